"""Main application class that ties everything together."""

import numpy as np
import pygame
from pygame.locals import *
from OpenGL.GL import *
from OpenGL.GLU import *

from config import fireflies as config
from fireflies import Bounds, CommandInterpreter, Simulation, Spawner
from rendering import FireflyRenderer, TextRenderer, VolumeOutline
from .camera import Camera
from .input_handler import InputHandler


class Application:
    """Main application managing the fixed-rate loop and rendering."""

    def __init__(self, seed: int = None):
        pygame.init()
        pygame.display.set_mode(
            (config.WINDOW["width"], config.WINDOW["height"]),
            DOUBLEBUF | OPENGL
        )
        pygame.display.set_caption(config.WINDOW["title"])

        # Simulation
        rng = np.random.default_rng(seed)
        self.bounds = Bounds.from_config()
        self.simulation = Simulation(bounds=self.bounds, rng=rng)
        self.spawner = Spawner(self.simulation)
        self.commands = CommandInterpreter(self.simulation)

        # Core components
        self.camera = Camera(target=self.bounds.center)
        self.input_handler = InputHandler(self.camera, self.commands)

        # Rendering components
        self.volume = VolumeOutline(self.bounds)
        self.fireflies = FireflyRenderer(self.simulation.flock.max_participants)
        self.text_renderer = TextRenderer()

        # State
        self.clock = pygame.time.Clock()
        self.running = True
        self.fps = 0

        self._setup_gl()
        print(f"[App] Volume radius={self.bounds.radius:g} height={self.bounds.height:g}, "
              f"up to {self.simulation.flock.max_participants} fireflies")

    def _setup_gl(self):
        """Initialize OpenGL settings."""
        glClearColor(*config.COLORS["background"])
        glEnable(GL_DEPTH_TEST)

        glMatrixMode(GL_PROJECTION)
        glLoadIdentity()
        gluPerspective(
            config.CAMERA["fov"],
            config.WINDOW["width"] / config.WINDOW["height"],
            config.CAMERA["near_clip"],
            config.CAMERA["far_clip"]
        )
        glMatrixMode(GL_MODELVIEW)

    def _handle_events(self):
        """Process all pending pygame events."""
        for event in pygame.event.get():
            if not self.input_handler.handle_event(event):
                self.running = False

    def _update(self, dt: float):
        """Update game state."""
        dt = min(dt, config.SIMULATION["max_dt"])

        self.input_handler.handle_continuous_input(dt)
        self.camera.update(dt)
        self.spawner.update(dt)
        self.simulation.step(dt)

    def _hud_lines(self):
        state = self.simulation.state
        flock = self.simulation.flock
        return [
            f"Fireflies: {len(flock)}/{flock.max_participants}  |  FPS: {self.fps:.0f}",
            f"Color: {state.color_mode}  |  Max speed: {state.max_speed:g}",
            f"Changeup in {max(state.changeup_timer, 0.0):.1f}s",
        ]

    def _render(self):
        """Render the scene."""
        glClear(GL_COLOR_BUFFER_BIT | GL_DEPTH_BUFFER_BIT)
        self.camera.apply()

        self.volume.draw()
        self.fireflies.draw(self.simulation.flock)

        screen_size = (config.WINDOW["width"], config.WINDOW["height"])
        self.text_renderer.draw_lines(self._hud_lines(), 10, 10, screen_size)
        if self.input_handler.console_open:
            self.text_renderer.draw_text(
                f"> {self.input_handler.console_text}_",
                10, screen_size[1] - 40, screen_size,
                color=config.COLORS["prompt"]
            )

        pygame.display.flip()

    def run(self):
        """Main application loop."""
        while self.running:
            dt = self.clock.tick(config.WINDOW["fps"]) / 1000.0
            self.fps = self.clock.get_fps()

            self._handle_events()
            self._update(dt)
            self._render()

        pygame.quit()
