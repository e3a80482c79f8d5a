"""Input handling: camera controls and the command console."""

import pygame
from pygame.locals import *
from config import fireflies as config

from fireflies import ColorMode, CommandInterpreter
from .camera import Camera


class InputHandler:
    """
    Handles keyboard and mouse input.

    Pressing Enter (or '/') opens a one-line console; the typed text is sent
    to the command interpreter when Enter is pressed again. While the console
    is open, camera keys are ignored.
    """

    def __init__(self, camera: Camera, commands: CommandInterpreter):
        self.camera = camera
        self.commands = commands
        self.mouse_dragging = False
        self.last_mouse_pos = (0, 0)
        self.console_open = False
        self.console_text = ""

        # Number keys pick a color mode without typing
        self.mode_keys = {
            K_1: lambda: ColorMode.leader(),
            K_2: lambda: ColorMode.random(),
            K_3: lambda: ColorMode.fixed_hue(self.commands.simulation.rng.random()),
            K_4: lambda: ColorMode.rainbow(self.commands.simulation.state.rainbow_speed),
        }

    def _open_console(self):
        self.console_open = True
        self.console_text = ""
        pygame.key.start_text_input()

    def _close_console(self):
        self.console_open = False
        self.console_text = ""
        pygame.key.stop_text_input()

    def _handle_console_key(self, event: pygame.event.Event):
        if event.key in (K_RETURN, K_KP_ENTER):
            text = self.console_text.lstrip("/")
            self._close_console()
            if text.strip() and not self.commands.execute(text):
                print(f"[Cmd] Ignored: {text!r}")
        elif event.key == K_ESCAPE:
            self._close_console()
        elif event.key == K_BACKSPACE:
            self.console_text = self.console_text[:-1]

    def handle_event(self, event: pygame.event.Event) -> bool:
        """
        Handle a single pygame event.
        Returns False if the application should quit, True otherwise.
        """
        if event.type == QUIT:
            return False

        if self.console_open:
            if event.type == TEXTINPUT:
                self.console_text += event.text
            elif event.type == KEYDOWN:
                self._handle_console_key(event)
            return True

        if event.type == KEYDOWN:
            if event.key == K_ESCAPE:
                return False
            if event.key in (K_RETURN, K_KP_ENTER, K_SLASH):
                self._open_console()
            elif event.key in self.mode_keys:
                self.commands.simulation.set_color_mode(self.mode_keys[event.key]())
        elif event.type == MOUSEBUTTONDOWN:
            if event.button == 1:
                self.mouse_dragging = True
                self.last_mouse_pos = pygame.mouse.get_pos()
        elif event.type == MOUSEBUTTONUP:
            if event.button == 1:
                self.mouse_dragging = False
        elif event.type == MOUSEWHEEL:
            self.camera.zoom_smooth(-event.y * config.CAMERA["keyboard_zoom_speed"] * 0.25)

        return True

    def handle_continuous_input(self, dt: float):
        """Handle held keys and mouse drag (called each frame)."""
        if not self.console_open:
            keys = pygame.key.get_pressed()
            rot_speed = config.CAMERA["keyboard_rotate_speed"] * dt
            zoom_speed = config.CAMERA["keyboard_zoom_speed"] * dt

            if keys[K_a]:
                self.camera.rotate(-rot_speed, 0)
            if keys[K_d]:
                self.camera.rotate(rot_speed, 0)
            if keys[K_w]:
                self.camera.rotate(0, rot_speed)
            if keys[K_s]:
                self.camera.rotate(0, -rot_speed)
            if keys[K_q]:
                self.camera.zoom(-zoom_speed)
            if keys[K_e]:
                self.camera.zoom(zoom_speed)

        if self.mouse_dragging:
            current_pos = pygame.mouse.get_pos()
            dx = current_pos[0] - self.last_mouse_pos[0]
            dy = current_pos[1] - self.last_mouse_pos[1]
            self.camera.rotate(
                dx * config.CAMERA["mouse_sensitivity"],
                -dy * config.CAMERA["mouse_sensitivity"]
            )
            self.last_mouse_pos = current_pos
