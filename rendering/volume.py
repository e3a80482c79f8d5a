"""Wireframe outline of the containment cylinder."""

import math
from OpenGL.GL import *
from config import fireflies as config


class VolumeOutline:
    """Draws the top and bottom rings of the bounds plus a few vertical struts."""

    def __init__(self, bounds, segments: int = None):
        self.bounds = bounds
        self.segments = segments or config.VOLUME["segments"]
        self.color = config.VOLUME["color"]

        cx, _, cz = bounds.center
        r = bounds.radius
        self._ring = [
            (cx + r * math.cos(2 * math.pi * k / self.segments),
             cz + r * math.sin(2 * math.pi * k / self.segments))
            for k in range(self.segments)
        ]

    def draw(self):
        top = self.bounds.top
        bottom = self.bounds.bottom

        glColor3f(*self.color)
        for y in (top, bottom):
            glBegin(GL_LINE_LOOP)
            for x, z in self._ring:
                glVertex3f(x, y, z)
            glEnd()

        glBegin(GL_LINES)
        for x, z in self._ring[::max(1, self.segments // 8)]:
            glVertex3f(x, bottom, z); glVertex3f(x, top, z)
        glEnd()
