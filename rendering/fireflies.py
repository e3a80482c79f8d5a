"""Firefly rendering - translucent points with VBO upload."""

import numpy as np
from OpenGL.GL import *
from OpenGL.arrays import vbo

from config import fireflies as config


class FireflyRenderer:
    """
    Draws each agent as a glowing point.

    Alpha is ``1 - transparency``, so agents in the edge fade zone dissolve
    as they approach a wrap.
    """

    def __init__(self, capacity: int):
        self.capacity = capacity
        self.point_size = float(config.FIREFLY["point_size"])
        self._vertices = np.zeros((capacity, 3), dtype=np.float32)
        self._colors = np.zeros((capacity, 4), dtype=np.float32)

        self._vbo_vertices = None
        self._vbo_colors = None
        self._vbos_initialized = False

    def _init_vbos(self):
        """Initialize VBOs for fast GPU rendering."""
        if self._vbos_initialized:
            return

        try:
            self._vbo_vertices = vbo.VBO(self._vertices, usage=GL_DYNAMIC_DRAW)
            self._vbo_colors = vbo.VBO(self._colors, usage=GL_DYNAMIC_DRAW)
            self._vbos_initialized = True
        except Exception as e:
            print(f"[Render] VBO init failed, using client arrays: {e}")
            self._vbo_vertices = None
            self._vbo_colors = None

    def _fill(self, flock) -> int:
        n = len(flock)
        self._vertices[:n] = flock.positions[:n]
        self._colors[:n, :3] = flock.colors[:n]
        self._colors[:n, 3] = 1.0 - flock.transparency[:n]
        return n

    def draw(self, flock):
        if not self._vbos_initialized:
            self._init_vbos()

        n = self._fill(flock)
        if n == 0:
            return

        glEnable(GL_BLEND)
        glBlendFunc(GL_SRC_ALPHA, GL_ONE)
        glDepthMask(GL_FALSE)
        glEnable(GL_POINT_SMOOTH)
        glPointSize(self.point_size)

        glEnableClientState(GL_VERTEX_ARRAY)
        glEnableClientState(GL_COLOR_ARRAY)

        if self._vbos_initialized:
            self._vbo_vertices.set_array(self._vertices[:n])
            self._vbo_colors.set_array(self._colors[:n])

            self._vbo_vertices.bind()
            glVertexPointer(3, GL_FLOAT, 0, None)
            self._vbo_colors.bind()
            glColorPointer(4, GL_FLOAT, 0, None)

            glDrawArrays(GL_POINTS, 0, n)

            self._vbo_vertices.unbind()
            self._vbo_colors.unbind()
        else:
            glVertexPointer(3, GL_FLOAT, 0, self._vertices[:n])
            glColorPointer(4, GL_FLOAT, 0, self._colors[:n])
            glDrawArrays(GL_POINTS, 0, n)

        glDisableClientState(GL_VERTEX_ARRAY)
        glDisableClientState(GL_COLOR_ARRAY)

        glDisable(GL_POINT_SMOOTH)
        glDepthMask(GL_TRUE)
        glDisable(GL_BLEND)
