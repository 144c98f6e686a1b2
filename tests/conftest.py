import os

# pygame must not try to open a real window or audio device during tests
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")
os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")

import numpy as np
import pytest

from lightcast.sim.lightScene import AutomaticMode, SceneState
from lightcast.sim.rayMath import Circle


class RecordingSurface:
    """Drawing surface that keeps every command instead of rasterizing."""

    def __init__(self):
        self.commands = []

    def clear(self, color):
        self.commands.append(("clear", color))

    def draw_line(self, p0, p1, color):
        self.commands.append(("line", np.array(p0, dtype=float), np.array(p1, dtype=float), color))

    def draw_filled_circle(self, center, radius, color):
        self.commands.append(("circle", np.array(center, dtype=float), radius, color))

    def draw_text(self, text, row, color):
        self.commands.append(("text", text, row, color))

    def present(self):
        self.commands.append(("present",))

    def of_kind(self, kind):
        return [c for c in self.commands if c[0] == kind]


@pytest.fixture
def surface():
    return RecordingSurface()


@pytest.fixture
def scene():
    blocker = Circle((400.0, 300.0), 80.0)
    return SceneState(light=Circle((550.0, 300.0), 15.0),
                      blocker=blocker,
                      anchor=blocker.center,
                      orbit_radius=150.0,
                      angular_speed=0.01,
                      mode=AutomaticMode(0.0))
