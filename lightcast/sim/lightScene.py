from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import ClassVar, Iterable, Union

import numpy as np

from lightcast.common.simpleFsm import SimpleFsm, SimpleState
from lightcast.sim.lightEvents import (
    InputEvent, KeySelect, Mode, PointerDown, PointerMove, PointerUp, Quit, pointer_position,
)
from lightcast.sim.rayMath import Circle, vec2

logger = logging.getLogger(__name__)

TWO_PI = 2.0 * math.pi

# ── Mode variants ─────────────────────────────────────────────────────────────
@dataclass(frozen=True)
class AutomaticMode(SimpleState):
    """Light orbits the anchor; ``angle`` is kept in [0, 2π)."""
    angle: float = 0.0
    stateId: ClassVar[str] = Mode.AUTOMATIC.value

@dataclass(frozen=True)
class DragMode(SimpleState):
    """Light follows the pointer while it is held down.

    ``resume_angle`` is the orbit angle picked up again when switching back
    to automatic mode.
    """
    pointer_down: bool = False
    resume_angle: float = 0.0
    stateId: ClassVar[str] = Mode.DRAG.value

ModeState = Union[AutomaticMode, DragMode]

MODE_STATE_MAP: dict[str, set[str]] = {
    AutomaticMode.stateId: {DragMode.stateId},
    DragMode.stateId:      {AutomaticMode.stateId},
}

def wrap_angle(angle: float) -> float:
    wrapped = angle % TWO_PI
    # float modulo of a tiny negative value can round up to exactly 2π
    return 0.0 if wrapped >= TWO_PI else wrapped

def orbit_position(anchor: np.ndarray, radius: float, angle: float) -> np.ndarray:
    return anchor + radius * vec2(math.cos(angle), math.sin(angle))

# ── Scene ─────────────────────────────────────────────────────────────────────
class SceneState:
    """Light, blocker and interaction mode. Owned by the frame loop."""

    def __init__(self,
                 light: Circle,
                 blocker: Circle,
                 anchor: np.ndarray,
                 orbit_radius: float,
                 angular_speed: float,
                 mode: ModeState = AutomaticMode()):
        if not (math.isfinite(blocker.radius) and blocker.radius > 0):
            raise ValueError(f"blocker radius must be finite and > 0, got {blocker.radius}")
        self.light = light
        self.blocker = blocker
        self.anchor = np.array(anchor, dtype=float)
        self.orbit_radius = float(orbit_radius)
        self.angular_speed = float(angular_speed)
        self.fsm = SimpleFsm(MODE_STATE_MAP, mode)

    @classmethod
    def from_settings(cls, settings) -> "SceneState":
        blocker = Circle(settings.resolved_blocker_center(), settings.blocker_radius)
        angle = wrap_angle(settings.initial_angle)
        if settings.mode == "drag":
            mode = DragMode(pointer_down=False, resume_angle=angle)
        else:
            mode = AutomaticMode(angle)
        light_center = orbit_position(blocker.center, settings.orbit_radius, angle)
        return cls(light=Circle(light_center, settings.light_radius),
                   blocker=blocker,
                   anchor=blocker.center,
                   orbit_radius=settings.orbit_radius,
                   angular_speed=settings.angular_speed,
                   mode=mode)

    @property
    def mode(self) -> ModeState:
        return self.fsm.currentState

    @property
    def light_pos(self) -> np.ndarray:
        return self.light.center

    @property
    def orbit_angle(self) -> float:
        mode = self.mode
        if isinstance(mode, AutomaticMode):
            return mode.angle
        return mode.resume_angle

    def retune(self, settings):
        """Pick up reloaded settings. The blocker stays fixed for the whole run."""
        self.light.radius = float(settings.light_radius)
        self.orbit_radius = float(settings.orbit_radius)
        self.angular_speed = float(settings.angular_speed)
        new_center = settings.resolved_blocker_center()
        if (settings.blocker_radius != self.blocker.radius
                or not np.allclose(new_center, self.blocker.center)):
            logger.warning("Blocker changes take effect on restart only")

# ── Input & animation step ────────────────────────────────────────────────────
def select_mode(scene: SceneState, mode: Mode, requestor="input") -> bool:
    if mode is Mode.AUTOMATIC:
        target = AutomaticMode(scene.orbit_angle)
    else:
        target = DragMode(pointer_down=False, resume_angle=scene.orbit_angle)
    return scene.fsm.requestUpdate(target, requestor)

def apply_event(scene: SceneState, event: InputEvent) -> bool:
    """Apply one input event. Returns False once a quit was requested."""
    if isinstance(event, Quit):
        return False
    if isinstance(event, KeySelect):
        select_mode(scene, event.mode)
        return True

    mode = scene.mode
    if not isinstance(mode, DragMode):
        return True
    if isinstance(event, PointerDown):
        scene.fsm.updateState(DragMode(True, mode.resume_angle))
    elif isinstance(event, PointerUp):
        scene.fsm.updateState(DragMode(False, mode.resume_angle))
    elif isinstance(event, PointerMove) and mode.pointer_down:
        scene.light.center = pointer_position(event)
    return True

def advance(scene: SceneState):
    """Per-frame animation: moves the light along its orbit in automatic mode."""
    mode = scene.mode
    if not isinstance(mode, AutomaticMode):
        return
    angle = wrap_angle(mode.angle + scene.angular_speed)
    scene.fsm.updateState(AutomaticMode(angle))
    scene.light.center = orbit_position(scene.anchor, scene.orbit_radius, angle)

def step(scene: SceneState, events: Iterable[InputEvent]) -> bool:
    """Drain ``events`` then advance one frame. Returns False if the loop should stop."""
    running = True
    for event in events:
        if not apply_event(scene, event):
            running = False
    advance(scene)
    return running
