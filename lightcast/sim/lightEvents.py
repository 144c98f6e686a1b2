from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Optional, Union

import numpy as np
import pygame

# ── Input events ──────────────────────────────────────────────────────────────
class Mode(Enum):
    AUTOMATIC = "Automatic"
    DRAG      = "Drag"

@dataclass(frozen=True)
class Quit:
    pass

@dataclass(frozen=True)
class KeySelect:
    mode: Mode

@dataclass(frozen=True)
class PointerDown:
    pass

@dataclass(frozen=True)
class PointerUp:
    pass

@dataclass(frozen=True)
class PointerMove:
    position: tuple

InputEvent = Union[Quit, KeySelect, PointerDown, PointerUp, PointerMove]

MODE_KEYS = {
    pygame.K_a: Mode.AUTOMATIC,
    pygame.K_d: Mode.DRAG,
}

LEFT_BUTTON = 1

# ── pygame → InputEvent ───────────────────────────────────────────────────────
def translate_event(ev) -> Optional[InputEvent]:
    """Map one pygame event onto an InputEvent; None for anything we ignore."""
    if ev.type == pygame.QUIT:
        return Quit()
    if ev.type == pygame.KEYDOWN:
        mode = MODE_KEYS.get(ev.key)
        return KeySelect(mode) if mode is not None else None
    if ev.type == pygame.MOUSEBUTTONDOWN and ev.button == LEFT_BUTTON:
        return PointerDown()
    if ev.type == pygame.MOUSEBUTTONUP and ev.button == LEFT_BUTTON:
        return PointerUp()
    if ev.type == pygame.MOUSEMOTION:
        x, y = ev.pos
        return PointerMove((float(x), float(y)))
    return None

def poll_events() -> Iterator[InputEvent]:
    """Drain the pygame queue. Never blocks."""
    for ev in pygame.event.get():
        translated = translate_event(ev)
        if translated is not None:
            yield translated

def pointer_position(event: PointerMove) -> np.ndarray:
    return np.array(event.position, dtype=float)
