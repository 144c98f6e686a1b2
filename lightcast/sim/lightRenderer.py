from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, Protocol

import numpy as np
import pygame

from lightcast.sim.lightScene import AutomaticMode, SceneState
from lightcast.sim.rayMath import ray_circle_intersection, unit_direction

# ── Drawing surface ───────────────────────────────────────────────────────────
class DrawingSurface(Protocol):
    def clear(self, color) -> None: ...
    def draw_line(self, p0, p1, color) -> None: ...
    def draw_filled_circle(self, center, radius: float, color) -> None: ...
    def draw_text(self, text: str, row: int, color) -> None: ...
    def present(self) -> None: ...

def _ipt(p) -> tuple:
    """Plain Python (int, int) clamped to a range SDL accepts."""
    def toint(v):
        f = max(-32768.0, min(32767.0, float(v)))
        return int(f)
    return (toint(p[0]), toint(p[1]))

class PygameSurface:
    """DrawingSurface backed by a pygame display surface."""

    def __init__(self, surf, font=None):
        self.surf = surf
        self.font = font

    def clear(self, color):
        self.surf.fill(color)

    def draw_line(self, p0, p1, color):
        pygame.draw.line(self.surf, color, _ipt(p0), _ipt(p1))

    def draw_filled_circle(self, center, radius, color):
        pygame.draw.circle(self.surf, color, _ipt(center), int(radius))

    def draw_text(self, text, row, color):
        if self.font is None:
            return
        rendered = self.font.render(text, True, color)
        self.surf.blit(rendered, (12, 12 + row * 18))

    def present(self):
        pygame.display.flip()

# ── Ray tracing ───────────────────────────────────────────────────────────────
@dataclass(frozen=True)
class RaySample:
    angle: float
    direction: np.ndarray
    hit_distance: float         # NO_HIT or > 0
    effective_distance: float   # hit_distance clamped to max_range
    end: np.ndarray
    blocked: bool               # truncated by the blocker before max_range

def effective_distance(hit_distance: float, max_range: float) -> float:
    return hit_distance if 0 < hit_distance < max_range else max_range

def trace_rays(scene: SceneState, num_rays: int, max_range: float) -> List[RaySample]:
    """One ray per 2π/num_rays step, fixed in world space, from the light position."""
    origin = scene.light_pos
    blocker = scene.blocker
    step = 2.0 * math.pi / num_rays
    samples = []
    for i in range(num_rays):
        angle = i * step
        direction = unit_direction(angle)
        hit = ray_circle_intersection(origin, direction, blocker.center, blocker.radius)
        dist = effective_distance(hit, max_range)
        samples.append(RaySample(angle, direction, hit, dist,
                                 origin + direction * dist, dist < max_range))
    return samples

# ── Frame ─────────────────────────────────────────────────────────────────────
def render_frame(scene: SceneState, surface: DrawingSurface, settings) -> List[RaySample]:
    """Draw light, blocker and rays. Clearing and presenting belong to the caller."""
    surface.draw_filled_circle(scene.light.center, scene.light.radius, settings.light_color)
    surface.draw_filled_circle(scene.blocker.center, scene.blocker.radius, settings.blocker_color)

    samples = trace_rays(scene, settings.num_rays, settings.max_range)
    origin = scene.light_pos
    for sample in samples:
        surface.draw_line(origin, sample.end, settings.ray_color)

    if settings.show_hud:
        draw_hud(scene, surface, samples, settings.hud_color)
    return samples

def draw_hud(scene: SceneState, surface: DrawingSurface, samples: List[RaySample], color):
    mode = scene.mode
    blocked = sum(1 for s in samples if s.blocked)
    surface.draw_text("2D LIGHT OCCLUSION", 0, (255, 230, 80))
    surface.draw_text(f"mode: {mode.stateId}", 1, color)
    if isinstance(mode, AutomaticMode):
        surface.draw_text(f"orbit angle: {mode.angle:.2f} rad", 2, color)
    else:
        surface.draw_text(f"pointer: {'DOWN' if mode.pointer_down else 'UP'}", 2, color)
    surface.draw_text(f"blocked rays: {blocked}/{len(samples)}", 3, color)
    surface.draw_text("A -> automatic    D -> drag", 4, color)
