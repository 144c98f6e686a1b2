import math
from dataclasses import dataclass

import numpy as np

# Returned by the intersector when there is no forward hit
NO_HIT = -1.0

# ── Vector helpers ────────────────────────────────────────────────────────────
def vec2(x: float, y: float) -> np.ndarray:
    return np.array([x, y], dtype=float)

def distance(a: np.ndarray, b: np.ndarray) -> float:
    """Euclidean distance between two points"""
    return float(np.hypot(a[0] - b[0], a[1] - b[1]))

def unit_direction(angle: float) -> np.ndarray:
    """angle (rad) → unit vector, measured from +x towards +y"""
    return vec2(math.cos(angle), math.sin(angle))

# ── Shapes ────────────────────────────────────────────────────────────────────
@dataclass
class Circle:
    center: np.ndarray
    radius: float

    def __post_init__(self):
        self.center = np.array(self.center, dtype=float)
        self.radius = float(self.radius)

@dataclass
class Ray:
    origin: np.ndarray
    direction: np.ndarray

    def __post_init__(self):
        self.origin = np.array(self.origin, dtype=float)
        self.direction = np.array(self.direction, dtype=float)

    def point_at(self, t: float) -> np.ndarray:
        return self.origin + self.direction * t

# ── Intersection ──────────────────────────────────────────────────────────────
def ray_circle_intersection(origin, direction, center, radius: float) -> float:
    """
    Distance along ``direction`` from ``origin`` to the circle boundary.

    Solves |origin + t*direction - center| = radius for t. The nearer root is
    returned when it lies ahead of the origin; otherwise the farther root,
    which happens when the origin is inside the circle. Returns NO_HIT when
    the line misses the circle or the circle lies entirely behind the origin.
    """
    ox = float(origin[0]) - float(center[0])
    oy = float(origin[1]) - float(center[1])
    dx = float(direction[0])
    dy = float(direction[1])

    a = dx * dx + dy * dy
    if a == 0.0:
        raise ValueError("ray direction must be non-zero")
    b = 2.0 * (ox * dx + oy * dy)
    c = ox * ox + oy * oy - radius * radius

    discriminant = b * b - 4.0 * a * c
    if discriminant < 0:
        return NO_HIT

    sqrt_disc = math.sqrt(discriminant)
    t1 = (-b - sqrt_disc) / (2.0 * a)
    t2 = (-b + sqrt_disc) / (2.0 * a)
    if t1 > 0:
        return t1
    if t2 > 0:
        return t2
    return NO_HIT

def cast(ray: Ray, circle: Circle) -> float:
    return ray_circle_intersection(ray.origin, ray.direction, circle.center, circle.radius)
