"""
Path geometry for connectors and node outlines, plus the hand-drawn perturbation.
"""
from __future__ import annotations

import math
import random

Point = tuple[float, float]

CURVE_STEPS = 32
CORNER_STEPS = 6


def cubic_bezier(p0: Point, p1: Point, p2: Point, p3: Point, steps: int = CURVE_STEPS) -> list[Point]:
    points: list[Point] = []
    for i in range(steps + 1):
        t = i / steps
        u = 1 - t
        a, b, c, d = u * u * u, 3 * u * u * t, 3 * u * t * t, t * t * t
        points.append((
            a * p0[0] + b * p1[0] + c * p2[0] + d * p3[0],
            a * p0[1] + b * p1[1] + c * p2[1] + d * p3[1],
        ))
    return points


def connector_curve(start: Point, end: Point, steps: int = CURVE_STEPS) -> list[Point]:
    """S-shaped curve leaving start and entering end horizontally."""
    dx = (end[0] - start[0]) / 2
    return cubic_bezier(start, (start[0] + dx, start[1]), (end[0] - dx, end[1]), end, steps)


def rounded_rect_points(x0: float, y0: float, x1: float, y1: float, radius: float) -> list[Point]:
    """Closed outline of a rounded rectangle, clockwise from the top-right corner."""
    r = max(0.0, min(radius, (x1 - x0) / 2, (y1 - y0) / 2))
    corners = [
        (x1 - r, y0 + r, -math.pi / 2),
        (x1 - r, y1 - r, 0.0),
        (x0 + r, y1 - r, math.pi / 2),
        (x0 + r, y0 + r, math.pi),
    ]
    points: list[Point] = []
    for cx, cy, start in corners:
        for i in range(CORNER_STEPS + 1):
            a = start + (math.pi / 2) * i / CORNER_STEPS
            points.append((cx + r * math.cos(a), cy + r * math.sin(a)))
    return points


def wobble(points: list[Point], rng: random.Random, jitter: float, waviness: float) -> list[Point]:
    """
    Hand-drawn copy of a path: every point shifts by up to `jitter`, and the
    path bends along its normal in a slow random wave of amplitude `waviness`.
    """
    if len(points) < 2:
        return list(points)
    phase = rng.uniform(0, 2 * math.pi)
    cycles = rng.uniform(0.5, 1.5)
    n = len(points)
    out: list[Point] = []
    for i, (x, y) in enumerate(points):
        prev_x, prev_y = points[max(0, i - 1)]
        next_x, next_y = points[min(n - 1, i + 1)]
        tx, ty = next_x - prev_x, next_y - prev_y
        length = math.hypot(tx, ty) or 1.0
        nx, ny = -ty / length, tx / length
        wave = waviness * math.sin(phase + 2 * math.pi * cycles * i / (n - 1))
        out.append((
            x + nx * wave + rng.uniform(-jitter, jitter),
            y + ny * wave + rng.uniform(-jitter, jitter),
        ))
    return out


def translate(points: list[Point], dx: float, dy: float) -> list[Point]:
    return [(x + dx, y + dy) for x, y in points]
