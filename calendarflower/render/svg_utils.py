from __future__ import annotations

import math

import numpy as np


def fmt_coord(v: float) -> str:
    if not np.isfinite(v):
        return "0"
    s = f"{v:.2f}"
    return "0.00" if s == "-0.00" else s


def polar_to_cartesian(angle_deg: float, radius: float) -> tuple[float, float]:
    """Point at ``angle_deg`` (0 = 12 o'clock, clockwise) and ``radius``."""
    a = math.radians(angle_deg)
    return math.sin(a) * radius, -math.cos(a) * radius


def annular_sector_path(
    inner_radius: float, outer_radius: float, start_angle: float, end_angle: float
) -> str:
    """SVG path for the ring slice between two radii and two angles.

    Spans of a full turn or more are drawn as a complete annulus, since a
    single arc command cannot close on its own start point.
    """
    span = end_angle - start_angle
    if span <= 0 or outer_radius <= 0:
        return ""
    ri = max(0.0, inner_radius)
    ro = outer_radius
    if span >= 360:
        return _annulus_path(ri, ro, start_angle)

    large = 1 if span > 180 else 0
    osx, osy = polar_to_cartesian(start_angle, ro)
    oex, oey = polar_to_cartesian(end_angle, ro)
    parts = [
        f"M {fmt_coord(osx)},{fmt_coord(osy)}",
        f"A {fmt_coord(ro)},{fmt_coord(ro)} 0 {large},1 {fmt_coord(oex)},{fmt_coord(oey)}",
    ]
    if ri > 0:
        iex, iey = polar_to_cartesian(end_angle, ri)
        isx, isy = polar_to_cartesian(start_angle, ri)
        parts.append(f"L {fmt_coord(iex)},{fmt_coord(iey)}")
        parts.append(
            f"A {fmt_coord(ri)},{fmt_coord(ri)} 0 {large},0 {fmt_coord(isx)},{fmt_coord(isy)}"
        )
    else:
        parts.append("L 0,0")
    parts.append("Z")
    return " ".join(parts)


def _annulus_path(ri: float, ro: float, start_angle: float) -> str:
    def _circle(r: float, sweep: int) -> list[str]:
        x0, y0 = polar_to_cartesian(start_angle, r)
        x1, y1 = polar_to_cartesian(start_angle + 180, r)
        return [
            f"M {fmt_coord(x0)},{fmt_coord(y0)}",
            f"A {fmt_coord(r)},{fmt_coord(r)} 0 1,{sweep} {fmt_coord(x1)},{fmt_coord(y1)}",
            f"A {fmt_coord(r)},{fmt_coord(r)} 0 1,{sweep} {fmt_coord(x0)},{fmt_coord(y0)}",
            "Z",
        ]

    parts = _circle(ro, 1)
    if ri > 0:
        parts += _circle(ri, 0)
    return " ".join(parts)


def polygon_path(points: list[tuple[float, float]]) -> str:
    if not points:
        return ""
    head, *rest = points
    segs = [f"M {fmt_coord(head[0])},{fmt_coord(head[1])}"]
    segs += [f"L {fmt_coord(x)},{fmt_coord(y)}" for x, y in rest]
    segs.append("Z")
    return " ".join(segs)


def svg_empty(css_class: str, width: int, height: int, aria_label: str = "no data") -> str:
    return f'<svg class="{css_class}" width="{width}" height="{height}" viewBox="0 0 {width} {height}" aria-label="{aria_label}"></svg>'
