"""PNG rasterization of floor plans using matplotlib.

Draws straight into pixel space: the bounding box of every room vertex on
every floor is fitted, with a margin, into the target image at a uniform
scale. Per room:
- Translucent pastel fill
- Edges stroked by wall type (external thicker than internal)
- Faint name watermark sized to the room
- Offset dimension lines with end ticks and a rounded length badge
- Doors, windows and stairs

The figure uses 72 dpi so one point equals one pixel; stroke widths and font
sizes in the options are therefore pixels.
"""

from __future__ import annotations

import io
import math
from collections.abc import Sequence
from dataclasses import dataclass

import matplotlib
matplotlib.use("Agg")  # headless rendering
import matplotlib.image as mpimg
import matplotlib.pyplot as plt
import numpy as np
from matplotlib.colors import hsv_to_rgb
from pydantic import BaseModel, Field

from floorplan_studio.models.elements import WINDOW_PANELS, Stairs, WallType
from floorplan_studio.models.geometry import Point2D, bounding_box
from floorplan_studio.models.rooms import Floor, Room

_DPI = 72

_EXTERNAL_STROKE = (0.0, 0.0, 0.0, 0.85)
_INTERNAL_STROKE = (0.0, 0.0, 0.0, 0.7)
_DIMENSION_STROKE = (0.0, 0.0, 0.0, 0.45)
_DOOR_COLOR = (0.55, 0.35, 0.17, 0.85)
_WINDOW_COLOR = (0.0, 0.5, 0.5, 0.8)
_STAIRS_COLOR = (0.2, 0.2, 0.2, 0.8)


class PNGExportOptions(BaseModel):
    """Rendering options. Pixel values refer to the final (scaled) image."""

    show_grid: bool = False
    show_dimensions: bool = True
    show_names: bool = True
    show_openings: bool = True
    show_stairs: bool = True
    background: str = Field(default="#FFFFFF", description="Any matplotlib color")
    external_wall_width: float = Field(default=5.0, gt=0)
    internal_wall_width: float = Field(default=2.5, gt=0)
    margin: float = Field(default=32.0, ge=0, description="Padding in pixels")
    grid_step_meters: float = Field(default=1.0, gt=0)
    image_scale: float = Field(default=2.0, gt=0, description="Pixels per logical point")


@dataclass
class FitTransform:
    """Uniform model → pixel mapping (y grows downward like the editor view)."""

    min_x: float
    min_y: float
    scale: float
    left: float
    top: float
    right: float
    bottom: float

    def to_px(self, p: Point2D) -> tuple[float, float]:
        return (
            (p.x - self.min_x) * self.scale + self.left,
            (p.y - self.min_y) * self.scale + self.top,
        )


def format_length(meters: float) -> str:
    """Dimension label: one decimal from 10 m up, two below."""
    return f"{meters:.1f} m" if meters >= 10 else f"{meters:.2f} m"


def fit_transform(
    floors: Sequence[Floor],
    width_px: int,
    height_px: int,
    margin: float,
) -> FitTransform | None:
    """Fit all room vertices into the padded image. None if there are no vertices."""
    points = [v for f in floors for r in f.rooms for v in r.vertices]
    bounds = bounding_box(points)
    if bounds is None:
        return None
    min_x, min_y, max_x, max_y = bounds
    if min_x == max_x:
        max_x += 1
    if min_y == max_y:
        max_y += 1
    draw_w = max(width_px - 2 * margin, 1.0)
    draw_h = max(height_px - 2 * margin, 1.0)
    scale = min(draw_w / (max_x - min_x), draw_h / (max_y - min_y))
    return FitTransform(
        min_x=min_x,
        min_y=min_y,
        scale=scale,
        left=margin,
        top=margin,
        right=margin + draw_w,
        bottom=margin + draw_h,
    )


def render_png(
    floors: Sequence[Floor],
    size: tuple[float, float] = (1024, 768),
    options: PNGExportOptions | None = None,
) -> bytes:
    """Render all floors to opaque PNG bytes.

    Args:
        floors: Floors to draw (all of them overlap in one image).
        size: Logical (width, height); multiplied by options.image_scale.
        options: Rendering options.

    Returns:
        PNG file contents. With no vertices anywhere the image is a blank
        canvas in the background color.
    """
    opts = options or PNGExportOptions()
    width_px = max(1, int(round(size[0] * opts.image_scale)))
    height_px = max(1, int(round(size[1] * opts.image_scale)))

    # Half a pixel of slack keeps the canvas from rounding down a pixel.
    fig_w, fig_h = width_px + 0.5, height_px + 0.5
    fig = plt.figure(figsize=(fig_w / _DPI, fig_h / _DPI), dpi=_DPI)
    try:
        fig.patch.set_facecolor(opts.background)
        ax = fig.add_axes((0, 0, 1, 1))
        ax.set_facecolor(opts.background)
        ax.set_xlim(0, fig_w)
        ax.set_ylim(fig_h, 0)
        ax.set_axis_off()

        fit = fit_transform(floors, width_px, height_px, opts.margin)
        if fit is not None:
            if opts.show_grid:
                _draw_grid(ax, fit, opts.grid_step_meters)
            for floor in floors:
                for room in floor.rooms:
                    if len(room.vertices) >= 3:
                        _draw_room(ax, room, fit, opts)

        fig.canvas.draw()
        rgba = np.asarray(fig.canvas.buffer_rgba())[:height_px, :width_px].copy()
    finally:
        plt.close(fig)

    # Flatten to a fully opaque image.
    rgba[..., 3] = 255
    buf = io.BytesIO()
    mpimg.imsave(buf, rgba, format="png")
    return buf.getvalue()


def _draw_grid(ax: plt.Axes, fit: FitTransform, step_m: float) -> None:
    step_px = step_m * fit.scale
    if step_px < 6:
        return
    color = (0.0, 0.0, 0.0, 0.06)
    x = math.floor(fit.left)
    while x <= fit.right:
        ax.plot([x, x], [fit.top, fit.bottom], color=color, linewidth=1, zorder=1)
        x += step_px
    y = math.floor(fit.top)
    while y <= fit.bottom:
        ax.plot([fit.left, fit.right], [y, y], color=color, linewidth=1, zorder=1)
        y += step_px


def _draw_room(ax: plt.Axes, room: Room, fit: FitTransform, opts: PNGExportOptions) -> None:
    pts = [fit.to_px(v) for v in room.vertices]
    xs = [p[0] for p in pts]
    ys = [p[1] for p in pts]

    rgb = hsv_to_rgb((room.hue % 1.0, room.saturation, room.brightness))
    ax.fill(xs, ys, color=(*rgb, room.alpha), linewidth=0, zorder=2)

    n = len(pts)
    for i in range(n):
        a, b = pts[i], pts[(i + 1) % n]
        external = room.wall_type(i) == WallType.EXTERNAL
        ax.plot(
            [a[0], b[0]],
            [a[1], b[1]],
            color=_EXTERNAL_STROKE if external else _INTERNAL_STROKE,
            linewidth=opts.external_wall_width if external else opts.internal_wall_width,
            solid_capstyle="round",
            zorder=5,
        )

    if opts.show_names and room.name.strip():
        _draw_watermark(ax, room.name.strip(), xs, ys)

    if opts.show_dimensions:
        _draw_dimensions(ax, room, fit)

    if opts.show_openings:
        _draw_openings(ax, room, fit)

    if opts.show_stairs:
        for stairs in room.stairs:
            _draw_stairs(ax, stairs, fit)


def _draw_watermark(ax: plt.Axes, name: str, xs: list[float], ys: list[float]) -> None:
    """Large faint room name, only when the room is big enough on the image."""
    inset_w = (max(xs) - min(xs)) - 2 * 16
    inset_h = (max(ys) - min(ys)) - 2 * 28
    if inset_w <= 10 or inset_h <= 10:
        return
    font_size = max(12.0, min(min(inset_w, inset_h) * 0.28, 42.0))
    ax.text(
        (max(xs) + min(xs)) / 2,
        (max(ys) + min(ys)) / 2,
        name,
        fontsize=font_size,
        fontweight="black",
        ha="center",
        va="center",
        color=(0.0, 0.0, 0.0, 0.045),
        parse_math=False,
        zorder=3,
    )


def _draw_dimensions(ax: plt.Axes, room: Room, fit: FitTransform) -> None:
    """Dimension line 18 px outside each edge, with ticks and a length badge."""
    offset_model = 18 / fit.scale
    tick_half = 5
    n = len(room.vertices)
    for i in range(n):
        a, b = room.edge(i)
        dx, dy = b.x - a.x, b.y - a.y
        length = math.hypot(dx, dy)
        if length == 0:
            continue
        ux, uy = dx / length, dy / length
        nx, ny = -uy, ux
        sa = fit.to_px(a.offset(nx * offset_model, ny * offset_model))
        sb = fit.to_px(b.offset(nx * offset_model, ny * offset_model))

        ax.plot([sa[0], sb[0]], [sa[1], sb[1]], color=_DIMENSION_STROKE, linewidth=1, zorder=6)
        for px, py in (sa, sb):
            ax.plot(
                [px - nx * tick_half, px + nx * tick_half],
                [py - ny * tick_half, py + ny * tick_half],
                color=_DIMENSION_STROKE,
                linewidth=1,
                zorder=6,
            )

        ax.text(
            (sa[0] + sb[0]) / 2,
            (sa[1] + sb[1]) / 2,
            format_length(length),
            fontsize=10,
            fontweight="semibold",
            ha="center",
            va="center",
            color=(0.1, 0.1, 0.1, 0.85),
            parse_math=False,
            bbox=dict(boxstyle="round,pad=0.3", facecolor=(0.1, 0.1, 0.1, 0.25), edgecolor="none"),
            zorder=7,
        )


def _draw_openings(ax: plt.Axes, room: Room, fit: FitTransform) -> None:
    """Doors as thick brown segments, windows as teal segments with mullions."""
    for door in room.doors:
        segment = room.opening_segment(door)
        if segment is None:
            continue
        p1, p2 = (fit.to_px(p) for p in segment)
        ax.plot([p1[0], p2[0]], [p1[1], p2[1]], color=_DOOR_COLOR, linewidth=5,
                solid_capstyle="butt", zorder=8)

    for window in room.windows:
        segment = room.opening_segment(window)
        if segment is None:
            continue
        p1, p2 = (fit.to_px(p) for p in segment)
        ax.plot([p1[0], p2[0]], [p1[1], p2[1]], color=_WINDOW_COLOR, linewidth=3,
                solid_capstyle="butt", zorder=8)
        panels = WINDOW_PANELS[window.type]
        seg_len = math.hypot(p2[0] - p1[0], p2[1] - p1[1])
        if panels < 2 or seg_len == 0:
            continue
        nx = -(p2[1] - p1[1]) / seg_len
        ny = (p2[0] - p1[0]) / seg_len
        for k in range(1, panels):
            mx = p1[0] + (p2[0] - p1[0]) * k / panels
            my = p1[1] + (p2[1] - p1[1]) * k / panels
            ax.plot([mx - nx * 4, mx + nx * 4], [my - ny * 4, my + ny * 4],
                    color=_WINDOW_COLOR, linewidth=1, zorder=9)


def _draw_stairs(ax: plt.Axes, stairs: Stairs, fit: FitTransform) -> None:
    """Rotated rectangle with one tread line per step and an ascent arrow."""
    cos_r, sin_r = math.cos(stairs.rotation), math.sin(stairs.rotation)

    def local(u: float, v: float) -> tuple[float, float]:
        # u runs along the flight, v across it
        p = stairs.center.offset(u * cos_r - v * sin_r, u * sin_r + v * cos_r)
        return fit.to_px(p)

    hl, hw = stairs.length / 2, stairs.width / 2
    corners = [local(-hl, -hw), local(hl, -hw), local(hl, hw), local(-hl, hw)]
    xs = [c[0] for c in corners] + [corners[0][0]]
    ys = [c[1] for c in corners] + [corners[0][1]]
    ax.plot(xs, ys, color=_STAIRS_COLOR, linewidth=1.5, zorder=8)

    for i in range(1, stairs.steps):
        u = -hl + stairs.length * i / stairs.steps
        (x1, y1), (x2, y2) = local(u, -hw), local(u, hw)
        ax.plot([x1, x2], [y1, y2], color=_STAIRS_COLOR, linewidth=0.5, zorder=8)

    tail, head = local(-hl * 0.8, 0), local(hl * 0.8, 0)
    if not stairs.up:
        tail, head = head, tail
    ax.annotate(
        "", xy=head, xytext=tail,
        arrowprops=dict(arrowstyle="->", color=_STAIRS_COLOR, lw=1.2),
        zorder=9,
    )
