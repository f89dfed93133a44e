from __future__ import annotations

import numpy as np

from plotkit.raster.canvas import RGBA, blend_region


def draw_polyline(dst: np.ndarray, xs: np.ndarray, ys: np.ndarray, color: RGBA, width: int = 1) -> None:
    """Stroke connected segments with a square pen ``width`` pixels wide.

    Axis-aligned segments such as histogram step outlines are filled
    as one box; diagonal ones are stamped along their sampled pixels.
    """
    if xs.shape != ys.shape:
        raise ValueError("xs and ys must have the same shape")
    if xs.size < 2:
        return
    half = max(0, int(width) // 2)
    px = xs.astype(np.int64).tolist()
    py = ys.astype(np.int64).tolist()
    for x0, y0, x1, y1 in zip(px[:-1], py[:-1], px[1:], py[1:]):
        if x0 == x1 or y0 == y1:
            blend_region(dst, min(x0, x1) - half, min(y0, y1) - half, max(x0, x1) + half + 1, max(y0, y1) + half + 1, color)
            continue
        for x, y in _segment_pixels(x0, y0, x1, y1):
            blend_region(dst, x - half, y - half, x + half + 1, y + half + 1, color)


def _segment_pixels(x0: int, y0: int, x1: int, y1: int) -> list[tuple[int, int]]:
    steps = max(abs(x1 - x0), abs(y1 - y0)) + 1
    xs = np.rint(np.linspace(x0, x1, steps)).astype(np.int64)
    ys = np.rint(np.linspace(y0, y1, steps)).astype(np.int64)
    return list(zip(xs.tolist(), ys.tolist()))
