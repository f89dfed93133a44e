from __future__ import annotations

import numpy as np


RGBA = tuple[int, int, int, int]


def new_canvas(width: int, height: int, color: RGBA = (0, 0, 0, 255)) -> np.ndarray:
    if width <= 0 or height <= 0:
        raise ValueError("canvas width/height must be > 0")
    canvas = np.empty((height, width, 4), dtype=np.uint8)
    canvas[:, :] = np.asarray(color, dtype=np.uint8)
    return canvas


def blend_region(dst: np.ndarray, x0: int, y0: int, x1: int, y1: int, color: RGBA, mask: np.ndarray | None = None) -> None:
    """Alpha-blend ``color`` over the half-open pixel box, optionally through a boolean mask."""
    xa = max(0, x0)
    ya = max(0, y0)
    xb = min(dst.shape[1], x1)
    yb = min(dst.shape[0], y1)
    if xa >= xb or ya >= yb:
        return
    view = dst[ya:yb, xa:xb]
    a = color[3] / 255.0
    src = np.asarray(color[:3], dtype=np.float32) * a
    blended = (src + view[:, :, :3].astype(np.float32) * (1.0 - a)).astype(np.uint8)
    if mask is None:
        view[:, :, :3] = blended
        view[:, :, 3] = 255
        return
    sub = mask[ya - y0 : yb - y0, xa - x0 : xb - x0]
    view[:, :, :3][sub] = blended[sub]
    view[:, :, 3][sub] = 255


def blend_coverage(dst: np.ndarray, x: int, y: int, coverage: np.ndarray, color: RGBA) -> None:
    """Blend ``color`` through an 8-bit coverage mask whose top-left lands at ``(x, y)``."""
    h, w = coverage.shape
    xa = max(0, x)
    ya = max(0, y)
    xb = min(dst.shape[1], x + w)
    yb = min(dst.shape[0], y + h)
    if xa >= xb or ya >= yb:
        return
    a = coverage[ya - y : yb - y, xa - x : xb - x].astype(np.float32) * (color[3] / (255.0 * 255.0))
    if not np.any(a > 0):
        return
    view = dst[ya:yb, xa:xb]
    src = np.asarray(color[:3], dtype=np.float32)
    rgb = src * a[:, :, None] + view[:, :, :3].astype(np.float32) * (1.0 - a[:, :, None])
    view[:, :, :3] = np.clip(np.rint(rgb), 0, 255).astype(np.uint8)
    view[:, :, 3] = np.maximum(view[:, :, 3], np.clip(a * 255.0, 0, 255).astype(np.uint8))


def draw_hline(dst: np.ndarray, x0: int, x1: int, y: int, color: RGBA) -> None:
    blend_region(dst, min(x0, x1), y, max(x0, x1) + 1, y + 1, color)


def draw_vline(dst: np.ndarray, x: int, y0: int, y1: int, color: RGBA) -> None:
    blend_region(dst, x, min(y0, y1), x + 1, max(y0, y1) + 1, color)
