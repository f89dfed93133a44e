from __future__ import annotations

import numpy as np


HATCH_SPACING = 8
HATCH_LINE_WIDTH = 1


def hatch_mask(pattern: str, width: int, height: int, *, spacing: int = HATCH_SPACING) -> np.ndarray | None:
    """Boolean (height, width) mask of hatch strokes, or None for ``"none"``.

    The mask is anchored at the rectangle's top-left pixel so identical bars
    hatch identically wherever they are drawn.
    """
    if pattern == "none" or width <= 0 or height <= 0:
        return None
    if spacing < 2:
        raise ValueError("hatch spacing must be >= 2")
    yy, xx = np.indices((height, width))
    if pattern == "forward_slash":
        return (xx + yy) % spacing < HATCH_LINE_WIDTH
    if pattern == "backward_slash":
        return (xx - yy) % spacing < HATCH_LINE_WIDTH
    if pattern == "vertical":
        return xx % spacing < HATCH_LINE_WIDTH
    if pattern == "horizontal":
        return yy % spacing < HATCH_LINE_WIDTH
    if pattern == "grid":
        return (xx % spacing < HATCH_LINE_WIDTH) | (yy % spacing < HATCH_LINE_WIDTH)
    if pattern == "cross":
        return ((xx + yy) % spacing < HATCH_LINE_WIDTH) | ((xx - yy) % spacing < HATCH_LINE_WIDTH)
    if pattern in {"hollow_circle", "filled_circle"}:
        cx = (xx % spacing) - (spacing - 1) * 0.5
        cy = (yy % spacing) - (spacing - 1) * 0.5
        dist = np.sqrt(cx * cx + cy * cy)
        radius = spacing * 0.3
        if pattern == "filled_circle":
            return dist <= radius
        return np.abs(dist - radius) <= 0.6
    raise ValueError(f"unsupported hatch pattern: {pattern}")
