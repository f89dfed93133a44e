from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

import numpy as np
from PIL import Image, ImageDraw, ImageFont

from plotkit.raster.canvas import RGBA, blend_coverage


DEFAULT_FONT_FAMILY = "DejaVu Sans"
DEFAULT_FONT_SIZE_PX = 11.0
FONT_FALLBACKS = ("dejavusans", "liberationsans", "helvetica", "arial")
FONT_DIRS = (
    Path.home() / "Library" / "Fonts",
    Path("/Library/Fonts"),
    Path("/System/Library/Fonts"),
    Path("/usr/share/fonts"),
    Path("/usr/local/share/fonts"),
)

HorizontalAnchor = Literal["left", "center", "right"]
VerticalAnchor = Literal["top", "middle", "bottom"]

Font = ImageFont.FreeTypeFont | ImageFont.ImageFont


def draw_text(
    dst: np.ndarray,
    x: int,
    y: int,
    text: str,
    color: RGBA,
    *,
    font_family: str = DEFAULT_FONT_FAMILY,
    font_size_px: float = DEFAULT_FONT_SIZE_PX,
    rotate_deg: int = 0,
    h_anchor: HorizontalAnchor = "left",
    v_anchor: VerticalAnchor = "top",
) -> tuple[int, int, int, int]:
    """Draw ``text`` anchored at ``(x, y)`` and return the ``(x, y, w, h)`` box it covered."""
    if not text:
        return (x, y, 0, 0)
    coverage = _label_mask(text, font_family, font_size_px, _quarter_turns(rotate_deg))
    h, w = coverage.shape
    left = _anchor_offset(x, w, h_anchor, ("left", "center", "right"))
    top = _anchor_offset(y, h, v_anchor, ("top", "middle", "bottom"))
    blend_coverage(dst, left, top, coverage, color)
    return (left, top, w, h)


def text_size(
    text: str,
    *,
    font_family: str = DEFAULT_FONT_FAMILY,
    font_size_px: float = DEFAULT_FONT_SIZE_PX,
    rotate_deg: int = 0,
) -> tuple[int, int]:
    turns = _quarter_turns(rotate_deg)
    if not text:
        # line height of an empty label
        _, top, _, bottom = _font(font_family, font_size_px).getbbox("Ag")
        w, h = 0, max(1, int(bottom - top))
    else:
        h, w = _label_mask(text, font_family, font_size_px, 0).shape
    return (h, w) if turns % 2 else (w, h)


def _anchor_offset(pos: int, extent: int, anchor: str, names: tuple[str, str, str]) -> int:
    if anchor == names[0]:
        return pos
    if anchor == names[1]:
        return pos - extent // 2
    if anchor == names[2]:
        return pos - extent
    raise ValueError(f"unsupported anchor: {anchor}")


def _quarter_turns(rotate_deg: int) -> int:
    if rotate_deg % 90 != 0:
        raise ValueError("rotate_deg must be a multiple of 90")
    return (rotate_deg // 90) % 4


@lru_cache(maxsize=512)
def _label_mask(text: str, font_family: str, font_size_px: float, turns: int) -> np.ndarray:
    font = _font(font_family, font_size_px)
    left, top, right, bottom = font.getbbox(text)
    image = Image.new("L", (max(1, int(right - left)), max(1, int(bottom - top))), 0)
    ImageDraw.Draw(image).text((-left, -top), text, fill=255, font=font)
    mask = np.asarray(image, dtype=np.uint8)
    return np.rot90(mask, k=turns) if turns else mask


@lru_cache(maxsize=64)
def _font(font_family: str, font_size_px: float) -> Font:
    path = _find_font_file(font_family.strip().lower().replace(" ", "") or DEFAULT_FONT_FAMILY.lower().replace(" ", ""))
    if path is None:
        return ImageFont.load_default()
    try:
        return ImageFont.truetype(str(path), size=max(1, int(round(font_size_px))))
    except OSError:
        return ImageFont.load_default()


@lru_cache(maxsize=16)
def _find_font_file(wanted: str) -> Path | None:
    files = sorted(
        path
        for base in FONT_DIRS
        if base.exists()
        for path in base.rglob("*")
        if path.suffix.lower() in {".ttf", ".otf", ".ttc"}
    )
    stems = [(path.stem.lower().replace(" ", "").replace("-", ""), path) for path in files]
    for pattern in (wanted, *FONT_FALLBACKS):
        # prefer the regular face over bold/oblique variants
        exact = [path for stem, path in stems if stem == pattern]
        if exact:
            return exact[0]
        partial = [path for stem, path in stems if stem.startswith(pattern)]
        if partial:
            return min(partial, key=lambda p: len(p.stem))
    return None
