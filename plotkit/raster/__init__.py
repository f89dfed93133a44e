from .canvas import blend_region, draw_hline, draw_vline, new_canvas
from .draw_lines import draw_polyline
from .draw_text import draw_text, text_size
from .hatching import hatch_mask
from .renderer import RasterRenderer

__all__ = [
    "RasterRenderer",
    "blend_region",
    "draw_hline",
    "draw_vline",
    "draw_polyline",
    "draw_text",
    "hatch_mask",
    "new_canvas",
    "text_size",
]
