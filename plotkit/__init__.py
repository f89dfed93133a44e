from plotkit.api import bar_graph, figure, histogram
from plotkit.bar_graph import BarGraph, BarLayout
from plotkit.bars import BarRect, build_bar_rects
from plotkit.errors import InvalidInputError, PlotDataError
from plotkit.figure import Figure, FigureStyle
from plotkit.geometry import AxisMapping, PlotMarkers, Point, Rect, Size
from plotkit.histogram import Histogram, HistogramSeries
from plotkit.raster import RasterRenderer
from plotkit.renderer import Chart, LegendIcon, Renderer
from plotkit.series import Pair, Series

__all__ = [
    "AxisMapping",
    "BarGraph",
    "BarLayout",
    "BarRect",
    "Chart",
    "Figure",
    "FigureStyle",
    "Histogram",
    "HistogramSeries",
    "InvalidInputError",
    "LegendIcon",
    "Pair",
    "PlotDataError",
    "PlotMarkers",
    "Point",
    "RasterRenderer",
    "Rect",
    "Renderer",
    "Series",
    "Size",
    "bar_graph",
    "build_bar_rects",
    "figure",
    "histogram",
]
