"""Chart and map views rendered with Altair."""

from .base import BaseView
from .chart import Chart
from .export import FigureExporter
from .map import VisualizationMap

__all__ = [
    "BaseView",
    "Chart",
    "FigureExporter",
    "VisualizationMap",
]
