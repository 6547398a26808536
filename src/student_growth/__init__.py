"""Student growth visualization: choropleth map and line chart of German student demographics."""

__version__ = "0.1.0"
