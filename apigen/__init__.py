"""Generate typed API bindings by scraping an HTML API reference."""

__version__ = "0.1.0"
