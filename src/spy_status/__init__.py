"""Query tracked users' device activity and render status summaries."""

__version__ = "0.3.0"
