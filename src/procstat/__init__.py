"""procstat - interval sampling of /proc counters and text streams."""

__version__ = "0.3.0"
