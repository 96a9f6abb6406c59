"""Herald — notification delivery engine for community bots."""

__version__ = "0.1.0"
