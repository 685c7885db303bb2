"""Configuration reader, bindings model and session helpers for a Wayland compositor."""

__version__ = "0.1.0"