"""Khon Reep: crowdsourced traffic-safety incident pins."""

__version__ = "1.0.0"
