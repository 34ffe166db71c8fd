"""Building energy compliance portal: temperature alerts, compliance tracking and degree-day savings."""

__version__ = "1.0.0"
