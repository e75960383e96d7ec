"""feedpulse: customer feedback collection, sentiment and theme analysis."""

__version__ = "0.1.0"
