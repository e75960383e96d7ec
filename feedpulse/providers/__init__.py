"""Concrete adapters for the interfaces in ``feedpulse.interfaces``."""
