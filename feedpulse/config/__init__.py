"""Configuration module - exports Settings, load_config and the analysis tables."""

from feedpulse.config.lexicons import load_analysis_tables
from feedpulse.config.loader import load_config
from feedpulse.config.settings import Settings

__all__ = ["Settings", "load_analysis_tables", "load_config"]
