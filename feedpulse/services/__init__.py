"""Business logic: classification, theme extraction, ingestion and reporting."""

from feedpulse.services.ingestion_service import IngestionService
from feedpulse.services.report_service import ReportService
from feedpulse.services.sentiment_classifier import SentimentClassifier
from feedpulse.services.theme_extractor import ThemeExtractor

__all__ = [
    "IngestionService",
    "ReportService",
    "SentimentClassifier",
    "ThemeExtractor",
]
