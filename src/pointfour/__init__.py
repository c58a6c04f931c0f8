"""PointFour - fit and quality insights from fashion reviews on the web."""

__version__ = "0.3.0"
__author__ = "PointFour Team"

from .core.models import *
from .core.config import settings
from .services.review_search import ReviewSearchService
from .services.analyzers import AnalyzerFactory

__all__ = [
    "settings",
    "ReviewSearchService",
    "AnalyzerFactory",
]
