"""Analyzer contract, logging decorator and the primary-or-fallback strategy."""

import logging
import time
from abc import ABC, abstractmethod
from typing import Optional

from ..core.config import settings
from ..core.fallback import FallbackAnalyzer
from ..core.models import AnalysisInput, AnalysisResult
from .llm import OpenAIAnalyzer

logger = logging.getLogger(__name__)


class Analyzer(ABC):
    """Turns raw search results into per-aspect sections."""

    name = "analyzer"

    @abstractmethod
    def analyze(self, analysis_input: AnalysisInput) -> AnalysisResult:
        """Analyze one request's results. May raise; callers decide how to recover."""


Analyzer.register(FallbackAnalyzer)
Analyzer.register(OpenAIAnalyzer)


class LoggingAnalyzer(Analyzer):
    """Decorator that logs stage name, duration and outcome of an analyzer."""

    def __init__(self, inner: Analyzer):
        self.inner = inner

    @property
    def name(self) -> str:
        return self.inner.name

    def analyze(self, analysis_input: AnalysisInput) -> AnalysisResult:
        start = time.time()
        try:
            result = self.inner.analyze(analysis_input)
        except Exception as e:
            logger.warning(f"Analyzer '{self.name}' failed after {time.time() - start:.2f}s: {e}")
            raise
        logger.info(
            f"Analyzer '{self.name}' produced {len(result.sections)} sections "
            f"from {len(analysis_input.results)} results in {time.time() - start:.2f}s"
        )
        return result


class FallbackChain(Analyzer):
    """Try the primary analyzer, fall back to the deterministic one.

    Any primary failure, and an empty primary answer on a non-empty corpus,
    hands the same input to the fallback. The fallback's own result is
    returned as is.
    """

    name = "primary-or-fallback"

    def __init__(self, primary: Optional[Analyzer], fallback: Analyzer):
        self.primary = primary
        self.fallback = fallback

    def analyze(self, analysis_input: AnalysisInput) -> AnalysisResult:
        if self.primary is not None:
            try:
                result = self.primary.analyze(analysis_input)
            except Exception as e:
                logger.warning(f"Primary analyzer failed, using fallback: {e}")
            else:
                if result.has_data or not analysis_input.results:
                    return result
                logger.info("Primary analyzer found no sections, using fallback")
        return self.fallback.analyze(analysis_input)


class AnalyzerFactory:
    """Factory for creating analyzers."""

    @staticmethod
    def create() -> Analyzer:
        """OpenAI with fallback when a key is configured, otherwise the fallback alone."""
        fallback = LoggingAnalyzer(FallbackAnalyzer())
        if settings.effective_openai_key:
            return FallbackChain(LoggingAnalyzer(OpenAIAnalyzer()), fallback)
        logger.info("No OpenAI API key configured, using fallback analyzer only")
        return FallbackChain(None, fallback)
