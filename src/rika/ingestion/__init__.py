"""Extraction pipeline interfaces."""

from .api import language, parse
from .extractor import DocumentExtractor, ExtractionError, ExtractionFailure
from .issues import IssueCategory, IssueLog
from .language_detection import LanguageDetector, default_detector
from .models import ExtractionOutcome, ExtractionResult, InputType
from .runner import ExtractionRunner, RunOptions, RunReport
from .targets import TargetResolution, resolve_targets

__all__ = [
    "DocumentExtractor",
    "ExtractionError",
    "ExtractionFailure",
    "ExtractionOutcome",
    "ExtractionResult",
    "ExtractionRunner",
    "InputType",
    "IssueCategory",
    "IssueLog",
    "LanguageDetector",
    "RunOptions",
    "RunReport",
    "TargetResolution",
    "default_detector",
    "language",
    "parse",
    "resolve_targets",
]
