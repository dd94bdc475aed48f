from .errors import (
    EngineError,
    InvalidInputError,
    UpstreamUnavailableError,
    AnalysisTimeoutError,
    AnalysisCancelledError,
    ErrorCode,
)
from .sources import PriceDataProvider, PatternDetector, ReportSink

__all__ = [
    "EngineError",
    "InvalidInputError",
    "UpstreamUnavailableError",
    "AnalysisTimeoutError",
    "AnalysisCancelledError",
    "ErrorCode",
    "PriceDataProvider",
    "PatternDetector",
    "ReportSink",
]
