from .config import (
    BLACKMAN_HARRIS_7TERM,
    RECTANGULAR,
    AnalysisConfig,
    CallbackConverter,
    CodeConverter,
    LinearConverter,
    WindowType,
)
from .context import ProcessingContext
from .results import MeasurementResult

__all__ = [
    "BLACKMAN_HARRIS_7TERM",
    "RECTANGULAR",
    "AnalysisConfig",
    "CallbackConverter",
    "CodeConverter",
    "LinearConverter",
    "WindowType",
    "ProcessingContext",
    "MeasurementResult",
]
