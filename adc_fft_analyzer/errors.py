"""Exception taxonomy of the analysis engine.

Every stage raises on the first problem it detects; nothing is retried. The
classes also derive from the matching builtin so callers that only know about
``ValueError`` or ``MemoryError`` keep working.
"""

from __future__ import annotations


class SpectralAnalysisError(Exception):
    """Base class for all errors raised by :mod:`adc_fft_analyzer`."""


class InvalidArgumentError(SpectralAnalysisError, ValueError):
    """Missing context, unsupported window type, bad lengths or a non-positive divisor."""


class OutOfMemoryError(SpectralAnalysisError, MemoryError):
    """Buffer allocation failed while initializing an analyzer."""


class TransformError(SpectralAnalysisError, RuntimeError):
    """Raised by the FFT collaborator (unsupported length, use before ``init``)."""
