"""ADC FFT Analyzer -- spectral dynamic-performance figures of merit for ADC captures.

This package takes a block of raw converter codes and derives the standard
dynamic figures of merit:

- DC statistics: offset, min/max/peak-to-peak amplitude, transition noise
- Windowed spectrum (7-term Blackman-Harris or rectangular) in dBFS
- Fundamental and harmonics 2..6, with Nyquist-zone folding and
  root-sum-square leakage reconstruction
- THD, SNR, SINAD, SFDR (dBc and dBFS), dynamic range and ENOB

Key principles:
- One analyzer per channel: each owns its buffers and its FFT transform
- Stages run in strict order and raise on the first error
- The raw input buffer is DC-corrected in place by every cycle

Main subpackages:
- analysis: Window, waveform, spectrum, harmonic, noise stages and the FFTAnalyzer orchestrator
- models: Configuration, processing context and measurement result
"""

from .analysis.engine import FFTAnalyzer
from .errors import InvalidArgumentError, OutOfMemoryError, SpectralAnalysisError, TransformError
from .models import AnalysisConfig, CallbackConverter, LinearConverter, MeasurementResult

__all__ = [
    "FFTAnalyzer",
    "AnalysisConfig",
    "CallbackConverter",
    "LinearConverter",
    "MeasurementResult",
    "SpectralAnalysisError",
    "InvalidArgumentError",
    "OutOfMemoryError",
    "TransformError",
]
