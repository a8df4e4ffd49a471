"""Analysis package.

Design principle:
  - Each stage is a function over a :class:`~adc_fft_analyzer.models.context.ProcessingContext`
    that fills the context buffers and returns a frozen summary of what it derived.
  - :class:`~adc_fft_analyzer.analysis.engine.FFTAnalyzer` sequences the stages and
    copies the summaries into the caller's :class:`~adc_fft_analyzer.models.results.MeasurementResult`.

Stage order: waveform statistics -> spectrum -> harmonics -> noise.
"""

from .engine import FFTAnalyzer
from .harmonics import HarmonicsResult, fold_harmonic, locate_harmonics
from .noise import NoiseResult, calculate_noise
from .report import format_summary, harmonics_table, summary_table
from .spectrum import compute_spectrum
from .transform import FFTTransform, NumpyFFTTransform
from .waveform import WaveformStats, waveform_statistics
from .window import window_coefficients

__all__ = [
    "FFTAnalyzer",
    "FFTTransform",
    "NumpyFFTTransform",
    "HarmonicsResult",
    "NoiseResult",
    "WaveformStats",
    "calculate_noise",
    "compute_spectrum",
    "fold_harmonic",
    "format_summary",
    "harmonics_table",
    "locate_harmonics",
    "summary_table",
    "waveform_statistics",
    "window_coefficients",
]
