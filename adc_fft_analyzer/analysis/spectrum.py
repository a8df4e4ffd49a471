"""Spectral pipeline: DC-free codes -> windowed complex FFT -> corrected dB spectrum.

Steps (strictly ordered)
------------------------
1) The first ``fft_length`` DC-corrected codes are converted to reference-free
   volts and packed as real parts of an interleaved complex buffer; imaginary
   parts are zero.
2) The window is applied to the real parts.
3) Forward complex FFT of ``fft_length`` points, reduced to magnitudes.
4) Window correction: ``corrected = 2 * magnitude / divisor`` (one-sided
   spectrum), ``dB = 20*log10(corrected)`` relative to a full scale of 1.0.

Because a real signal is fed to a complex FFT, the upper half of the
``fft_length`` bins mirrors the lower half.
"""

from __future__ import annotations

import numpy as np

from adc_fft_analyzer.errors import InvalidArgumentError
from adc_fft_analyzer.models.config import AnalysisConfig
from adc_fft_analyzer.models.context import ProcessingContext

from .constants import magnitude_to_db
from .window import apply_window, normalization_divisor


def pack_real_samples(ctx: ProcessingContext, config: AnalysisConfig) -> None:
    """Fill ``ctx.fft_input`` with ``[volts, 0.0, volts, 0.0, ...]``."""
    n = ctx.fft_length
    conv = config.converter
    ch = config.channel
    codes = ctx.input_data[:n]

    buf = ctx.fft_input
    buf[0::2] = np.fromiter(
        (conv.code_to_volts_no_ref(int(c), ch) for c in codes), dtype=float, count=n
    )
    buf[1::2] = 0.0


def compute_spectrum(ctx: ProcessingContext, config: AnalysisConfig) -> float:
    """Run the spectral pipeline and return the normalization divisor used."""
    if ctx is None or config is None:
        raise InvalidArgumentError("compute_spectrum requires a context and a configuration")

    n = ctx.fft_length
    pack_real_samples(ctx, config)
    coeff_sum = apply_window(ctx.fft_input, ctx.window, n)

    ctx.transform.transform(ctx.fft_input, n)
    ctx.fft_magnitude[:] = ctx.transform.magnitude(ctx.fft_input, n)

    divisor = normalization_divisor(ctx.window, n, coeff_sum)
    ctx.fft_magnitude_corrected[:] = ctx.fft_magnitude * 2.0 / divisor
    ctx.fft_db[:] = magnitude_to_db(ctx.fft_magnitude_corrected)
    return divisor
