"""DC characterization of the raw capture.

Computed directly on the straight-binary codes before any spectral work:

- mean code (integer-truncated toward zero) = DC offset
- max / min / peak-to-peak amplitude in volts and in LSB
- transition noise = RMS deviation of the codes from the truncated mean

The truncated mean is then subtracted from ``input_data`` in place, so the
spectral stages only ever see the DC-removed capture.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

from adc_fft_analyzer.errors import InvalidArgumentError
from adc_fft_analyzer.models.config import AnalysisConfig
from adc_fft_analyzer.models.context import ProcessingContext


@dataclass(frozen=True)
class WaveformStats:
    """DC statistics of one capture (volts unless suffixed ``_lsb``)."""

    dc: float
    dc_lsb: int
    max_amplitude: float
    min_amplitude: float
    pk_pk_amplitude: float
    max_amplitude_lsb: int
    min_amplitude_lsb: int
    pk_pk_amplitude_lsb: int
    transition_noise: float
    transition_noise_lsb: int
    rms_noise: float


def truncated_mean(codes: np.ndarray) -> int:
    """Integer mean of ``codes`` rounded toward zero (exact for any code width)."""
    total = int(np.sum(codes, dtype=object))
    n = int(codes.size)
    q = abs(total) // n
    return q if total >= 0 else -q


def waveform_statistics(ctx: ProcessingContext, config: AnalysisConfig) -> WaveformStats:
    """Compute DC statistics and remove the DC offset from ``ctx.input_data``."""
    if ctx is None or config is None:
        raise InvalidArgumentError("waveform_statistics requires a context and a configuration")

    codes = ctx.input_data
    conv = config.converter
    zero_scale = int(config.zero_scale)
    full_scale = float(config.full_scale)
    span = 2.0 * float(config.vref)

    mean = truncated_mean(codes)

    # First occurrence, like a strict '>' scan.
    max_code = int(codes[int(np.argmax(codes))])
    min_code = int(codes[int(np.argmin(codes))])

    deviation = float(np.sum((codes.astype(float) - float(mean)) ** 2))
    noise_lsb = int(math.sqrt(deviation / codes.size))
    noise_v = span * noise_lsb / full_scale

    max_v = conv.code_to_volts_with_ref(max_code, config.channel)
    min_v = conv.code_to_volts_with_ref(min_code, config.channel)

    stats = WaveformStats(
        dc=span * mean / full_scale,
        dc_lsb=mean + zero_scale,
        max_amplitude=max_v,
        min_amplitude=min_v,
        pk_pk_amplitude=max_v - min_v,
        max_amplitude_lsb=max_code + zero_scale,
        min_amplitude_lsb=min_code + zero_scale,
        pk_pk_amplitude_lsb=max_code - min_code,
        transition_noise=noise_v,
        transition_noise_lsb=noise_lsb,
        rms_noise=noise_v,
    )

    codes -= mean
    return stats
