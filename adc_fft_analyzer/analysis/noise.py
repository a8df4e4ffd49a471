"""Noise floor isolation and the derived figures of merit.

The noise spectrum is the corrected magnitude spectrum with the DC band, the
fundamental spread and every harmonic spread zeroed.  From it:

- ``RSS = sqrt(sum((m/(2*sqrt(2)))**2)) * 2*sqrt(2)``
- peak spur level ``20*log10(1/peak)``, positive for a spur below full scale
- biggest spur: the strongest located harmonic (dBFS), replaced by the peak
  spur level when that one is lower
- ``SFDR_dBc = biggest_spur - fundamental_dBFS``, ``SFDR_dBFS = biggest_spur``
- ``average_bin_noise = 20*log10(sum(noise)/fft_length)``
- ``DR = 20*log10(1/RSS) + 4.48``
- ``SNR = 20*log10(P_fundamental / RSS)``
- ``SINAD = -10*log10(10**(-|SNR|/10) + 10**(-|THD|/10))``
- ``ENOB = (SINAD - 1.67 + |fundamental_dBFS|) / 6.02``

All logarithms go through :func:`~adc_fft_analyzer.analysis.constants.safe_db20`,
so a silent capture (RSS of zero) still yields finite figures.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Sequence

import numpy as np

from adc_fft_analyzer.errors import InvalidArgumentError
from adc_fft_analyzer.models.context import ProcessingContext

from .constants import (
    DC_EXCLUDE_BINS,
    FUND_SPREAD_BINS,
    HARM_SPREAD_BINS,
    N_LOCATED_HARMONICS,
    RSS_SCALE,
    safe_db20,
)
from .harmonics import HarmonicsResult

logger = logging.getLogger(__name__)

# Added to 20*log10(1/RSS) to give the dynamic range.
DR_CORRECTION_DB = 4.48

# Lower bound of the biggest-spur search.
SPUR_SEARCH_FLOOR_DB = -300.0


@dataclass(frozen=True)
class NoiseResult:
    """Noise-floor figures of one cycle (dB unless stated)."""

    rss: float  # linear, corrected-magnitude units
    average_bin_noise: float
    pk_spurious_noise: float
    pk_spurious_freq: int
    biggest_spur: float
    sfdr_dbc: float
    sfdr_dbfs: float
    dr: float
    snr: float
    sinad: float
    enob: float


def noise_mask(fft_length: int, harmonics_freq: Sequence[int]) -> np.ndarray:
    """Boolean mask of the bins that count as noise.

    Excludes ``[0, DC_EXCLUDE_BINS)``, the fundamental (``harmonics_freq[0]``)
    ``+-FUND_SPREAD_BINS`` and each harmonic slot ``+-HARM_SPREAD_BINS``.
    """
    n = int(fft_length)
    keep = np.ones(n, dtype=bool)
    keep[:DC_EXCLUDE_BINS] = False

    def _exclude(center: int, span: int) -> None:
        lo = max(int(center) - span, 0)
        hi = min(int(center) + span, n - 1)
        if lo <= hi:
            keep[lo : hi + 1] = False

    freq = list(harmonics_freq)
    _exclude(freq[0], FUND_SPREAD_BINS)
    for f in freq[1:]:
        _exclude(f, HARM_SPREAD_BINS)
    return keep


def sinad_db(snr: float, thd: float) -> float:
    return -10.0 * math.log10(10.0 ** (-abs(snr) / 10.0) + 10.0 ** (-abs(thd) / 10.0))


def enob_bits(sinad: float, fundamental_dbfs: float) -> float:
    return (sinad - 1.67 + abs(fundamental_dbfs)) / 6.02


def biggest_spur_db(harmonics_mag_dbfs: Sequence[float], pk_spurious_noise: float) -> float:
    """Strongest harmonic level, replaced by ``pk_spurious_noise`` when that is lower."""
    biggest = SPUR_SEARCH_FLOOR_DB
    for mag in harmonics_mag_dbfs[1 : N_LOCATED_HARMONICS + 1]:
        if mag > biggest:
            biggest = float(mag)
    if biggest > pk_spurious_noise:
        biggest = float(pk_spurious_noise)
    return biggest


def calculate_noise(ctx: ProcessingContext, harmonics: HarmonicsResult) -> NoiseResult:
    """Fill ``ctx.noise_bins`` and derive the noise figures of merit."""
    if ctx is None or harmonics is None:
        raise InvalidArgumentError("calculate_noise requires a context and located harmonics")

    n = ctx.fft_length
    corrected = ctx.fft_magnitude_corrected

    keep = noise_mask(n, harmonics.freq)
    ctx.noise_bins[:] = np.where(keep, corrected, 0.0)

    kept = corrected[keep]
    rms = kept / RSS_SCALE
    rss = math.sqrt(float(np.sum(rms * rms))) * RSS_SCALE
    mean = float(np.sum(kept)) / n

    if kept.size:
        k = int(np.argmax(kept))
        peak = float(kept[k])
        peak_bin = int(np.flatnonzero(keep)[k])
    else:
        peak = 0.0
        peak_bin = 0

    if rss == 0.0:
        logger.warning("Noise floor RSS is zero; SNR and DR fall back to the dB clamp limits")

    pk_spurious = safe_db20(1.0, peak)
    fund_dbfs = float(harmonics.mag_dbfs[0])
    biggest = biggest_spur_db(harmonics.mag_dbfs, pk_spurious)

    snr = safe_db20(float(harmonics.power[0]), rss)
    sinad = sinad_db(snr, harmonics.thd)

    return NoiseResult(
        rss=rss,
        average_bin_noise=safe_db20(mean),
        pk_spurious_noise=pk_spurious,
        pk_spurious_freq=peak_bin,
        biggest_spur=biggest,
        sfdr_dbc=biggest - fund_dbfs,
        sfdr_dbfs=biggest,
        dr=safe_db20(1.0, rss) + DR_CORRECTION_DB,
        snr=snr,
        sinad=sinad,
        enob=enob_bits(sinad, fund_dbfs),
    )
