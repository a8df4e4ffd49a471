"""Fundamental and harmonic location with Nyquist-zone folding.

Procedure
---------
1) Fundamental: strongest dB bin in ``[DC_EXCLUDE_BINS, fft_length)``; of two
   mirror-image peaks the lower bin wins.
2) Harmonic of order ``k``: ideal bin ``k * fundamental``, folded into the first
   Nyquist zone ``[0, fft_length]``:

   - ``ideal < fft_length``: used as is
   - zone ``z = 1 + ideal // fft_length``; odd ``z``:
     ``fft_length - (fft_length*z - ideal)``; even ``z``: ``fft_length*z - ideal``

3) Refinement: strongest dB bin within ``+-HARM_SPREAD_BINS`` of the folded bin.
4) Leakage reconstruction: root-sum-square of the corrected magnitudes over
   ``+-FUND_SPREAD_BINS`` (fundamental) or ``+-HARM_SPREAD_BINS`` (harmonics).
5) ``THD = 20*log10(sqrt(sum(P_i**2)) / P_0)`` over the located harmonics.

Only orders 2..6 are located (slots 1..5); slot 6 of the result arrays stays zero.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Tuple

import numpy as np

from adc_fft_analyzer.errors import InvalidArgumentError
from adc_fft_analyzer.models.context import ProcessingContext
from adc_fft_analyzer.models.results import HARMONIC_SLOTS

from .constants import (
    DB_FLOOR,
    DC_EXCLUDE_BINS,
    FUND_SPREAD_BINS,
    HARM_SPREAD_BINS,
    N_LOCATED_HARMONICS,
    RSS_SCALE,
    safe_db20,
)

# Real input through a complex FFT leaves bins k and fft_length-k equal to a
# few ulps; peaks closer than this are ties.
PEAK_TIE_DB = 1e-9


@dataclass(frozen=True)
class HarmonicsResult:
    """Located fundamental and harmonics.

    Arrays have shape ``(7,)``: index 0 = fundamental, index ``i`` = order ``i+1``.
    """

    freq: np.ndarray
    mag_dbfs: np.ndarray
    power: np.ndarray
    fundamental_volts: float
    thd: float


def _strongest(db: np.ndarray, lo: int, hi: int) -> Tuple[int, float]:
    """First maximum above :data:`DB_FLOOR` in ``db[lo:hi]``; ``(-1, DB_FLOOR)`` if none.

    Bins within :data:`PEAK_TIE_DB` of the maximum count as equal, so the lower
    of two mirror-image bins is always the one returned.
    """
    seg = db[lo:hi]
    if seg.size == 0:
        return -1, DB_FLOOR
    top = float(seg.max())
    if not top > DB_FLOOR:
        return -1, DB_FLOOR
    k = int(np.flatnonzero(seg >= top - PEAK_TIE_DB)[0])
    return lo + k, float(seg[k])


def find_fundamental(db: np.ndarray, fft_length: int) -> Tuple[int, float]:
    """Return ``(bin, dBFS)`` of the fundamental; ``(0, DB_FLOOR)`` for an empty spectrum."""
    pos, mag = _strongest(db, DC_EXCLUDE_BINS, int(fft_length))
    if pos < 0:
        return 0, DB_FLOOR
    return pos, mag


def fold_harmonic(fund_bin: int, order: int, fft_length: int) -> int:
    """Fold the ideal bin of harmonic ``order`` into the first Nyquist zone."""
    ideal = int(fund_bin) * int(order)
    n = int(fft_length)
    if ideal < n:
        return ideal
    zone = 1 + ideal // n
    if zone % 2:
        return n - (n * zone - ideal)
    return n * zone - ideal


def refine_peak(db: np.ndarray, position: int, span: int = HARM_SPREAD_BINS) -> Tuple[int, float]:
    """Strongest bin within ``position +- span``.

    The window is clipped to the spectrum.  When every bin in it sits at the dB
    floor the (clipped) folded position is kept.
    """
    last = db.size - 1
    lo = max(int(position) - span, 0)
    hi = min(int(position) + span, last)
    pos, mag = _strongest(db, lo, hi + 1)
    if pos < 0:
        return min(max(int(position), 0), last), DB_FLOOR
    return pos, mag


def rss_power(corrected: np.ndarray, center: int, span: int) -> float:
    """Leakage-corrected power of a tone spread over ``center +- span`` bins."""
    lo = max(int(center) - span, 0)
    hi = min(int(center) + span, corrected.size - 1)
    rms = corrected[lo : hi + 1] / RSS_SCALE
    return math.sqrt(float(np.sum(rms * rms))) * RSS_SCALE


def dbfs_to_volts(vref: float, value_db: float) -> float:
    """Peak-to-peak volts of a dBFS level."""
    return 2.0 * float(vref) * 10.0 ** (value_db / 20.0)


def thd_db(power: np.ndarray) -> float:
    harm = np.asarray(power[1 : N_LOCATED_HARMONICS + 1], dtype=float)
    return safe_db20(math.sqrt(float(np.sum(harm * harm))), float(power[0]))


def locate_harmonics(ctx: ProcessingContext, vref: float) -> HarmonicsResult:
    """Locate fundamental and harmonics on the spectra held by ``ctx``."""
    if ctx is None:
        raise InvalidArgumentError("locate_harmonics requires a context")

    n = ctx.fft_length
    db = ctx.fft_db
    corrected = ctx.fft_magnitude_corrected

    freq = np.zeros(HARMONIC_SLOTS, dtype=int)
    mag = np.zeros(HARMONIC_SLOTS, dtype=float)
    power = np.zeros(HARMONIC_SLOTS, dtype=float)

    freq[0], mag[0] = find_fundamental(db, n)

    for i in range(1, N_LOCATED_HARMONICS + 1):
        folded = fold_harmonic(freq[0], i + 1, n)
        freq[i], mag[i] = refine_peak(db, folded)

    power[0] = rss_power(corrected, freq[0], FUND_SPREAD_BINS)
    for i in range(1, N_LOCATED_HARMONICS + 1):
        power[i] = rss_power(corrected, freq[i], HARM_SPREAD_BINS)

    return HarmonicsResult(
        freq=freq,
        mag_dbfs=mag,
        power=power,
        fundamental_volts=dbfs_to_volts(vref, float(mag[0])),
        thd=thd_db(power),
    )
