"""Bin exclusion zones and dB conventions shared by the analysis stages."""

from __future__ import annotations

import math

import numpy as np


# Bins [0, DC_EXCLUDE_BINS) are never taken as fundamental or noise.
DC_EXCLUDE_BINS = 10

# Power leakage spread on either side of the fundamental / of a harmonic.
FUND_SPREAD_BINS = 10
HARM_SPREAD_BINS = 3

# Harmonic orders 2..6 are located (result slots 1..5).
N_LOCATED_HARMONICS = 5

# Clamp range of the dB ratios; zero magnitudes map to the floor and peak
# searches ignore anything at or below it.
DB_FLOOR = -200.0
DB_CEILING = 200.0

# Peak-to-RMS scaling used by the root-sum-square power reconstruction.
RSS_SCALE = 2.0 * math.sqrt(2.0)


def magnitude_to_db(magnitude: np.ndarray) -> np.ndarray:
    """``20*log10(magnitude)``; zero bins read :data:`DB_FLOOR`, every other bin is exact."""
    m = np.asarray(magnitude, dtype=float)
    out = np.full(m.shape, DB_FLOOR, dtype=float)
    pos = m > 0.0
    out[pos] = 20.0 * np.log10(m[pos])
    return out


def safe_db20(num: float, den: float = 1.0) -> float:
    """``20*log10(num/den)`` clamped into ``[DB_FLOOR, DB_CEILING]``.

    A zero (or negative) numerator gives the floor, a zero denominator with a
    positive numerator gives the ceiling.
    """
    num = float(num)
    den = float(den)
    if not num > 0.0:
        return DB_FLOOR
    if not den > 0.0:
        return DB_CEILING
    return float(min(max(20.0 * math.log10(num / den), DB_FLOOR), DB_CEILING))
