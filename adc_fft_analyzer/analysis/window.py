"""Window coefficients applied to the real samples before the FFT.

Two windows are supported:

- ``"rectangular"``: every coefficient is 1 and the amplitude-correction sum is
  ``2*fft_length`` (the raw sample count).
- ``"blackman_harris_7term"``: 7-term cosine series

      w[n] = sum_k a_k * cos(2*pi*k*n / (2*fft_length - 1))

  evaluated on the first ``fft_length`` points of a ``2*fft_length``-point grid.
  For ``fft_length == 2048`` the coefficients come from a cached 4096-entry table
  and the correction sum is the table total; for other lengths the sum is
  accumulated over the applied coefficients.
"""

from __future__ import annotations

from typing import Tuple

import numpy as np

from adc_fft_analyzer.errors import InvalidArgumentError
from adc_fft_analyzer.models.config import BLACKMAN_HARRIS_7TERM, RECTANGULAR


BH7_COEFFS = np.array(
    [
        0.27105140069342,
        -0.43329793923448,
        0.21812299954311,
        -0.06592544638803,
        0.01081174209837,
        -0.00077658482522,
        0.00001388721735,
    ]
)

TABLE_FFT_LENGTH = 2048
TABLE_SIZE = 2 * TABLE_FFT_LENGTH


def blackman_harris_7term(n_points: int, grid_size: int) -> np.ndarray:
    """First ``n_points`` coefficients of a ``grid_size``-point 7-term Blackman-Harris window."""
    if grid_size < 2:
        raise InvalidArgumentError(f"grid_size must be >= 2, got {grid_size}")
    n = np.arange(int(n_points), dtype=float)
    k = np.arange(BH7_COEFFS.size, dtype=float)
    phase = 2.0 * np.pi * np.outer(n, k) / float(grid_size - 1)
    return np.cos(phase) @ BH7_COEFFS


BH7_TABLE_4096 = blackman_harris_7term(TABLE_SIZE, TABLE_SIZE)
BH7_TABLE_4096.setflags(write=False)
BH7_TABLE_4096_SUM = float(np.sum(BH7_TABLE_4096))


def window_coefficients(window: str, fft_length: int) -> Tuple[np.ndarray, float]:
    """Return ``(coefficients, coefficient_sum)`` for the ``fft_length`` real samples.

    Raises
    ------
    InvalidArgumentError
        For any window other than the two supported ones.
    """
    n = int(fft_length)
    if window == RECTANGULAR:
        return np.ones(n, dtype=float), float(2 * n)
    if window == BLACKMAN_HARRIS_7TERM:
        if n == TABLE_FFT_LENGTH:
            return BH7_TABLE_4096[:n].copy(), BH7_TABLE_4096_SUM
        coeffs = blackman_harris_7term(n, 2 * n)
        return coeffs, float(np.sum(coeffs))
    raise InvalidArgumentError(f"Unsupported window type: {window!r}")


def apply_window(fft_input: np.ndarray, window: str, fft_length: int) -> float:
    """Multiply the real parts of an interleaved complex buffer in place.

    Returns the coefficient sum used later for amplitude correction.
    """
    coeffs, coeff_sum = window_coefficients(window, fft_length)
    n = int(fft_length)
    fft_input[0 : 2 * n : 2] *= coeffs
    return coeff_sum


def normalization_divisor(window: str, fft_length: int, coeff_sum: float) -> float:
    """Amplitude-correction divisor of the magnitude spectrum."""
    n = int(fft_length)
    if n == TABLE_FFT_LENGTH and window == BLACKMAN_HARRIS_7TERM:
        return BH7_TABLE_4096_SUM
    if window == RECTANGULAR:
        return float(2 * n)
    if not coeff_sum > 0.0:
        raise InvalidArgumentError(f"Window coefficient sum must be > 0, got {coeff_sum}")
    return float(coeff_sum)
