from __future__ import annotations

import numpy as np
import pytest

from adc_fft_analyzer.analysis.window import (
    BH7_COEFFS,
    BH7_TABLE_4096,
    BH7_TABLE_4096_SUM,
    apply_window,
    blackman_harris_7term,
    normalization_divisor,
    window_coefficients,
)
from adc_fft_analyzer.errors import InvalidArgumentError


def test_rectangular_is_all_ones_with_sample_count_sum() -> None:
    coeffs, total = window_coefficients("rectangular", 256)
    assert coeffs.shape == (256,)
    assert np.all(coeffs == 1.0)
    assert total == 512.0


@pytest.mark.parametrize("fft_length", [16, 512, 1024, 2048, 4096])
@pytest.mark.parametrize("coeff_sum", [-1.0, 0.0, 3.5, 1e9])
def test_rectangular_divisor_ignores_accumulated_sum(fft_length: int, coeff_sum: float) -> None:
    assert normalization_divisor("rectangular", fft_length, coeff_sum) == 2.0 * fft_length


def test_bh7_table_shape_and_endpoints() -> None:
    assert BH7_TABLE_4096.shape == (4096,)
    # The coefficient set nearly cancels at n=0 and sums to ~1 at the grid centre.
    assert abs(BH7_TABLE_4096[0]) < 1e-6
    assert BH7_TABLE_4096.max() == pytest.approx(np.sum(np.abs(BH7_COEFFS)), abs=1e-5)
    assert BH7_TABLE_4096_SUM == pytest.approx(np.sum(BH7_TABLE_4096))
    # Symmetric over the 4096-point grid.
    np.testing.assert_allclose(BH7_TABLE_4096, BH7_TABLE_4096[::-1], atol=1e-12)


def test_bh7_table_is_read_only() -> None:
    with pytest.raises(ValueError):
        BH7_TABLE_4096[0] = 1.0


def test_bh7_at_2048_uses_table_and_precomputed_sum() -> None:
    coeffs, total = window_coefficients("blackman_harris_7term", 2048)
    np.testing.assert_array_equal(coeffs, BH7_TABLE_4096[:2048])
    assert total == BH7_TABLE_4096_SUM
    assert normalization_divisor("blackman_harris_7term", 2048, 123.0) == BH7_TABLE_4096_SUM


def test_bh7_other_length_accumulates_live_sum() -> None:
    n = 1024
    coeffs, total = window_coefficients("blackman_harris_7term", n)

    k = np.arange(n)
    expected = sum(a * np.cos(2.0 * np.pi * i * k / (2 * n - 1)) for i, a in enumerate(BH7_COEFFS))
    np.testing.assert_allclose(coeffs, expected, atol=1e-12)
    assert total == pytest.approx(expected.sum())
    assert normalization_divisor("blackman_harris_7term", n, total) == total


def test_series_matches_table_on_same_grid() -> None:
    np.testing.assert_allclose(blackman_harris_7term(2048, 4096), BH7_TABLE_4096[:2048], atol=1e-12)


def test_unsupported_window_rejected() -> None:
    with pytest.raises(InvalidArgumentError):
        window_coefficients("hann", 1024)


def test_non_positive_sum_rejected_for_live_window() -> None:
    with pytest.raises(InvalidArgumentError):
        normalization_divisor("blackman_harris_7term", 1024, 0.0)


def test_apply_window_scales_real_parts_only() -> None:
    n = 16
    buf = np.ones(2 * n)
    total = apply_window(buf, "blackman_harris_7term", n)

    coeffs, expected_total = window_coefficients("blackman_harris_7term", n)
    np.testing.assert_allclose(buf[0::2], coeffs)
    assert np.all(buf[1::2] == 1.0)
    assert total == expected_total
