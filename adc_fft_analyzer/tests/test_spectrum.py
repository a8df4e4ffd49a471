from __future__ import annotations

import math

import numpy as np
import pytest

from adc_fft_analyzer.analysis.constants import DB_FLOOR, magnitude_to_db
from adc_fft_analyzer.analysis.spectrum import compute_spectrum, pack_real_samples
from adc_fft_analyzer.analysis.transform import NumpyFFTTransform
from adc_fft_analyzer.analysis.window import BH7_TABLE_4096_SUM
from adc_fft_analyzer.errors import InvalidArgumentError
from adc_fft_analyzer.models.config import AnalysisConfig, LinearConverter
from adc_fft_analyzer.models.context import ProcessingContext


BITS = 24


def _setup(fft_length: int, window: str) -> tuple:
    conv = LinearConverter(bits=BITS, vref=2.5)
    cfg = AnalysisConfig(
        vref=2.5,
        sample_rate=1.0e6,
        samples_count=2 * fft_length,
        full_scale=conv.full_scale,
        zero_scale=conv.zero_scale,
        converter=conv,
        window=window,
    )
    tr = NumpyFFTTransform()
    tr.init(fft_length)
    ctx = ProcessingContext(cfg.max_samples, fft_length, tr, window=window)
    return cfg, ctx


def _tone(n_samples: int, fft_length: int, bin_: int, amplitude: float) -> np.ndarray:
    """Integer codes of a sine that completes ``bin_`` periods per ``fft_length`` samples."""
    n = np.arange(n_samples)
    return np.round(amplitude * np.sin(2.0 * np.pi * bin_ * n / fft_length)).astype(np.int64)


def test_pack_real_samples_uses_first_half_and_zero_imaginary() -> None:
    cfg, ctx = _setup(16, "rectangular")
    codes = np.arange(32, dtype=np.int64) * 1000
    ctx.set_input(codes)

    pack_real_samples(ctx, cfg)

    np.testing.assert_allclose(ctx.fft_input[0::2], codes[:16] / 2.0 ** (BITS - 1))
    assert np.all(ctx.fft_input[1::2] == 0.0)


def test_rectangular_tone_level_and_mirror() -> None:
    n, b = 1024, 64
    cfg, ctx = _setup(n, "rectangular")
    ctx.set_input(_tone(2 * n, n, b, 2.0**22))  # 0.5 of full scale

    divisor = compute_spectrum(ctx, cfg)

    assert divisor == 2.0 * n
    # A sine of amplitude 0.5 reads 0.25 after the 2/(2*fft_length) correction.
    assert ctx.fft_magnitude_corrected[b] == pytest.approx(0.25, rel=1e-4)
    assert ctx.fft_db[b] == pytest.approx(20.0 * math.log10(0.25), abs=1e-3)
    # Real input through a complex FFT: the upper half mirrors the lower half.
    assert ctx.fft_magnitude_corrected[n - b] == pytest.approx(ctx.fft_magnitude_corrected[b], rel=1e-9)


def test_bh7_live_sum_tone_level() -> None:
    n, b = 1024, 101
    cfg, ctx = _setup(n, "blackman_harris_7term")
    ctx.set_input(_tone(2 * n, n, b, 2.0**22))

    compute_spectrum(ctx, cfg)

    assert ctx.fft_db[b] == pytest.approx(20.0 * math.log10(0.5), abs=0.1)


def test_bh7_table_length_uses_precomputed_divisor() -> None:
    n, b = 2048, 101
    cfg, ctx = _setup(n, "blackman_harris_7term")
    ctx.set_input(_tone(2 * n, n, b, 2.0**22))

    divisor = compute_spectrum(ctx, cfg)

    assert divisor == BH7_TABLE_4096_SUM
    # The table total covers the whole 4096-point window, twice the applied half.
    assert ctx.fft_db[b] == pytest.approx(20.0 * math.log10(0.25), abs=0.1)


def test_silent_input_gives_floor_spectrum() -> None:
    cfg, ctx = _setup(64, "blackman_harris_7term")
    ctx.set_input(np.zeros(128, dtype=np.int64))

    compute_spectrum(ctx, cfg)

    assert np.all(ctx.fft_magnitude_corrected == 0.0)
    assert np.all(ctx.fft_db == DB_FLOOR)


def test_unsupported_window_aborts() -> None:
    cfg, ctx = _setup(64, "flat_top")
    ctx.set_input(np.zeros(128, dtype=np.int64))
    with pytest.raises(InvalidArgumentError):
        compute_spectrum(ctx, cfg)


def test_db_floor_applies_to_zero_bins_only() -> None:
    db = magnitude_to_db(np.array([0.0, 1e-15, 0.5]))

    assert db[0] == DB_FLOOR
    assert db[1] == pytest.approx(-300.0)
    assert db[2] == pytest.approx(20.0 * math.log10(0.5))
