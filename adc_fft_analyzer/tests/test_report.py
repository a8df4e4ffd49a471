from __future__ import annotations

import numpy as np
import pandas as pd
import pytest

from adc_fft_analyzer.analysis.report import (
    format_summary,
    harmonic_rows,
    harmonics_table,
    summary_rows,
    summary_table,
)
from adc_fft_analyzer.models.results import MeasurementResult


def _result() -> MeasurementResult:
    res = MeasurementResult()
    res.update(
        harmonics_freq=np.array([100, 200, 300, 400, 500, 600, 0]),
        harmonics_mag_dbfs=np.array([-6.0, -90.0, -95.0, -100.0, -110.0, -120.0, 0.0]),
        harmonics_power=np.array([0.5, 1e-5, 5e-6, 1e-6, 3e-7, 1e-7, 0.0]),
        thd=-89.5,
        snr=110.2,
        enob=17.9,
        rms_noise=2.5e-6,
        dc=0.001,
    )
    return res


def test_harmonic_rows_cover_fundamental_and_five_harmonics() -> None:
    rows = harmonic_rows(_result(), bin_width=10.0)

    assert len(rows) == 6
    assert [r["order"] for r in rows] == [1, 2, 3, 4, 5, 6]
    assert rows[0]["frequency_hz"] == pytest.approx(1000.0)
    assert rows[2]["bin"] == 300
    assert rows[5]["magnitude_dbfs"] == -120.0


def test_harmonics_table_columns() -> None:
    df = harmonics_table(_result(), bin_width=10.0)

    assert isinstance(df, pd.DataFrame)
    assert list(df.columns) == ["order", "bin", "frequency_hz", "magnitude_dbfs", "power"]
    assert df["frequency_hz"].tolist() == [1000.0, 2000.0, 3000.0, 4000.0, 5000.0, 6000.0]


def test_summary_units_and_scaling() -> None:
    rows = {(label, unit): value for label, value, unit in summary_rows(_result(), bin_width=10.0)}

    assert rows[("THD", "dB")] == -89.5
    assert rows[("RMS noise", "uV")] == pytest.approx(2.5)
    assert rows[("Fundamental frequency", "Hz")] == pytest.approx(1000.0)


def test_summary_table_and_text() -> None:
    df = summary_table(_result(), bin_width=10.0)
    assert list(df.columns) == ["quantity", "value", "unit"]
    assert len(df) == 12

    text = format_summary(_result(), bin_width=10.0)
    assert len(text.splitlines()) == 12
    assert "THD" in text
    assert "ENOB" in text
    assert "-89.500 dB" in text
