"""Tabular and text views of a :class:`MeasurementResult`.

Functions
---------
harmonic_rows
    One dict per located harmonic, suitable for ``pd.DataFrame()``.
harmonics_table
    The same rows as a DataFrame.
summary_rows
    ``(label, value, unit)`` tuples of the headline figures.
summary_table
    The headline figures as a DataFrame.
format_summary
    Fixed-width text block of the headline figures.
"""

from __future__ import annotations

from typing import List, Tuple

import pandas as pd

from adc_fft_analyzer.models.results import MeasurementResult

from .constants import N_LOCATED_HARMONICS


def harmonic_rows(result: MeasurementResult, bin_width: float) -> list[dict]:
    """Build one row per populated harmonic slot (fundamental first).

    Parameters
    ----------
    result : MeasurementResult
        Output of a completed cycle.
    bin_width : float
        Hz per bin, ``sample_rate / (2*fft_length)``.

    Returns
    -------
    list of dict
        Keys ``order``, ``bin``, ``frequency_hz``, ``magnitude_dbfs``, ``power``.
    """
    rows: list[dict] = []
    for i in range(N_LOCATED_HARMONICS + 1):
        b = int(result.harmonics_freq[i])
        rows.append(
            {
                "order": i + 1,
                "bin": b,
                "frequency_hz": b * float(bin_width),
                "magnitude_dbfs": float(result.harmonics_mag_dbfs[i]),
                "power": float(result.harmonics_power[i]),
            }
        )
    return rows


def harmonics_table(result: MeasurementResult, bin_width: float) -> pd.DataFrame:
    return pd.DataFrame(harmonic_rows(result, bin_width))


def summary_rows(result: MeasurementResult, bin_width: float) -> List[Tuple[str, float, str]]:
    """Headline figures in display order."""
    return [
        ("THD", result.thd, "dB"),
        ("SNR", result.snr, "dB"),
        ("DR", result.dr, "dB"),
        ("SINAD", result.sinad, "dB"),
        ("SFDR", result.sfdr_dbc, "dBc"),
        ("SFDR", result.sfdr_dbfs, "dBFS"),
        ("ENOB", result.enob, "bits"),
        ("Fundamental", float(result.harmonics_mag_dbfs[0]), "dBFS"),
        ("Fundamental frequency", int(result.harmonics_freq[0]) * float(bin_width), "Hz"),
        ("RMS noise", result.rms_noise * 1e6, "uV"),
        ("DC", result.dc, "V"),
        ("Peak-to-peak", result.pk_pk_amplitude, "V"),
    ]


def summary_table(result: MeasurementResult, bin_width: float) -> pd.DataFrame:
    return pd.DataFrame(summary_rows(result, bin_width), columns=["quantity", "value", "unit"])


def format_summary(result: MeasurementResult, bin_width: float) -> str:
    lines = []
    for label, value, unit in summary_rows(result, bin_width):
        lines.append(f"{label:<22s} {value:12.3f} {unit}")
    return "\n".join(lines)
