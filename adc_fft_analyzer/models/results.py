from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any, Dict

import numpy as np


# Slots of the harmonic arrays: 0 = fundamental, 1..6 = 2nd..7th harmonic.
HARMONIC_SLOTS = 7


def _zeros_int() -> np.ndarray:
    return np.zeros(HARMONIC_SLOTS, dtype=int)


def _zeros_float() -> np.ndarray:
    return np.zeros(HARMONIC_SLOTS, dtype=float)


@dataclass
class MeasurementResult:
    """Figures of merit of one analysis cycle.

    The caller owns the instance; every cycle overwrites it wholesale.

    Attributes
    ----------
    harmonics_freq, harmonics_mag_dbfs, harmonics_power:
        Arrays of shape ``(7,)``.  Index 0 is the fundamental, index ``i`` the
        harmonic of order ``i+1``.  Only indices 0..5 are populated.
    fundamental:
        Fundamental amplitude in volts peak-to-peak.
    pk_spurious_noise, pk_spurious_freq:
        Peak spur level (``20*log10(1/peak)``) and its bin.
    thd, snr, dr, sinad, sfdr_dbc, sfdr_dbfs:
        In dB.
    enob:
        Effective number of bits.
    dc, max_amplitude, min_amplitude, pk_pk_amplitude, transition_noise, rms_noise:
        In volts.
    *_lsb:
        Same quantities in code units.
    """

    harmonics_power: np.ndarray = field(default_factory=_zeros_float)
    harmonics_mag_dbfs: np.ndarray = field(default_factory=_zeros_float)
    harmonics_freq: np.ndarray = field(default_factory=_zeros_int)

    fundamental: float = 0.0
    pk_spurious_noise: float = 0.0
    pk_spurious_freq: int = 0

    thd: float = 0.0
    snr: float = 0.0
    dr: float = 0.0
    sinad: float = 0.0
    sfdr_dbc: float = 0.0
    sfdr_dbfs: float = 0.0
    enob: float = 0.0
    rms_noise: float = 0.0
    average_bin_noise: float = 0.0

    max_amplitude: float = 0.0
    min_amplitude: float = 0.0
    pk_pk_amplitude: float = 0.0
    dc: float = 0.0
    transition_noise: float = 0.0

    max_amplitude_lsb: int = 0
    min_amplitude_lsb: int = 0
    pk_pk_amplitude_lsb: int = 0
    dc_lsb: int = 0
    transition_noise_lsb: int = 0

    def reset(self) -> None:
        """Zero-fill every field in place."""
        fresh = MeasurementResult()
        for f in fields(self):
            setattr(self, f.name, getattr(fresh, f.name))

    def update(self, **values: Any) -> None:
        known = {f.name for f in fields(self)}
        unknown = set(values) - known
        if unknown:
            raise KeyError(f"Unknown MeasurementResult fields: {sorted(unknown)}")
        for k, v in values.items():
            setattr(self, k, v)

    def to_dict(self) -> Dict[str, Any]:
        """Return a JSON-friendly dict (arrays become lists)."""
        out: Dict[str, Any] = {}
        for f in fields(self):
            v = getattr(self, f.name)
            out[f.name] = v.tolist() if isinstance(v, np.ndarray) else v
        return out
