"""Analysis configuration -- everything fixed between two analysis cycles.

An :class:`AnalysisConfig` groups the converter description (reference
voltage, sample rate, code scaling), the code conversion strategy and the
window choice into one frozen dataclass.  It can be:

- Overridden field-by-field via ``dataclasses.replace()``
- Serialized to/from a dict for JSON provenance (the converter is not serialized)
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Callable, Dict, Literal, Protocol

from adc_fft_analyzer.errors import InvalidArgumentError


WindowType = Literal["blackman_harris_7term", "rectangular"]

BLACKMAN_HARRIS_7TERM: WindowType = "blackman_harris_7term"
RECTANGULAR: WindowType = "rectangular"

# Buffer capacity in raw samples (fft_length up to 4096).
DEFAULT_MAX_SAMPLES = 8192

# Fundamental search starts above the DC exclusion band, so the spectrum must be longer.
MIN_SAMPLES = 22


class CodeConverter(Protocol):
    """Device-specific conversion of ADC codes, resolved once at configuration time."""

    def code_to_volts_no_ref(self, code: int, channel: int) -> float:
        ...

    def code_to_volts_with_ref(self, code: int, channel: int) -> float:
        ...

    def code_to_straight_binary(self, raw_code: int, channel: int) -> int:
        ...


@dataclass(frozen=True)
class CallbackConverter:
    """Adapt three plain callables to :class:`CodeConverter`."""

    to_volts_no_ref: Callable[[int, int], float]
    to_volts_with_ref: Callable[[int, int], float]
    to_straight_binary: Callable[[int, int], int]

    def code_to_volts_no_ref(self, code: int, channel: int) -> float:
        return float(self.to_volts_no_ref(code, channel))

    def code_to_volts_with_ref(self, code: int, channel: int) -> float:
        return float(self.to_volts_with_ref(code, channel))

    def code_to_straight_binary(self, raw_code: int, channel: int) -> int:
        return int(self.to_straight_binary(raw_code, channel))


@dataclass(frozen=True)
class LinearConverter:
    """Bipolar two's-complement ADC with a linear transfer function.

    Attributes
    ----------
    bits : int
        Converter resolution.  Raw codes are ``bits`` wide two's-complement words.
    vref : float
        Reference voltage; a code of ``2**(bits-1)`` corresponds to ``+vref``.

    The reference-free conversion is normalized so that full scale is 1.0, which
    makes the dB spectrum read directly in dBFS.
    """

    bits: int
    vref: float

    @property
    def half_scale(self) -> int:
        return 1 << (self.bits - 1)

    @property
    def full_scale(self) -> int:
        """Number of codes spanning ``-vref..+vref``."""
        return 1 << self.bits

    @property
    def zero_scale(self) -> int:
        """Offset-binary code of 0 V."""
        return self.half_scale

    def code_to_volts_no_ref(self, code: int, channel: int) -> float:
        return code / float(self.half_scale)

    def code_to_volts_with_ref(self, code: int, channel: int) -> float:
        return code * self.vref / float(self.half_scale)

    def code_to_straight_binary(self, raw_code: int, channel: int) -> int:
        raw = int(raw_code) & (self.full_scale - 1)
        if raw & self.half_scale:
            raw -= self.full_scale
        return raw


@dataclass(frozen=True)
class AnalysisConfig:
    """Frozen configuration of one analysis channel.

    Required fields
    ---------------
    vref : float
        Device reference voltage in volts.
    sample_rate : float
        Sample rate in Hz.
    samples_count : int
        Number of raw codes per capture; the complex FFT runs on half of it.
    full_scale, zero_scale : int
        Full-scale code span and zero-scale code of the input representation.
    converter : CodeConverter
        Conversion strategy used for every code-to-volts/straight-binary step.

    Optional fields
    ---------------
    window : str
        ``"blackman_harris_7term"`` (default) or ``"rectangular"``.  Other values
        are rejected by the window generator when a cycle runs.
    channel : int
        Channel index forwarded to every converter call.
    max_samples : int
        Buffer capacity reserved by the analyzer; later updates may not exceed it.
    """

    vref: float
    sample_rate: float
    samples_count: int
    full_scale: int
    zero_scale: int
    converter: CodeConverter

    window: WindowType = BLACKMAN_HARRIS_7TERM
    channel: int = 0
    max_samples: int = DEFAULT_MAX_SAMPLES

    def __post_init__(self) -> None:
        if self.converter is None:
            raise InvalidArgumentError("converter is required")
        n = int(self.samples_count)
        if n < MIN_SAMPLES or n % 2:
            raise InvalidArgumentError(
                f"samples_count must be an even number >= {MIN_SAMPLES}, got {self.samples_count}"
            )
        if n > int(self.max_samples):
            raise InvalidArgumentError(
                f"samples_count={n} exceeds buffer capacity max_samples={self.max_samples}"
            )
        if not self.sample_rate > 0:
            raise InvalidArgumentError(f"sample_rate must be > 0, got {self.sample_rate}")
        if self.full_scale == 0:
            raise InvalidArgumentError("full_scale must be non-zero")

    @property
    def fft_length(self) -> int:
        return int(self.samples_count) // 2

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def to_dict(self) -> Dict[str, Any]:
        """Return a JSON-friendly dict without the converter."""
        d = {f.name: getattr(self, f.name) for f in fields(self) if f.name != "converter"}
        d["fft_length"] = self.fft_length
        return d

    @classmethod
    def from_dict(cls, d: Dict[str, Any], converter: CodeConverter) -> AnalysisConfig:
        """Reconstruct from a dict (e.g. loaded from JSON) and a converter."""
        d = dict(d)  # shallow copy
        d.pop("fft_length", None)
        d.pop("converter", None)
        return cls(converter=converter, **d)
