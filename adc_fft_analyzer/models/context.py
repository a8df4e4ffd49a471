from __future__ import annotations

from typing import Iterable

import numpy as np

from adc_fft_analyzer.errors import InvalidArgumentError
from adc_fft_analyzer.models.config import BLACKMAN_HARRIS_7TERM, CodeConverter, WindowType


class ProcessingContext:
    """Working buffers of one analysis channel.

    Buffers are allocated once at ``capacity`` raw samples and zero-filled.  The
    properties below return writable views of the active length, so each
    analysis cycle overwrites them in place.

    Notes
    -----
    - ``input_data`` holds ``2*fft_length`` straight-binary codes.  Waveform
      statistics removes the DC offset from it in place: a caller that needs to
      analyze the same capture again must keep its own copy.
    - ``fft_input`` is interleaved complex ``[re, im, ...]`` of ``2*fft_length`` floats.
    - Magnitude, dB and noise buffers have ``fft_length`` bins.
    """

    def __init__(self, capacity: int, fft_length: int, transform, *, window: WindowType = BLACKMAN_HARRIS_7TERM) -> None:
        capacity = int(capacity)
        if 2 * int(fft_length) > capacity:
            raise InvalidArgumentError(
                f"fft_length={fft_length} needs {2 * int(fft_length)} samples, capacity is {capacity}"
            )
        self.capacity = capacity
        self.fft_length = int(fft_length)
        self.window = window
        self.transform = transform

        self._input_data = np.zeros(capacity, dtype=np.int64)
        self._fft_input = np.zeros(capacity, dtype=float)
        self._fft_magnitude = np.zeros(capacity // 2, dtype=float)
        self._fft_magnitude_corrected = np.zeros(capacity // 2, dtype=float)
        self._fft_db = np.zeros(capacity // 2, dtype=float)
        self._noise_bins = np.zeros(capacity // 2, dtype=float)

        self.bin_width = 0.0
        self.fft_done = False

    # ------------------------------------------------------------------
    # Active-length views
    # ------------------------------------------------------------------

    @property
    def n_samples(self) -> int:
        return 2 * self.fft_length

    @property
    def input_data(self) -> np.ndarray:
        return self._input_data[: self.n_samples]

    @property
    def fft_input(self) -> np.ndarray:
        return self._fft_input[: self.n_samples]

    @property
    def fft_magnitude(self) -> np.ndarray:
        return self._fft_magnitude[: self.fft_length]

    @property
    def fft_magnitude_corrected(self) -> np.ndarray:
        return self._fft_magnitude_corrected[: self.fft_length]

    @property
    def fft_db(self) -> np.ndarray:
        return self._fft_db[: self.fft_length]

    @property
    def noise_bins(self) -> np.ndarray:
        return self._noise_bins[: self.fft_length]

    # ------------------------------------------------------------------
    # Input
    # ------------------------------------------------------------------

    def _check_length(self, values: np.ndarray) -> None:
        if values.ndim != 1 or values.size != self.n_samples:
            raise InvalidArgumentError(
                f"Expected {self.n_samples} codes (2*fft_length), got shape {values.shape}"
            )

    def set_input(self, codes: Iterable[int]) -> None:
        """Copy straight-binary codes into ``input_data``."""
        arr = np.asarray(list(codes) if not isinstance(codes, np.ndarray) else codes)
        self._check_length(arr)
        if arr.dtype.kind not in "iu":
            raise InvalidArgumentError(f"Codes must be integers, got dtype {arr.dtype}")
        self.input_data[:] = arr

    def load_codes(self, raw_codes: Iterable[int], converter: CodeConverter, channel: int = 0) -> None:
        """Convert raw device codes to straight binary and store them in ``input_data``."""
        raw = np.asarray(list(raw_codes) if not isinstance(raw_codes, np.ndarray) else raw_codes)
        self._check_length(raw)
        self.input_data[:] = [converter.code_to_straight_binary(int(c), channel) for c in raw]

    def frequency_axis(self) -> np.ndarray:
        """Bin frequencies in Hz, valid after ``bin_width`` was set by a cycle."""
        return np.arange(self.fft_length, dtype=float) * self.bin_width
