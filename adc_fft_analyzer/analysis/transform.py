"""Forward complex FFT collaborator.

The engine only relies on three operations:

``init(length)``
    Prepare for ``length``-point transforms.
``transform(buffer, length)``
    In-place forward FFT of an interleaved ``[re0, im0, re1, im1, ...]`` float
    buffer holding ``length`` complex points.
``magnitude(buffer, length)``
    Per-point complex magnitude of such a buffer.

:class:`NumpyFFTTransform` is the default implementation, backed by
``numpy.fft.fft``.  Supported lengths are the radix-2 sizes 16..4096.
"""

from __future__ import annotations

from typing import Optional, Protocol

import numpy as np

from adc_fft_analyzer.errors import TransformError


MIN_LENGTH = 16
MAX_LENGTH = 4096


class FFTTransform(Protocol):
    def init(self, length: int) -> None:
        ...

    def transform(self, buffer: np.ndarray, length: int) -> None:
        ...

    def magnitude(self, buffer: np.ndarray, length: int) -> np.ndarray:
        ...

    def release(self) -> None:
        ...


def _split_interleaved(buffer: np.ndarray, length: int) -> np.ndarray:
    buf = np.asarray(buffer)
    if buf.ndim != 1:
        raise TransformError(f"Expected 1D interleaved buffer, got shape {buf.shape}")
    if buf.size < 2 * length:
        raise TransformError(f"Buffer too short: size={buf.size}, need={2 * length}")
    return buf[0 : 2 * length : 2] + 1j * buf[1 : 2 * length : 2]


class NumpyFFTTransform:
    """Radix-2 forward FFT over an interleaved float buffer.

    One instance is one transform handle: each analyzer owns its own, so several
    channels can be analyzed independently.
    """

    def __init__(self) -> None:
        self._length: Optional[int] = None

    @property
    def length(self) -> Optional[int]:
        return self._length

    def init(self, length: int) -> None:
        n = int(length)
        if n < MIN_LENGTH or n > MAX_LENGTH or n & (n - 1):
            raise TransformError(
                f"Unsupported FFT length {length}; expected a power of two in [{MIN_LENGTH}, {MAX_LENGTH}]"
            )
        self._length = n

    def release(self) -> None:
        self._length = None

    def _check(self, length: int) -> int:
        if self._length is None:
            raise TransformError("FFT transform used before init()")
        if int(length) != self._length:
            raise TransformError(f"FFT initialized for length {self._length}, called with {length}")
        return self._length

    def transform(self, buffer: np.ndarray, length: int) -> None:
        n = self._check(length)
        z = np.fft.fft(_split_interleaved(buffer, n))
        buffer[0 : 2 * n : 2] = z.real
        buffer[1 : 2 * n : 2] = z.imag

    def magnitude(self, buffer: np.ndarray, length: int) -> np.ndarray:
        n = self._check(length)
        return np.abs(_split_interleaved(buffer, n))
