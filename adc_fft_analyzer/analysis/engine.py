"""Analysis orchestrator.

:class:`FFTAnalyzer` owns one :class:`ProcessingContext`, one
:class:`MeasurementResult` and one FFT transform handle, and runs the stages of
an analysis cycle in strict order::

    waveform statistics -> spectral pipeline -> harmonic locator -> noise / FOM

Every analyzer owns its transform, so several analyzers can be used side by
side for different channels.  A single analyzer is not reentrant: ``perform``,
``update_params`` and ``close`` must not overlap on the same instance.
"""

from __future__ import annotations

import logging
from dataclasses import asdict
from typing import Callable, Iterable, Optional

import numpy as np

from adc_fft_analyzer.errors import InvalidArgumentError, OutOfMemoryError, SpectralAnalysisError
from adc_fft_analyzer.models.config import AnalysisConfig
from adc_fft_analyzer.models.context import ProcessingContext
from adc_fft_analyzer.models.results import MeasurementResult

from .harmonics import locate_harmonics
from .noise import calculate_noise
from .spectrum import compute_spectrum
from .transform import FFTTransform, NumpyFFTTransform
from .waveform import waveform_statistics

logger = logging.getLogger(__name__)


class FFTAnalyzer:
    """Spectral dynamic-performance analyzer of one ADC channel.

    Parameters
    ----------
    config:
        Channel configuration.  Its ``max_samples`` fixes the buffer capacity for
        the lifetime of the analyzer.
    transform_factory:
        Zero-argument callable returning a fresh :class:`FFTTransform`.

    Raises
    ------
    InvalidArgumentError
        If ``config`` is missing.
    OutOfMemoryError
        If the buffers cannot be allocated.
    TransformError
        Propagated from the transform's ``init``.
    """

    def __init__(
        self,
        config: AnalysisConfig,
        *,
        transform_factory: Callable[[], FFTTransform] = NumpyFFTTransform,
    ) -> None:
        if config is None:
            raise InvalidArgumentError("FFTAnalyzer requires a configuration")

        try:
            ctx = ProcessingContext(
                config.max_samples,
                config.fft_length,
                transform_factory(),
                window=config.window,
            )
            result = MeasurementResult()
        except MemoryError as e:
            raise OutOfMemoryError(
                f"Cannot allocate analysis buffers for {config.max_samples} samples"
            ) from e

        self._config = config
        self._context = ctx
        self._result = result

        ctx.transform.init(ctx.fft_length)
        logger.info(
            "FFT analyzer initialized: fft_length=%d window=%s sample_rate=%g Hz channel=%d",
            ctx.fft_length,
            ctx.window,
            config.sample_rate,
            config.channel,
        )

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def config(self) -> AnalysisConfig:
        return self._config

    @property
    def context(self) -> ProcessingContext:
        return self._context

    @property
    def result(self) -> MeasurementResult:
        return self._result

    @property
    def fft_done(self) -> bool:
        return self._context.fft_done

    def _completed_view(self, arr: np.ndarray) -> np.ndarray:
        if not self._context.fft_done:
            raise SpectralAnalysisError("No completed analysis cycle; call perform() first")
        out = arr.copy()
        out.setflags(write=False)
        return out

    @property
    def spectrum_db(self) -> np.ndarray:
        """dBFS spectrum of the last completed cycle (read-only copy)."""
        return self._completed_view(self._context.fft_db)

    @property
    def spectrum_corrected(self) -> np.ndarray:
        """Window-corrected magnitude spectrum of the last completed cycle (read-only copy)."""
        return self._completed_view(self._context.fft_magnitude_corrected)

    def frequency_axis(self) -> np.ndarray:
        return self._context.frequency_axis()

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    def update_params(self, config: AnalysisConfig) -> None:
        """Switch to a new configuration without reallocating buffers.

        Re-derives ``fft_length`` and re-initializes the transform.  Any result
        from a previous cycle is invalidated.  If the transform rejects the new
        length, the :class:`TransformError` propagates and the analyzer keeps
        its previous configuration.
        """
        if config is None:
            raise InvalidArgumentError("update_params requires a configuration")
        ctx = self._context
        if config.samples_count > ctx.capacity:
            raise InvalidArgumentError(
                f"samples_count={config.samples_count} exceeds allocated capacity {ctx.capacity}"
            )

        # Nothing is committed unless the transform accepts the new length.
        ctx.transform.init(config.fft_length)

        self._config = config
        ctx.fft_length = config.fft_length
        ctx.window = config.window
        ctx.fft_done = False
        logger.info(
            "FFT analyzer updated: fft_length=%d sample_rate=%g Hz vref=%g V",
            ctx.fft_length,
            config.sample_rate,
            config.vref,
        )

    def close(self) -> None:
        """Release the transform handle; the analyzer cannot perform afterwards."""
        release = getattr(self._context.transform, "release", None)
        if release is not None:
            release()
        self._context.fft_done = False

    def __enter__(self) -> "FFTAnalyzer":
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        self.close()
        return False

    # ------------------------------------------------------------------
    # Input
    # ------------------------------------------------------------------

    def set_input(self, codes: Iterable[int]) -> None:
        """Store ``2*fft_length`` straight-binary codes for the next cycle."""
        self._context.set_input(codes)

    def load_codes(self, raw_codes: Iterable[int]) -> None:
        """Convert raw device codes to straight binary and store them for the next cycle."""
        self._context.load_codes(raw_codes, self._config.converter, self._config.channel)

    # ------------------------------------------------------------------
    # Analysis cycle
    # ------------------------------------------------------------------

    def perform(self, result: Optional[MeasurementResult] = None) -> MeasurementResult:
        """Run one full analysis cycle on the codes currently in the context.

        The DC offset is removed from the context's input buffer as a side
        effect.  On failure the exception of the failing stage propagates,
        ``fft_done`` stays False and the buffers and ``result`` keep whatever the
        completed stages wrote.
        """
        ctx = self._context
        cfg = self._config
        out = self._result if result is None else result

        ctx.fft_done = False
        ctx.bin_width = float(cfg.sample_rate) / (ctx.fft_length * 2.0)
        out.reset()

        stats = waveform_statistics(ctx, cfg)
        out.update(**asdict(stats))
        logger.debug("Waveform statistics: dc_lsb=%d pk_pk_lsb=%d", stats.dc_lsb, stats.pk_pk_amplitude_lsb)

        divisor = compute_spectrum(ctx, cfg)
        logger.debug("Spectrum computed: window=%s divisor=%g", ctx.window, divisor)

        harm = locate_harmonics(ctx, cfg.vref)
        out.update(
            harmonics_freq=harm.freq.copy(),
            harmonics_mag_dbfs=harm.mag_dbfs.copy(),
            harmonics_power=harm.power.copy(),
            fundamental=harm.fundamental_volts,
            thd=harm.thd,
        )
        logger.debug("Fundamental at bin %d (%.3f dBFS), THD %.3f dB", harm.freq[0], harm.mag_dbfs[0], harm.thd)

        noise = calculate_noise(ctx, harm)
        out.update(
            pk_spurious_noise=noise.pk_spurious_noise,
            pk_spurious_freq=noise.pk_spurious_freq,
            sfdr_dbc=noise.sfdr_dbc,
            sfdr_dbfs=noise.sfdr_dbfs,
            average_bin_noise=noise.average_bin_noise,
            dr=noise.dr,
            snr=noise.snr,
            sinad=noise.sinad,
            enob=noise.enob,
        )
        logger.debug("Noise: SNR %.3f dB, SINAD %.3f dB, ENOB %.3f", noise.snr, noise.sinad, noise.enob)

        ctx.fft_done = True
        return out
