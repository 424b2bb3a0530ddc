# heightfield/data_source.py

"""
================================================================================
HEIGHT DATA SOURCES
================================================================================
This module provides the HeightDataSource interface consumed by terrain mesh
builders, and its implementations: a fractal noise source and a flat source.

Data Contract:
---------------
- Inputs (on initialization):
    - config (NoiseConfig or dict): Noise parameters. Dictionaries override
      the internal defaults.
    - logger: A configured Python logging object for construction messages.
- Outputs (from methods):
    - get_value: One float32-precision height for a 3D position.
    - get_values: A float32 array of heights for an array of positions.
- Side Effects: Logs messages during construction only. Sampling never logs.
- Invariants: Given the same configuration and position, the output is
  deterministic. No maximum clamp is ever applied.

Threading:
---------------
set_height_scale() and set_min() belong to a single-threaded configuration
phase. Once configuration is complete and the instance has been handed to
other threads, get_value()/get_values() are safe to call concurrently: they
read only immutable state.
================================================================================
"""

import logging
import math
from typing import Protocol, Sequence, runtime_checkable

import numpy as np

from . import noise
from .octaves import NoiseConfig, NoiseQuality, OctaveTable, wrap_seed

# Scalar and batch kernels for each evaluation strategy.
_KERNELS = {
    NoiseQuality.STANDARD: (noise.fractal_noise, noise.fractal_noise_batch),
}


@runtime_checkable
class HeightDataSource(Protocol):
    """
    A protocol defining what a terrain builder expects from a height source.
    The builder samples get_values() over a spherified grid and displaces each
    vertex along its normal by the returned height.
    """
    def get_value(self, position: Sequence[float]) -> float: ...
    def get_values(self, positions) -> np.ndarray: ...
    def get_seed(self) -> int: ...
    def get_height_scale(self) -> float: ...
    def set_height_scale(self, height_scale: float) -> None: ...


def _as_position_array(positions) -> np.ndarray:
    points = np.asarray(positions, dtype=np.float64)
    if points.ndim == 0 or points.shape[-1] != 3:
        raise ValueError(f"positions must have a trailing dimension of 3, got shape {points.shape}")
    return points


def _check_finite(name: str, value: float) -> float:
    value = float(value)
    if not math.isfinite(value):
        raise ValueError(f"{name} must be finite, got {value!r}")
    return value


class FractalDataSource:
    """
    Generates heights from multi-octave 3D gradient noise.
    """
    def __init__(self, config=None, logger: logging.Logger = None):
        """
        Initializes the fractal source and builds its octave table.

        Args:
            config (NoiseConfig | dict, optional): Noise parameters. None uses
                the internal defaults.
            logger (logging.Logger, optional): The logger instance for all output.

        Raises:
            ValueError: If the configuration is invalid.
        """
        self.logger = logger or logging.getLogger(__name__)
        if config is None:
            config = {}
        if isinstance(config, NoiseConfig):
            config.validate()
            self.config = config
        else:
            self.config = NoiseConfig.from_dict(config, self.logger)

        if self.config.quality not in _KERNELS:
            raise ValueError(f"No evaluator registered for noise quality {self.config.quality}")
        self._kernel, self._batch_kernel = _KERNELS[self.config.quality]

        if self.config.persistence >= 1.0:
            self.logger.warning(
                f"Persistence {self.config.persistence} >= 1: higher octaves will not be damped."
            )

        self.octaves = OctaveTable(self.config)
        self._height_scale = float(self.config.height_scale)
        self._min_enabled = False
        self._min = 0.0
        if self.config.min_clamp is not None:
            self.set_min(self.config.min_clamp)

        self.logger.info(
            f"FractalDataSource initialized with seed: {self.config.seed} "
            f"({len(self.octaves)} octaves, quality: {self.config.quality.value})"
        )
        self.logger.debug(
            f"Octave frequency scales: {self.octaves.frequency_scales.tolist()}, "
            f"amplitudes: {self.octaves.amplitudes.tolist()}"
        )

    @classmethod
    def from_seed(cls, seed: int, logger: logging.Logger = None) -> "FractalDataSource":
        """Default parameters with the given seed."""
        return cls(NoiseConfig(seed=seed), logger=logger)

    # --- Configuration phase ---

    def set_height_scale(self, height_scale: float) -> None:
        self._height_scale = _check_finite("height_scale", height_scale)

    def set_min(self, min_value: float) -> None:
        """Enables the minimum clamp. Stored at float32 precision so clamped outputs equal it exactly."""
        self._min = float(np.float32(_check_finite("min_clamp", min_value)))
        self._min_enabled = True

    # --- Accessors ---

    def get_seed(self) -> int:
        return wrap_seed(self.config.seed)

    def get_height_scale(self) -> float:
        return self._height_scale

    @property
    def min_clamp(self):
        return self._min if self._min_enabled else None

    @property
    def max_clamp(self) -> float:
        # Kept alongside min_clamp but never applied to samples.
        return self.config.max_clamp

    def amplitude_bound(self) -> float:
        """
        Theoretical envelope of the output magnitude before min clamping:
        |height_scale| * |scale| * sum of octave amplitudes.
        """
        return abs(self._height_scale) * abs(self.config.scale) * self.octaves.amplitude_sum()

    # --- Sampling ---

    def get_value(self, position: Sequence[float]) -> float:
        """
        Returns the height contribution at a 3D position.
        """
        x, y, z = position
        value = self._kernel(
            float(x), float(y), float(z),
            self.octaves.seeds, self.octaves.frequency_scales, self.octaves.amplitudes,
            float(self.config.scale)
        )
        value *= self._height_scale
        if self._min_enabled:
            value = max(value, self._min)
        return float(np.float32(value))

    def get_values(self, positions) -> np.ndarray:
        """
        Vectorized get_value over an array of positions with shape (..., 3).
        Returns a float32 array with shape (...).
        """
        points = _as_position_array(positions)
        flat = np.ascontiguousarray(points.reshape(-1, 3))
        values = self._batch_kernel(
            flat,
            self.octaves.seeds, self.octaves.frequency_scales, self.octaves.amplitudes,
            float(self.config.scale)
        )
        values *= self._height_scale
        if self._min_enabled:
            np.maximum(values, self._min, out=values)
        return values.astype(np.float32).reshape(points.shape[:-1])


class FlatDataSource:
    """
    A constant height everywhere. Useful for smooth bodies and as a baseline
    when testing terrain builders.
    """
    def __init__(self, height: float = 0.0, seed: int = 0, height_scale: float = 1.0):
        self._height = _check_finite("height", height)
        self._seed = int(seed)
        self._height_scale = _check_finite("height_scale", height_scale)

    def set_height_scale(self, height_scale: float) -> None:
        self._height_scale = _check_finite("height_scale", height_scale)

    def get_seed(self) -> int:
        return self._seed

    def get_height_scale(self) -> float:
        return self._height_scale

    def get_value(self, position: Sequence[float]) -> float:
        return float(np.float32(self._height * self._height_scale))

    def get_values(self, positions) -> np.ndarray:
        points = _as_position_array(positions)
        return np.full(points.shape[:-1], self._height * self._height_scale, dtype=np.float32)
