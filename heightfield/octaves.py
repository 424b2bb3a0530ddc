# heightfield/octaves.py

"""
================================================================================
NOISE CONFIGURATION & OCTAVE TABLE
================================================================================
This module turns user parameters into the immutable per-octave arrays the
noise kernels consume.

Data Contract:
---------------
- Inputs:
    - config (dict): User-defined parameters which override the defaults in
      heightfield.config. Recognised keys are the NoiseConfig field names.
- Outputs:
    - NoiseConfig: A validated, frozen parameter set.
    - OctaveTable: Read-only arrays of octave seeds, frequency scales and
      amplitudes, built exactly once.
- Side Effects: None, apart from debug logging of ignored keys.
- Invariants: The octave table never changes after construction. All
  randomness is a pure function of the config and the sample position.
================================================================================
"""

import enum
import logging
import math
from dataclasses import dataclass, fields
from typing import NamedTuple, Optional

import numpy as np

from . import config as DEFAULTS


class NoiseQuality(enum.Enum):
    """
    Coherent noise evaluation strategies. Only STANDARD (cubic s-curve,
    trilinear blend) is implemented; new evaluators register against a new
    member here.
    """
    STANDARD = "standard"


def wrap_seed(seed: int) -> int:
    """Wraps an integer into the signed 32-bit range used for hashing."""
    half = 1 << (DEFAULTS.SEED_BITS - 1)
    return ((int(seed) + half) % (1 << DEFAULTS.SEED_BITS)) - half


def _is_finite_number(value) -> bool:
    return isinstance(value, (int, float, np.integer, np.floating)) and math.isfinite(value)


@dataclass(frozen=True)
class NoiseConfig:
    """Build-time parameters of a fractal height source."""
    seed: int = DEFAULTS.DEFAULT_SEED
    frequency: float = DEFAULTS.DEFAULT_FREQUENCY
    octave_count: int = DEFAULTS.DEFAULT_OCTAVE_COUNT
    lacunarity: float = DEFAULTS.DEFAULT_LACUNARITY
    persistence: float = DEFAULTS.DEFAULT_PERSISTENCE
    scale: float = DEFAULTS.DEFAULT_SCALE
    height_scale: float = DEFAULTS.DEFAULT_HEIGHT_SCALE
    min_clamp: Optional[float] = DEFAULTS.DEFAULT_MIN_CLAMP
    max_clamp: float = DEFAULTS.DEFAULT_MAX_CLAMP
    quality: NoiseQuality = NoiseQuality.STANDARD

    @classmethod
    def from_dict(cls, config: dict, logger: logging.Logger = None) -> "NoiseConfig":
        """
        Overlays a user configuration dictionary on the internal defaults.

        Args:
            config (dict): User-defined parameters to override defaults.
            logger (logging.Logger, optional): Receives a debug line for every
                unrecognised key.

        Raises:
            ValueError: If the resulting configuration is invalid.
        """
        logger = logger or logging.getLogger(__name__)
        known = {f.name for f in fields(cls)}
        for key in config:
            if key not in known:
                logger.debug(f"Ignoring unknown noise parameter '{key}'.")

        quality = config.get('quality', NoiseQuality.STANDARD)
        try:
            quality = NoiseQuality(quality)
        except ValueError:
            raise ValueError(f"Unknown noise quality: {quality!r}") from None

        settings = cls(
            seed=config.get('seed', DEFAULTS.DEFAULT_SEED),
            frequency=config.get('frequency', DEFAULTS.DEFAULT_FREQUENCY),
            octave_count=config.get('octave_count', DEFAULTS.DEFAULT_OCTAVE_COUNT),
            lacunarity=config.get('lacunarity', DEFAULTS.DEFAULT_LACUNARITY),
            persistence=config.get('persistence', DEFAULTS.DEFAULT_PERSISTENCE),
            scale=config.get('scale', DEFAULTS.DEFAULT_SCALE),
            height_scale=config.get('height_scale', DEFAULTS.DEFAULT_HEIGHT_SCALE),
            min_clamp=config.get('min_clamp', DEFAULTS.DEFAULT_MIN_CLAMP),
            max_clamp=config.get('max_clamp', DEFAULTS.DEFAULT_MAX_CLAMP),
            quality=quality,
        )
        settings.validate()
        return settings

    def validate(self) -> None:
        """Rejects parameters that would put NaN or garbage into every sample."""
        if isinstance(self.seed, bool) or not isinstance(self.seed, (int, np.integer)):
            raise ValueError(f"seed must be an integer, got {self.seed!r}")
        if (isinstance(self.octave_count, bool)
                or not isinstance(self.octave_count, (int, np.integer))
                or self.octave_count < 1):
            raise ValueError(f"octave_count must be an integer >= 1, got {self.octave_count!r}")
        if not _is_finite_number(self.frequency) or self.frequency <= 0:
            raise ValueError(f"frequency must be finite and > 0, got {self.frequency!r}")
        if not _is_finite_number(self.persistence) or self.persistence <= 0:
            raise ValueError(f"persistence must be finite and > 0, got {self.persistence!r}")
        if not _is_finite_number(self.lacunarity):
            raise ValueError(f"lacunarity must be finite, got {self.lacunarity!r}")
        if not _is_finite_number(self.scale):
            raise ValueError(f"scale must be finite, got {self.scale!r}")
        if not _is_finite_number(self.height_scale):
            raise ValueError(f"height_scale must be finite, got {self.height_scale!r}")
        if self.min_clamp is not None and not _is_finite_number(self.min_clamp):
            raise ValueError(f"min_clamp must be finite, got {self.min_clamp!r}")
        if not isinstance(self.quality, NoiseQuality):
            raise ValueError(f"quality must be a NoiseQuality, got {self.quality!r}")


class Octave(NamedTuple):
    seed: int
    frequency_scale: float
    amplitude: float


class OctaveTable:
    """
    The fixed per-octave parameters derived from a NoiseConfig. Octave i has
    seed `seed + i` (wrapped to 32 bits), frequency scale
    `frequency * lacunarity**i` and amplitude `persistence**i`.
    """
    def __init__(self, settings: NoiseConfig):
        count = int(settings.octave_count)
        seeds = np.empty(count, dtype=np.int64)
        frequency_scales = np.empty(count, dtype=np.float64)
        amplitudes = np.empty(count, dtype=np.float64)

        frequency_scale = float(settings.frequency)
        amplitude = 1.0
        for o in range(count):
            seeds[o] = wrap_seed(settings.seed + o)
            frequency_scales[o] = frequency_scale
            amplitudes[o] = amplitude
            frequency_scale *= settings.lacunarity
            amplitude *= settings.persistence

        for array in (seeds, frequency_scales, amplitudes):
            array.setflags(write=False)
        self.seeds = seeds
        self.frequency_scales = frequency_scales
        self.amplitudes = amplitudes

    def __len__(self) -> int:
        return self.seeds.shape[0]

    def __getitem__(self, index: int) -> Octave:
        return Octave(int(self.seeds[index]), float(self.frequency_scales[index]), float(self.amplitudes[index]))

    def __iter__(self):
        for o in range(len(self)):
            yield self[o]

    def amplitude_sum(self) -> float:
        return float(np.sum(self.amplitudes))
