# heightfield/presets.py

"""
================================================================================
CELESTIAL BODY PRESETS
================================================================================
Factories that configure height sources the way solar-system bodies are
seeded: rocky planets and moons get a relief of 1% to 3% of their radius,
atmosphere shells a fixed 1.5% relief on a slightly larger sphere.

Data Contract:
---------------
- Inputs: seed, nominal radius, palette name.
- Outputs: PlanetSurface / AtmosphereShell descriptors carrying a configured
  FractalDataSource.
- Side Effects: None. Relief draws use a seed-derived generator, never global
  random state.
================================================================================
"""

import logging
import math
from typing import NamedTuple

import numpy as np

from . import config as DEFAULTS
from .data_source import FractalDataSource
from .sphere import collision_radius


class PlanetSurface(NamedTuple):
    palette: str
    radius: float
    collision_radius: float
    source: FractalDataSource


class AtmosphereShell(NamedTuple):
    radius: float
    source: FractalDataSource


def _check_radius(radius: float) -> float:
    radius = float(radius)
    if not math.isfinite(radius) or radius <= 0:
        raise ValueError(f"radius must be finite and > 0, got {radius!r}")
    return radius


def relief_fraction(seed: int) -> float:
    """Deterministic surface relief in [1%, 3%) of the radius for a seed."""
    rng = np.random.default_rng(seed & 0xffffffff)
    return DEFAULTS.MIN_RELIEF_FRACTION + rng.random() * DEFAULTS.RELIEF_FRACTION_RANGE


def planet_surface(seed: int, radius: float, palette: str = "Earth", logger: logging.Logger = None) -> PlanetSurface:
    """
    Configures the height source for a rocky planet or moon. The palette only
    selects surface materials downstream; every palette shares the same noise.
    """
    if palette not in DEFAULTS.PLANET_PALETTES:
        raise ValueError(f"Unknown palette {palette!r}; expected one of {DEFAULTS.PLANET_PALETTES}")
    radius = _check_radius(radius)

    source = FractalDataSource.from_seed(seed, logger=logger)
    source.set_height_scale(relief_fraction(seed) * radius)
    return PlanetSurface(palette, radius, collision_radius(radius), source)


def atmosphere_shell(seed: int, radius: float, logger: logging.Logger = None) -> AtmosphereShell:
    """Configures the height source for an atmosphere shell around a body of the given radius."""
    radius = _check_radius(radius)
    source = FractalDataSource.from_seed(seed, logger=logger)
    source.set_height_scale(DEFAULTS.ATMOSPHERE_RELIEF_FRACTION * radius)
    return AtmosphereShell(radius * DEFAULTS.ATMOSPHERE_RADIUS_FACTOR, source)
