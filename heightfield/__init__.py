# heightfield/__init__.py

# This file makes the 'heightfield' directory a Python package.
# We can also use it to define the public API of the package.

from .data_source import FlatDataSource, FractalDataSource, HeightDataSource
from .octaves import NoiseConfig, NoiseQuality, Octave, OctaveTable
from .presets import AtmosphereShell, PlanetSurface, atmosphere_shell, planet_surface

__all__ = [
    "HeightDataSource", "FractalDataSource", "FlatDataSource",
    "NoiseConfig", "NoiseQuality", "Octave", "OctaveTable",
    "PlanetSurface", "AtmosphereShell", "planet_surface", "atmosphere_shell",
]
