# heightfield/config.py

"""
================================================================================
INTERNAL DEFAULT CONFIGURATION
================================================================================
This module contains the default, fallback internal constants for the height
field generator. These values are used if they are not explicitly provided by
the user's configuration.

DO NOT MODIFY THIS FILE FOR A SPECIFIC PLANET.
Instead, pass a configuration dictionary to NoiseConfig.from_dict().
================================================================================
"""

# --- Fractal Noise ---
DEFAULT_SEED = 0
DEFAULT_FREQUENCY = 1.0
DEFAULT_OCTAVE_COUNT = 12
# Each octave doubles the frequency of the previous one.
DEFAULT_LACUNARITY = 2.0
# Each octave keeps 62.5% of the previous octave's amplitude.
DEFAULT_PERSISTENCE = 0.625
# Magnitude factor applied to every single-octave sample.
DEFAULT_SCALE = 2.12

# --- Post-processing ---
DEFAULT_HEIGHT_SCALE = 1.0
# The minimum clamp is disabled unless explicitly set.
DEFAULT_MIN_CLAMP = None
# Stored for compatibility with planet configurations but never applied.
DEFAULT_MAX_CLAMP = 1.5

# --- Lattice Hash ---
# Large odd multipliers, one per axis and one for the seed.
NOISE_X_FACTOR = 1619
NOISE_Y_FACTOR = 31337
NOISE_Z_FACTOR = 6971
NOISE_SEED_FACTOR = 1013
NOISE_SHIFT = 8
GRADIENT_TABLE_SIZE = 256

# --- Seeds ---
# Octave seeds wrap into the signed 32-bit domain.
SEED_BITS = 32

# --- Planet Presets ---
# Surface relief as a fraction of the planet radius (1% to 3%).
MIN_RELIEF_FRACTION = 0.01
RELIEF_FRACTION_RANGE = 0.02
ATMOSPHERE_RELIEF_FRACTION = 0.015
ATMOSPHERE_RADIUS_FACTOR = 1.01
PLANET_PALETTES = ("Earth", "Barren", "Lava", "Mars")

# --- Baking ---
DEFAULT_FACE_RESOLUTION = 129
DEFAULT_BAKE_RADIUS = 1000.0
DEFAULT_OUTPUT_DIR = "baked_heightfields"
