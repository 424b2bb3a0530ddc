"""Tests for noise configuration and octave table construction."""

import logging
import math

import numpy as np
import pytest

from heightfield.octaves import NoiseConfig, NoiseQuality, OctaveTable, wrap_seed


class TestNoiseConfig:
    """Test configuration defaults, overrides and validation."""

    def test_defaults(self):
        settings = NoiseConfig.from_dict({})
        assert settings.seed == 0
        assert settings.frequency == 1.0
        assert settings.octave_count == 12
        assert settings.lacunarity == 2.0
        assert settings.persistence == 0.625
        assert settings.scale == 2.12
        assert settings.height_scale == 1.0
        assert settings.min_clamp is None
        assert settings.max_clamp == 1.5
        assert settings.quality is NoiseQuality.STANDARD

    def test_overrides(self):
        settings = NoiseConfig.from_dict({'seed': 99, 'octave_count': 4, 'quality': 'standard'})
        assert settings.seed == 99
        assert settings.octave_count == 4
        assert settings.persistence == 0.625

    def test_unknown_keys_are_ignored(self, caplog):
        with caplog.at_level(logging.DEBUG):
            settings = NoiseConfig.from_dict({'seed': 3, 'colour': 'red'})
        assert settings.seed == 3
        assert "colour" in caplog.text

    def test_frozen(self):
        settings = NoiseConfig()
        with pytest.raises(AttributeError):
            settings.seed = 5

    @pytest.mark.parametrize("overrides", [
        {'octave_count': 0},
        {'octave_count': -3},
        {'octave_count': 2.5},
        {'persistence': 0.0},
        {'persistence': -0.5},
        {'persistence': math.nan},
        {'frequency': math.inf},
        {'frequency': math.nan},
        {'frequency': 0.0},
        {'scale': math.inf},
        {'scale': math.nan},
        {'lacunarity': math.nan},
        {'height_scale': math.inf},
        {'min_clamp': math.nan},
        {'seed': 1.5},
        {'quality': 'ultra'},
    ])
    def test_invalid_configuration_is_rejected(self, overrides):
        with pytest.raises(ValueError):
            NoiseConfig.from_dict(overrides)

    def test_validate_on_direct_construction(self):
        with pytest.raises(ValueError):
            NoiseConfig(octave_count=0).validate()


class TestWrapSeed:
    """Test 32-bit seed wrapping."""

    def test_in_range_unchanged(self):
        assert wrap_seed(0) == 0
        assert wrap_seed(-5) == -5
        assert wrap_seed(2**31 - 1) == 2**31 - 1

    def test_overflow_wraps(self):
        assert wrap_seed(2**31) == -2**31
        assert wrap_seed(2**32 + 7) == 7


class TestOctaveTable:
    """Test derived per-octave parameters."""

    def test_default_table(self):
        table = OctaveTable(NoiseConfig())
        assert len(table) == 12
        np.testing.assert_array_equal(table.seeds, np.arange(12))
        np.testing.assert_allclose(table.frequency_scales, 2.0 ** np.arange(12))
        np.testing.assert_allclose(table.amplitudes, 0.625 ** np.arange(12))

    def test_frequency_and_seed_offsets(self):
        table = OctaveTable(NoiseConfig(seed=10, frequency=0.5, octave_count=3, lacunarity=3.0))
        assert list(table) == [
            (10, 0.5, 1.0),
            (11, 1.5, 0.625),
            (12, 4.5, 0.390625),
        ]

    def test_seeds_wrap_at_32_bits(self):
        table = OctaveTable(NoiseConfig(seed=2**31 - 1, octave_count=3))
        assert table.seeds.tolist() == [2**31 - 1, -2**31, -2**31 + 1]

    def test_arrays_are_immutable(self):
        table = OctaveTable(NoiseConfig(octave_count=2))
        with pytest.raises(ValueError):
            table.amplitudes[0] = 5.0
        with pytest.raises(ValueError):
            table.seeds[0] = 5

    def test_amplitude_sum(self):
        table = OctaveTable(NoiseConfig(octave_count=3, persistence=0.5))
        assert table.amplitude_sum() == pytest.approx(1.75)
