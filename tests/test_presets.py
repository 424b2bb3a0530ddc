"""Tests for planet and atmosphere presets."""

import pytest

from heightfield import atmosphere_shell, planet_surface
from heightfield.presets import relief_fraction


class TestPlanetSurface:
    """Test rocky body presets."""

    def test_relief_range(self):
        for seed in range(50):
            assert 0.01 <= relief_fraction(seed) < 0.03

    def test_relief_is_deterministic(self):
        assert relief_fraction(123) == relief_fraction(123)

    def test_negative_seed(self):
        assert 0.01 <= relief_fraction(-9) < 0.03

    @pytest.mark.parametrize("palette", ["Earth", "Barren", "Lava", "Mars"])
    def test_height_scale_is_fraction_of_radius(self, palette):
        surface = planet_surface(seed=7, radius=500.0, palette=palette)
        assert surface.palette == palette
        assert surface.source.get_seed() == 7
        assert surface.source.get_height_scale() == pytest.approx(relief_fraction(7) * 500.0)

    def test_collision_radius_is_nominal(self):
        surface = planet_surface(seed=1, radius=320.0)
        assert surface.collision_radius == surface.radius == 320.0

    def test_palettes_share_noise(self):
        earth = planet_surface(seed=4, radius=100.0, palette="Earth")
        mars = planet_surface(seed=4, radius=100.0, palette="Mars")
        position = (12.5, -40.25, 88.0)
        assert earth.source.get_value(position) == mars.source.get_value(position)

    def test_unknown_palette(self):
        with pytest.raises(ValueError):
            planet_surface(seed=1, radius=100.0, palette="Candy")

    @pytest.mark.parametrize("radius", [0.0, -5.0, float('inf')])
    def test_invalid_radius(self, radius):
        with pytest.raises(ValueError):
            planet_surface(seed=1, radius=radius)


class TestAtmosphereShell:
    """Test atmosphere shell presets."""

    def test_shell_geometry(self):
        shell = atmosphere_shell(seed=2, radius=1000.0)
        assert shell.radius == pytest.approx(1010.0)
        assert shell.source.get_height_scale() == pytest.approx(15.0)

    def test_shell_min_clamp_can_be_added(self):
        shell = atmosphere_shell(seed=2, radius=1000.0)
        shell.source.set_min(0.0)
        assert shell.source.get_value((400.3, 500.7, 600.1)) >= 0.0
