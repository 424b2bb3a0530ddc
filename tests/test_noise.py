"""Tests for the gradient table, lattice hash and single-octave noise."""

import numpy as np
import pytest

from heightfield import noise
from heightfield.gradients import GRADIENT_TABLE


class TestGradientTable:
    """Test the constant gradient table."""

    def test_shape(self):
        assert GRADIENT_TABLE.shape == (256, 3)

    def test_vectors_are_unit_length(self):
        lengths = np.linalg.norm(GRADIENT_TABLE, axis=1)
        np.testing.assert_allclose(lengths, 1.0, atol=1e-4)

    def test_table_is_read_only(self):
        with pytest.raises(ValueError):
            GRADIENT_TABLE[0, 0] = 0.0

    def test_gradient_at_is_table_lookup(self):
        for index in (0, 85, 255):
            assert noise.gradient_at(index) == tuple(GRADIENT_TABLE[index])


class TestLatticeHash:
    """Test the lattice hash mixer."""

    def test_known_values(self):
        """Hand-computed: (1619*ix + 31337*iy + 6971*iz + 1013*seed) mixed and masked."""
        assert noise.lattice_hash(0, 0, 0, 0) == 0
        assert noise.lattice_hash(1, 0, 0, 0) == 85
        assert noise.lattice_hash(-1, 0, 0, 0) == 84
        assert noise.lattice_hash(0, 0, 0, 1) == 246

    def test_range(self):
        rng = np.random.default_rng(7)
        for ix, iy, iz, seed in rng.integers(-100000, 100000, size=(500, 4)):
            index = noise.lattice_hash(int(ix), int(iy), int(iz), int(seed))
            assert 0 <= index <= 255

    def test_reaches_most_of_the_table(self):
        """A modest block of lattice points spreads over the table."""
        hits = set()
        for ix in range(-8, 8):
            for iy in range(-8, 8):
                for iz in range(-4, 4):
                    hits.add(noise.lattice_hash(ix, iy, iz, 3))
        assert len(hits) > 128


class TestLatticeCell:
    """Test the floor split of coordinates."""

    def test_negative_coordinate_floors(self):
        cell, offset = noise.lattice_cell(-0.3)
        assert cell == -1
        assert offset == pytest.approx(0.7)

    def test_positive_coordinate(self):
        cell, offset = noise.lattice_cell(2.25)
        assert cell == 2
        assert offset == pytest.approx(0.25)

    def test_integer_coordinates(self):
        assert noise.lattice_cell(-1.0) == (-1, 0.0)
        assert noise.lattice_cell(0.0) == (0, 0.0)
        assert noise.lattice_cell(3.0) == (3, 0.0)


class TestCoherentNoise:
    """Test single-octave gradient noise."""

    def test_s_curve_endpoints(self):
        assert noise.s_curve(0.0) == 0.0
        assert noise.s_curve(1.0) == 1.0
        assert noise.s_curve(0.5) == 0.5

    def test_known_value(self):
        """
        At (0.5, 0, 0) only the corners (0,0,0) and (1,0,0) carry weight:
        0.5 * (g0.x * 0.5) + 0.5 * (g85.x * -0.5), times scale.
        """
        expected = (0.5 * (-0.763874 * 0.5) + 0.5 * (-0.224209 * -0.5)) * 2.12
        value = noise.coherent_noise(0.5, 0.0, 0.0, 0, 2.12)
        assert value == pytest.approx(expected, rel=1e-12)

    def test_zero_at_lattice_points(self):
        for point in [(0.0, 0.0, 0.0), (1.0, 0.0, 0.0), (-3.0, 7.0, 2.0)]:
            assert noise.coherent_noise(*point, 11, 2.12) == 0.0

    def test_deterministic(self):
        a = noise.coherent_noise(0.37, -1.82, 4.05, 42, 2.12)
        b = noise.coherent_noise(0.37, -1.82, 4.05, 42, 2.12)
        assert a == b

    @pytest.mark.parametrize("axis", [0, 1, 2])
    @pytest.mark.parametrize("boundary", [1.0, -1.0, 0.0, 5.0])
    def test_continuous_across_cell_boundaries(self, axis, boundary):
        base = [0.31, 0.62, 0.17]
        below = list(base)
        above = list(base)
        below[axis] = boundary - 1e-7
        above[axis] = boundary + 1e-7
        a = noise.coherent_noise(*below, 5, 2.12)
        b = noise.coherent_noise(*above, 5, 2.12)
        assert abs(a - b) < 1e-5

    def test_bounded_by_scale(self):
        rng = np.random.default_rng(3)
        for x, y, z in rng.uniform(-50.0, 50.0, size=(2000, 3)):
            assert abs(noise.coherent_noise(x, y, z, 9, 2.12)) <= 2.12

    def test_seed_changes_values(self):
        a = noise.coherent_noise(0.5, 0.25, 0.75, 0, 1.0)
        b = noise.coherent_noise(0.5, 0.25, 0.75, 1, 1.0)
        assert a != b


class TestFractalKernels:
    """Test the scalar and batch accumulation kernels."""

    def setup_method(self):
        self.seeds = np.array([4, 5, 6], dtype=np.int64)
        self.frequency_scales = np.array([1.0, 2.0, 4.0])
        self.amplitudes = np.array([1.0, 0.5, 0.25])

    def test_scalar_is_weighted_octave_sum(self):
        x, y, z = 0.3, -0.7, 1.9
        expected = sum(
            noise.coherent_noise(x * f, y * f, z * f, s, 2.12) * a
            for s, f, a in zip(self.seeds, self.frequency_scales, self.amplitudes)
        )
        value = noise.fractal_noise(x, y, z, self.seeds, self.frequency_scales, self.amplitudes, 2.12)
        assert value == pytest.approx(expected, rel=1e-12)

    def test_batch_matches_scalar_exactly(self):
        positions = np.random.default_rng(11).uniform(-20.0, 20.0, size=(300, 3))
        batch = noise.fractal_noise_batch(positions, self.seeds, self.frequency_scales, self.amplitudes, 2.12)
        for row, value in zip(positions, batch):
            scalar = noise.fractal_noise(row[0], row[1], row[2], self.seeds, self.frequency_scales, self.amplitudes, 2.12)
            assert value == scalar
