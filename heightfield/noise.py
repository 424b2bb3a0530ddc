# heightfield/noise.py

"""
================================================================================
COHERENT GRADIENT NOISE
================================================================================
This module provides the numerical core of the height field: 3D gradient
noise at a single frequency and its multi-octave accumulation. It is designed
to be a pure, stateless utility.

Data Contract:
---------------
- Inputs:
    - x, y, z: Continuous sample coordinates (scalars) or an (N, 3) array of
      positions for the batch kernel.
    - seed: A 32-bit integer selecting the lattice gradients.
    - seeds, frequency_scales, amplitudes: The per-octave arrays of an
      OctaveTable.
    - scale: Magnitude factor applied to every single-octave sample.
- Outputs:
    - float64 noise values. A single octave is bounded by |scale|.
- Side Effects: None.
- Invariants: Identical inputs always produce bit-identical outputs, and the
  noise is continuous across lattice cell boundaries.
================================================================================
"""

import numpy as np
from numba import njit, prange

from .config import (
    NOISE_X_FACTOR, NOISE_Y_FACTOR, NOISE_Z_FACTOR,
    NOISE_SEED_FACTOR, NOISE_SHIFT,
)
from .gradients import GRADIENT_TABLE


@njit
def lattice_hash(ix, iy, iz, seed):
    """Maps an integer lattice point and a seed to a gradient table index."""
    v = (NOISE_X_FACTOR * ix + NOISE_Y_FACTOR * iy
         + NOISE_Z_FACTOR * iz + NOISE_SEED_FACTOR * seed) & 0xffffffff
    v ^= v >> NOISE_SHIFT
    return v & 0xff

@njit
def gradient_at(index):
    "Gradient table lookup."
    return GRADIENT_TABLE[index, 0], GRADIENT_TABLE[index, 1], GRADIENT_TABLE[index, 2]

@njit
def lattice_cell(v):
    """
    Splits a coordinate into its lattice cell and fractional offset.
    Uses floor, so -0.3 lands in cell -1 with offset 0.7.
    """
    i = int(np.floor(v))
    return i, v - i

@njit
def s_curve(t):
    "3t^2 - 2t^3"
    return t * t * (3.0 - 2.0 * t)

@njit
def lerp(left, right, a):
    "Linear interpolation."
    return (1.0 - a) * left + a * right

@njit
def gradient_noise(fx, fy, fz, ix, iy, iz, seed):
    """Dot product of a corner's gradient with the vector from that corner to the sample."""
    gx, gy, gz = gradient_at(lattice_hash(ix, iy, iz, seed))
    return gx * (fx - ix) + gy * (fy - iy) + gz * (fz - iz)

@njit
def coherent_noise(x, y, z, seed, scale):
    """
    Single-octave gradient noise. The eight cell corners are blended with
    s-curve eased trilinear interpolation, along x, then y, then z.
    """
    x0, xf = lattice_cell(x)
    y0, yf = lattice_cell(y)
    z0, zf = lattice_cell(z)
    x1 = x0 + 1
    y1 = y0 + 1
    z1 = z0 + 1

    xs = s_curve(xf)
    ys = s_curve(yf)
    zs = s_curve(zf)

    n0 = gradient_noise(x, y, z, x0, y0, z0, seed)
    n1 = gradient_noise(x, y, z, x1, y0, z0, seed)
    ix0 = lerp(n0, n1, xs)
    n0 = gradient_noise(x, y, z, x0, y1, z0, seed)
    n1 = gradient_noise(x, y, z, x1, y1, z0, seed)
    ix1 = lerp(n0, n1, xs)
    iy0 = lerp(ix0, ix1, ys)

    n0 = gradient_noise(x, y, z, x0, y0, z1, seed)
    n1 = gradient_noise(x, y, z, x1, y0, z1, seed)
    ix0 = lerp(n0, n1, xs)
    n0 = gradient_noise(x, y, z, x0, y1, z1, seed)
    n1 = gradient_noise(x, y, z, x1, y1, z1, seed)
    ix1 = lerp(n0, n1, xs)
    iy1 = lerp(ix0, ix1, ys)

    return lerp(iy0, iy1, zs) * scale

@njit
def fractal_noise(x, y, z, seeds, frequency_scales, amplitudes, scale):
    """Weighted sum of coherent noise over every octave of an octave table."""
    value = 0.0
    for o in range(seeds.shape[0]):
        f = frequency_scales[o]
        value += coherent_noise(x * f, y * f, z * f, seeds[o], scale) * amplitudes[o]
    return value

@njit(parallel=True)
def fractal_noise_batch(positions, seeds, frequency_scales, amplitudes, scale):
    """
    Evaluates fractal_noise for every row of an (N, 3) position array.
    Rows are independent, so the loop is spread across threads with prange;
    every element matches the scalar kernel bit for bit.
    """
    n = positions.shape[0]
    out = np.empty(n, dtype=np.float64)
    for i in prange(n):
        out[i] = fractal_noise(
            positions[i, 0], positions[i, 1], positions[i, 2],
            seeds, frequency_scales, amplitudes, scale
        )
    return out
