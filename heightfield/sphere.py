# heightfield/sphere.py

"""
================================================================================
SPHERE SAMPLING
================================================================================
This module lays out sampling grids on a cube projected onto a sphere and
evaluates a HeightDataSource over them in a single batch call. It is the
boundary handed to mesh builders: they receive directions, heights and
displaced vertices, and build the collision shape from the undisplaced
radius.

Data Contract:
---------------
- Inputs:
    - face: One of FACES ('+x', '-x', '+y', '-y', '+z', '-z').
    - resolution: Vertices along one edge of a patch (>= 2).
    - lod, i, j: Quadtree patch address on the face (2**lod patches per edge).
- Outputs:
    - (R, R, 3) arrays of unit directions or vertices, (R, R) height arrays.
- Side Effects: None.
- Invariants: Neighbouring patches on a face share identical edge
  directions, so their heights agree along the seam.
================================================================================
"""

from typing import NamedTuple

import numpy as np

FACES = ('+x', '-x', '+y', '-y', '+z', '-z')

# (normal, u axis, v axis) per cube face.
_FACE_AXES = {
    '+x': ((1.0, 0.0, 0.0), (0.0, 0.0, -1.0), (0.0, -1.0, 0.0)),
    '-x': ((-1.0, 0.0, 0.0), (0.0, 0.0, 1.0), (0.0, -1.0, 0.0)),
    '+y': ((0.0, 1.0, 0.0), (1.0, 0.0, 0.0), (0.0, 0.0, 1.0)),
    '-y': ((0.0, -1.0, 0.0), (1.0, 0.0, 0.0), (0.0, 0.0, -1.0)),
    '+z': ((0.0, 0.0, 1.0), (1.0, 0.0, 0.0), (0.0, -1.0, 0.0)),
    '-z': ((0.0, 0.0, -1.0), (-1.0, 0.0, 0.0), (0.0, -1.0, 0.0)),
}


class PatchSample(NamedTuple):
    directions: np.ndarray
    heights: np.ndarray
    vertices: np.ndarray


def patch_directions(face: str, resolution: int, lod: int = 0, i: int = 0, j: int = 0) -> np.ndarray:
    """
    Generates the unit directions of one quadtree patch of a cube face.
    lod 0 is the whole face.
    """
    if face not in _FACE_AXES:
        raise ValueError(f"Unknown cube face {face!r}; expected one of {FACES}")
    if resolution < 2:
        raise ValueError(f"resolution must be >= 2, got {resolution}")
    if lod < 0:
        raise ValueError(f"lod must be >= 0, got {lod}")
    tiles = 2 ** lod
    if not (0 <= i < tiles and 0 <= j < tiles):
        raise ValueError(f"patch ({i}, {j}) is outside a face with {tiles}x{tiles} patches at lod {lod}")

    normal, u_axis, v_axis = (np.array(axis) for axis in _FACE_AXES[face])

    # Cube coordinates in [-1, 1] along each face axis.
    u = np.linspace(i / tiles, (i + 1) / tiles, resolution) * 2.0 - 1.0
    v = np.linspace(j / tiles, (j + 1) / tiles, resolution) * 2.0 - 1.0
    uu, vv = np.meshgrid(u, v)

    cube = normal + uu[..., np.newaxis] * u_axis + vv[..., np.newaxis] * v_axis
    return cube / np.linalg.norm(cube, axis=-1, keepdims=True)


def face_directions(face: str, resolution: int) -> np.ndarray:
    return patch_directions(face, resolution)


def sample_heights(source, directions: np.ndarray, radius: float) -> np.ndarray:
    """Samples the source at the nominal surface points in one batch."""
    return source.get_values(directions * radius)


def displace(directions: np.ndarray, radius: float, heights: np.ndarray) -> np.ndarray:
    """Pushes each surface point out along its normal by its height."""
    return directions * (radius + heights.astype(np.float64))[..., np.newaxis]


def collision_radius(radius: float) -> float:
    """
    The radius of the physical collision sphere. Surface relief is visual
    only and is never part of the collision shape.
    """
    return float(radius)


def sample_patch(source, face: str, resolution: int, radius: float, lod: int = 0, i: int = 0, j: int = 0) -> PatchSample:
    directions = patch_directions(face, resolution, lod, i, j)
    heights = sample_heights(source, directions, radius)
    return PatchSample(directions, heights, displace(directions, radius, heights))
