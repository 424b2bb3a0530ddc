# heightfield/baker.py

"""
================================================================================
OFFLINE HEIGHT FIELD BAKER
================================================================================
Bakes the six cube faces of a body's height field to disk ("baking"): a raw
float32 .npy array and a 16-bit grayscale PNG preview per face, plus a
manifest.json mapping faces to content hashes and a generation_config.json
recording the exact parameters used.

Faces are distributed over a multiprocessing.Pool. Each worker builds its own
FractalDataSource from the plain parameter dictionary, so nothing unpicklable
crosses the process boundary.
================================================================================
"""

import hashlib
import json
import logging
import multiprocessing
import os
import sys
import time

import numba
import numpy as np
from PIL import Image
from tqdm import tqdm

from . import config as DEFAULTS
from . import sphere
from .data_source import FractalDataSource

# --- Global variables for worker processes ---
worker_source = None
worker_radius = 0.0
worker_resolution = 0
worker_output_dir = ""


def face_filename(face: str) -> str:
    """'+x' -> 'pos_x', '-z' -> 'neg_z'."""
    return face.replace('+', 'pos_').replace('-', 'neg_')


def save_height_preview(heights: np.ndarray, file_path: str, low: float, high: float) -> None:
    """
    Saves heights as a 16-bit grayscale PNG, mapping [low, high] to [0, 65535].
    Every face of a bake uses the same range so previews line up at the seams.
    """
    span = high - low
    if span > 0:
        normalized = np.clip((heights.astype(np.float64) - low) / span, 0.0, 1.0)
    else:
        normalized = np.zeros(heights.shape)
    img = Image.fromarray((normalized * 65535).round().astype(np.uint16))
    img.save(file_path, 'PNG')


def init_worker(noise_params: dict, radius: float, resolution: int, output_dir: str, threads_per_worker: int = None):
    """Initializes the global state for each worker process."""
    global worker_source, worker_radius, worker_resolution, worker_output_dir

    if threads_per_worker is not None:
        # The pool already spreads faces across processes.
        numba.set_num_threads(threads_per_worker)

    worker_logger = logging.getLogger(f"Worker-{os.getpid()}")
    worker_source = FractalDataSource(noise_params, logger=worker_logger)
    worker_radius = radius
    worker_resolution = resolution
    worker_output_dir = output_dir


def process_face(face: str) -> dict:
    """
    Samples and SAVES a single cube face. Returns only minimal metadata.
    """
    directions = sphere.face_directions(face, worker_resolution)
    heights = sphere.sample_heights(worker_source, directions, worker_radius)

    file_hash = hashlib.sha256(heights.tobytes()).hexdigest()
    faces_dir = os.path.join(worker_output_dir, "faces")
    os.makedirs(faces_dir, exist_ok=True)
    name = face_filename(face)
    np.save(os.path.join(faces_dir, f"{name}.npy"), heights)

    bound = worker_source.amplitude_bound()
    low = worker_source.min_clamp if worker_source.min_clamp is not None else -bound
    save_height_preview(heights, os.path.join(faces_dir, f"{name}.png"), low, bound)

    return {
        'face': face,
        'hash': file_hash,
        'min_height': float(heights.min()),
        'max_height': float(heights.max()),
    }


def bake_faces(noise_params: dict, output_dir: str, radius: float, resolution: int, workers: int, logger: logging.Logger) -> dict:
    """
    Bakes all cube faces and writes the manifest. workers == 0 runs every
    face in the calling process.

    Returns:
        dict: The manifest that was written to manifest.json.

    Raises:
        ValueError: If workers is negative or the noise parameters are invalid.
    """
    if workers < 0:
        raise ValueError(f"workers must be >= 0, got {workers!r}")

    start_time = time.perf_counter()
    os.makedirs(output_dir, exist_ok=True)
    logger.info(f"Output directory set to '{output_dir}'")

    # Validates the parameters once up front, before any worker starts.
    main_source = FractalDataSource(noise_params, logger=logger)

    workers = min(workers, len(sphere.FACES))
    results = {}
    if workers == 0:
        logger.info("Baking faces in-process.")
        init_worker(noise_params, radius, resolution, output_dir)
        for face in tqdm(sphere.FACES, desc="Baking Faces"):
            result = process_face(face)
            results[result['face']] = result
    else:
        logger.info(f"Using {workers} worker processes.")
        init_args = (noise_params, radius, resolution, output_dir, 1)
        with multiprocessing.Pool(processes=workers, initializer=init_worker, initargs=init_args) as pool:
            results_iterator = pool.imap_unordered(process_face, sphere.FACES)
            for result in tqdm(results_iterator, total=len(sphere.FACES), desc="Baking Faces"):
                results[result['face']] = result

    manifest = {
        "seed": main_source.get_seed(),
        "radius": radius,
        "collision_radius": sphere.collision_radius(radius),
        "face_resolution": resolution,
        "amplitude_bound": main_source.amplitude_bound(),
        "faces": {face: results[face] for face in sphere.FACES},
    }
    manifest_path = os.path.join(output_dir, "manifest.json")
    with open(manifest_path, 'w') as f:
        json.dump(manifest, f, indent=2)

    # The "birth certificate" of the bake.
    settings = main_source.config
    generation_config = {
        'seed': settings.seed,
        'frequency': settings.frequency,
        'octave_count': settings.octave_count,
        'lacunarity': settings.lacunarity,
        'persistence': settings.persistence,
        'scale': settings.scale,
        'height_scale': main_source.get_height_scale(),
        'min_clamp': main_source.min_clamp,
        'max_clamp': settings.max_clamp,
        'quality': settings.quality.value,
    }
    gen_config_path = os.path.join(output_dir, "generation_config.json")
    with open(gen_config_path, 'w') as f:
        json.dump(generation_config, f, indent=4)

    end_time = time.perf_counter()
    logger.info(f"Baking complete! Total time: {end_time - start_time:.2f} seconds.")
    logger.info(f"Baked faces and manifest.json saved to: {output_dir}")
    return manifest


def bake_from_config(config_path: str, workers: int = None) -> dict:
    """
    Loads a JSON configuration and bakes it. The file holds a
    'noise_parameters' object and an optional 'bake_parameters' object.
    """
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(levelname)s - %(message)s',
        stream=sys.stdout
    )
    logger = logging.getLogger("Baker")

    logger.info(f"Loading configuration from: {config_path}")
    try:
        with open(config_path, 'r') as f:
            config = json.load(f)
    except (FileNotFoundError, json.JSONDecodeError) as e:
        logger.critical(f"Failed to load or parse config file: {e}")
        return None

    noise_params = config.get('noise_parameters', {})
    bake_params = config.get('bake_parameters', {})
    seed = noise_params.get('seed', DEFAULTS.DEFAULT_SEED)

    output_dir = bake_params.get('output_dir', os.path.join(DEFAULTS.DEFAULT_OUTPUT_DIR, f"seed_{seed}"))
    radius = bake_params.get('radius', DEFAULTS.DEFAULT_BAKE_RADIUS)
    resolution = bake_params.get('face_resolution', DEFAULTS.DEFAULT_FACE_RESOLUTION)
    if workers is None:
        workers = bake_params.get('workers', max(1, multiprocessing.cpu_count() - 1))
    if workers < 0:
        logger.critical(f"Invalid worker count: {workers}. Use 0 to bake in-process.")
        return None

    return bake_faces(noise_params, output_dir, radius, resolution, workers, logger)
