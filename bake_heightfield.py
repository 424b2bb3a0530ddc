# bake_heightfield.py

"""
================================================================================
OFFLINE HEIGHT FIELD BAKER SCRIPT
================================================================================
This script is a command-line tool for pre-computing a body's height field
over the six faces of a spherified cube ("baking"). This is a slow, one-time
process that lets a terrain builder load heights instead of sampling noise
at runtime.

Usage:
    python bake_heightfield.py --config path/to/your/config.json
================================================================================
"""
import argparse

from heightfield.baker import bake_from_config


# --- Command-Line Interface ---
if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Offline height field baker for procedural planets.")
    parser.add_argument(
        "--config",
        type=str,
        required=True,
        help="Path to the JSON configuration file for the body to be baked."
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=None,
        help="Number of worker processes (0 bakes in-process). Defaults to CPU count - 1."
    )
    args = parser.parse_args()

    bake_from_config(args.config, workers=args.workers)
