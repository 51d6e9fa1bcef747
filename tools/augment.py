#!/usr/bin/env python3
"""Augmentation preview script.

This script loads an image, builds an augmentation pipeline from a YAML
configuration and writes several augmented samples, which is the quickest
way to check what a pipeline does to real data.

Usage:
    Default training pipeline:
        python tools/augment.py --image dog.jpg --output-dir outputs/aug

    Custom pipeline and validation split:
        python tools/augment.py --image dog.jpg --config configs/augment.yaml \\
            --split val --num-samples 1

    Override options:
        python tools/augment.py --image dog.jpg --opts image.fill=0.5 seed=0
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List

import torch
from PIL import Image as PILImage

# Add project root to path
PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from projaug.configs import Config, build_transform, get_default_config, load_config
from projaug.items import Image
from projaug.transforms import apply

# Setup logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger("augment")


def parse_args() -> argparse.Namespace:
    """Parse command-line arguments.

    Returns:
        Parsed argument namespace.
    """
    parser = argparse.ArgumentParser(
        description="Write augmented samples of an image",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    # Five samples of the default training pipeline
    python tools/augment.py --image dog.jpg

    # Deterministic validation pipeline from a config
    python tools/augment.py --image dog.jpg --config configs/augment.yaml --split val
        """,
    )

    parser.add_argument(
        "--image",
        type=str,
        required=True,
        help="Path to the input image",
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to YAML configuration file (default: built-in pipeline)",
    )
    parser.add_argument(
        "--split",
        type=str,
        default="train",
        help="Pipeline to use from config.pipeline (default: train)",
    )
    parser.add_argument(
        "--num-samples",
        type=int,
        default=5,
        help="Number of augmented samples to write (default: 5)",
    )
    parser.add_argument(
        "--output-dir",
        type=str,
        default="outputs/augment",
        help="Directory to save samples (default: outputs/augment)",
    )
    parser.add_argument(
        "--opts",
        nargs="*",
        default=[],
        help="Override config options (format: key=value, e.g., image.fill=0.5)",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Log sampled parameters and composition rewrites",
    )

    return parser.parse_args()


def parse_opts(opts: List[str]) -> Dict[str, Any]:
    """Parse CLI option overrides.

    Args:
        opts: List of "key=value" strings.

    Returns:
        Dictionary of parsed overrides.
    """
    overrides = {}
    for opt in opts:
        if "=" not in opt:
            raise ValueError(f"Invalid option format: {opt}. Use key=value format.")
        key, value = opt.split("=", 1)

        # Try to parse value as int, float, or bool
        if value.lower() == "true":
            value = True
        elif value.lower() == "false":
            value = False
        elif value.lower() == "none":
            value = None
        else:
            try:
                value = int(value)
            except ValueError:
                try:
                    value = float(value)
                except ValueError:
                    pass  # Keep as string

        overrides[key] = value

    return overrides


def load_image(path: str, config: Config) -> Image:
    """Load an RGB image as an ``Image`` item using the config's image options."""
    pil_image = PILImage.open(path).convert("RGB")
    return Image.from_pil(
        pil_image,
        interpolation=config.get("image.interpolation", "bilinear"),
        extrapolation=config.get("image.extrapolation", "constant"),
        fill=config.get("image.fill", 0.0),
    )


def main() -> None:
    """Main entry point."""
    args = parse_args()

    if args.debug:
        logging.getLogger("projaug").setLevel(logging.DEBUG)

    if args.config:
        logger.info(f"Loading config from: {args.config}")
        config = get_default_config().merge(load_config(args.config))
    else:
        config = get_default_config()

    for key, value in parse_opts(args.opts).items():
        config.set(key, value)
        logger.info(f"Override: {key} = {value}")

    pipeline = config.get(f"pipeline.{args.split}")
    if pipeline is None:
        raise KeyError(f"Config has no pipeline '{args.split}'")
    tfm = build_transform(pipeline)

    generator = None
    seed = config.get("seed")
    if seed is not None:
        generator = torch.Generator().manual_seed(int(seed))
        logger.info(f"Using seed: {seed}")

    image = load_image(args.image, config)
    logger.info(f"Loaded {args.image} with bounds {image.bounds}")

    output_dir = Path(args.output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    stem = Path(args.image).stem
    for i in range(args.num_samples):
        result = apply(tfm, image, generator=generator)
        out_path = output_dir / f"{stem}_{args.split}_{i:03d}.png"
        result.to_pil().save(out_path)
        logger.info(f"Saved {out_path} ({tuple(result.data.shape)})")

    logger.info("Done!")


if __name__ == "__main__":
    main()
