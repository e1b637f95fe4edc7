"""Main entry point for GeneLife.

``python -m genelife`` opens the interactive viewer, ``python -m genelife train``
runs the batch trainer.
"""

import argparse
from typing import List, Optional

from genelife.config import GameConfig

def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="genelife", description="Evolve grid agents driven by gene tables.")
    parser.add_argument("mode", nargs="?", choices=["view", "train"], default="view",
                        help="Open the viewer (default) or run the batch trainer.")
    parser.add_argument("--seed", type=int, default=None, help="Seed for the random generator.")
    parser.add_argument("--snapshot", default=None, help="Snapshot file to load from and save to.")
    parser.add_argument("--generations", type=int, default=None, help="Generations to train.")
    parser.add_argument("--headless", action="store_true", help="Run the viewer loop without a window.")
    parser.add_argument("--verbose", action="store_true", help="Print per-tick details.")
    return parser.parse_args(argv)

def build_config(args: argparse.Namespace) -> GameConfig:
    config = GameConfig(seed=args.seed, headless_mode=args.headless, verbose=args.verbose)
    if args.snapshot:
        config.snapshot_path = args.snapshot
    if args.generations is not None:
        config.training_generations = args.generations
    return config

def main(argv: Optional[List[str]] = None) -> None:
    """Initializes and runs GeneLife in the requested mode."""
    args = parse_args(argv)
    config = build_config(args)

    if args.mode == "train":
        from genelife.core.simulation import Trainer
        from genelife.world.snapshot import SnapshotError
        print(f"Training for {config.training_generations} generations...")
        try:
            Trainer(config).run()
        except SnapshotError as e:
            print(f"Error: {e}")
            raise SystemExit(1) from e
        print("Training finished.")
        return

    # pyglet is only needed (and only importable with a display) for the viewer
    from genelife.core.engine import Engine
    print("Initializing GeneLife Engine...")
    engine = Engine(config)
    print("Starting GeneLife Engine...")
    engine.run()
    print("GeneLife Engine finished.")

if __name__ == "__main__":
    main()
