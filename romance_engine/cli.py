"""
Band Romance Engine - command line entry point

Runs a seeded courtship simulation and prints its summary.

Usage:
    romance-sim [--ticks N] [--seed SEED] [--secret] [--shares-band] [--debug] [--env-file PATH]

Example:
    romance-sim --ticks 60 --seed 42 --shares-band
"""

import argparse
import json
import sys

from .config import init_config, reset_config
from .logging import configure_logging, get_logger
from .simulation import run_courtship_simulation


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Band Romance Engine - simulate a relationship's progression",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  romance-sim                          # Default ticks and seed from configuration
  romance-sim --ticks 80 --seed 3      # Longer run with a different seed
  romance-sim --secret --debug         # Secret affair with colored debug logging

Environment Variables:
  ROMANCE_LOG_LEVEL       Log level (default: INFO)
  ROMANCE_DEBUG_MODE      Human-readable console logs (default: false)
  ROMANCE_SIM_TICKS       Default number of ticks (default: 30)
  ROMANCE_SIM_SEED        Default seed (default: 7)
        """
    )

    parser.add_argument("--ticks", type=int, default=None, help="Number of interactions to simulate")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument("--secret", action="store_true", help="Start the romance as a secret affair")
    parser.add_argument("--shares-band", action="store_true",
                        help="Both partners play in the same band (stage changes affect band chemistry)")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    parser.add_argument("--env-file", default=None, help="Path to a .env file")

    return parser


def main(argv=None) -> int:
    """CLI entry point"""
    args = build_parser().parse_args(argv)

    try:
        reset_config()
        config = init_config(args.env_file)
    except ValueError as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return 2

    # Command line flags win over the environment and .env
    if args.debug:
        config.engine.debug_mode = True
        config.engine.log_level = "DEBUG"

    configure_logging(config)
    logger = get_logger(__name__)

    if args.ticks is not None and args.ticks < 1:
        logger.error("--ticks must be at least 1")
        return 2

    result = run_courtship_simulation(
        ticks=args.ticks,
        seed=args.seed,
        shares_band=args.shares_band,
        secret=args.secret
    )

    print(json.dumps(result.summary(), indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    sys.exit(main())
