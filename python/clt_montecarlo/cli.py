"""Command line entry point: ``clt-montecarlo``."""

import argparse
import logging
import sys
from typing import List, Optional

from . import CentralLimitExperiment, __version__
from .config import ExperimentConfig
from .density import PRESETS
from .exceptions import CLTError
from .experiment import STREAM_MODES
from .report import format_run_summary, format_statistics
from .sampling import OutOfRangePolicy

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="clt-montecarlo",
        description=(
            "Sample a probability density by discrete inverse transform "
            "sampling and compare the distribution of batch means with the "
            "central limit theorem prediction."
        ),
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--config", metavar="FILE", help="JSON file with experiment settings"
    )
    parser.add_argument(
        "--pdf", choices=sorted(PRESETS), help="built-in probability density"
    )
    parser.add_argument("--xmin", type=float, help="lower bound of the domain")
    parser.add_argument("--xmax", type=float, help="upper bound of the domain")
    parser.add_argument("--numpoints", type=int, help="points in the discrete CDF")
    parser.add_argument(
        "--num-iterations", type=int, help="samples averaged per batch"
    )
    parser.add_argument("--num-means", type=int, help="number of batch means")
    parser.add_argument("--seed", type=int, help="random seed")
    parser.add_argument(
        "--policy",
        choices=[p.value for p in OutOfRangePolicy],
        help="handling of uniform draws outside the CDF table",
    )
    parser.add_argument("--streams", choices=STREAM_MODES, help="random stream layout")
    parser.add_argument("--workers", type=int, dest="n_workers", help="worker processes")
    parser.add_argument(
        "--plot", metavar="PATH", help="save the four panel figure (e.g. plot.png)"
    )
    parser.add_argument(
        "--list-presets", action="store_true", help="list built-in densities and exit"
    )
    parser.add_argument("-v", "--verbose", action="count", default=0)
    return parser


def _config_from_args(args: argparse.Namespace) -> ExperimentConfig:
    config = ExperimentConfig.from_json(args.config) if args.config else ExperimentConfig()

    overrides = {}
    for name in (
        "pdf",
        "xmin",
        "xmax",
        "numpoints",
        "num_iterations",
        "num_means",
        "seed",
        "policy",
        "streams",
        "n_workers",
    ):
        value = getattr(args, name)
        if value is not None:
            overrides[name] = value
    if args.n_workers is not None and args.n_workers > 1 and args.streams is None:
        overrides["streams"] = "per_trial"
    return config.replace(**overrides) if overrides else config


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    level = logging.WARNING
    if args.verbose == 1:
        level = logging.INFO
    elif args.verbose > 1:
        level = logging.DEBUG
    logging.basicConfig(
        format="%(asctime)s %(levelname)8s %(name)s: %(message)s", level=level
    )

    if args.list_presets:
        for name in sorted(PRESETS):
            print(name)
        return 0

    try:
        config = _config_from_args(args)
        result = CentralLimitExperiment(config).run()
    except (CLTError, ValueError, OSError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    print(format_run_summary(result))
    print()
    print(format_statistics(result))

    if args.plot:
        from .plotting import plot_result

        plot_result(result, path=args.plot)
        logger.info("Saved figure to %s", args.plot)
    return 0


if __name__ == "__main__":
    sys.exit(main())
