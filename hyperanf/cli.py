"""Command line entry point: hyperanf INPUT [OUTPUT] [PRECISION]"""

import argparse
import logging
import sys

from hyperanf.errors import HyperANFError
from hyperanf.graph import AdjacencyIndex
from hyperanf.hyperanf import HyperANF
from hyperanf.io import CsvRoundWriter, read_edges
from hyperanf.sketch import MAX_PRECISION, MIN_PRECISION
from hyperanf.stats import average_distance, effective_diameter

logger = logging.getLogger("hyperanf")


def precision_type(value):
    try:
        precision = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid precision {value!r}") from None
    if not MIN_PRECISION <= precision <= MAX_PRECISION:
        raise argparse.ArgumentTypeError(
            f"precision must be between {MIN_PRECISION} and {MAX_PRECISION}, got {precision}")
    return precision


def positive_int(value):
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid integer {value!r}") from None
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {number}")
    return number


def build_parser():
    parser = argparse.ArgumentParser(
        prog="hyperanf",
        description="Approximate the neighbourhood function of every node of an undirected graph.")
    parser.add_argument("input", help="edge list, one whitespace-separated pair per line, '#' comments")
    parser.add_argument("output", nargs="?", default="./out.csv",
                        help="CSV file receiving round,node,estimate rows (default: %(default)s)")
    parser.add_argument("precision", nargs="?", type=precision_type, default=10,
                        help="sketch precision p, 2^p registers per node (default: %(default)s)")
    parser.add_argument("--seed", type=int, default=0, help="hash seed (default: %(default)s)")
    parser.add_argument("--workers", type=positive_int, default=None,
                        help="threads per round (default: number of CPUs)")
    parser.add_argument("--max-rounds", type=positive_int, default=None,
                        help="stop after this many rounds even without convergence")
    parser.add_argument("--log-level", default="INFO",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=args.log_level, format="%(asctime)s %(name)s %(levelname)s %(message)s")

    try:
        graph = AdjacencyIndex.from_edges(read_edges(args.input))
    except (OSError, HyperANFError) as e:
        logger.error("Cannot load graph from %s: %s", args.input, e)
        return 1

    engine = HyperANF(graph, args.precision, seed=args.seed, workers=args.workers)
    export_failures = 0
    with CsvRoundWriter(args.output) as writer:
        def export(snapshot):
            nonlocal export_failures
            try:
                writer.write(snapshot)
            except OSError as e:
                export_failures += 1
                logger.error("Could not write round %d to %s: %s", snapshot.t, args.output, e)
            else:
                logger.info("wrote counters.")

        nf = engine.run(args.max_rounds, callback=export)

    if nf:
        logger.info("Average distance: %.4f", average_distance(nf))
        logger.info("Effective diameter: %.4f", effective_diameter(nf))
    if export_failures:
        logger.error("%d of %d rounds could not be exported", export_failures, len(nf))
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
