"""Command-line interface: sample lines or CSV rows from stdin to stdout."""

import argparse
import os
import sys
from typing import TextIO

from dotenv import load_dotenv
from loguru import logger
from pydantic import ValidationError

from datasample.core.config import SampleConfig
from datasample.core.errors import ColumnNotFoundError, RowDecodeError, SamplingError
from datasample.core.runner import Runner
from datasample.core.step import Pipeline
from datasample.sinks.sink import Sink
from datasample.sources.source import Source
from datasample.transforms.sample import Sample

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2

EPILOG = """\
examples:
    # Sample 10 lines from a file (using reservoir sampling)
    cat data.txt | datasample 10

    # Sample 5% of lines from a file
    cat data.txt | datasample -p 5

    # Sample from a CSV file, preserving the header
    cat data.csv | datasample 10 --csv

    # Keep about 10% of users, with every row of each kept user
    cat events.csv | datasample -p 10 --csv --hash user_id

    # Get reproducible output using a fixed seed
    cat data.txt | datasample 10 -s 42
"""


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="datasample",
        description=(
            "Reads lines from standard input and outputs a random sample. "
            "Supports fixed-size sampling (reservoir sampling), "
            "percentage-based sampling and grouped sampling of CSV rows."
        ),
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "sample_size",
        nargs="?",
        type=int,
        metavar="SAMPLE_SIZE",
        help="Number of lines to sample using reservoir sampling. "
        "Cannot be used together with --percentage.",
    )
    parser.add_argument(
        "-p",
        "--percentage",
        type=float,
        metavar="VALUE",
        help="Percentage of lines to sample (0-100). "
        "Each line has this percentage chance of being included.",
    )
    parser.add_argument(
        "-C",
        "--csv",
        dest="csv_mode",
        action="store_true",
        help="Preserve the first line as header (not counted in sampling).",
    )
    parser.add_argument(
        "-s",
        "--seed",
        type=int,
        metavar="NUMBER",
        help="Fixed random seed for reproducible output.",
    )
    parser.add_argument(
        "--hash",
        dest="hash_column",
        metavar="COLUMN_NAME",
        help="Column name for hash-based sampling: rows with the same value "
        "are all included or all excluded. Requires --csv and --percentage.",
    )
    parser.add_argument(
        "--log-level",
        metavar="LEVEL",
        help="Logging level for messages on stderr (default: WARNING).",
    )
    return parser


def parse_config(argv: list[str] | None = None) -> SampleConfig:
    """
    Parse command-line arguments into a validated configuration.

    ``DATASAMPLE_SEED`` and ``DATASAMPLE_LOG_LEVEL`` (from the environment or
    a ``.env`` file) fill in options that are not given on the command line.

    Raises:
        SystemExit: On argument syntax errors (from argparse).
        ValidationError: If the options are inconsistent.
    """
    load_dotenv()
    args = build_parser().parse_args(argv)

    seed = args.seed if args.seed is not None else os.getenv("DATASAMPLE_SEED")
    log_level = args.log_level or os.getenv("DATASAMPLE_LOG_LEVEL", "WARNING")

    return SampleConfig(
        sample_size=args.sample_size,
        percentage=args.percentage,
        csv_mode=args.csv_mode,
        seed=seed,
        hash_column=args.hash_column,
        log_level=log_level,
    )


def build_pipeline(config: SampleConfig, stdin: TextIO, stdout: TextIO) -> Pipeline:
    """Pick the sampling step for ``config`` and wire it between stdin and stdout."""
    if config.mode == "grouped":
        return (
            Source.csv(stdin)
            >> Sample.grouped(config.hash_column, config.percentage)
            >> Sink.csv(stdout)
        )

    if config.mode == "reservoir":
        step = Sample.reservoir(
            config.sample_size, seed=config.seed, preserve_header=config.csv_mode
        )
    else:
        step = Sample.percentage(
            config.percentage, seed=config.seed, preserve_header=config.csv_mode
        )

    return Source.lines(stdin) >> step >> Sink.lines(stdout)


def configure_logging(level: str) -> None:
    """Send log messages at ``level`` and above to stderr."""
    logger.remove()
    logger.add(sys.stderr, level=level, format="<level>{level}</level>: {message}")


def main(
    argv: list[str] | None = None,
    stdin: TextIO | None = None,
    stdout: TextIO | None = None,
) -> int:
    """
    Run the CLI.

    Returns:
        0 on success, 1 on runtime failure, 2 on invalid usage.
    """
    stdin = stdin if stdin is not None else sys.stdin
    stdout = stdout if stdout is not None else sys.stdout

    configure_logging("WARNING")

    try:
        config = parse_config(argv)
    except ValidationError as e:
        for error in e.errors():
            location = ".".join(str(part) for part in error["loc"])
            prefix = f"{location}: " if location else ""
            logger.error(f"{prefix}{error['msg']}")
        return EXIT_USAGE

    configure_logging(config.log_level)
    logger.debug(f"Sampling mode: {config.mode}")

    pipeline = build_pipeline(config, stdin, stdout)
    runner = Runner(pipeline)

    try:
        runner.drain()
        stdout.flush()
    except ColumnNotFoundError as e:
        logger.error(f"Column '{e.column}' not found in CSV header")
        return EXIT_FAILURE
    except RowDecodeError as e:
        logger.error(f"Could not decode input: {e}")
        return EXIT_FAILURE
    except SamplingError as e:
        logger.error(str(e))
        return EXIT_USAGE
    except BrokenPipeError:
        _silence_stdout(stdout)
        return EXIT_OK
    except OSError as e:
        logger.error(f"I/O error: {e}")
        return EXIT_FAILURE

    return EXIT_OK


def _silence_stdout(stdout: TextIO) -> None:
    """Point stdout at /dev/null so the interpreter's final flush cannot fail."""
    if stdout is not sys.stdout:
        return
    devnull = os.open(os.devnull, os.O_WRONLY)
    os.dup2(devnull, sys.stdout.fileno())
    os.close(devnull)


if __name__ == "__main__":
    sys.exit(main())
