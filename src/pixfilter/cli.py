import argparse
import logging
import sys

from pixfilter import codec
from pixfilter.filters import FILTERS, PARAMETRIC_FILTERS, apply_filter

logger = logging.getLogger(__name__)

USAGE = "USAGE: pixfilter [-v] [--] <in-file> <out-file> <grayscale|invert|emboss|motionblur> {motion-blur-length}"


class UsageError(Exception):
    pass


class ArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that raises UsageError instead of exiting."""

    def error(self, message):
        raise UsageError(message)


def build_parser() -> ArgumentParser:
    parser = ArgumentParser(
        prog="pixfilter",
        description="Apply a filter to a plain-text (P3) pixel map",
        add_help=False,
    )
    parser.add_argument("input", help="Path to input image")
    parser.add_argument("output", help="Path to write the filtered image (overwritten)")
    parser.add_argument("filter", choices=list(FILTERS), help="Filter to apply")
    parser.add_argument("length", nargs="?", type=int, default=None, help="Blur length, required for motionblur")
    parser.add_argument("-v", "--verbose", action="store_true", default=False, help="Enable debug logging")
    return parser


def parse_args(argv: list[str]) -> argparse.Namespace:
    args = build_parser().parse_args(argv)
    if args.filter in PARAMETRIC_FILTERS and args.length is None:
        raise UsageError(f"{args.filter} requires a length")
    if args.filter not in PARAMETRIC_FILTERS and args.length is not None:
        raise UsageError(f"{args.filter} takes no length")
    return args


def main(argv: list[str] | None = None) -> int:
    if argv is None:
        argv = sys.argv[1:]
    try:
        args = parse_args(argv)
    except UsageError as e:
        print(USAGE, file=sys.stderr)
        print(f"error: {e}", file=sys.stderr)
        return 1

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s: %(message)s",
    )

    try:
        grid = codec.load(args.input)
    except codec.FormatError as e:
        logger.error(f"Cannot decode {args.input}: {e}")
        return 1
    except OSError as e:
        logger.error(f"Cannot read {args.input}: {e}")
        return 1

    result = apply_filter(args.filter, grid, args.length)

    try:
        codec.save(result, args.output)
    except OSError as e:
        logger.error(f"Cannot write {args.output}: {e}")
        return 1

    logger.info(f"Applied {args.filter} to {args.input} ({grid.width}x{grid.height}) -> {args.output}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
