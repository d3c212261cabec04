from __future__ import annotations
import argparse
import asyncio
import sys

from ..config import LoaderConfig
from ..errors import ModelLoadError
from ..formats.registry import detect, open_model
from ..ir.context import FileContext
from ..utils.logging import get_logger
from ..utils.reporting import format_summary, generate_summary, write_report


def cmd_detect(args):
    """Handles the 'detect' command."""
    config = LoaderConfig.from_args(args)
    get_logger("graphjson", config.log_level)
    try:
        match = asyncio.run(detect(FileContext(args.model), config))
    except (OSError, ValueError) as e:
        print(f"[ERROR] {e}", file=sys.stderr)
        return 1
    if match is None:
        print(f"{args.model}: unsupported")
        return 1
    print(f"{args.model}: {match.format}")
    return 0


def cmd_inspect(args):
    """Handles the 'inspect' command."""
    config = LoaderConfig.from_args(args)
    get_logger("graphjson", config.log_level)
    try:
        model = asyncio.run(open_model(FileContext(args.model), config))
    except (ModelLoadError, OSError, ValueError) as e:
        print(f"[ERROR] {e}", file=sys.stderr)
        return 1

    print(format_summary(generate_summary(model)))

    if config.report:
        write_report(model, config.report)
        print(f"\n[OK] Report written to {config.report}")
    return 0


def _add_common(p: argparse.ArgumentParser):
    p.add_argument("model", help="Path to a JSON graph document")
    p.add_argument("-c", "--config", type=str, default=None,
                   help="Path to YAML config file to override defaults")
    p.add_argument("--formats", type=str, default=None,
                   help="Comma-separated format ranking, e.g. 'cdsmodel,customjson'")
    p.add_argument("--log-level", type=str, default=None, dest="log_level",
                   choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                   help="Logging verbosity")


def build_parser():
    p = argparse.ArgumentParser(
        prog="graphjson",
        description="Normalize JSON computation graph documents",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )
    sub = p.add_subparsers(dest="cmd", required=True)

    # --- Detect Command ---
    pd = sub.add_parser("detect", help="Report which format claims a document",
                        formatter_class=argparse.ArgumentDefaultsHelpFormatter)
    _add_common(pd)
    pd.set_defaults(func=cmd_detect)

    # --- Inspect Command ---
    pi = sub.add_parser("inspect", help="Load a document and print a summary",
                        formatter_class=argparse.ArgumentDefaultsHelpFormatter)
    _add_common(pi)
    pi.add_argument("--report", type=str, default=None,
                    help="Path to write the JSON summary")
    pi.add_argument("--show-weights", action="store_const", const=True, default=None,
                    dest="weights_visible", help="Mark weight arguments as visible")
    pi.set_defaults(func=cmd_inspect)

    return p


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
