"""
modclassify CLI - Command-line interface for gene-module subtype classification.

Commands:
    modclassify classify    - Score samples, assign subtypes, prepare the heatmap
"""

import argparse
import sys
from typing import Optional, List

from modclassify import __version__


def main(args: Optional[List[str]] = None) -> int:
    """Main CLI dispatcher for modclassify."""
    parser = argparse.ArgumentParser(
        prog="modclassify",
        description="Gene-module subtype classification for osteosarcoma expression data",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Commands:
  classify      Score samples against gene modules and assign subtypes

Examples:
  modclassify classify --input expression.tsv --modules modules.yaml
  modclassify classify -i expr.csv -m modules.gmt --method entropy --heatmap heatmap.pdf
        """
    )

    parser.add_argument(
        "--version", "-V",
        action="version",
        version=f"%(prog)s {__version__}"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    from modclassify.cli import classify
    classify.register_parser(subparsers)

    argv = list(args) if args is not None else sys.argv[1:]
    parsed_args = parser.parse_args(argv)

    if parsed_args.command is None:
        parser.print_help()
        return 0

    # Subcommand sees only its own arguments
    parsed_args.argv = argv[argv.index(parsed_args.command) + 1:]
    return parsed_args.func(parsed_args)


if __name__ == "__main__":
    sys.exit(main())
