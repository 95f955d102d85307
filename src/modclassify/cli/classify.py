"""
modclassify classify - Assign samples to gene-module subtypes.

Scores every sample against each gene module, assigns the TopCluster,
computes a simplicity score and writes heatmap-ready outputs.

Usage:
    modclassify classify --input expression.tsv --modules modules.yaml
    modclassify classify -i expr.csv -m modules.gmt --method entropy --heatmap figures/heatmap.pdf
    modclassify classify --config classify.yaml --output results/run2

Outputs (under --output):
    scores.csv          per-sample module scores, TopCluster, SimplicityScore
    heatmap/            heatmap_matrix.csv, annotation.csv, palette.json
    run_config.json     parameters and subtype counts for this run
"""

import argparse
import sys
from pathlib import Path

from modclassify.core.modules import REFERENCE_MODULE_ORDER


def _positive_float(value: str) -> float:
    """argparse type for positive floats (> 0)."""
    fvalue = float(value)
    if fvalue <= 0:
        raise argparse.ArgumentTypeError(f"{value} is not a positive float")
    return fvalue


def register_parser(subparsers: argparse._SubParsersAction) -> None:
    """Register the classify subcommand."""
    parser = subparsers.add_parser(
        "classify",
        help="Assign samples to gene-module subtypes",
        description="Score samples against gene modules, assign TopCluster and simplicity",
    )
    parser.add_argument("--input", "-i", type=Path, default=None,
                        help="Normalized expression matrix (genes × samples; CSV/TSV)")
    parser.add_argument("--modules", "-m", type=Path, default=None,
                        help="Gene modules (.yaml, .yml, .json or .gmt)")
    parser.add_argument("--output", "-o", type=Path, default=Path("results/classification"),
                        help="Output directory (default: results/classification)")
    parser.add_argument("--module-order", nargs="+", default=list(REFERENCE_MODULE_ORDER),
                        help="Preferred module display order; unknown names are ignored")
    parser.add_argument("--method", choices=["gap", "entropy"], default="gap",
                        help="Simplicity method (default: gap)")
    parser.add_argument("--config", type=Path, default=None,
                        help="YAML/JSON config file; explicit CLI arguments take precedence")

    # Heatmap rendering
    parser.add_argument("--heatmap", type=Path, default=None,
                        help="Render the heatmap to this file (.png, .pdf, .svg, .html)")
    parser.add_argument("--scale", choices=["none", "row", "column"], default="column",
                        help="Z-score axis for the heatmap (default: column)")
    parser.add_argument("--hide-colnames", dest="show_colnames", action="store_false",
                        help="Do not label heatmap columns with sample IDs")
    parser.add_argument("--cellwidth", type=_positive_float, default=6,
                        help="Heatmap cell width in points (default: 6)")
    parser.add_argument("--cluster-rows", action="store_true",
                        help="Hierarchically cluster modules in the heatmap")
    parser.add_argument("--cluster-cols", action="store_true",
                        help="Hierarchically cluster samples in the heatmap")
    parser.add_argument("--no-legend", dest="legend", action="store_false",
                        help="Omit heatmap colorbars")

    parser.set_defaults(func=run_classify)


def run_classify(args: argparse.Namespace) -> int:
    """Execute the classify command."""
    import logging
    from datetime import datetime

    from modclassify.core.errors import InputError
    from modclassify.io.loaders import load_matrix, load_gene_modules
    from modclassify.io.writers import write_score_table, write_heatmap_inputs
    from modclassify.pipeline import classify_samples
    from modclassify.utils.fileio import atomic_write_json

    logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
    logger = logging.getLogger(__name__)

    # Load and merge config file if provided
    if args.config:
        from modclassify.cli.config import load_config, merge_config_with_args, validate_config

        logger.info(f"Loading configuration from: {args.config}")
        try:
            config = load_config(args.config)
            validate_config(config)
            # Raw argv (minus the subcommand) decides which values were explicit
            cli_args = getattr(args, "argv", None)
            if cli_args is None:
                cli_args = sys.argv[2:]
            args = merge_config_with_args(config, args, cli_args)
        except (FileNotFoundError, ValueError) as e:
            logger.error(f"Config file error: {e}")
            return 1

    if not args.input:
        logger.error("--input is required (via CLI or config file)")
        return 1
    if not args.modules:
        logger.error("--modules is required (via CLI or config file)")
        return 1

    start_time = datetime.now()

    try:
        logger.info(f"Loading expression: {args.input}")
        matrix = load_matrix(args.input)
        logger.info(f"Loading modules: {args.modules}")
        modules = load_gene_modules(args.modules)

        result = classify_samples(matrix, modules, args.module_order, args.method)
    except (InputError, FileNotFoundError) as e:
        logger.error(str(e))
        return 1

    output = Path(args.output)
    output.mkdir(parents=True, exist_ok=True)
    scores_path = write_score_table(result.scores, output / "scores.csv")
    heatmap_paths = write_heatmap_inputs(result.heatmap, output / "heatmap")

    figure_path = None
    if args.heatmap:
        import matplotlib
        matplotlib.use("Agg")
        from modclassify.viz import configure_style, plot_module_heatmap

        palette = configure_style("paper")
        fig = plot_module_heatmap(
            result.heatmap,
            show_colnames=args.show_colnames,
            scale=args.scale,
            cellwidth=args.cellwidth,
            cluster_rows=args.cluster_rows,
            cluster_cols=args.cluster_cols,
            legend=args.legend,
            palette=palette,
        )
        figure_path = fig.save(args.heatmap)
        fig.close()
        logger.info(f"Heatmap saved: {figure_path}")

    counts = result.subtype_counts()
    run_config = {
        "timestamp": start_time.isoformat(),
        "input": str(args.input),
        "modules": str(args.modules),
        "module_order": result.module_order,
        "method": result.method.value,
        "n_samples": result.scores.n_samples,
        "subtype_counts": {str(k): int(v) for k, v in counts.items()},
        "outputs": {
            "scores": str(scores_path),
            **{f"heatmap_{k}": str(v) for k, v in heatmap_paths.items()},
            "figure": str(figure_path) if figure_path else None,
        },
    }
    atomic_write_json(output / "run_config.json", run_config)

    print(f"\n{'='*70}")
    print("  Module Classification")
    print(f"{'='*70}")
    print(f"Samples:  {result.scores.n_samples}")
    print(f"Method:   {result.method.value}")
    for label, n in counts.items():
        print(f"  {label:<20} {n}")
    print(f"Results:  {output}")
    print(f"Elapsed:  {(datetime.now() - start_time).total_seconds():.1f}s\n")

    return 0
