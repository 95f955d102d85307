"""
Configuration file support for the modclassify CLI.

Supports YAML and JSON config files with CLI argument override.

Example config::

    input: data/os_expression.tsv
    modules: data/os_modules.yaml
    output: results/classification
    module_order: [Proliferating-like, Osteoblast-like, Chondroblast-like, Fibroblast-like]
    method: entropy
    heatmap:
      path: figures/module_heatmap.pdf
      scale: column
      show_colnames: false
      cellwidth: 6
"""

import json
from argparse import Namespace
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from modclassify.core.modules import REFERENCE_MODULE_ORDER
from modclassify.scoring.simplicity import SimplicityMethod

VALID_SCALES = ('none', 'row', 'column')


@dataclass
class HeatmapConfig:
    """Heatmap rendering options."""
    path: Optional[Path] = None
    scale: str = "column"
    show_colnames: bool = True
    cellwidth: float = 6
    cluster_rows: bool = False
    cluster_cols: bool = False
    legend: bool = True


@dataclass
class ConfigSchema:
    """
    Complete configuration schema for the classify command.

    Mirrors the CLI argument structure for consistency.
    """
    input: Optional[Path] = None
    modules: Optional[Path] = None
    output: Optional[Path] = None
    module_order: List[str] = field(default_factory=lambda: list(REFERENCE_MODULE_ORDER))
    method: str = "gap"
    heatmap: HeatmapConfig = field(default_factory=HeatmapConfig)


def load_config(config_path: Path) -> Dict[str, Any]:
    """
    Load configuration from YAML or JSON file.

    Parameters:
        config_path: Path to config file (.yaml, .yml, or .json)

    Returns:
        Dictionary with configuration values

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If file format is unsupported or invalid
    """
    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    suffix = config_path.suffix.lower()
    if suffix not in ('.yaml', '.yml', '.json'):
        raise ValueError(
            f"Unsupported config format: {suffix}. "
            f"Use .yaml, .yml, or .json"
        )

    try:
        with open(config_path, 'r') as f:
            if suffix == '.json':
                config = json.load(f)
            else:
                config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in config file: {e}")
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in config file: {e}")

    if config is None:
        return {}

    if not isinstance(config, dict):
        raise ValueError("Config file must contain a dictionary/mapping at top level")

    return config


def validate_config(config: Dict[str, Any]) -> None:
    """
    Validate configuration structure and values.

    Raises:
        ValueError: If configuration is invalid
    """
    unknown = set(config) - set(ConfigSchema.__dataclass_fields__)
    if unknown:
        raise ValueError(f"Unknown config key(s): {', '.join(sorted(unknown))}")

    if 'method' in config:
        valid_methods = [m.value for m in SimplicityMethod]
        if config['method'] not in valid_methods:
            raise ValueError(
                f"Invalid simplicity method '{config['method']}'. "
                f"Choose from: {', '.join(valid_methods)}"
            )

    if 'module_order' in config:
        order = config['module_order']
        if not isinstance(order, list) or not all(isinstance(m, str) for m in order):
            raise ValueError("module_order must be a list of module names")

    heatmap = config.get('heatmap')
    if heatmap is not None:
        if not isinstance(heatmap, dict):
            raise ValueError("heatmap must be a mapping of rendering options")
        unknown = set(heatmap) - set(HeatmapConfig.__dataclass_fields__)
        if unknown:
            raise ValueError(f"Unknown heatmap option(s): {', '.join(sorted(unknown))}")
        if 'scale' in heatmap and heatmap['scale'] not in VALID_SCALES:
            raise ValueError(
                f"Invalid heatmap scale '{heatmap['scale']}'. "
                f"Choose from: {', '.join(VALID_SCALES)}"
            )
        if 'cellwidth' in heatmap:
            width = heatmap['cellwidth']
            if not isinstance(width, (int, float)) or width <= 0:
                raise ValueError(f"heatmap cellwidth must be positive number, got: {width}")


def _merge_value(cli_value: Any, config_value: Any, was_explicitly_set: bool) -> Any:
    """
    Merge a single config value with CLI argument.

    Rules:
    - CLI args ALWAYS override config if explicitly set
    - If CLI arg not set, use config value
    - If neither set, keep CLI default
    """
    if was_explicitly_set:
        return cli_value
    if config_value is not None:
        return config_value
    return cli_value


def _explicit_args(cli_args: Optional[List[str]]) -> set:
    """Names of the options that appear on the command line."""
    short_to_long = {
        'i': 'input',
        'm': 'modules',
        'o': 'output',
    }
    explicit = set()
    for arg in cli_args or []:
        if arg.startswith('--'):
            explicit.add(arg[2:].split('=', 1)[0].replace('-', '_'))
        elif arg.startswith('-') and len(arg) == 2 and arg[1] in short_to_long:
            explicit.add(short_to_long[arg[1]])
    return explicit


def merge_config_with_args(config: Dict[str, Any], args: Namespace, cli_args: Optional[List[str]] = None) -> Namespace:
    """
    Merge config file values with CLI arguments.

    Priority (highest to lowest):
    1. Explicitly provided CLI arguments
    2. Config file values
    3. CLI argument defaults

    Parameters:
        config: Configuration dictionary from load_config()
        args: Parsed CLI arguments (argparse.Namespace)
        cli_args: Raw CLI arguments list (for detecting explicit values)
                  If None, assumes all args are defaults

    Returns:
        Updated Namespace with merged values
    """
    explicit = _explicit_args(cli_args)
    merged = Namespace(**vars(args))

    # === Top-level paths ===
    for key in ('input', 'modules', 'output'):
        if key in config:
            value = config[key]
            if value is not None:
                value = Path(value)
            setattr(merged, key, _merge_value(getattr(merged, key), value, key in explicit))

    # === Scoring ===
    if 'module_order' in config:
        merged.module_order = _merge_value(
            merged.module_order, config['module_order'], 'module_order' in explicit
        )
    if 'method' in config:
        merged.method = _merge_value(merged.method, config['method'], 'method' in explicit)

    # === Heatmap section ===
    heatmap = config.get('heatmap') or {}
    if 'path' in heatmap:
        value = Path(heatmap['path']) if heatmap['path'] is not None else None
        merged.heatmap = _merge_value(merged.heatmap, value, 'heatmap' in explicit)
    if 'scale' in heatmap:
        merged.scale = _merge_value(merged.scale, heatmap['scale'], 'scale' in explicit)
    if 'show_colnames' in heatmap:
        # CLI spells this one as --hide-colnames
        merged.show_colnames = _merge_value(
            merged.show_colnames, heatmap['show_colnames'], 'hide_colnames' in explicit
        )
    if 'cellwidth' in heatmap:
        merged.cellwidth = _merge_value(merged.cellwidth, heatmap['cellwidth'], 'cellwidth' in explicit)
    if 'cluster_rows' in heatmap:
        merged.cluster_rows = _merge_value(
            merged.cluster_rows, heatmap['cluster_rows'], 'cluster_rows' in explicit
        )
    if 'cluster_cols' in heatmap:
        merged.cluster_cols = _merge_value(
            merged.cluster_cols, heatmap['cluster_cols'], 'cluster_cols' in explicit
        )
    if 'legend' in heatmap:
        merged.legend = _merge_value(merged.legend, heatmap['legend'], 'no_legend' in explicit)

    return merged
