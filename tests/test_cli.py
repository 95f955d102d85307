"""Tests for the modclassify command-line interface and config files."""

import json
from argparse import Namespace
from pathlib import Path

import pandas as pd
import pytest
import yaml

from modclassify import __version__
from modclassify.cli import main
from modclassify.cli.config import load_config, merge_config_with_args, validate_config


def read_json(path):
    with open(path) as f:
        return json.load(f)


@pytest.mark.integration
class TestClassifyCommand:
    """Tests for `modclassify classify`."""

    def test_writes_outputs(self, tmp_path, input_files):
        out = tmp_path / "results"
        code = main([
            "classify",
            "--input", str(input_files["expression"]),
            "--modules", str(input_files["modules"]),
            "--output", str(out),
        ])

        assert code == 0
        assert (out / "scores.csv").exists()
        assert (out / "heatmap" / "heatmap_matrix.csv").exists()
        assert (out / "heatmap" / "annotation.csv").exists()
        assert (out / "heatmap" / "palette.json").exists()

        run_config = read_json(out / "run_config.json")
        assert run_config["method"] == "gap"
        assert run_config["module_order"] == ["A", "B", "C"]
        assert run_config["subtype_counts"] == {"A": 2, "B": 1, "C": 1}
        assert run_config["outputs"]["figure"] is None

        scores = pd.read_csv(out / "scores.csv", index_col=0)
        assert list(scores["TopCluster"]) == ["A", "A", "B", "C"]

    def test_entropy_and_heatmap(self, tmp_path, input_files):
        out = tmp_path / "results"
        figure = tmp_path / "figures" / "heatmap.png"
        code = main([
            "classify",
            "-i", str(input_files["expression"]),
            "-m", str(input_files["modules"]),
            "-o", str(out),
            "--method", "entropy",
            "--heatmap", str(figure),
            "--hide-colnames",
        ])

        assert code == 0
        assert figure.exists()
        assert read_json(out / "run_config.json")["method"] == "entropy"

    def test_missing_input_file(self, tmp_path, input_files):
        code = main([
            "classify",
            "--input", str(tmp_path / "nope.csv"),
            "--modules", str(input_files["modules"]),
            "--output", str(tmp_path / "results"),
        ])
        assert code == 1
        assert not (tmp_path / "results").exists()

    def test_malformed_modules(self, tmp_path, input_files):
        bad = tmp_path / "bad.yaml"
        bad.write_text("A: g1\n")
        code = main([
            "classify",
            "--input", str(input_files["expression"]),
            "--modules", str(bad),
            "--output", str(tmp_path / "results"),
        ])
        assert code == 1

    def test_nested_module_genes(self, tmp_path, input_files):
        bad = tmp_path / "nested.yaml"
        bad.write_text("A: [[g1, g2]]\n")
        code = main([
            "classify",
            "--input", str(input_files["expression"]),
            "--modules", str(bad),
            "--output", str(tmp_path / "results"),
        ])
        assert code == 1
        assert not (tmp_path / "results").exists()

    def test_input_required(self, tmp_path, input_files):
        code = main(["classify", "--modules", str(input_files["modules"])])
        assert code == 1

    def test_config_file(self, tmp_path, input_files):
        config = tmp_path / "classify.yaml"
        config.write_text(yaml.safe_dump({
            "input": str(input_files["expression"]),
            "modules": str(input_files["modules"]),
            "output": str(tmp_path / "from_config"),
            "method": "entropy",
            "module_order": ["C", "B"],
        }))

        assert main(["classify", "--config", str(config)]) == 0
        run_config = read_json(tmp_path / "from_config" / "run_config.json")
        assert run_config["method"] == "entropy"
        assert run_config["module_order"] == ["C", "B", "A"]

    def test_cli_overrides_config(self, tmp_path, input_files):
        config = tmp_path / "classify.yaml"
        config.write_text(yaml.safe_dump({
            "input": str(input_files["expression"]),
            "modules": str(input_files["modules"]),
            "method": "entropy",
        }))
        out = tmp_path / "results"

        assert main(["classify", "--config", str(config), "--method", "gap", "-o", str(out)]) == 0
        assert read_json(out / "run_config.json")["method"] == "gap"

    def test_invalid_config(self, tmp_path):
        config = tmp_path / "classify.yaml"
        config.write_text("method: variance\n")
        assert main(["classify", "--config", str(config)]) == 1

    def test_no_command_prints_help(self, capsys):
        assert main([]) == 0
        assert "classify" in capsys.readouterr().out

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as exc:
            main(["--version"])
        assert exc.value.code == 0
        assert capsys.readouterr().out.strip() == f"modclassify {__version__}"


class TestConfig:
    """Tests for load_config(), validate_config() and merge_config_with_args()."""

    def test_load_yaml(self, tmp_path):
        path = tmp_path / "c.yml"
        path.write_text("method: gap\nheatmap:\n  scale: row\n")
        assert load_config(path) == {"method": "gap", "heatmap": {"scale": "row"}}

    def test_load_json(self, tmp_path):
        path = tmp_path / "c.json"
        path.write_text('{"method": "entropy"}')
        assert load_config(path) == {"method": "entropy"}

    def test_empty_file(self, tmp_path):
        path = tmp_path / "c.yaml"
        path.write_text("")
        assert load_config(path) == {}

    def test_unsupported_format(self, tmp_path):
        path = tmp_path / "c.toml"
        path.write_text("method = 'gap'")
        with pytest.raises(ValueError, match="Unsupported"):
            load_config(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "c.yaml")

    def test_top_level_must_be_mapping(self, tmp_path):
        path = tmp_path / "c.yaml"
        path.write_text("- gap\n")
        with pytest.raises(ValueError, match="mapping"):
            load_config(path)

    @pytest.mark.parametrize("config", [
        {"method": "variance"},
        {"module_order": "A"},
        {"heatmap": "yes"},
        {"heatmap": {"scale": "both"}},
        {"heatmap": {"cellwidth": 0}},
        {"heatmap": {"colour": "red"}},
        {"workers": 4},
    ])
    def test_validate_rejects(self, config):
        with pytest.raises(ValueError):
            validate_config(config)

    def test_validate_accepts(self):
        validate_config({
            "method": "entropy",
            "module_order": ["A", "B"],
            "heatmap": {"path": "h.pdf", "scale": "none", "cellwidth": 8, "legend": False},
        })

    def test_merge_priority(self):
        args = Namespace(
            input=None, modules=None, output=Path("results/classification"),
            module_order=["X"], method="gap", heatmap=None, scale="column",
            show_colnames=True, cellwidth=6, cluster_rows=False, cluster_cols=False,
            legend=True,
        )
        config = {
            "input": "expr.csv",
            "method": "entropy",
            "heatmap": {"path": "h.pdf", "scale": "row", "show_colnames": False},
        }

        merged = merge_config_with_args(config, args, ["--scale", "none"])

        assert merged.input == Path("expr.csv")
        assert merged.method == "entropy"
        assert merged.heatmap == Path("h.pdf")
        assert merged.show_colnames is False
        assert merged.scale == "column"  # explicit on the command line
        assert args.method == "gap"
