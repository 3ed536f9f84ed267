from __future__ import annotations

import json
from pathlib import Path

import yaml
from typer.testing import CliRunner

from chartrepo.cli import app

runner = CliRunner()


def test_index_command_writes_index(tmp_path: Path, make_chart) -> None:
    make_chart(tmp_path, "foo", "1.0.0")
    make_chart(tmp_path, "foo", "2.0.0")

    result = runner.invoke(app, ["index", str(tmp_path), "--url", "https://charts.example.com/"])

    assert result.exit_code == 0, result.output
    assert "Indexed 2 versions of 1 charts" in result.output
    document = yaml.safe_load((tmp_path / "index.yaml").read_text())
    assert document["entries"]["foo"][0]["urls"] == ["https://charts.example.com/foo-2.0.0.tgz"]


def test_index_command_json_and_merge(tmp_path: Path, make_chart) -> None:
    charts = tmp_path / "charts"
    make_chart(charts, "foo", "1.0.0")
    merge_target = tmp_path / "published" / "index.yaml"
    merge_target.parent.mkdir()

    result = runner.invoke(app, ["index", str(charts), "--json", "--merge", str(merge_target)])

    assert result.exit_code == 0, result.output
    document = json.loads((charts / "index.yaml").read_text())
    assert document["entries"]["foo"][0]["urls"] == ["foo-1.0.0.tgz"]
    assert json.loads(merge_target.read_text())["entries"] == {}


def test_index_command_reports_merge_failure(tmp_path: Path, make_chart) -> None:
    make_chart(tmp_path, "foo", "1.0.0")
    corrupt = tmp_path / "corrupt.yaml"
    corrupt.write_text("apiVersion: [\n")

    result = runner.invoke(app, ["index", str(tmp_path), "--merge", str(corrupt)])

    assert result.exit_code == 1
    assert "merge failed" in result.output
    assert not (tmp_path / "index.yaml").exists()


def test_index_command_missing_directory(tmp_path: Path) -> None:
    result = runner.invoke(app, ["index", str(tmp_path / "nope")])
    assert result.exit_code == 1


def test_index_command_reads_config(tmp_path: Path, make_chart) -> None:
    charts = tmp_path / "charts"
    make_chart(charts, "foo", "1.0.0")
    config = tmp_path / "chartrepo.yml"
    config.write_text("url: https://mirror.example.com/charts\njson_output: true\nlog_level: warning\n")

    result = runner.invoke(app, ["index", str(charts), "--config", str(config)])

    assert result.exit_code == 0, result.output
    document = json.loads((charts / "index.yaml").read_text())
    assert document["entries"]["foo"][0]["urls"] == ["https://mirror.example.com/charts/foo-1.0.0.tgz"]


def test_url_flag_overrides_config(tmp_path: Path, make_chart) -> None:
    make_chart(tmp_path, "foo", "1.0.0")
    config = tmp_path / "chartrepo.yml"
    config.write_text("url: https://mirror.example.com/charts\n")

    result = runner.invoke(app, ["index", str(tmp_path), "--config", str(config), "--url", "https://other.example.com"])

    assert result.exit_code == 0, result.output
    document = yaml.safe_load((tmp_path / "index.yaml").read_text())
    assert document["entries"]["foo"][0]["urls"] == ["https://other.example.com/foo-1.0.0.tgz"]


def test_summarize_command(tmp_path: Path, make_chart) -> None:
    make_chart(tmp_path, "foo", "1.0.0")
    make_chart(tmp_path, "bar", "0.3.0")
    assert runner.invoke(app, ["index", str(tmp_path)]).exit_code == 0

    result = runner.invoke(app, ["summarize", str(tmp_path / "index.yaml")])

    assert result.exit_code == 0, result.output
    summary = json.loads(result.stdout)
    assert summary["total_charts"] == 2
    assert summary["latest"] == {"bar": "0.3.0", "foo": "1.0.0"}
