"""Tests for the check and explain commands."""

from __future__ import annotations

import json
from pathlib import Path

import yaml
from click.testing import CliRunner

from hasscope.cli.main import cli


def write_scope_file(tmp_path: Path) -> Path:
    path = tmp_path / "scopes.yaml"
    path.write_text(
        yaml.safe_dump(
            {
                "version": 1,
                "scopes": [
                    {"name": "featured", "type": "boolean", "only": ["index"]},
                    {"name": "by_degree"},
                    {"name": "range", "using": ["lo", "hi"]},
                    {"name": "mine", "type": "boolean", "if": "signed_in"},
                    {"name": "per_page", "default": "10"},
                ],
            },
            sort_keys=False,
        ),
        encoding="utf-8",
    )
    return path


def test_check_json_lists_scopes(tmp_path: Path) -> None:
    """Test check json lists scopes."""
    scope_file = write_scope_file(tmp_path)

    runner = CliRunner()
    result = runner.invoke(cli, ["check", str(scope_file), "--format", "json"])

    assert result.exit_code == 0, result.output
    payload = json.loads(result.output)
    assert [s["name"] for s in payload["scopes"]] == [
        "featured",
        "by_degree",
        "range",
        "mine",
        "per_page",
    ]
    assert payload["scopes"][2]["type"] == "hash"


def test_check_table_output(tmp_path: Path) -> None:
    """Test check table output."""
    scope_file = write_scope_file(tmp_path)

    runner = CliRunner()
    result = runner.invoke(cli, ["check", str(scope_file)])

    assert result.exit_code == 0, result.output
    assert "featured" in result.output
    assert "by_degree" in result.output


def test_check_reports_invalid_options(tmp_path: Path) -> None:
    """Test check reports invalid options."""
    scope_file = tmp_path / "scopes.yaml"
    scope_file.write_text(
        yaml.safe_dump({"scopes": [{"name": "a", "type": "array", "using": ["x"]}]}),
        encoding="utf-8",
    )

    runner = CliRunner()
    result = runner.invoke(cli, ["check", str(scope_file)])

    assert result.exit_code == 1
    assert "using" in result.output


def test_explain_json(tmp_path: Path) -> None:
    """Test explain json."""
    scope_file = write_scope_file(tmp_path)
    params = {"featured": "true", "by_degree": "phd", "range": {"lo": "1", "hi": ""}}

    runner = CliRunner()
    result = runner.invoke(
        cli,
        [
            "explain",
            str(scope_file),
            "--params",
            json.dumps(params),
            "--action",
            "index",
            "--format",
            "json",
        ],
    )

    assert result.exit_code == 0, result.output
    payload = json.loads(result.output)
    assert [a["name"] for a in payload["applied"]] == ["featured", "by_degree", "per_page"]
    assert payload["applied"][1]["args"] == ["phd"]
    assert payload["current_scopes"] == {"featured": True, "by_degree": "phd", "per_page": "10"}


def test_explain_respects_action_and_flags(tmp_path: Path) -> None:
    """Test explain respects action and flags."""
    scope_file = write_scope_file(tmp_path)
    params_file = tmp_path / "params.yaml"
    params_file.write_text(
        yaml.safe_dump({"featured": "1", "mine": "1", "range": {"lo": "1", "hi": "5"}}),
        encoding="utf-8",
    )

    runner = CliRunner()
    result = runner.invoke(
        cli,
        [
            "explain",
            str(scope_file),
            "--params",
            str(params_file),
            "--action",
            "show",
            "--flag",
            "signed_in",
            "--format",
            "yaml",
        ],
    )

    assert result.exit_code == 0, result.output
    payload = yaml.safe_load(result.output)
    assert [a["name"] for a in payload["applied"]] == ["range", "mine", "per_page"]
    assert payload["applied"][0]["args"] == ["1", "5"]
    assert payload["current_scopes"]["range"] == {"lo": "1", "hi": "5"}


def test_explain_rejects_non_mapping_params(tmp_path: Path) -> None:
    """Test explain rejects non mapping params."""
    scope_file = write_scope_file(tmp_path)

    runner = CliRunner()
    result = runner.invoke(cli, ["explain", str(scope_file), "--params", "[1, 2]"])

    assert result.exit_code == 1
    assert "mapping" in result.output


def test_explain_dotted_condition_reads_flags(tmp_path: Path) -> None:
    """Test that dotted conditions are answered from --flag values."""
    scope_file = tmp_path / "scopes.yaml"
    scope_file.write_text(
        yaml.safe_dump(
            {"scopes": [{"name": "drafts", "type": "boolean", "if": "current_user.is_admin"}]}
        ),
        encoding="utf-8",
    )
    args = ["explain", str(scope_file), "--params", '{"drafts": "1"}', "--format", "json"]

    runner = CliRunner()
    denied = runner.invoke(cli, args)
    allowed = runner.invoke(cli, [*args, "--flag", "current_user.is_admin"])

    assert denied.exit_code == 0, denied.output
    assert json.loads(denied.output)["applied"] == []
    assert allowed.exit_code == 0, allowed.output
    assert [a["name"] for a in json.loads(allowed.output)["applied"]] == ["drafts"]
