"""Tests for CLI commands."""
import pytest
import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from click.testing import CliRunner
from main import cli


@pytest.fixture
def runner(tmp_path):
    return CliRunner(env={
        "MT_USE_MOCK": "1",
        "MT_STORAGE_PATH": str(tmp_path / "prefs.json"),
        "MT_LOG_LEVEL": "WARNING",
    })


def test_cli_help(runner):
    result = runner.invoke(cli, ["--help"])
    assert result.exit_code == 0
    assert "MT Monitor" in result.output


def test_cli_version(runner):
    result = runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert "1.0.0" in result.output


def test_rules_help(runner):
    result = runner.invoke(cli, ["rules", "--help"])
    assert result.exit_code == 0
    for command in ("list", "show", "create", "edit", "toggle", "delete"):
        assert command in result.output


# ── Presets ───────────────────────────────────────────

def test_presets_detect(runner):
    result = runner.invoke(cli, ["presets", "detect", "http_status", "500", "--operator", "gte"])
    assert result.exit_code == 0
    assert result.output.strip() == "5xx"


def test_presets_detect_custom(runner):
    result = runner.invoke(cli, ["presets", "detect", "cooldown", "600"])
    assert result.exit_code == 0
    assert result.output.strip() == "custom"


def test_presets_list(runner):
    result = runner.invoke(cli, ["presets", "list", "cooldown"])
    assert result.exit_code == 0
    assert "1hr" in result.output


# ── Schedules ─────────────────────────────────────────

def test_schedule_encode(runner):
    result = runner.invoke(cli, ["schedule", "encode", "--type", "weekly", "--hour", "14",
                                 "--minute", "30", "--weekday", "3"])
    assert result.exit_code == 0
    assert "30 14 * * 3" in result.output
    assert "Every Wednesday at 14:30" in result.output


def test_schedule_encode_rejects_out_of_range(runner):
    result = runner.invoke(cli, ["schedule", "encode", "--hour", "24"])
    assert result.exit_code != 0


def test_schedule_decode(runner):
    result = runner.invoke(cli, ["schedule", "decode", "0 9 * * *"])
    assert result.exit_code == 0
    assert "Daily at 09:00" in result.output
    assert "editing would save" not in result.output


def test_schedule_decode_zero_padded_no_warning(runner):
    result = runner.invoke(cli, ["schedule", "decode", "05 09 * * *"])
    assert result.exit_code == 0
    assert "Daily at 09:05" in result.output
    assert "editing would save" not in result.output


def test_schedule_decode_legacy_warns(runner):
    result = runner.invoke(cli, ["schedule", "decode", "*/15 * * * *"])
    assert result.exit_code == 0
    assert "Daily at 09:00" in result.output
    assert "editing would save" in result.output


# ── Rules against the mock API ────────────────────────

def test_rules_list(runner):
    result = runner.invoke(cli, ["rules", "list"])
    assert result.exit_code == 0
    assert "Alert Rules" in result.output


def test_rules_create(runner):
    result = runner.invoke(cli, ["rules", "create", "--name", "API 5xx", "--service", "api-gateway",
                                 "--threshold", "5xx", "--cooldown", "1hr"])
    assert result.exit_code == 0, result.output
    assert "Created rule" in result.output
    assert "HTTP Status ≥ 500" in result.output


def test_rules_create_resource_custom_threshold(runner):
    result = runner.invoke(cli, ["rules", "create", "--name", "Mem", "--category", "resource",
                                 "--metric", "memory", "--threshold", "85"])
    assert result.exit_code == 0, result.output
    assert "Memory > 85% · 3min" in result.output


def test_rules_create_invalid(runner):
    result = runner.invoke(cli, ["rules", "create", "--cooldown", "30"])
    assert result.exit_code == 1
    assert "name: required" in result.output
    assert "cooldown" in result.output


def test_rules_edit(runner):
    result = runner.invoke(cli, ["rules", "edit", "rule-api-errors", "--threshold", "4xx"])
    assert result.exit_code == 0, result.output
    assert "Updated rule rule-api-errors" in result.output


def test_rules_edit_unknown(runner):
    result = runner.invoke(cli, ["rules", "edit", "missing", "--name", "x"])
    assert result.exit_code == 1


def test_rules_toggle(runner):
    result = runner.invoke(cli, ["rules", "toggle", "rule-db-disk"])
    assert result.exit_code == 0
    assert "enabled" in result.output


def test_rules_delete_needs_confirmation(runner):
    result = runner.invoke(cli, ["rules", "delete", "rule-web-cpu"], input="n\n")
    assert result.exit_code != 0
    result = runner.invoke(cli, ["rules", "delete", "rule-web-cpu", "--yes"])
    assert result.exit_code == 0


# ── Notifications ─────────────────────────────────────

def test_notifications_read_persists(runner):
    result = runner.invoke(cli, ["notifications", "read", "101", "102"])
    assert result.exit_code == 0
    assert "2 notifications marked read" in result.output

    result = runner.invoke(cli, ["notifications", "list"])
    assert result.exit_code == 0
    assert "1 unread" in result.output


def test_notifications_read_counts_only_new_ids(runner):
    runner.invoke(cli, ["notifications", "read", "101", "102"])
    result = runner.invoke(cli, ["notifications", "read", "102", "103"])
    assert result.exit_code == 0
    assert "1 notifications marked read" in result.output
    result = runner.invoke(cli, ["notifications", "read", "--all"])
    assert "0 notifications marked read" in result.output


def test_notifications_read_all(runner):
    result = runner.invoke(cli, ["notifications", "read", "--all"])
    assert result.exit_code == 0
    assert "3 notifications marked read" in result.output


def test_notifications_stats(runner):
    result = runner.invoke(cli, ["notifications", "stats"])
    assert result.exit_code == 0
    assert "Sent: 2" in result.output
