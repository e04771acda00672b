from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest

from cablelift.cli import run_cli
from cablelift.cli.errors import CliError, build_error_payload, log_cli_error
from cablelift.cli.io import load_cli_config
from cablelift.cli.parser import build_parser
from tests.conftest import write_pyproject
from tests.helpers import capture_rows, write_csv_capture, write_jsonl_capture


FATIGUE_SET = [(1, 1000.0), (2, 950.0), (3, 850.0), (4, 750.0)]


@pytest.fixture
def capture_path(cli_workdir: Path) -> Path:
    return write_csv_capture(cli_workdir / "set.csv", capture_rows(FATIGUE_SET))


def _log_args(directory: Path) -> list[str]:
    return ["--log-output", str(directory / "cli.log")]


def test_analyze_json_report(capture_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    result = run_cli(_log_args(capture_path.parent) + ["analyze", str(capture_path), "--format", "json"])

    payload = json.loads(result)
    assert payload["source"] == str(capture_path)
    assert payload["velocity_loss_threshold_percent"] == 20.0
    assert [rep["velocity"]["should_stop_set"] for rep in payload["reps"]] == [
        False,
        False,
        False,
        True,
    ]
    assert payload["reps"][0]["quality"]["composite"] == 100
    assert payload["set_summary"]["total_velocity_loss_percent"] == pytest.approx(25.0)
    assert payload["quality_summary"]["trend"] in {"IMPROVING", "STABLE", "DECLINING"}
    assert json.loads(capsys.readouterr().out) == payload


def test_analyze_text_report_is_default(capture_path: Path) -> None:
    result = run_cli(_log_args(capture_path.parent) + ["analyze", str(capture_path)])

    assert result.startswith("Cable session")
    assert "STOP" in result


def test_analyze_jsonl_capture(cli_workdir: Path) -> None:
    path = write_jsonl_capture(cli_workdir / "set.jsonl", capture_rows(FATIGUE_SET))

    payload = json.loads(run_cli(_log_args(cli_workdir) + ["analyze", str(path), "--format", "json"]))

    assert len(payload["reps"]) == 4


def test_threshold_and_exercise_overrides(capture_path: Path) -> None:
    base = _log_args(capture_path.parent) + ["analyze", str(capture_path), "--format", "json"]

    squat = json.loads(run_cli(base + ["--exercise", "squat"]))
    explicit = json.loads(run_cli(base + ["--exercise", "squat", "--threshold", "30"]))

    assert squat["velocity_loss_threshold_percent"] == pytest.approx(15.0)
    assert [rep["velocity"]["should_stop_set"] for rep in squat["reps"]] == [
        False,
        False,
        True,
        True,
    ]
    assert explicit["velocity_loss_threshold_percent"] == pytest.approx(30.0)
    assert not any(rep["velocity"]["should_stop_set"] for rep in explicit["reps"])


def test_engine_config_file(capture_path: Path) -> None:
    engine_config = capture_path.parent / "engine.yaml"
    engine_config.write_text("defaults:\n  velocity_loss_threshold_percent: 4\n", encoding="utf8")

    payload = json.loads(
        run_cli(
            _log_args(capture_path.parent)
            + [
                "analyze",
                str(capture_path),
                "--format",
                "json",
                "--engine-config",
                str(engine_config),
            ]
        )
    )

    assert payload["velocity_loss_threshold_percent"] == pytest.approx(4.0)
    assert payload["reps"][1]["velocity"]["should_stop_set"] is True


@pytest.mark.parametrize(
    ("extra_args", "expected_status"),
    [
        (["--threshold", "-5"], 2),
        (["--engine-config", "missing.yaml"], 4),
    ],
    ids=["invalid-threshold", "missing-engine-config"],
)
def test_invalid_engine_options_exit_with_status(
    capture_path: Path, extra_args: list[str], expected_status: int
) -> None:
    with pytest.raises(SystemExit) as excinfo:
        run_cli(_log_args(capture_path.parent) + ["analyze", str(capture_path)] + extra_args)

    assert excinfo.value.code == expected_status


def test_non_numeric_engine_threshold_exits_usage(capture_path: Path) -> None:
    engine_config = capture_path.parent / "engine.yaml"
    engine_config.write_text(
        "exercises:\n  squat:\n    velocity_loss_threshold_percent: fast\n", encoding="utf8"
    )

    with pytest.raises(SystemExit) as excinfo:
        run_cli(
            _log_args(capture_path.parent)
            + ["analyze", str(capture_path), "--engine-config", str(engine_config), "--exercise", "squat"]
        )

    assert excinfo.value.code == 2


def test_missing_capture_exits_not_found(
    cli_workdir: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    with pytest.raises(SystemExit) as excinfo:
        run_cli(_log_args(cli_workdir) + ["analyze", str(cli_workdir / "absent.csv")])

    assert excinfo.value.code == 4
    assert "does not exist" in capsys.readouterr().out


def test_malformed_capture_exits_usage(cli_workdir: Path) -> None:
    path = cli_workdir / "bad.csv"
    path.write_text("timestamp_ms,rep\n0,1\n", encoding="utf8")

    with pytest.raises(SystemExit) as excinfo:
        run_cli(_log_args(cli_workdir) + ["analyze", str(path)])

    assert excinfo.value.code == 2


def test_unknown_log_level_exits_usage(
    capture_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    with pytest.raises(SystemExit) as excinfo:
        run_cli(["--log-level", "bogus", "analyze", str(capture_path)])

    assert excinfo.value.code == 2
    assert "bogus" in capsys.readouterr().out


@pytest.mark.parametrize(
    "contents",
    ["[tool.cablelift\n", "[tool]\ncablelift = 3\n", '[tool.cablelift]\nlogging = "debug"\n'],
    ids=["invalid-toml", "section-not-table", "logging-not-table"],
)
def test_malformed_pyproject_exits_usage(
    capture_path: Path, contents: str, capsys: pytest.CaptureFixture[str]
) -> None:
    (capture_path.parent / "pyproject.toml").write_text(contents, encoding="utf8")

    with pytest.raises(SystemExit) as excinfo:
        run_cli(_log_args(capture_path.parent) + ["analyze", str(capture_path)])

    assert excinfo.value.code == 2
    assert "pyproject.toml" in capsys.readouterr().out


def test_errors_are_logged_to_configured_output(cli_workdir: Path) -> None:
    with pytest.raises(SystemExit):
        run_cli(_log_args(cli_workdir) + ["analyze", str(cli_workdir / "absent.csv")])

    entries = [
        json.loads(line)
        for line in (cli_workdir / "cli.log").read_text(encoding="utf8").splitlines()
    ]
    errors = [entry for entry in entries if entry.get("event") == "cli.error"]
    assert len(errors) == 1
    assert errors[0]["category"] == "not_found"
    assert errors[0]["status_code"] == 4


def test_pyproject_defaults_drive_parser(capture_path: Path) -> None:
    write_pyproject(
        capture_path.parent,
        """
        [tool.cablelift.logging]
        level = "debug"
        format = "text"

        [tool.cablelift.analyze]
        format = "json"
        exercise = "deadlift"
        """,
    )

    payload = json.loads(run_cli(_log_args(capture_path.parent) + ["analyze", str(capture_path)]))

    assert payload["exercise"] == "deadlift"
    assert payload["velocity_loss_threshold_percent"] == pytest.approx(15.0)


def test_load_cli_config_honours_environment(
    tmp_path: Path, cli_workdir: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    site = tmp_path / "site"
    site.mkdir()
    pyproject = write_pyproject(site, '[tool.cablelift.analyze]\nformat = "json"\n')
    monkeypatch.setenv("CABLELIFT_CONFIG", str(site))

    config = load_cli_config()

    assert config["analyze"] == {"format": "json"}
    assert config["_config_path"] == str(pyproject.resolve())


def test_load_cli_config_without_pyproject(cli_workdir: Path) -> None:
    assert load_cli_config() == {"_config_path": None}


def test_load_cli_config_skips_pyproject_without_tool_table(
    tmp_path: Path, cli_workdir: Path
) -> None:
    explicit = tmp_path / "explicit"
    explicit.mkdir()
    write_pyproject(explicit, '[project]\nname = "other"\n')
    local = write_pyproject(cli_workdir, '[tool.cablelift.analyze]\nexercise = "squat"\n')

    config = load_cli_config(explicit / "pyproject.toml")

    assert config["analyze"] == {"exercise": "squat"}
    assert config["_config_path"] == str(local.resolve())


def test_build_parser_uses_logging_defaults() -> None:
    parser = build_parser({"logging": {"level": "warning", "output": "stdout"}})

    namespace = parser.parse_args(["analyze", "set.csv"])

    assert namespace.log_level == "warning"
    assert namespace.log_output == "stdout"
    assert namespace.log_format == "json"
    assert namespace.format == "text"
    assert namespace.threshold is None
    assert namespace.capture == Path("set.csv")


@pytest.mark.parametrize(
    ("category", "expected"),
    [("runtime", 1), ("usage", 2), ("io", 3), ("not_found", 4), ("unknown", 1)],
)
def test_error_categories_map_to_status_codes(category: str, expected: int) -> None:
    assert build_error_payload("boom", category=category).status_code == expected
    assert CliError("boom", category=category).status_code == expected


def test_error_context_is_made_serialisable(caplog: pytest.LogCaptureFixture) -> None:
    error = CliError("boom", category="io", context={"path": Path("x.csv"), "count": 2})

    with caplog.at_level(logging.ERROR, logger="cablelift.cli"):
        log_cli_error(error.payload)

    assert error.context == {"path": "x.csv", "count": 2}
    assert error.payload.as_dict()["status_code"] == 3
    (record,) = caplog.records
    assert record.category == "io"
    assert record.context == {"path": "x.csv", "count": 2}
