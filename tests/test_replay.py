import json
from pathlib import Path

import pytest

import replay_fixture
from tests._shared_cases import (
    SYNTHETIC_CODE,
    TYPE_ERROR_COMPONENT,
    TYPE_MISMATCH_CODE,
    PatternAnalyzer,
    ScriptRewriter,
)
from twoslashmap.engine import AnalyzeOptions, RewriteMode
from twoslashmap.engine.replay import load_fixture, read_fixture
from twoslashmap.errors import FixtureError
from twoslashmap.pipeline import TwoslashOptions, run_fixture
from twoslashmap.text import LineIndex, Position


def _recorded_fixture(source: str = TYPE_ERROR_COMPONENT) -> dict[str, object]:
    rewritten = ScriptRewriter().rewrite(source, mode=RewriteMode.TS, is_ts_file=False)
    generated = TwoslashOptions().reference_header() + rewritten.code
    # Recorded without interception, so the synthetic diagnostic is part of the capture.
    analysis = PatternAnalyzer(extra_diagnostics=((1, 0),)).analyze(generated, "js", AnalyzeOptions())
    return {
        "source": source,
        "rewrite": {"code": rewritten.code, "map": dict(rewritten.map)},
        "analysis": {
            "code": analysis.code,
            "staticQuickInfos": [info.to_dict() for info in analysis.static_quick_infos],
            "errors": [error.to_dict() for error in analysis.errors],
            "extension": "ts",
            "queries": [],
        },
    }


def _write(tmp_path: Path, data: object) -> Path:
    path = tmp_path / "component.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


def test_load_fixture_keeps_unknown_analysis_fields_as_extras() -> None:
    fixture = load_fixture(_recorded_fixture())

    assert fixture.source == TYPE_ERROR_COMPONENT
    assert dict(fixture.analyzer.result.extras) == {"extension": "ts", "queries": []}
    assert [error.code for error in fixture.analyzer.result.errors] == [SYNTHETIC_CODE, TYPE_MISMATCH_CODE]


def test_replay_rewriter_rejects_a_different_source() -> None:
    fixture = load_fixture(_recorded_fixture())

    with pytest.raises(FixtureError):
        fixture.rewriter.rewrite("<p>other</p>", mode=RewriteMode.TS, is_ts_file=False)


def test_run_fixture_filters_recorded_errors_through_interception(tmp_path: Path) -> None:
    path = _write(tmp_path, _recorded_fixture())

    result = run_fixture(path)

    assert [error.info.code for error in result.errors] == [TYPE_MISMATCH_CODE]
    assert result.errors[0].original == Position(2, 1)
    assert [info.info.target_string for info in result.static_quick_infos] == ["count", "name"]
    assert result.extras["queries"] == []


def test_run_fixture_reads_recorded_positions_as_utf16_code_units(tmp_path: Path) -> None:
    source = "<script>\n\tconst s = '\U0001f600'; let t = 1;\n</script>"
    path = _write(tmp_path, _recorded_fixture(source))

    result = run_fixture(path)

    binding = result.static_quick_infos[-1]
    assert binding.info.target_string == "t"
    assert binding.original == Position(1, 21)
    assert source[LineIndex.of(source).string_index(binding.original_start) :].startswith("t = 1")


@pytest.mark.parametrize(
    "data",
    [
        [],
        {"rewrite": {"code": "", "map": {}}, "analysis": {"code": ""}},
        {"source": "", "rewrite": {"code": ""}, "analysis": {"code": ""}},
        {
            "source": "",
            "rewrite": {"code": "", "map": {}},
            "analysis": {"code": "", "errors": [{"line": "0"}]},
        },
    ],
)
def test_read_fixture_rejects_malformed_files(tmp_path: Path, data: object) -> None:
    with pytest.raises(FixtureError):
        read_fixture(_write(tmp_path, data))


def test_read_fixture_rejects_invalid_json(tmp_path: Path) -> None:
    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(FixtureError, match="invalid JSON"):
        read_fixture(path)


def test_replay_cli_prints_remapped_json(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    path = _write(tmp_path, _recorded_fixture())

    exit_code = replay_fixture.main([str(path), "--indent", "0"])

    assert exit_code == 0
    data = json.loads(capsys.readouterr().out)
    assert data["code"] == TYPE_ERROR_COMPONENT
    assert [error["code"] for error in data["errors"]] == [TYPE_MISMATCH_CODE]
    assert data["errors"][0]["original"]["line"] == 2


def test_replay_cli_reports_broken_fixture(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    path = _write(tmp_path, {"source": 1})

    exit_code = replay_fixture.main([str(path)])

    assert exit_code == 2
    assert "error:" in capsys.readouterr().err
