import json
from pathlib import Path

import pytest

from packages.engine import compile_rules
from packages.net import ConfigurationError
from packages.pipeline import PipelineResult
from packages.report import read_rules_file, run_record, write_run_record, write_word_list


def _result():
    return PipelineResult(rule_text="O AT 3", rules=compile_rules("O AT 3"),
                          fetched=3, candidates=["AVOID"], words=["AVOID"], rejected=2)


def test_rules_file_drops_comments(tmp_path: Path):
    p = tmp_path / "rules.txt"
    p.write_text("# board after guess 2\nO at 3\r\n  # gray letters\nno S, T\n", encoding="utf-8")
    assert read_rules_file(p) == "O at 3\nno S, T"


def test_missing_rules_file_is_configuration_error(tmp_path: Path):
    with pytest.raises(ConfigurationError, match="Rules file not found"):
        read_rules_file(tmp_path / "missing.txt")


def test_word_list_is_uppercased_one_per_line(tmp_path: Path):
    out = write_word_list(["avoid", "ALONG"], tmp_path / "sub" / "words.txt")
    assert Path(out).read_text(encoding="utf-8") == "AVOID\nALONG\n"


def test_empty_word_list_writes_empty_file(tmp_path: Path):
    out = write_word_list([], tmp_path / "words.txt")
    assert Path(out).read_text(encoding="utf-8") == ""


def test_run_record_drops_secrets():
    rec = run_record(_result(), {"api_key": "s3cret", "validate": True}, "20250101T000000Z")
    assert rec["config"] == {"validate": True}
    assert rec["ok"] is True
    assert rec["result"]["rules"]["exact"] == {"2": "O"}


def test_run_record_default_path(tmp_path: Path):
    # conftest chdirs into tmp_path
    out = write_run_record(_result(), {}, run_id="20250101T000000Z")
    assert Path(out) == Path("reports") / "run_20250101T000000Z.json"
    data = json.loads((tmp_path / out).read_text(encoding="utf-8"))
    assert data["run_id"] == "20250101T000000Z"
    assert data["result"]["rejected"] == 2
