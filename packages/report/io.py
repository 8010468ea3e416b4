"""
Run inputs and outputs on disk.

- read_rules_file:  rule text from a hand-written file ('#' lines are comments).
- write_word_list:  the final words, one per line.
- run_record:       JSON-ready record of one run (config without secrets + result).
- write_run_record: dump that record, by default to reports/run_<id>.json.
"""

from __future__ import annotations

import datetime as dt
import json
from pathlib import Path
from typing import Dict, Iterable, Optional

from packages.net import ConfigurationError

REPORTS_DIR = Path("reports")
SECRET_KEYS = frozenset({"api_key"})


def new_run_id() -> str:
    """UTC timestamp used to name run records, e.g. 20250820T024121Z."""
    return dt.datetime.now(dt.timezone.utc).strftime("%Y%m%dT%H%M%SZ")


def read_rules_file(path: Path | str) -> str:
    """
    Rule text from `path`, one rule per line.

    Comment lines (first non-blank character '#') are dropped so a rules
    file can carry notes. Raises ConfigurationError if the file is missing.
    """
    p = Path(path)
    if not p.is_file():
        raise ConfigurationError(f"Rules file not found: {p}")
    lines = p.read_text(encoding="utf-8").splitlines()
    return "\n".join(ln for ln in lines if not ln.lstrip().startswith("#"))


def write_word_list(words: Iterable[str], path: Path | str) -> str:
    """Upper-cased words, one per line; an empty list writes an empty file."""
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    body = "".join(f"{w.upper()}\n" for w in words)
    p.write_text(body, encoding="utf-8")
    return str(p)


def run_record(result, config: Dict, run_id: str) -> Dict:
    """`result` is a PipelineResult; secret config entries are left out."""
    return {
        "run_id": run_id,
        "ok": result.ok,
        "config": {k: v for k, v in config.items() if k not in SECRET_KEYS},
        "result": result.to_dict(),
    }


def write_run_record(
        result,
        config: Dict,
        path: Optional[Path | str] = None,
        *,
        run_id: Optional[str] = None,
) -> str:
    run_id = run_id or new_run_id()
    p = Path(path) if path is not None else REPORTS_DIR / f"run_{run_id}.json"
    p.parent.mkdir(parents=True, exist_ok=True)
    with p.open("w", encoding="utf-8") as f:
        json.dump(run_record(result, config, run_id), f, indent=2)
    return str(p)
