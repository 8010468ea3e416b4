# apps/cli/run.py
"""
CLI entry point for wordhunt.

This script:
  1) Loads settings (.env.local / .env / environment; flags override).
  2) Turns the constraints into rule text (Gemini), or takes rule text as-is
     from --rules / --rules-file.
  3) Runs the pipeline: compile -> fetch word list -> filter -> (optional)
     dictionary check with a live progress indicator.
  4) Prints the rules, counts and words, and optionally writes:
       - TXT:  final word list (--words-out)
       - JSON: run record with config (no secrets), rules and counts (--out)

Examples:
    python -m apps.cli.run "The word has 'A' in it, 'O' is the third letter, and no S, T, R, E"
    python -m apps.cli.run --rules "O at 3\\nA in word\\nno S, T, R, E\\nLENGTH: 5" --validate
"""

from __future__ import annotations

import argparse
import dataclasses
import json
import logging
import sys
from typing import List, Optional

from tqdm import tqdm

from packages.net import ConfigurationError
from packages.pipeline import Orchestrator, PipelineResult, load_settings
from packages.report import read_rules_file, write_run_record, write_word_list

DEFAULT_PROMPT = "The word has 'A' in it, 'O' is the third letter, and no S, T, R, E, C, L, U, D"


def _rule_text(args) -> Optional[str]:
    """Rule text from flags; a literal backslash-n in --rules means newline."""
    if args.rules_file:
        return read_rules_file(args.rules_file)
    if args.rules is not None:
        return args.rules.replace("\\n", "\n")
    return None


def _progress_callback(mode: str):
    """Per-lookup callback for the dictionary step ('bar', 'plain' or 'off')."""
    if mode == "off":
        return None, lambda: None

    state = {"bar": None}

    def cb(idx: int, total: int, word: str, verdict: bool) -> None:
        if mode == "bar":
            if state["bar"] is None:
                state["bar"] = tqdm(total=total, ncols=80, desc="Validating", unit="word")
            state["bar"].update(1)
            return
        mark = "VALID" if verdict else "invalid (not in dictionary)"
        sys.stderr.write(f"[{idx}/{total}] Checking \"{word}\"... {mark}\n")
        sys.stderr.flush()

    def close() -> None:
        if state["bar"] is not None:
            state["bar"].close()

    return cb, close


def _print_result(res: PipelineResult, show: int) -> None:
    print("=== RULES ===")
    print(res.rule_text.strip() or "(none)")
    if res.rules is not None:
        print(json.dumps(res.rules.to_dict(), indent=2))
    print()

    if res.seeds:
        print("Seed: " + ", ".join(str(s) for s in res.seeds))
    print(f"Fetched {res.fetched} unique words; "
          f"{len(res.candidates)} match all rules ({res.rejected} rejected)")
    if res.validated:
        print(f"Dictionary check: {len(res.words)}/{len(res.candidates)} valid "
              f"({res.invalid} invalid)")
    if res.diagnostic:
        print(res.diagnostic)
    print()

    words: List[str] = res.words
    print(f"=== WORDS ({len(words)}) ===")
    if not words:
        print("  (No words found)")
    for w in words[:show]:
        print(f"  {w}")
    if len(words) > show:
        print(f"  ... and {len(words) - show} more")


def main(argv: Optional[List[str]] = None) -> int:
    """
    Parse CLI args, run the pipeline, print and write outputs.
    Returns the process exit code.
    """
    ap = argparse.ArgumentParser(description="wordhunt: find words matching Wordle-style constraints")
    ap.add_argument("constraints", nargs="?",
                    help="free-text constraints (translated to rules with Gemini)")
    ap.add_argument("--rules", help="rule text, lines separated by newlines or a literal \\n")
    ap.add_argument("--rules-file", help="file with one rule per line")
    ap.add_argument("--api-key", help="Gemini API key (default: GEMINI_API_KEY)")
    ap.add_argument("--validate", action="store_true",
                    help="confirm survivors with the dictionary API")
    ap.add_argument("--present-fallback", action="store_true",
                    help="seed from the most constrained present letter when no exact rule exists")
    ap.add_argument("--show", type=int, default=50, help="max words to print")
    ap.add_argument("--out", help="write a JSON run record here ('auto' = reports/run_<ts>.json)")
    ap.add_argument("--words-out", help="write the final word list here, one per line")
    ap.add_argument(
        "--progress",
        choices=["auto", "bar", "plain", "off"],
        default="auto",
        help="Show dictionary-check progress (auto=bar on a terminal, else plain text)."
    )
    ap.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    args = ap.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    # 1) Settings; flags win over environment
    try:
        settings = load_settings()
    except ConfigurationError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1
    if args.api_key:
        settings = dataclasses.replace(settings, api_key=args.api_key)

    # 2) Input: rule text beats free text
    try:
        rule_text = _rule_text(args)
    except (ConfigurationError, OSError) as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1
    prompt = args.constraints
    if rule_text is None:
        prompt = prompt or DEFAULT_PROMPT
        if not settings.api_key:
            print("ERROR: No API key provided. Pass --api-key or set GEMINI_API_KEY "
                  "(or use --rules to skip translation).", file=sys.stderr)
            return 1

    orch = Orchestrator.from_settings(
        settings, validate=args.validate, present_fallback=args.present_fallback
    )

    # 3) Run, with progress for the (slow) dictionary step
    mode = args.progress
    if mode == "auto":
        mode = "bar" if sys.stderr.isatty() else "plain"
    progress, close = _progress_callback(mode)
    try:
        res = orch.run(prompt, rule_text=rule_text, progress=progress)
    finally:
        close()

    if not res.ok:
        print("=== ERROR ===", file=sys.stderr)
        print(res.failure, file=sys.stderr)
        return 1

    _print_result(res, args.show)

    # 4) Optional outputs
    if args.words_out:
        print(f"Wrote: {write_word_list(res.words, args.words_out)}")
    if args.out:
        path = None if args.out == "auto" else args.out
        print(f"Wrote: {write_run_record(res, vars(args), path)}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
