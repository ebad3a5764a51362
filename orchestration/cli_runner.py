# orchestration/cli_runner.py
"""Command-line runner for lyricsmith.

Builds prompts from an analysis document, parses saved model responses and
runs the heuristic generator. Prompts and JSON results go to stdout; logs go
to stderr.
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any

import structlog
from pydantic import ValidationError
from utils.logging import setup_logging

from models import (
    PROBLEM_TYPES,
    MelodyParameters,
    PoemAnalysis,
    extract_quantitative_data,
)
from parsing import (
    parse_analysis_response,
    parse_melody_feedback_response,
    parse_suggestion_response,
)
from processing import GeneratorOptions, generate_suggestions_from_analysis
from prompting import (
    create_analysis_prompt,
    create_melody_feedback_prompt,
    create_suggestion_prompt_from_analysis,
    reconstruct_poem_text,
    truncate_prompt_if_needed,
)

logger = structlog.get_logger(__name__)

EXIT_OK = 0
EXIT_PARSE_FAILED = 1
EXIT_BAD_INPUT = 2


class InputError(Exception):
    """Raised when a CLI input file cannot be read or validated."""


def _positive_int(value: str) -> int:
    number = int(value)
    if number <= 0:
        raise argparse.ArgumentTypeError(f"must be positive, got {value}")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="lyricsmith",
        description="Build lyric-adaptation prompts and interpret model responses.",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        type=str.upper,
        help="Override LYRICSMITH_LOG_LEVEL",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    prompt = commands.add_parser("prompt", help="Render a model prompt")
    prompt_kinds = prompt.add_subparsers(dest="prompt_kind", required=True)

    suggestions = prompt_kinds.add_parser("suggestions", help="Word substitution prompt")
    suggestions.add_argument("analysis", help="Path to the analysis JSON document")
    suggestions.add_argument("--max-suggestions", type=int, default=None)
    suggestions.add_argument("--max-tokens", type=_positive_int, default=None)

    analysis = prompt_kinds.add_parser("analysis", help="Qualitative analysis prompt")
    analysis.add_argument("analysis", help="Path to the analysis JSON document")
    analysis.add_argument("--poem-file", default=None, help="Use this poem text verbatim")
    analysis.add_argument("--max-tokens", type=_positive_int, default=None)

    melody = prompt_kinds.add_parser("melody", help="Melody feedback prompt")
    melody.add_argument("analysis", help="Path to the analysis JSON document")
    melody.add_argument("--abc", required=True, help="Path to the ABC notation file")
    melody.add_argument("--key", required=True)
    melody.add_argument("--time-signature", required=True)
    melody.add_argument("--tempo", type=int, required=True)
    melody.add_argument("--lyrics-file", default=None)
    melody.add_argument("--max-tokens", type=_positive_int, default=None)

    parse = commands.add_parser("parse", help="Parse a saved model response")
    parse.add_argument("kind", choices=["suggestions", "analysis", "feedback"])
    parse.add_argument("response", nargs="?", default="-", help="Response file or '-' for stdin")

    heuristics = commands.add_parser("heuristics", help="Model-free suggestions")
    heuristics.add_argument("analysis", help="Path to the analysis JSON document")
    heuristics.add_argument("--max-suggestions", type=int, default=None)
    heuristics.add_argument("--min-severity", choices=["low", "medium", "high"], default="low")
    heuristics.add_argument("--focus", nargs="+", choices=PROBLEM_TYPES, default=None)

    return parser


def _read_text(path: str) -> str:
    try:
        if path == "-":
            return sys.stdin.read()
        return Path(path).read_text(encoding="utf-8")
    except OSError as exc:
        raise InputError(f"Cannot read {path}: {exc}") from exc
    except UnicodeDecodeError as exc:
        raise InputError(f"{path} is not UTF-8 text: {exc}") from exc


def load_analysis(path: str) -> PoemAnalysis:
    """Read and validate an analysis JSON document."""
    raw = _read_text(path)
    try:
        return PoemAnalysis.model_validate(json.loads(raw))
    except json.JSONDecodeError as exc:
        raise InputError(f"{path} is not valid JSON: {exc}") from exc
    except ValidationError as exc:
        raise InputError(f"{path} is not a valid poem analysis: {exc}") from exc


def _emit_prompt(prompt: str, max_tokens: int | None) -> None:
    result = truncate_prompt_if_needed(prompt, max_tokens)
    if result.was_truncated:
        logger.warning(result.message)
    print(result.prompt)


def _emit_json(payload: dict[str, Any]) -> None:
    print(json.dumps(payload, indent=2, ensure_ascii=False))


def _run_prompt(args: argparse.Namespace) -> int:
    analysis = load_analysis(args.analysis)

    if args.prompt_kind == "suggestions":
        prompt = create_suggestion_prompt_from_analysis(analysis, args.max_suggestions)
    elif args.prompt_kind == "analysis":
        poem = (
            _read_text(args.poem_file)
            if args.poem_file
            else reconstruct_poem_text(analysis)
        )
        prompt = create_analysis_prompt(
            poem,
            extract_quantitative_data(analysis),
            title=analysis.meta.title,
            emotional_arc=analysis.emotion.emotional_arc or None,
        )
    else:
        lyrics = (
            _read_text(args.lyrics_file)
            if args.lyrics_file
            else reconstruct_poem_text(analysis)
        )
        prompt = create_melody_feedback_prompt(
            lyrics,
            _read_text(args.abc),
            MelodyParameters(
                key=args.key, time_signature=args.time_signature, tempo=args.tempo
            ),
            analysis,
        )

    _emit_prompt(prompt, args.max_tokens)
    return EXIT_OK


def _run_parse(args: argparse.Namespace) -> int:
    response = _read_text(args.response)

    if args.kind == "suggestions":
        parsed = parse_suggestion_response(response)
        payload = {
            "suggestions": [s.model_dump(by_alias=True) for s in parsed.suggestions]
        }
    elif args.kind == "analysis":
        parsed = parse_analysis_response(response)
        payload = {"analysis": parsed.analysis.model_dump(by_alias=True)}
    else:
        parsed = parse_melody_feedback_response(response)
        payload = {"feedback": parsed.feedback.model_dump(by_alias=True)}

    payload["metadata"] = parsed.metadata.model_dump(by_alias=True)
    _emit_json(payload)
    return EXIT_OK if parsed.metadata.success else EXIT_PARSE_FAILED


def _run_heuristics(args: argparse.Namespace) -> int:
    analysis = load_analysis(args.analysis)
    options = GeneratorOptions(
        max_suggestions=args.max_suggestions,
        min_severity=args.min_severity,
        focus_types=tuple(args.focus) if args.focus else PROBLEM_TYPES,
    )
    result = generate_suggestions_from_analysis(analysis, options)
    _emit_json(
        {
            "suggestions": [s.model_dump(by_alias=True) for s in result.suggestions],
            "problemsProcessed": result.problems_processed,
            "problemsSkipped": result.problems_skipped,
            "skipReasons": result.skip_reasons,
        }
    )
    return EXIT_OK


_HANDLERS = {
    "prompt": _run_prompt,
    "parse": _run_parse,
    "heuristics": _run_heuristics,
}


def run(argv: list[str] | None = None) -> int:
    """Parse ``argv``, run the requested command and return the exit code."""
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level)
    try:
        return _HANDLERS[args.command](args)
    except InputError as exc:
        logger.error("Invalid input", error=str(exc))
        return EXIT_BAD_INPUT
