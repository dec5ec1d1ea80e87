import argparse
import json
from pathlib import Path
from typing import Any, List

from . import __version__
from .distance import edit_distance
from .env import ConfigError, load_env, load_weights, log_level
from .logger import get_logger
from .normalize import normalize
from .schema import InvalidRecordError, validate_note
from .scoring import NoteInput, ScoreParams, explain_score


def read_records(input_path: Path) -> List[Any]:
    if not input_path.exists():
        raise SystemExit(f"Input file not found: {input_path}")
    try:
        with input_path.open("r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise SystemExit(f"Invalid JSON in {input_path}: {e}")
    return data if isinstance(data, list) else [data]


def parse_tokens(raw: str | None) -> List[str] | None:
    if raw is None:
        return None
    return [t.strip().lower() for t in raw.split(",") if t.strip()]


def escape_id(note_id: str) -> str:
    # Keeps one note per output line whatever the id contains
    return (
        note_id.replace("\\", "\\\\")
        .replace("\t", "\\t")
        .replace("\n", "\\n")
        .replace("\r", "\\r")
    )


def cmd_score(args: argparse.Namespace) -> None:
    logger = get_logger()
    records = read_records(Path(args.input))
    try:
        weights = load_weights()
    except ConfigError as e:
        raise SystemExit(str(e))

    params = ScoreParams.from_query(
        args.query,
        tokens=parse_tokens(args.tokens),
        enable_fuzzy_matching=not args.no_fuzzy,
    )
    logger.debug(
        "Scoring notes",
        query=params.query,
        tokens=list(params.tokens),
        notes=len(records),
        fuzzy=params.enable_fuzzy_matching,
    )
    logger.debug("Effective weights", **weights.as_dict())

    for index, record in enumerate(records):
        try:
            note = NoteInput.from_dict(record)
        except InvalidRecordError as e:
            logger.warning("Skipping invalid note", index=index, errors=e.errors)
            logger.record_invalid_record(type(e).__name__)
            continue

        breakdown = explain_score(params, note, weights)
        logger.record_score(breakdown, weights.max_total_fuzzy_score)
        print(f"{escape_id(note.id)}\t{breakdown.total}")
        if args.explain:
            for key, value in breakdown.as_dict().items():
                if key in ("note_id", "total"):
                    continue
                print(f"  {key}: {value}")

    logger.log_metrics_summary()


def cmd_validate(args: argparse.Namespace) -> None:
    records = read_records(Path(args.input))
    failed = False
    for index, record in enumerate(records):
        errors = validate_note(record)
        if errors:
            failed = True
            print(f"Invalid note #{index}:")
            for e in errors:
                print(f" - {e}")
    if failed:
        raise SystemExit(2)
    print("Valid")


def cmd_normalize(args: argparse.Namespace) -> None:
    print(normalize(args.text))


def cmd_distance(args: argparse.Namespace) -> None:
    dist = edit_distance(args.a, args.b, args.max)
    if dist > args.max:
        print(f">{args.max}")
    else:
        print(dist)


def main(argv: List[str] | None = None):
    # Load .env if present (NOTESCORE_* weight overrides, NOTESCORE_LOG_LEVEL)
    load_env()
    parser = argparse.ArgumentParser(prog="notescore", description="Note search relevance scoring")
    parser.add_argument("--version", action="store_true", help="Show version")
    parser.add_argument("--log-level", default=None, help="Log level (default: NOTESCORE_LOG_LEVEL or INFO)")
    parser.add_argument("--log-dir", default=None, help="Also write logs to this directory")

    subparsers = parser.add_subparsers(dest="command")
    sc = subparsers.add_parser("score", help="Score notes from a JSON file; prints <id> TAB <score> per note, escaping tabs, newlines and backslashes in ids")
    sc.add_argument("--query", required=True, help="Raw search query")
    sc.add_argument("--tokens", help="Comma-separated tokens (default: query split on whitespace)")
    sc.add_argument("--input", required=True, help="Path to a note JSON object or list of notes")
    sc.add_argument("--explain", action="store_true", help="Print the score breakdown per note")
    sc.add_argument("--no-fuzzy", action="store_true", help="Disable fuzzy matching tiers")
    sc.set_defaults(func=cmd_score)

    val = subparsers.add_parser("validate", help="Validate a note JSON file")
    val.add_argument("--input", required=True, help="Path to a note JSON object or list of notes")
    val.set_defaults(func=cmd_validate)

    norm = subparsers.add_parser("normalize", help="Print the normalized form of a string")
    norm.add_argument("text")
    norm.set_defaults(func=cmd_normalize)

    dist = subparsers.add_parser("distance", help="Bounded edit distance between two strings")
    dist.add_argument("a")
    dist.add_argument("b")
    dist.add_argument("--max", type=int, default=3, help="Distance bound (default 3)")
    dist.set_defaults(func=cmd_distance)

    args = parser.parse_args(argv)

    if args.version:
        print(__version__)
        return

    log_dir = Path(args.log_dir) if args.log_dir else None
    get_logger(
        level=args.log_level or log_level(),
        log_dir=log_dir,
        enable_file=log_dir is not None,
    )

    if hasattr(args, "func"):
        args.func(args)
        return

    parser.print_help()


if __name__ == "__main__":
    main()
