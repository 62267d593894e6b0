"""
Command line for emotion-radar.

Usage:
    emotion-radar analyze "ずっと会いたい"
    emotion-radar commit "ずっと会いたい" --workspace ./my_radar_store
    emotion-radar history list
    emotion-radar history pin <id>
    emotion-radar history show <id>
    emotion-radar history export > history.json
    emotion-radar csv "会いたい！" -o scores.csv
    emotion-radar lexicon import my_lexicon.json

Text arguments may be ``-`` to read from stdin.  The workspace comes from
``--workspace``, then ``$EMOTION_RADAR_PATH``, then ``./emotion_radar_store``.
"""

import argparse
import json
import os
import sys
from typing import List, Optional

from .categories import CATEGORIES, CATEGORY_LABELS
from .core import EmotionRadar
from .export import write_csv


def _workspace(args) -> str:
    return (
        args.workspace
        or os.environ.get("EMOTION_RADAR_PATH")
        or "./emotion_radar_store"
    )


def _text(value: str) -> str:
    return sys.stdin.read() if value == "-" else value


def _read_file(path: str) -> str:
    with open(path, encoding="utf-8-sig") as f:
        return f.read()


def _print_result(radar: EmotionRadar, result, as_json: bool) -> None:
    if as_json:
        data = result.to_dict()
        data["comments"] = dict(radar.comments(result))
        print(json.dumps(data, ensure_ascii=False, indent=2))
        return
    for c in CATEGORIES:
        mark = "*" if c in result.leaders else " "
        print(f"{mark} {CATEGORY_LABELS[c]:<4} {c:<10} {result.normalized[c]:6.1f}")
    for c, comment in radar.comments(result):
        print(f"[{CATEGORY_LABELS[c]}] {comment}")


# ── commands ────────────────────────────────────────────────────────────

def cmd_analyze(radar: EmotionRadar, args) -> int:
    radar.relation_boost = not args.no_relation_boost
    _print_result(radar, radar.analyze(_text(args.text)), args.json)
    return 0


def cmd_commit(radar: EmotionRadar, args) -> int:
    item = radar.commit(_text(args.text))
    if item is None:
        print("Not stored (blank or already in history)")
        return 1
    print(f"Stored {item.id}")
    return 0


def cmd_history_list(radar: EmotionRadar, args) -> int:
    items = list(radar.history)
    if args.limit:
        items = items[-args.limit:]
    if not items:
        print("History is empty")
        return 0
    for it in reversed(items):
        pin = "📌" if it.pinned else "  "
        lead = ",".join(it.leaders) or "-"
        print(f"{pin} {it.id}  {it.ts}  {lead:<20} {it.snippet}")
    return 0


def cmd_history_pin(radar: EmotionRadar, args) -> int:
    try:
        pinned = radar.toggle_pin(args.id)
    except KeyError:
        print(f"ERROR: no history item {args.id}", file=sys.stderr)
        return 1
    print(f"{args.id} {'pinned' if pinned else 'unpinned'}")
    return 0


def cmd_history_show(radar: EmotionRadar, args) -> int:
    try:
        result = radar.reanalyze(args.id)
    except KeyError:
        print(f"ERROR: no history item {args.id}", file=sys.stderr)
        return 1
    _print_result(radar, result, args.json)
    return 0


def cmd_history_delete(radar: EmotionRadar, args) -> int:
    try:
        outcome = radar.delete_history_item(args.id)
    except KeyError:
        print(f"ERROR: no history item {args.id}", file=sys.stderr)
        return 1
    if not outcome["deleted"]:
        print(f"ERROR: {args.id} is pinned; unpin it first", file=sys.stderr)
        return 1
    print(f"Deleted {args.id}")
    return 0


def cmd_history_clear(radar: EmotionRadar, args) -> int:
    removed = radar.clear_history()
    print(f"Removed {removed} item(s), kept {len(radar.history)} pinned")
    return 0


def cmd_history_export(radar: EmotionRadar, args) -> int:
    print(radar.export_history())
    return 0


def cmd_history_import(radar: EmotionRadar, args) -> int:
    try:
        payload = _read_file(args.file)
    except (OSError, ValueError) as e:
        print(f"ERROR: cannot read {args.file}: {e}", file=sys.stderr)
        return 1
    outcome = radar.import_history(payload)
    if not outcome["ok"]:
        print(f"ERROR: {outcome['error']}", file=sys.stderr)
        return 1
    print(f"Imported {outcome['items']} item(s)")
    return 0


def cmd_csv(radar: EmotionRadar, args) -> int:
    result = radar.analyze(_text(args.text))
    if args.output:
        write_csv(result, args.output, labels=not args.ids)
        print(f"Wrote {args.output}")
    else:
        sys.stdout.write(radar.export_csv(result, labels=not args.ids) + "\n")
    return 0


def cmd_lexicon_export(radar: EmotionRadar, args) -> int:
    print(radar.export_lexicon())
    return 0


def cmd_lexicon_import(radar: EmotionRadar, args) -> int:
    try:
        payload = _read_file(args.file)
    except (OSError, ValueError) as e:
        print(f"ERROR: cannot read {args.file}: {e}", file=sys.stderr)
        return 1
    outcome = radar.import_lexicon(payload)
    if not outcome["ok"]:
        print(f"ERROR: {outcome['error']}", file=sys.stderr)
        return 1
    print(f"Imported {outcome['terms']} term(s)")
    return 0


def cmd_lexicon_reset(radar: EmotionRadar, args) -> int:
    radar.reset_lexicon()
    print("Lexicon reset to built-in defaults")
    return 0


def cmd_stats(radar: EmotionRadar, args) -> int:
    print(json.dumps(radar.stats(), ensure_ascii=False, indent=2))
    return 0


# ── parser ──────────────────────────────────────────────────────────────

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="emotion-radar",
        description="Keyword-based emotion scoring with a retained history.",
    )
    parser.add_argument(
        "--workspace",
        default=None,
        help="Workspace directory. Defaults to $EMOTION_RADAR_PATH or ./emotion_radar_store",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("analyze", help="Score a text.")
    p.add_argument("text", help="Text to score, or - for stdin.")
    p.add_argument("--json", action="store_true", help="Print the full result as JSON.")
    p.add_argument("--no-relation-boost", action="store_true",
                   help="Do not add the relationship-word bonus to affection.")
    p.set_defaults(func=cmd_analyze)

    p = sub.add_parser("commit", help="Score a text and append it to the history.")
    p.add_argument("text", help="Text to commit, or - for stdin.")
    p.set_defaults(func=cmd_commit)

    p = sub.add_parser("csv", help="Export normalized scores as CSV.")
    p.add_argument("text", help="Text to score, or - for stdin.")
    p.add_argument("-o", "--output", help="Write to this file instead of stdout.")
    p.add_argument("--ids", action="store_true",
                   help="Use category identifiers instead of labels.")
    p.set_defaults(func=cmd_csv)

    p = sub.add_parser("stats", help="Show history and lexicon counts.")
    p.set_defaults(func=cmd_stats)

    history = sub.add_parser("history", help="Inspect or change the history.")
    hsub = history.add_subparsers(dest="history_command", required=True)
    p = hsub.add_parser("list", help="List items, newest first.")
    p.add_argument("--limit", type=int, default=0)
    p.set_defaults(func=cmd_history_list)
    p = hsub.add_parser("pin", help="Toggle the pin of an item.")
    p.add_argument("id")
    p.set_defaults(func=cmd_history_pin)
    p = hsub.add_parser("show", help="Re-score an item with the current lexicon.")
    p.add_argument("id")
    p.add_argument("--json", action="store_true", help="Print the full result as JSON.")
    p.set_defaults(func=cmd_history_show)
    p = hsub.add_parser("delete", help="Delete an unpinned item.")
    p.add_argument("id")
    p.set_defaults(func=cmd_history_delete)
    p = hsub.add_parser("clear", help="Remove every unpinned item.")
    p.set_defaults(func=cmd_history_clear)
    p = hsub.add_parser("export", help="Print the history as JSON.")
    p.set_defaults(func=cmd_history_export)
    p = hsub.add_parser("import", help="Replace the history from a JSON file.")
    p.add_argument("file")
    p.set_defaults(func=cmd_history_import)

    lexicon = sub.add_parser("lexicon", help="Export, import or reset the lexicon.")
    lsub = lexicon.add_subparsers(dest="lexicon_command", required=True)
    p = lsub.add_parser("export", help="Print the lexicon as JSON.")
    p.set_defaults(func=cmd_lexicon_export)
    p = lsub.add_parser("import", help="Replace the lexicon from a JSON file.")
    p.add_argument("file")
    p.set_defaults(func=cmd_lexicon_import)
    p = lsub.add_parser("reset", help="Go back to the built-in lexicon.")
    p.set_defaults(func=cmd_lexicon_reset)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    radar = EmotionRadar(_workspace(args))
    return args.func(radar, args)


if __name__ == "__main__":
    sys.exit(main())
