"""
Emotion Radar MCP Server

Exposes emotion-radar as MCP tools and resources for any MCP-enabled agent.

Resources:
  - emotion://history → the retained history as a readable block

Tools:
  - analyze_text(text, relation_boost) → scores, leaders, top terms, comments
  - commit_text(text) → analyze and append to the history
  - list_history(limit) → newest history items
  - reanalyze_history_item(item_id) → re-score a stored text
  - toggle_pin(item_id) → pin / unpin a history item
  - delete_history_item(item_id) → delete one unpinned item
  - clear_history() → remove every unpinned item
  - import_history(history_json) / import_lexicon(lexicon_json)
  - radar_stats() → history and lexicon counts
  - export_csv(text) → CSV of normalized scores

Usage:
    python -m emotion_radar.mcp_server --workspace ./my_radar_store
    # or
    from emotion_radar.mcp_server import create_server

The module-level cache holds one live ``EmotionRadar`` per resolved path; it
is reloaded when ``history.json`` or ``lexicon.json`` changes on disk so that
writes from the CLI are picked up on the next call.
"""

from __future__ import annotations

import argparse
import os
import sys
from typing import Any, Dict, List, Optional

# ---------------------------------------------------------------------------
# Graceful MCP availability check
# ---------------------------------------------------------------------------
try:
    from mcp.server.fastmcp import FastMCP
    MCP_AVAILABLE = True
except ImportError:
    MCP_AVAILABLE = False
    FastMCP = None  # type: ignore

from emotion_radar.categories import CATEGORIES
from emotion_radar.core import EmotionRadar

# ---------------------------------------------------------------------------
# Module-level cache: one EmotionRadar per resolved path
# ---------------------------------------------------------------------------

_RADAR_CACHE: Dict[str, EmotionRadar] = {}
_CACHE_MTIME: Dict[str, float] = {}


def _workspace_mtime(resolved_path: str) -> float:
    """Return the most recent mtime across the store files."""
    mtimes: List[float] = []
    for name in ("history.json", "lexicon.json"):
        try:
            mtimes.append(os.path.getmtime(os.path.join(resolved_path, name)))
        except OSError:
            pass
    return max(mtimes) if mtimes else 0.0


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _get_workspace(workspace: Optional[str] = None) -> str:
    """Resolve the workspace from arg, env, or default."""
    return (
        workspace
        or os.environ.get("EMOTION_RADAR_PATH")
        or "./emotion_radar_store"
    )


def _load_radar(workspace: str) -> EmotionRadar:
    """Return an EmotionRadar for *workspace*, reloading if its files changed."""
    resolved = os.path.abspath(workspace)
    current_mtime = _workspace_mtime(resolved)
    cached_mtime = _CACHE_MTIME.get(resolved, -1.0)

    if resolved not in _RADAR_CACHE or current_mtime > cached_mtime:
        _RADAR_CACHE[resolved] = EmotionRadar(resolved)
        _CACHE_MTIME[resolved] = _workspace_mtime(resolved)

    return _RADAR_CACHE[resolved]


def _touch_cache(workspace: str) -> None:
    """Record our own write so the next call does not reload."""
    resolved = os.path.abspath(workspace)
    _CACHE_MTIME[resolved] = _workspace_mtime(resolved)


def _item_to_dict(item) -> Dict[str, Any]:
    return {
        "id": item.id,
        "ts": item.ts,
        "snippet": item.snippet,
        "normalized": dict(zip(CATEGORIES, item.normalized)),
        "leaders": list(item.leaders),
        "pinned": item.pinned,
    }


def _format_history_block(items: list) -> str:
    if not items:
        return "[emotion-radar] History is empty"
    lines = [f"[emotion-radar] {len(items)} history items", ""]
    for i, it in enumerate(items, 1):
        pin = " [pinned]" if it.pinned else ""
        lead = ",".join(it.leaders) or "-"
        lines.append(f"{i}. {it.ts} leaders={lead}{pin}  {it.snippet}")
    return "\n".join(lines)


# ---------------------------------------------------------------------------
# Server factory
# ---------------------------------------------------------------------------

def create_server(workspace: Optional[str] = None) -> "FastMCP":
    """Create and return the FastMCP server with emotion-radar tools/resources.

    Args:
        workspace: Path to the radar workspace directory.  Falls back to
            ``$EMOTION_RADAR_PATH`` env var, then ``./emotion_radar_store``.

    Raises:
        ImportError: If the ``mcp`` package is not installed.
    """
    if not MCP_AVAILABLE:
        raise ImportError(
            "The 'mcp' package is required to run the emotion-radar MCP server. "
            "Install it with: pip install mcp"
        )

    resolved_path = _get_workspace(workspace)
    mcp = FastMCP(
        name="emotion-radar",
        instructions=(
            "Emotion Radar — keyword-based emotion scoring for Japanese text. "
            "Use analyze_text to score a text, commit_text to keep it in the "
            "history, and list_history to browse past analyses."
        ),
    )

    @mcp.tool()
    def analyze_text(text: str, relation_boost: bool = True) -> Dict[str, Any]:
        """Score a text across affection, longing, sadness, amae and desire.

        Returns:
            Dict with keys: raw, normalized (0–100), leaders, top_terms,
            meta_adjustments, comments.  Blank text scores all zero with no
            leaders.
        """
        radar = _load_radar(resolved_path)
        previous = radar.relation_boost
        radar.relation_boost = relation_boost
        try:
            result = radar.analyze(text)
        finally:
            radar.relation_boost = previous
        data = result.to_dict()
        data["comments"] = {c: msg for c, msg in radar.comments(result)}
        return data

    @mcp.tool()
    def commit_text(text: str) -> Dict[str, Any]:
        """Analyze *text* and append it to the history.

        Returns:
            Dict with keys: stored (bool), item (dict or None), history_count.
            ``stored`` is False for blank text or text already in the history.
        """
        radar = _load_radar(resolved_path)
        item = radar.commit(text)
        _touch_cache(resolved_path)
        return {
            "stored": item is not None,
            "item": _item_to_dict(item) if item else None,
            "history_count": len(radar.history),
        }

    @mcp.tool()
    def list_history(limit: int = 20) -> List[Dict[str, Any]]:
        """Return the newest history items, newest first."""
        radar = _load_radar(resolved_path)
        items = list(radar.history)[-limit:] if limit > 0 else []
        return [_item_to_dict(it) for it in reversed(items)]

    @mcp.tool()
    def reanalyze_history_item(item_id: str) -> Dict[str, Any]:
        """Re-score a history item's full text with the current lexicon."""
        radar = _load_radar(resolved_path)
        try:
            result = radar.reanalyze(item_id)
        except KeyError:
            return {"ok": False, "error": f"unknown item {item_id}"}
        data = result.to_dict()
        data["ok"] = True
        data["text"] = result.text
        data["comments"] = {c: msg for c, msg in radar.comments(result)}
        return data

    @mcp.tool()
    def toggle_pin(item_id: str) -> Dict[str, Any]:
        """Pin or unpin a history item. Pinned items are never evicted."""
        radar = _load_radar(resolved_path)
        try:
            pinned = radar.toggle_pin(item_id)
        except KeyError:
            return {"ok": False, "error": f"unknown item {item_id}"}
        _touch_cache(resolved_path)
        return {"ok": True, "pinned": pinned}

    @mcp.tool()
    def delete_history_item(item_id: str) -> Dict[str, Any]:
        """Delete one history item. Pinned items are refused (``blocked``)."""
        radar = _load_radar(resolved_path)
        try:
            outcome = radar.delete_history_item(item_id)
        except KeyError:
            return {"deleted": False, "error": f"unknown item {item_id}"}
        _touch_cache(resolved_path)
        return outcome

    @mcp.tool()
    def clear_history() -> Dict[str, Any]:
        """Remove every unpinned history item."""
        radar = _load_radar(resolved_path)
        removed = radar.clear_history()
        _touch_cache(resolved_path)
        return {"removed": removed, "remaining": len(radar.history)}

    @mcp.tool()
    def import_history(history_json: str) -> Dict[str, Any]:
        """Replace the whole history with a JSON array of history items.

        Invalid payloads leave the history untouched and return
        ``{"ok": False, "error": ...}``.
        """
        radar = _load_radar(resolved_path)
        outcome = radar.import_history(history_json)
        _touch_cache(resolved_path)
        return outcome

    @mcp.tool()
    def import_lexicon(lexicon_json: str) -> Dict[str, Any]:
        """Replace the lexicon (keys: the five categories or their labels)."""
        radar = _load_radar(resolved_path)
        outcome = radar.import_lexicon(lexicon_json)
        _touch_cache(resolved_path)
        return outcome

    @mcp.tool()
    def radar_stats() -> Dict[str, Any]:
        """History size, pin count and lexicon size."""
        return _load_radar(resolved_path).stats()

    @mcp.tool()
    def export_csv(text: str) -> str:
        """CSV (with BOM) of the normalized scores of *text*."""
        radar = _load_radar(resolved_path)
        return radar.export_csv(radar.analyze(text))

    @mcp.resource("emotion://history")
    def history_resource() -> str:
        """The retained history as a human-readable block, oldest first."""
        radar = _load_radar(resolved_path)
        return _format_history_block(list(radar.history))

    return mcp


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------

def main() -> None:
    """Run the emotion-radar MCP server (stdio transport by default)."""
    parser = argparse.ArgumentParser(
        description="Emotion Radar MCP Server — expose emotion scoring over MCP."
    )
    parser.add_argument(
        "--workspace",
        default=None,
        help=(
            "Path to the radar workspace directory. "
            "Defaults to $EMOTION_RADAR_PATH or ./emotion_radar_store"
        ),
    )
    parser.add_argument(
        "--transport",
        choices=["stdio", "sse"],
        default="stdio",
        help="MCP transport (default: stdio).",
    )
    parser.add_argument("--host", default="127.0.0.1",
                        help="Host for SSE transport (default: 127.0.0.1).")
    parser.add_argument("--port", type=int, default=8765,
                        help="Port for SSE transport (default: 8765).")
    args = parser.parse_args()

    if not MCP_AVAILABLE:
        print(
            "ERROR: The 'mcp' package is not installed.\n"
            "Install it with: pip install mcp",
            file=sys.stderr,
        )
        sys.exit(1)

    server = create_server(workspace=args.workspace)

    if args.transport == "stdio":
        server.run(transport="stdio")
    else:
        server.settings.host = args.host
        server.settings.port = args.port
        server.run(transport="sse")


if __name__ == "__main__":
    main()
