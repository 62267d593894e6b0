"""
Emotion Radar — keyword-based emotion scoring with a retained history.

Scores free-form (mainly Japanese) text across five categories (affection,
longing, sadness, amae and desire) with a weighted lexicon and contextual
modifiers, and keeps a bounded, de-duplicated, pin-aware history of past
analyses. Standard library only, deterministic, transparent JSON storage.

Usage:
    from emotion_radar import EmotionRadar

    radar = EmotionRadar("./workspace")
    result = radar.analyze("ずっと会いたい")
    print(result.leaders)
    radar.commit("ずっと会いたい")
"""

__version__ = "1.0.1"

# Core
from emotion_radar.core import EmotionRadar
from emotion_radar.categories import CATEGORIES, CATEGORY_LABELS
from emotion_radar.lexicon import Lexeme, LexiconError, default_lexicon, parse_lexicon
from emotion_radar.scoring import AnalysisResult, EmotionAnalyzer, analyze
from emotion_radar.normalize import comment_band, normalize, select_leaders
from emotion_radar.hashing import hash_base36, hash_lexicon, seeded_pick, simple_hash
from emotion_radar.comments import comment_for

# History
from emotion_radar.history import (
    HistoryImportError,
    HistoryItem,
    HistoryStore,
    PinnedItemError,
    build_history_item,
)
from emotion_radar.commit import CommitController
from emotion_radar.stores import JsonStore, LexiconStore
from emotion_radar.export import scores_to_csv

# MCP Server (optional, requires the 'mcp' package)
try:
    from emotion_radar.mcp_server import create_server as create_mcp_server
    from emotion_radar.mcp_server import MCP_AVAILABLE
except ImportError:
    MCP_AVAILABLE = False

    def create_mcp_server(*args, **kwargs):  # type: ignore[misc]
        """Stub: install 'mcp' to use the MCP server. ``pip install mcp``"""
        raise ImportError(
            "The 'mcp' package is required. Install with: pip install mcp"
        )

__all__ = [
    "EmotionRadar",
    "CATEGORIES",
    "CATEGORY_LABELS",

    # Scoring
    "Lexeme",
    "LexiconError",
    "default_lexicon",
    "parse_lexicon",
    "AnalysisResult",
    "EmotionAnalyzer",
    "analyze",
    "normalize",
    "select_leaders",
    "comment_band",
    "comment_for",

    # Hashing
    "simple_hash",
    "hash_base36",
    "hash_lexicon",
    "seeded_pick",

    # History
    "HistoryItem",
    "HistoryStore",
    "HistoryImportError",
    "PinnedItemError",
    "build_history_item",
    "CommitController",
    "JsonStore",
    "LexiconStore",
    "scores_to_csv",

    # MCP
    "create_mcp_server",
    "MCP_AVAILABLE",
]
