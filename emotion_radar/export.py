"""CSV export of normalized scores.

The CSV starts with a UTF-8 byte-order mark so spreadsheet applications
detect the encoding of the Japanese category labels.
"""

import csv
import io

from .categories import CATEGORIES, CATEGORY_LABELS

BOM = "\ufeff"
CSV_HEADER = ("Category", "Normalized(%)")


def scores_to_csv(result, labels: bool = True) -> str:
    """Render ``Category, Normalized(%)`` rows for an :class:`AnalysisResult`.

    Categories appear in canonical order; *labels* selects the Japanese
    display labels over the identifiers.
    """
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    for c in CATEGORIES:
        name = CATEGORY_LABELS[c] if labels else c
        writer.writerow((name, f"{result.normalized[c]:.1f}"))
    return BOM + buf.getvalue().rstrip("\n")


def write_csv(result, path: str, labels: bool = True) -> str:
    """Write :func:`scores_to_csv` output to *path*. Returns the path."""
    with open(path, "w", encoding="utf-8", newline="") as f:
        f.write(scores_to_csv(result, labels=labels))
    return path
