"""Write paginated pages to JSON / JSONL for the renderer."""

import json
from pathlib import Path
from typing import Any, Dict, List, Sequence

from .paginator import Page
from .table_model import data_row_to_dict, grand_total_to_dict, header_row_to_dict


def page_to_dict(page: Page) -> Dict[str, Any]:
    """
    Convert a Page to the renderer's input shape.

    Keys use the extractor's camelCase so a page reads like a slice of the
    table it came from.
    """
    return {
        "pageNumber": page.page_number,
        "totalPages": page.total_pages,
        "headers": [header_row_to_dict(h) for h in page.headers],
        "rows": [data_row_to_dict(r) for r in page.rows],
        "grandTotal": grand_total_to_dict(page.grand_total),
        "metadata": dict(page.metadata),
    }


def pages_to_dicts(pages: Sequence[Page]) -> List[Dict[str, Any]]:
    return [page_to_dict(p) for p in pages]


def dumps_pages(pages: Sequence[Page], indent: int = 2) -> str:
    """Serialize pages deterministically (sorted keys, fixed separators)."""
    document = {
        "totalPages": len(pages),
        "pages": pages_to_dicts(pages),
    }
    return json.dumps(document, indent=indent, sort_keys=True, separators=(",", ": "),
                      ensure_ascii=False)


def write_pages_json(pages: Sequence[Page], path: Path) -> Path:
    """Write all pages as one JSON document."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        f.write(dumps_pages(pages) + "\n")
    return path


def write_pages_jsonl(pages: Sequence[Page], path: Path) -> Path:
    """Write one page per line."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        for page in pages:
            f.write(json.dumps(page_to_dict(page), sort_keys=True, ensure_ascii=False) + "\n")
    return path


def summarize_pages(pages: Sequence[Page], header_row_count: int) -> List[Dict[str, int]]:
    """Per-page composition: header rows + data rows + grand total."""
    summary = []
    for page in pages:
        grand_total_rows = 1 if page.grand_total is not None else 0
        summary.append({
            "page_number": page.page_number,
            "header_rows": header_row_count,
            "data_rows": len(page.rows),
            "grand_total_rows": grand_total_rows,
            "total_rows": header_row_count + len(page.rows) + grand_total_rows,
        })
    return summary


def format_summary(summary: Sequence[Dict[str, int]]) -> List[str]:
    """Human-readable lines for a page summary."""
    lines = []
    for entry in summary:
        line = (
            f"  Page {entry['page_number']}: {entry['header_rows']} headers"
            f" + {entry['data_rows']} data rows"
        )
        if entry["grand_total_rows"]:
            line += " + 1 grand total"
        line += f" = {entry['total_rows']} total rows"
        lines.append(line)
    return lines
