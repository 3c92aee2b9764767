"""Reporting formats for batch results and the action listing.

``text`` is one line per record plus a summary, ``json`` is a list of
records (syntax-colored with Pygments on a color terminal), and ``table``
is aligned plain-text columns. The format only affects presentation.
"""

from __future__ import annotations

import json
from collections.abc import Sequence

from .actions.registry import ActionRegistry
from .batch import BatchReport
from .menu.sections import DEFAULT_SECTIONS, SectionTable

TEXT = "text"
JSON = "json"
TABLE = "table"
FORMATS = (TEXT, JSON, TABLE)

Record = dict[str, object]

_RESULT_COLUMNS = ("token", "id", "label", "success", "error", "duration")
_LISTING_COLUMNS = ("id", "label", "handler", "section")


def highlight_json(text: str, style: str = "monokai") -> str:
    """Colorize JSON for a terminal using Pygments."""
    from pygments import highlight
    from pygments.formatters import Terminal256Formatter
    from pygments.lexers import JsonLexer
    from pygments.util import ClassNotFound

    try:
        formatter = Terminal256Formatter(style=style)
    except ClassNotFound:
        formatter = Terminal256Formatter()
    return highlight(text, JsonLexer(), formatter)


def _cell(value: object) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "yes" if value else "no"
    if isinstance(value, float):
        return f"{value:.2f}"
    return " ".join(str(value).split())


def format_table(records: Sequence[Record], columns: Sequence[str]) -> str:
    """Render ``records`` as left-aligned columns with a header rule."""
    header = [column.upper() for column in columns]
    rows = [[_cell(record.get(column)) for column in columns] for record in records]
    widths = [len(title) for title in header]
    for row in rows:
        for idx, cell in enumerate(row):
            widths[idx] = max(widths[idx], len(cell))
    lines = [
        "  ".join(title.ljust(widths[idx]) for idx, title in enumerate(header)).rstrip(),
        "  ".join("-" * width for width in widths),
    ]
    for row in rows:
        lines.append("  ".join(cell.ljust(widths[idx]) for idx, cell in enumerate(row)).rstrip())
    return "\n".join(lines) + "\n"


def format_json(records: Sequence[Record], color: bool = False) -> str:
    text = json.dumps(list(records), indent=2) + "\n"
    return highlight_json(text) if color else text


def summary_line(report: BatchReport) -> str:
    total = len(report.results)
    failed = len(report.failed)
    line = f"{total - failed}/{total} succeeded"
    if failed:
        line += f", {failed} failed"
    if report.terminated:
        line += " (stopped at terminate token)"
    return line


def format_text_report(report: BatchReport) -> str:
    lines: list[str] = []
    for result in report.results:
        status = "[OK]  " if result.success else "[FAIL]"
        name = f"{result.action_id} {result.label}" if result.action_id else result.token
        lines.append(f"{status} {name}")
        for out_line in result.output.splitlines():
            lines.append(f"       {out_line}")
        if result.error:
            lines.append(f"       error: {result.error}")
    lines.append(summary_line(report))
    return "\n".join(lines) + "\n"


def format_report(report: BatchReport, fmt: str, color: bool = False) -> str:
    records = [result.to_record() for result in report.results]
    if fmt == JSON:
        return format_json(records, color=color)
    if fmt == TABLE:
        return format_table(records, _RESULT_COLUMNS) + summary_line(report) + "\n"
    return format_text_report(report)


def listing_records(registry: ActionRegistry, sections: SectionTable = DEFAULT_SECTIONS) -> list[Record]:
    """Return catalog records in menu order (section order, then declaration)."""
    records: list[Record] = []
    for title in sections.order:
        for action in registry:
            if sections.classify(action.id) == title:
                records.append(
                    {"id": action.id, "label": action.label, "handler": action.handler_key, "section": title}
                )
    return records


def format_listing(
    registry: ActionRegistry,
    fmt: str,
    color: bool = False,
    sections: SectionTable = DEFAULT_SECTIONS,
) -> str:
    records = listing_records(registry, sections)
    if fmt == JSON:
        return format_json(records, color=color)
    if fmt == TABLE:
        return format_table(records, _LISTING_COLUMNS)
    lines: list[str] = []
    current: object = None
    for record in records:
        if record["section"] != current:
            current = record["section"]
            if lines:
                lines.append("")
            lines.append(f"{current}")
        lines.append(f"  {record['id']!s:<4} {record['label']}")
    return "\n".join(lines) + "\n"
