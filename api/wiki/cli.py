import json
import logging
import re
from typing import Any

from api.wiki.wikidata.sparql import clean_property_codes

PROPERTY_EXPRESSION_RE = re.compile(r"^(P\d+)\s*[=:]\s*(.+)$")
EMPTY = "—"
DESCRIPTION_WIDTH = 120


def configure_logging(verbosity: int) -> None:
    level = logging.INFO if verbosity > 1 else logging.WARNING
    logging.getLogger("api.wiki").setLevel(level)


def parse_props(raw: str | None) -> list[str]:
    """Split "P18,P279" (commas or whitespace) into distinct P-codes."""
    if not raw:
        return []
    return clean_property_codes(p for p in re.split(r"[,\s]+", raw) if p)


def parse_property_expression(expr: str | None) -> tuple[str, str] | None:
    """Parse ``P31=Q33506``, ``P31:Q33506`` or ``P18="File:Foo.jpg"``.

    Returns ``(property, value)`` or ``None`` if ``expr`` isn't one.
    """
    expr = (expr or "").strip()
    m = PROPERTY_EXPRESSION_RE.match(expr)
    if not m:
        return None
    value = m.group(2).strip()
    if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
        value = value[1:-1]
    return m.group(1), value


def truncate(text: str | None, width: int = DESCRIPTION_WIDTH) -> str:
    text = text or ""
    if len(text) > width:
        return text[: width - 3] + "…"
    return text


def display_value(value: Any) -> str:
    if isinstance(value, str):
        return value
    return json.dumps(value, ensure_ascii=False)


def display_values(values: list[Any]) -> str:
    return ", ".join(display_value(v) for v in values)


def to_json(payload: Any) -> str:
    return json.dumps(payload, indent=4, ensure_ascii=False)


def render_table(headers: list[str], rows: list[list[str]]) -> list[str]:
    widths = [len(h) for h in headers]
    for row in rows:
        for i, cell in enumerate(row):
            widths[i] = max(widths[i], len(cell))

    def line(cells: list[str]) -> str:
        return "  ".join(c.ljust(w) for c, w in zip(cells, widths)).rstrip()

    rule = "  ".join("-" * w for w in widths)
    return [line(headers), rule, *(line(r) for r in rows)]
