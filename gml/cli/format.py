"""Output rendering for gml commands (JSON or text/table)."""

import json
from typing import Any, Dict, List, Optional, Set

import click
from rich import box
from rich.cells import cell_len
from rich.console import Console
from rich.table import Table

OUTPUT_FORMAT_TEXT = "text"
OUTPUT_FORMAT_JSON = "json"
OUTPUT_FORMATS = (OUTPUT_FORMAT_TEXT, OUTPUT_FORMAT_JSON)

# Table columns in display order: (field name, record key, max width)
TABLE_COLUMNS = [
    ("id", "id", None),
    ("threadid", "threadId", None),
    ("url", "url", None),
    ("from", "from", 30),
    ("to", "to", 30),
    ("subject", "subject", 40),
    ("date", "date", None),
    ("labels", "labels", None),
    ("snippet", "snippet", 50),
]


def truncate(text: str, max_len: int) -> str:
    """Shorten text to max_len characters, ending in '...' when cut."""
    if len(text) <= max_len:
        return text
    return text[:max_len - 3] + "..."


def _make_console(width: int) -> Console:
    # Markup off so subjects like "[PATCH]" render literally
    return Console(width=width, markup=False, highlight=False, emoji=False)


def render_message_list(
    messages: List[Dict[str, Any]],
    fields: Set[str],
    output_format: str = OUTPUT_FORMAT_TEXT,
    console: Optional[Console] = None,
):
    """
    Print a message listing as JSON or as a table followed by any bodies.

    Only from, to, subject and snippet are truncated. The console is made
    wide enough for every row so rich never crops ids, urls or labels.
    """
    if output_format == OUTPUT_FORMAT_JSON:
        click.echo(json.dumps(messages, indent=2, ensure_ascii=False))
        return

    columns = [column for column in TABLE_COLUMNS if column[0] in fields]
    headers = [name.upper() for name, _, _ in columns]
    rows = [_table_row(msg, columns) for msg in messages]

    table = Table(box=box.SIMPLE_HEAD, show_header=True, header_style="bold")
    for header in headers:
        table.add_column(header, no_wrap=True)
    for row in rows:
        table.add_row(*row)

    if console is None:
        console = _make_console(_table_width(headers, rows))
    console.print(table)

    if "body" in fields:
        for msg in messages:
            if msg.get("body"):
                click.echo(f"\n=== {msg.get('id', '')} ===\n{msg['body']}")


def _table_row(msg: Dict[str, Any], columns) -> List[str]:
    row = []
    for _, key, width in columns:
        value = msg.get(key, "")
        if key == "labels":
            value = ", ".join(value or [])
        if width:
            value = truncate(value, width)
        row.append(value)
    return row


def _table_width(headers: List[str], rows: List[List[str]]) -> int:
    """Width that fits every column: cell padding plus one divider per column."""
    width = 2
    for i, header in enumerate(headers):
        width += max([cell_len(header)] + [cell_len(row[i]) for row in rows]) + 3
    return width


def render_message_detail(detail: Dict[str, Any], output_format: str = OUTPUT_FORMAT_TEXT):
    """Print a single message as JSON or as labelled lines followed by the body."""
    if output_format == OUTPUT_FORMAT_JSON:
        click.echo(json.dumps(detail, indent=2, ensure_ascii=False))
        return

    click.echo(f"ID: {detail['id']}")
    click.echo(f"ThreadID: {detail['threadId']}")
    click.echo(f"URL: {detail['url']}")
    click.echo(f"From: {detail['from']}")
    click.echo(f"To: {detail['to']}")
    click.echo(f"Subject: {detail['subject']}")
    click.echo(f"Date: {detail['date']}")
    if detail.get('labels'):
        click.echo(f"Labels: {', '.join(detail['labels'])}")
    click.echo("---")
    click.echo(detail['body'])
