import os
import json
from typing import List
from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich.markup import escape

# Environment variable to control CLI output mode
# Allowed values: 'plain' (default), 'json', 'rich'
OUTPUT_MODE_ENV = "BOOKSHELF_CLI_OUTPUT"

_console = Console()

def set_output_mode(mode: str) -> None:
    mode = (mode or "").lower().strip()
    if mode in {"plain", "json", "rich"}:
        os.environ[OUTPUT_MODE_ENV] = mode

def get_output_mode() -> str:
    return os.environ.get(OUTPUT_MODE_ENV, "plain").lower()

def print_id_list(ids: List[str]) -> None:
    """Print book ids according to the current output mode.
    - plain: one id per line, or 'No books in library.'
    - json: JSON array of ids
    - rich: Rich table
    """
    mode = get_output_mode()

    if not ids:
        print("No books in library.")
        return

    if mode == "json":
        print(json.dumps(ids))
    elif mode == "rich":
        table = Table(title="📚 Books", header_style="bold cyan")
        table.add_column("ID", style="magenta", no_wrap=True)
        for book_id in ids:
            table.add_row(book_id)
        _console.print(table)
    else:
        for book_id in ids:
            print(book_id)

def print_book(book_id: str, details: str) -> None:
    """Print a single book as returned by the server ('Title: ..., Author: ...').

    The server text is passed through as is: titles and authors may contain
    the separators themselves, so it cannot be split back into fields.
    """
    mode = get_output_mode()

    if mode == "json":
        print(json.dumps({"id": book_id, "details": details}, ensure_ascii=False))
    elif mode == "rich":
        _console.print(Panel.fit(escape(details), title=f"📖 {book_id}", border_style="blue"))
    else:
        print(details)
