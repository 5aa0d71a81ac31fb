import os
import subprocess
import sys
from typing import Optional

import httpx
import typer
from rich.console import Console

from bookshelf.ui_helpers import set_output_mode, print_id_list, print_book
from config import settings

APP_NAME = "Bookshelf CLI"

console = Console()

app = typer.Typer(help=APP_NAME)


def _client() -> httpx.Client:
    """HTTP client pointed at the running bookshelf server."""
    return httpx.Client(base_url=settings.api_base_url, timeout=settings.http_timeout)


def _request(method: str, path: str, params: Optional[dict] = None) -> httpx.Response:
    # Drop options the user did not give so the server leaves those fields alone
    params = {k: v for k, v in (params or {}).items() if v is not None}
    try:
        with _client() as client:
            return client.request(method, path, params=params)
    except httpx.RequestError as e:
        print(f"Could not reach server at {settings.api_base_url}: {e}")
        raise typer.Exit(code=2)


def _check_found(response: httpx.Response) -> None:
    if response.status_code == 404:
        print(response.text)
        raise typer.Exit(code=1)
    response.raise_for_status()


@app.callback()
def _global_options(
    output: Optional[str] = typer.Option(
        None,
        "--output",
        "-o",
        help="Output format: plain | json | rich (default: plain)",
    )
):
    """Global options for the CLI (e.g. output mode)."""
    if output:
        set_output_mode(output)


@app.command("add")
def cli_add(
    author: Optional[str] = typer.Option(None, "--author", "-a"),
    title: Optional[str] = typer.Option(None, "--title", "-t"),
):
    """Add a book and print its id."""
    response = _request("POST", "/books", {"author": author, "title": title})
    response.raise_for_status()
    print(response.text)


@app.command("get")
def cli_get(book_id: str):
    """Show the title and author of a book."""
    response = _request("GET", f"/books/{book_id}")
    _check_found(response)
    print_book(book_id, response.text)


@app.command("update")
def cli_update(
    book_id: str,
    author: Optional[str] = typer.Option(None, "--author", "-a"),
    title: Optional[str] = typer.Option(None, "--title", "-t"),
):
    """Change the author and/or title of a book."""
    if author is None and title is None:
        print("Nothing to update. Provide --author and/or --title.")
        raise typer.Exit(code=1)
    response = _request("PUT", f"/books/{book_id}", {"author": author, "title": title})
    _check_found(response)
    print(response.text)


@app.command("remove")
def cli_remove(book_id: str):
    """Delete a book by id."""
    response = _request("DELETE", f"/books/{book_id}")
    _check_found(response)
    print(response.text)


@app.command("list")
def cli_list():
    """List the ids of all books."""
    response = _request("GET", "/books")
    response.raise_for_status()
    print_id_list(response.text.split())


@app.command("serve")
def cli_serve(
    host: Optional[str] = typer.Option(None, "--host", help="Interface to bind (default from settings)"),
    port: Optional[int] = typer.Option(None, "--port", help="Port to bind (default from settings)"),
    timeout: int = typer.Option(0, "--timeout", help="Seconds to run before shutting down (0 = no timeout)"),
):
    """Start the HTTP server with uvicorn."""
    host = host or settings.api_host
    port = int(port or settings.api_port)
    print(f"Starting server on http://{host}:{port}/")
    args = [
        sys.executable,
        "-m", "uvicorn",
        "api:app",
        "--host", host,
        "--port", str(port),
    ]
    try:
        if timeout and timeout > 0:
            start_new_session = os.name != "nt"
            proc = subprocess.Popen(args, start_new_session=start_new_session)
            try:
                proc.wait(timeout=timeout)
            except subprocess.TimeoutExpired:
                # Time is up; try a clean shutdown first, then force it
                proc.terminate()
                try:
                    proc.wait(timeout=5)
                except subprocess.TimeoutExpired:
                    proc.kill()
                    proc.wait()
        else:
            subprocess.run(args)
    except FileNotFoundError:
        console.print("[bold red]Error:[/] `uvicorn` could not be started. Make sure it is installed.")
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
