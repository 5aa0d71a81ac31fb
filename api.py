import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import Depends, FastAPI, Query, Request
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel

from bookshelf.library import Library, BookNotFoundError
from config import settings

logging.basicConfig(level=settings.log_level.upper())
logger = logging.getLogger(__name__)

NOT_FOUND_MESSAGE = "Book not found"


# --- Models ---
class HealthModel(BaseModel):
    status: str
    timestamp: str
    total_books: int


# --- Dependencies ---
def get_library(request: Request) -> Library:
    """Library owned by the application serving this request."""
    return request.app.state.library


def create_app(library: Optional[Library] = None) -> FastAPI:
    """Build the HTTP adapter around a library instance.

    Each call gets its own library unless one is passed in, so tests can run
    several independent applications side by side.
    """
    app = FastAPI(title=settings.app_name, version=settings.app_version, debug=settings.debug)
    app.state.library = library if library is not None else Library()

    # --- Headers and request logging ---
    @app.middleware("http")
    async def add_default_headers(request: Request, call_next):
        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        logger.debug("%s %s -> %s", request.method, request.url.path, response.status_code)
        return response

    # --- Errors ---
    @app.exception_handler(BookNotFoundError)
    async def book_not_found_handler(request: Request, exc: BookNotFoundError):
        return PlainTextResponse(NOT_FOUND_MESSAGE, status_code=404)

    # --- Health check ---
    @app.get("/health", response_model=HealthModel)
    def health(library: Library = Depends(get_library)):
        """Lightweight health endpoint for container checks."""
        return HealthModel(
            status="healthy",
            timestamp=datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            total_books=len(library),
        )

    # --- Books ---
    # author and title are sent as query parameters, e.g. /books?author=Foo&title=Bar
    @app.post("/books", response_class=PlainTextResponse, status_code=201)
    def create_book(
        author: Optional[str] = Query(None),
        title: Optional[str] = Query(None),
        library: Library = Depends(get_library),
    ):
        """Create a book and return its id."""
        book_id = library.create(author=author, title=title)
        logger.info("Book %s created", book_id)
        return book_id

    @app.get("/books", response_class=PlainTextResponse)
    def list_books(library: Library = Depends(get_library)):
        """Ids of all books, separated by spaces."""
        return " ".join(library.list_ids())

    @app.get("/books/{book_id}", response_class=PlainTextResponse)
    def get_book(book_id: str, library: Library = Depends(get_library)):
        book = library.get(book_id)
        return str(book)

    @app.put("/books/{book_id}", response_class=PlainTextResponse)
    def update_book(
        book_id: str,
        author: Optional[str] = Query(None),
        title: Optional[str] = Query(None),
        library: Library = Depends(get_library),
    ):
        """Update author and/or title; omitted parameters stay unchanged."""
        library.update(book_id, author=author, title=title)
        logger.info("Book %s updated", book_id)
        return f"Book with id '{book_id}' updated"

    @app.delete("/books/{book_id}", response_class=PlainTextResponse)
    def delete_book(book_id: str, library: Library = Depends(get_library)):
        library.delete(book_id)
        logger.info("Book %s deleted", book_id)
        return f"Book with id '{book_id}' deleted"

    return app


app = create_app()
