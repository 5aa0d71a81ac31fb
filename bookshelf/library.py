import logging
import threading
from typing import Dict, List, Optional

from bookshelf.book import Book
from bookshelf.id_generator import IdGenerator, RandomIdGenerator
from config import settings

logger = logging.getLogger(__name__)


class BookNotFoundError(LookupError):
    """Raised when an operation references an id that is not in the library."""

    def __init__(self, book_id: str) -> None:
        self.book_id = book_id
        super().__init__(f"Book with id '{book_id}' not found.")


class IdentifierExhaustedError(RuntimeError):
    pass


class Library:
    """Manages the collection of books held in memory.

    A single re-entrant lock guards the whole map: every operation holds it
    for its full duration, so callers never see a partially applied update.
    Books are copied on the way in and out; nothing outside the library holds
    a reference to a stored record.
    """

    def __init__(self, id_generator: Optional[IdGenerator] = None, max_id_attempts: Optional[int] = None) -> None:
        if id_generator is None:
            id_generator = RandomIdGenerator(settings.id_upper_bound)
        self.id_generator = id_generator
        if max_id_attempts is None:
            max_id_attempts = settings.max_id_attempts
        if max_id_attempts < 1:
            raise ValueError("max_id_attempts must be at least 1.")
        self.max_id_attempts = max_id_attempts
        self._books: Dict[str, Book] = {}
        self._lock = threading.RLock()

    # ------------------------- Core operations ------------------------- #
    def create(self, author: Optional[str] = None, title: Optional[str] = None) -> str:
        """Store a new book and return its freshly drawn id."""
        book = Book(author=author, title=title)
        with self._lock:
            book_id = self._draw_unique_id()
            self._books[book_id] = book
        logger.debug("Created book %s", book_id)
        return book_id

    def get(self, book_id: str) -> Book:
        with self._lock:
            book = self._books.get(book_id)
            if book is None:
                raise BookNotFoundError(book_id)
            return book.copy()

    def update(self, book_id: str, author: Optional[str] = None, title: Optional[str] = None) -> Book:
        """Overwrite the fields that are given; None leaves a field unchanged.

        An empty string is a value like any other and does overwrite.
        """
        with self._lock:
            book = self._books.get(book_id)
            if book is None:
                raise BookNotFoundError(book_id)
            if author is not None:
                book.author = author
            if title is not None:
                book.title = title
            updated = book.copy()
        logger.debug("Updated book %s", book_id)
        return updated

    def delete(self, book_id: str) -> Book:
        """Remove a book and return its last state."""
        with self._lock:
            book = self._books.pop(book_id, None)
        if book is None:
            raise BookNotFoundError(book_id)
        logger.debug("Deleted book %s", book_id)
        return book

    def list_ids(self) -> List[str]:
        """Ids of all stored books. Order is not guaranteed."""
        with self._lock:
            return list(self._books)

    def __len__(self) -> int:
        with self._lock:
            return len(self._books)

    def __contains__(self, book_id: object) -> bool:
        with self._lock:
            return book_id in self._books

    # ------------------------- Utilities ------------------------- #
    def _draw_unique_id(self) -> str:
        # Caller holds the lock
        for _ in range(self.max_id_attempts):
            book_id = self.id_generator.next()
            if book_id not in self._books:
                return book_id
            logger.debug("Id %s already taken, drawing again", book_id)
        raise IdentifierExhaustedError(
            f"No unused id after {self.max_id_attempts} attempts."
        )
