from __future__ import annotations


class Book:
    """Represents a single book record held by the library."""

    def __init__(self, author: str | None = None, title: str | None = None) -> None:
        # Absent fields are stored as empty text
        self.author = author if author is not None else ""
        self.title = title if title is not None else ""

    def __str__(self) -> str:
        return f"Title: {self.title}, Author: {self.author}"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Book):
            return NotImplemented
        return self.author == other.author and self.title == other.title

    def __repr__(self) -> str:
        return f"Book(author={self.author!r}, title={self.title!r})"

    def copy(self) -> "Book":
        return Book(author=self.author, title=self.title)
