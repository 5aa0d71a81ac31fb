import threading

import pytest

from bookshelf.book import Book
from bookshelf.id_generator import RandomIdGenerator
from bookshelf.library import Library, BookNotFoundError, IdentifierExhaustedError


class FixedIdGenerator:
    """Hands out the given ids in order, repeating the last one forever."""

    def __init__(self, *ids):
        self.ids = list(ids)

    def next(self):
        if len(self.ids) > 1:
            return self.ids.pop(0)
        return self.ids[0]


def test_create_and_get(lib):
    assert lib.list_ids() == []

    book_id = lib.create(author="James Joyce", title="Ulysses")

    assert book_id == "1"
    book = lib.get(book_id)
    assert book.author == "James Joyce"
    assert book.title == "Ulysses"


def test_create_with_absent_fields_stores_empty_text(lib):
    book_id = lib.create()
    assert lib.get(book_id) == Book(author="", title="")


def test_create_returns_distinct_ids(lib):
    ids = [lib.create(author="A", title=str(i)) for i in range(50)]
    assert len(set(ids)) == 50


def test_create_with_random_ids():
    lib = Library()
    ids = [lib.create(title=str(i)) for i in range(100)]
    assert len(set(ids)) == 100
    assert set(lib.list_ids()) == set(ids)


def test_create_redraws_on_collision():
    lib = Library(id_generator=FixedIdGenerator("7", "7", "7", "8"))
    first = lib.create(title="First")
    second = lib.create(title="Second")

    assert first == "7"
    assert second == "8"
    assert lib.get("7").title == "First"


def test_create_gives_up_when_generator_keeps_colliding():
    lib = Library(id_generator=FixedIdGenerator("1"), max_id_attempts=5)
    lib.create(title="Only")

    with pytest.raises(IdentifierExhaustedError):
        lib.create(title="Never stored")
    assert lib.list_ids() == ["1"]


def test_explicit_attempt_cap_is_kept():
    lib = Library(max_id_attempts=1)
    assert lib.max_id_attempts == 1


@pytest.mark.parametrize("attempts", [0, -3])
def test_attempt_cap_below_one_is_rejected(attempts):
    with pytest.raises(ValueError):
        Library(max_id_attempts=attempts)


def test_book_str_matches_server_format():
    assert str(Book(author="Orwell", title="1984")) == "Title: 1984, Author: Orwell"
    assert str(Book()) == "Title: , Author: "


def test_get_missing_raises(lib):
    with pytest.raises(BookNotFoundError) as exc_info:
        lib.get("nonexistent")
    assert exc_info.value.book_id == "nonexistent"
    assert isinstance(exc_info.value, LookupError)


def test_get_returns_copy(lib):
    book_id = lib.create(author="Orwell", title="1984")
    book = lib.get(book_id)
    book.title = "Changed outside"

    assert lib.get(book_id).title == "1984"


def test_update_book_partial(lib):
    book_id = lib.create(author="Original Author", title="Original Title")

    updated = lib.update(book_id, author="Only Author Changed")
    assert updated.author == "Only Author Changed"
    assert updated.title == "Original Title"

    lib.update(book_id, title="Only Title Changed")
    book = lib.get(book_id)
    assert book.author == "Only Author Changed"
    assert book.title == "Only Title Changed"


def test_update_with_empty_string_overwrites(lib):
    book_id = lib.create(author="Someone", title="Something")
    lib.update(book_id, author="")
    assert lib.get(book_id) == Book(author="", title="Something")


def test_update_without_fields_changes_nothing(lib):
    book_id = lib.create(author="A", title="T")
    assert lib.update(book_id) == Book(author="A", title="T")


def test_update_book_not_found(lib):
    with pytest.raises(BookNotFoundError):
        lib.update("nonexistent", title="New Title")
    assert lib.list_ids() == []


def test_delete(lib):
    book_id = lib.create(author="Author", title="Test")

    removed = lib.delete(book_id)

    assert removed == Book(author="Author", title="Test")
    with pytest.raises(BookNotFoundError):
        lib.get(book_id)
    with pytest.raises(BookNotFoundError):
        lib.delete(book_id)


def test_list_ids_after_delete(lib):
    x = lib.create(title="x")
    y = lib.create(title="y")
    z = lib.create(title="z")

    lib.delete(y)

    assert set(lib.list_ids()) == {x, z}
    assert len(lib) == 2
    assert x in lib
    assert y not in lib


def test_separate_libraries_do_not_share_state():
    first = Library()
    second = Library()
    book_id = first.create(title="Only here")

    assert book_id in first
    assert second.list_ids() == []


def test_orwell_lifecycle(lib):
    book_id = lib.create(author="Orwell", title="1984")
    assert lib.get(book_id) == Book(author="Orwell", title="1984")

    lib.update(book_id, title="Nineteen Eighty-Four")
    assert lib.get(book_id) == Book(author="Orwell", title="Nineteen Eighty-Four")

    lib.delete(book_id)
    with pytest.raises(BookNotFoundError):
        lib.get(book_id)


def test_concurrent_creates_produce_distinct_ids():
    # A narrow random range forces collisions that the library must redraw
    lib = Library(id_generator=RandomIdGenerator(upper_bound=1000), max_id_attempts=10_000)
    workers = 8
    per_worker = 50
    results = []
    lock = threading.Lock()
    barrier = threading.Barrier(workers)

    def worker(n):
        barrier.wait()
        local = [lib.create(author=f"worker-{n}", title=str(i)) for i in range(per_worker)]
        with lock:
            results.extend(local)

    threads = [threading.Thread(target=worker, args=(n,)) for n in range(workers)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(results) == workers * per_worker
    assert len(set(results)) == workers * per_worker
    assert set(lib.list_ids()) == set(results)


def test_reads_never_see_half_applied_update(lib):
    book_id = lib.create(author="a0", title="t0")
    stop = threading.Event()
    torn = []

    def writer():
        for i in range(1, 2000):
            lib.update(book_id, author=f"a{i}", title=f"t{i}")
        stop.set()

    def reader():
        while not stop.is_set():
            book = lib.get(book_id)
            if book.author[1:] != book.title[1:]:
                torn.append(book)

    threads = [threading.Thread(target=writer)] + [threading.Thread(target=reader) for _ in range(3)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert torn == []
    assert lib.get(book_id) == Book(author="a1999", title="t1999")
