import pytest

from biblioteca.books import (
    adjust_copies,
    available_copies,
    book_title,
    book_totals,
    find_book_by_code,
    find_book_by_title,
    format_book,
    format_book_list,
    iter_books,
    register_book,
    titles_equal,
)
from biblioteca.storage import (
    Book,
    DuplicateCodeError,
    LibraryFile,
    NO_POSITION,
    NotFoundError,
)


@pytest.fixture
def db(tmp_path):
    with LibraryFile.open(tmp_path / "biblioteca.dat") as handle:
        yield handle


def _book(code, title="Dom Casmurro", copies=3):
    return Book(code, title, "Machado de Assis", "Garnier", 1, 1899, copies)


def test_titles_equal_ignores_case():
    assert titles_equal("Dom Casmurro", "dom CASMURRO")
    assert not titles_equal("Dom Casmurro", "Dom Casmurr")
    assert not titles_equal("abc", "abd")


def test_register_first_book_has_no_next(db):
    stored = register_book(db, _book(1))
    assert stored.next_pos == NO_POSITION
    header = db.read_header()
    assert header.total_books == 1
    assert header.book_top == header.SIZE + Book.SIZE


def test_register_inserts_at_head(db):
    register_book(db, _book(1, "A"))
    register_book(db, _book(2, "B"))
    assert [b.code for b in iter_books(db)] == [2, 1]


def test_register_duplicate_code_rejected(db):
    register_book(db, _book(5))
    with pytest.raises(DuplicateCodeError):
        register_book(db, _book(5, "Outro"))
    assert db.read_header().total_books == 1


def test_find_by_code(db):
    register_book(db, _book(1, "A"))
    register_book(db, _book(2, "B"))
    found = find_book_by_code(db, 1)
    assert found.title == "A"
    assert found.author == "Machado de Assis"
    with pytest.raises(NotFoundError):
        find_book_by_code(db, 99)


def test_find_by_title_case_insensitive(db):
    register_book(db, _book(4, "Memorias Postumas"))
    assert find_book_by_title(db, "memorias postumas").code == 4
    with pytest.raises(NotFoundError):
        find_book_by_title(db, "Quincas Borba")


def test_book_totals(db):
    books = [_book(1, "A", 3), _book(2, "B", 4)]
    for book in books:
        register_book(db, book)
    assert book_totals(db) == (len(books), sum(b.copies for b in books))


def test_book_totals_empty(db):
    assert book_totals(db) == (0, 0)


def test_format_book_contains_fields():
    text = format_book(_book(7, "Iracema", 2))
    assert "Código: 7\n" in text
    assert "Título: Iracema\n" in text
    assert "Exemplares: 2\n" in text
    assert text.startswith("\n--- DADOS DO LIVRO ---\n")


def test_format_book_list_empty(db):
    assert format_book_list(db) == "Nenhum livro cadastrado.\n"


def test_format_book_list_lines(db):
    register_book(db, _book(1, "A", 3))
    text = format_book_list(db)
    assert "Código: 1 | Título: A | Autor: Machado de Assis | Exemplares: 3" in text


def test_adjust_copies_persists(db):
    register_book(db, _book(1, "A", 3))
    updated = adjust_copies(db, 1, -1)
    assert updated.copies == 2
    assert available_copies(db, 1) == 2
    adjust_copies(db, 1, 1)
    assert available_copies(db, 1) == 3


def test_adjust_copies_missing(db):
    with pytest.raises(NotFoundError):
        adjust_copies(db, 1, 1)


def test_available_copies_missing(db):
    with pytest.raises(NotFoundError):
        available_copies(db, 3)


def test_book_title(db):
    register_book(db, _book(9, "Senhora"))
    assert book_title(db, 9) == "Senhora"
    with pytest.raises(NotFoundError):
        book_title(db, 10)


def test_books_survive_reopen(tmp_path):
    path = tmp_path / "biblioteca.dat"
    with LibraryFile.open(path) as handle:
        register_book(handle, _book(1, "A"))
    with LibraryFile.open(path) as handle:
        assert find_book_by_code(handle, 1).title == "A"