import pytest

from biblioteca.storage import (
    BOOK_AREA,
    USER_AREA,
    Book,
    Header,
    LibraryError,
    LibraryFile,
    Loan,
    User,
    format_header,
)


@pytest.fixture
def db(tmp_path):
    with LibraryFile.open(tmp_path / "biblioteca.dat") as handle:
        yield handle


def test_record_sizes_match_layout():
    assert len(Book(1, "t", "a", "e", 1, 2000, 3).to_bytes()) == Book.SIZE == 424
    assert len(User(1, "Ana").to_bytes()) == User.SIZE == 60
    assert len(Loan(1, 2, "01/01/2024").to_bytes()) == Loan.SIZE == 36


def test_new_file_header_layout(db):
    header = db.read_header()
    assert header.book_head == -1
    assert header.user_head == -1
    assert header.loan_head == -1
    assert header.book_top == Header.SIZE
    assert header.user_top - header.book_top == BOOK_AREA
    assert header.loan_top - header.user_top == USER_AREA
    assert (header.total_books, header.total_users, header.total_loans) == (0, 0, 0)


def test_header_round_trip():
    header = Header(5, 6, 7, 8, 9, 10, 1, 2, 3)
    assert Header.from_bytes(header.to_bytes()) == header


def test_header_short_data_raises():
    with pytest.raises(LibraryError):
        Header.from_bytes(b"\x00" * 4)


def test_book_round_trip():
    book = Book(7, "Dom Casmurro", "Machado de Assis", "Garnier", 2, 1899, 4, 123)
    assert Book.from_bytes(book.to_bytes()) == book


def test_book_title_truncated():
    book = Book(1, "x" * 200, "a", "e", 1, 2000, 1)
    assert len(book.title) == 150
    assert Book.from_bytes(book.to_bytes()).title == "x" * 150


def test_user_round_trip_and_truncation():
    user = User(3, "n" * 80, 44)
    restored = User.from_bytes(user.to_bytes())
    assert restored == user
    assert len(restored.name) == 50


def test_utf8_name_round_trip():
    user = User(3, "José da Conceição")
    assert User.from_bytes(user.to_bytes()).name == "José da Conceição"


def test_loan_round_trip_and_active():
    loan = Loan(1, 2, "01/02/2024", "")
    restored = Loan.from_bytes(loan.to_bytes())
    assert restored == loan
    assert restored.is_active()
    returned = Loan(1, 2, "01/02/2024", "05/02/2024")
    assert not Loan.from_bytes(returned.to_bytes()).is_active()


def test_header_persists_after_reopen(tmp_path):
    path = tmp_path / "data.dat"
    with LibraryFile.open(path) as db:
        header = db.read_header()
        header.total_books = 9
        db.write_header(header)
    with LibraryFile.open(path) as db:
        assert db.read_header() == header


def test_write_and_read_at(db):
    header = db.read_header()
    user = User(1, "Ana")
    end = db.write_at(header.user_top, user)
    assert end == header.user_top + User.SIZE
    assert db.read_at(header.user_top, User) == user


def test_walk_follows_links(db):
    header = db.read_header()
    first = header.user_top
    second = first + User.SIZE
    db.write_at(first, User(1, "Ana", -1))
    db.write_at(second, User(2, "Bia", first))
    walked = list(db.walk(second, User))
    assert walked == [(second, User(2, "Bia", first)), (first, User(1, "Ana", -1))]


def test_walk_empty_list(db):
    assert list(db.walk(-1, Book)) == []


def test_read_beyond_end_raises(db):
    with pytest.raises(LibraryError):
        db.read_at(db.read_header().book_top, Book)


def test_format_header_lists_counters(db):
    text = format_header(db.read_header())
    assert "Total de livros: 0" in text
    assert "Primeira posição de livros: -1" in text
    assert text.startswith("\n=== INFORMAÇÕES DO ARQUIVO ===\n")