"""Book records stored in the library data file."""

from __future__ import annotations

from dataclasses import replace
from typing import Iterator

from biblioteca.storage import (
    Book,
    DuplicateCodeError,
    LibraryFile,
    NotFoundError,
)

_ASCII_LOWER = str.maketrans(
    "ABCDEFGHIJKLMNOPQRSTUVWXYZ", "abcdefghijklmnopqrstuvwxyz"
)


def titles_equal(a: str, b: str) -> bool:
    """Compare two titles ignoring the case of ASCII letters."""
    return a.translate(_ASCII_LOWER) == b.translate(_ASCII_LOWER)


def register_book(db: LibraryFile, book: Book) -> Book:
    """Store a new book at the head of the book list and return the stored record."""
    header = db.read_header()
    for _, existing in db.walk(header.book_head, Book):
        if existing.code == book.code:
            raise DuplicateCodeError(f"Erro: Livro com código {book.code} já existe.")

    stored = replace(book, next_pos=header.book_head)
    position = header.book_top
    header.book_top = db.write_at(position, stored)
    header.book_head = position
    header.total_books += 1
    db.write_header(header)
    return stored


def iter_books(db: LibraryFile) -> Iterator[Book]:
    """Yield books, most recently registered first."""
    header = db.read_header()
    for _, book in db.walk(header.book_head, Book):
        yield book


def find_book_by_code(db: LibraryFile, code: int) -> Book:
    """Return the book with ``code``."""
    for book in iter_books(db):
        if book.code == code:
            return book
    raise NotFoundError(f"Livro com código {code} não encontrado.")


def find_book_by_title(db: LibraryFile, title: str) -> Book:
    """Return the first book whose title matches ``title`` regardless of case."""
    for book in iter_books(db):
        if titles_equal(book.title, title):
            return book
    raise NotFoundError(f'Livro com título "{title}" não encontrado.')


def book_totals(db: LibraryFile) -> tuple[int, int]:
    """Return the number of registered books and the sum of their copies."""
    header = db.read_header()
    copies = sum(book.copies for _, book in db.walk(header.book_head, Book))
    return header.total_books, copies


def format_book(book: Book) -> str:
    """Describe every field of a book."""
    return (
        "\n--- DADOS DO LIVRO ---\n"
        f"Código: {book.code}\n"
        f"Título: {book.title}\n"
        f"Autor: {book.author}\n"
        f"Editora: {book.publisher}\n"
        f"Edição: {book.edition}\n"
        f"Ano: {book.year}\n"
        f"Exemplares: {book.copies}\n"
        "----------------------\n\n"
    )


def format_book_list(db: LibraryFile) -> str:
    """Describe every registered book in one line each."""
    header = db.read_header()
    if header.total_books == 0:
        return "Nenhum livro cadastrado.\n"
    lines = ["\n=== LISTA DE TODOS OS LIVROS ==="]
    lines.extend(
        f"Código: {book.code} | Título: {book.title} | "
        f"Autor: {book.author} | Exemplares: {book.copies}"
        for book in iter_books(db)
    )
    lines.append("===============================\n\n")
    return "\n".join(lines)


def available_copies(db: LibraryFile, code: int) -> int:
    """Return the number of copies available of the book with ``code``."""
    return find_book_by_code(db, code).copies


def adjust_copies(db: LibraryFile, code: int, delta: int) -> Book:
    """Add ``delta`` to the copies of the book with ``code`` and return it updated."""
    header = db.read_header()
    for position, book in db.walk(header.book_head, Book):
        if book.code == code:
            updated = replace(book, copies=book.copies + delta)
            db.write_at(position, updated)
            return updated
    raise NotFoundError(f"Livro com código {code} não encontrado.")


def book_title(db: LibraryFile, code: int) -> str:
    """Return the title of the book with ``code``."""
    return find_book_by_code(db, code).title