"""Bulk loading of books, users and loans from a semicolon-separated text file."""

from __future__ import annotations

import re
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import TextIO, Union

from biblioteca.books import register_book
from biblioteca.loans import lend_book
from biblioteca.storage import Book, LibraryError, LibraryFile, Loan, User
from biblioteca.users import register_user

_LEADING = " \t"
_TRAILING = " \t\n\r"
_INTEGER = re.compile(r"\s*([+-]?\d+)")


class _MalformedLine(LibraryError):
    """A line lacks one of its required fields."""


@dataclass
class LoadSummary:
    """How many records of each kind a load stored."""

    books: int = 0
    users: int = 0
    loans: int = 0


def strip_field(text: str) -> str:
    """Drop leading blanks and tabs, and trailing blanks, tabs and line ends."""
    return text.lstrip(_LEADING).rstrip(_TRAILING)


def _to_int(text: str) -> int:
    """Read a leading integer the lenient way: anything unreadable counts as 0."""
    match = _INTEGER.match(text)
    return int(match.group(1)) if match else 0


def _fields(line: str, required: int, kind: str) -> list[str]:
    # Empty fields between separators are skipped, and the record tag is dropped.
    tokens = [token for token in line.split(";") if token][1:]
    if len(tokens) < required:
        raise _MalformedLine(f"Linha de {kind} incompleta: {line}")
    return [strip_field(token) for token in tokens]


def process_book_line(db: LibraryFile, line: str) -> Book:
    """Register the book described by an ``L;`` line."""
    code, title, author, publisher, edition, year, copies = _fields(line, 7, "livro")[:7]
    book = Book(
        _to_int(code),
        title,
        author,
        publisher,
        _to_int(edition),
        _to_int(year),
        _to_int(copies),
    )
    return register_book(db, book)


def process_user_line(db: LibraryFile, line: str) -> User:
    """Register the user described by a ``U;`` line."""
    code, name = _fields(line, 2, "usuário")[:2]
    return register_user(db, User(_to_int(code), name))


def process_loan_line(db: LibraryFile, line: str) -> Loan:
    """Record the loan described by an ``E;`` line; a missing return date keeps it active."""
    fields = _fields(line, 3, "empréstimo")
    user_code, book_code, loan_date = fields[:3]
    return_date = fields[3] if len(fields) > 3 else ""
    return lend_book(db, _to_int(user_code), _to_int(book_code), loan_date, return_date)


def load_text_file(
    db: LibraryFile, path: Union[str, Path], out: TextIO | None = None
) -> LoadSummary:
    """Load every record line of a text file into the data file and report on ``out``."""
    out = sys.stdout if out is None else out
    try:
        handle = open(path, "r", encoding="utf-8", errors="replace", newline="")
    except OSError as exc:
        raise LibraryError(f"Erro ao abrir arquivo: {path}") from exc

    summary = LoadSummary()
    print(f"Carregando dados do arquivo {path}...", file=out)
    with handle:
        for raw in handle:
            line = raw.split("\n", 1)[0]
            if not line:
                continue
            tag = line[:2]
            if tag == "L;":
                try:
                    process_book_line(db, line)
                except _MalformedLine:
                    continue
                except LibraryError as exc:
                    print(exc, file=out)
                    continue
                print("Livro cadastrado com sucesso!", file=out)
                summary.books += 1
            elif tag == "U;":
                try:
                    process_user_line(db, line)
                except _MalformedLine:
                    continue
                except LibraryError as exc:
                    print(exc, file=out)
                    continue
                print("Usuário cadastrado com sucesso!", file=out)
                summary.users += 1
            elif tag == "E;":
                try:
                    loan = process_loan_line(db, line)
                except _MalformedLine:
                    continue
                except LibraryError as exc:
                    # A well-formed loan line counts even when the loan is refused.
                    print(exc, file=out)
                else:
                    print(f"Empréstimo realizado em {loan.loan_date}.", file=out)
                summary.loans += 1
            else:
                print(f"Linha inválida ignorada: {line}", file=out)

    print("\n=== RESUMO DO CARREGAMENTO ===", file=out)
    print(
        f"Livros: {summary.books} | Usuários: {summary.users} | "
        f"Empréstimos: {summary.loans}",
        file=out,
    )
    print("==============================\n", file=out)
    return summary