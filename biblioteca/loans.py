"""Loans of books to users."""

from __future__ import annotations

import datetime
from dataclasses import replace
from typing import Iterator

from biblioteca.books import adjust_copies, book_title, find_book_by_code
from biblioteca.storage import (
    LibraryFile,
    Loan,
    NotFoundError,
    UnavailableError,
)
from biblioteca.users import user_exists, user_name

_RULE = "---------------------------------------------------------------------------------------------"
_MISSING_USER = "<Usuário não encontrado>"


def today() -> str:
    """Return the current local date as DD/MM/AAAA."""
    return datetime.date.today().strftime("%d/%m/%Y")


def lend_book(
    db: LibraryFile,
    user_code: int,
    book_code: int,
    loan_date: str = "",
    return_date: str = "",
) -> Loan:
    """Record a loan at the head of the loan list and take one copy of the book.

    An empty ``loan_date`` means today; an empty ``return_date`` leaves the loan active.
    """
    if not user_exists(db, user_code):
        raise NotFoundError(f"Erro: usuário {user_code} não encontrado.")
    try:
        book = find_book_by_code(db, book_code)
    except NotFoundError:
        raise NotFoundError(f"Erro: livro {book_code} não encontrado.") from None
    if book.copies <= 0:
        raise UnavailableError("Não há exemplares disponíveis.")

    header = db.read_header()
    loan = Loan(
        user_code,
        book_code,
        loan_date or today(),
        return_date,
        header.loan_head,
    )
    position = header.loan_top
    header.loan_top = db.write_at(position, loan)
    header.loan_head = position
    header.total_loans += 1
    db.write_header(header)

    adjust_copies(db, book_code, -1)
    return loan


def return_book(db: LibraryFile, user_code: int, book_code: int) -> Loan:
    """Mark the most recent active loan of the book to the user as returned today."""
    header = db.read_header()
    for position, loan in db.walk(header.loan_head, Loan):
        if loan.user_code == user_code and loan.book_code == book_code and loan.is_active():
            returned = replace(loan, return_date=today())
            db.write_at(position, returned)
            break
    else:
        raise NotFoundError("Erro: empréstimo não encontrado ou já devolvido.")

    adjust_copies(db, book_code, 1)
    return returned


def iter_loans(db: LibraryFile) -> Iterator[Loan]:
    """Yield loans, most recent first."""
    header = db.read_header()
    for _, loan in db.walk(header.loan_head, Loan):
        yield loan


def _name_or_placeholder(db: LibraryFile, code: int) -> str:
    try:
        return user_name(db, code)
    except NotFoundError:
        return _MISSING_USER


def _title_or_blank(db: LibraryFile, code: int) -> str:
    try:
        return book_title(db, code)
    except NotFoundError:
        return ""


def format_loan_list(db: LibraryFile) -> str:
    """Describe every recorded loan as a table."""
    lines = [
        "\n=== EMPRÉSTIMOS ATIVOS ===",
        f"{'Cód.U':<8} {'Usuário':<20} {'Cód.L':<8} {'Título':<30} "
        f"{'Empréstimo':<12} {'Devolvido':<12}",
        _RULE,
    ]
    loans = list(iter_loans(db))
    for loan in loans:
        name = _name_or_placeholder(db, loan.user_code)
        title = _title_or_blank(db, loan.book_code)
        lines.append(
            f"{loan.user_code:<8} {name:<20} {loan.book_code:<8} {title:<30} "
            f"{loan.loan_date:<12} {loan.return_date:<12}"
        )
    if not loans:
        lines.append("Nenhum empréstimo ativo.")
    lines.append(_RULE)
    return "\n".join(lines) + "\n"