"""Binary data file holding books, users and loans as linked lists of records."""

from __future__ import annotations

import struct
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, ClassVar, Iterator, Protocol, TypeVar, Union

BOOK_AREA = 1_000_000
USER_AREA = 100_000
NO_POSITION = -1

_HEADER = struct.Struct("<9i")
_BOOK = struct.Struct("<i151s201s51sx4i")
_USER = struct.Struct("<i51sxi")
_LOAN = struct.Struct("<ii11s11s2xi")


class LibraryError(Exception):
    """Base error for the library data file."""


class DuplicateCodeError(LibraryError):
    """A record with the same code is already stored."""


class NotFoundError(LibraryError):
    """The requested record does not exist."""


class UnavailableError(LibraryError):
    """No copies of the book are available."""


def _clip(text: str, size: int) -> str:
    """Cut text so that it fits a NUL-terminated field of ``size`` bytes."""
    raw = text.encode("utf-8")[: size - 1]
    return raw.decode("utf-8", "ignore")


def _encode(text: str) -> bytes:
    return text.encode("utf-8")


def _decode(raw: bytes) -> str:
    return raw.split(b"\0", 1)[0].decode("utf-8", "replace")


def _check_size(data: bytes, size: int, kind: str) -> None:
    if len(data) != size:
        raise LibraryError(f"{kind}: expected {size} bytes, got {len(data)}")


@dataclass
class Header:
    """Heads and free positions of each record list, plus counters."""

    SIZE: ClassVar[int] = _HEADER.size

    book_head: int = NO_POSITION
    book_top: int = _HEADER.size
    user_head: int = NO_POSITION
    user_top: int = _HEADER.size + BOOK_AREA
    loan_head: int = NO_POSITION
    loan_top: int = _HEADER.size + BOOK_AREA + USER_AREA
    total_books: int = 0
    total_users: int = 0
    total_loans: int = 0

    def to_bytes(self) -> bytes:
        return _HEADER.pack(
            self.book_head,
            self.book_top,
            self.user_head,
            self.user_top,
            self.loan_head,
            self.loan_top,
            self.total_books,
            self.total_users,
            self.total_loans,
        )

    @classmethod
    def from_bytes(cls, data: bytes) -> "Header":
        _check_size(data, cls.SIZE, "header")
        return cls(*_HEADER.unpack(data))


@dataclass
class Book:
    """A book record."""

    SIZE: ClassVar[int] = _BOOK.size

    code: int
    title: str
    author: str
    publisher: str
    edition: int
    year: int
    copies: int
    next_pos: int = NO_POSITION

    def __post_init__(self) -> None:
        self.title = _clip(self.title, 151)
        self.author = _clip(self.author, 201)
        self.publisher = _clip(self.publisher, 51)

    def to_bytes(self) -> bytes:
        return _BOOK.pack(
            self.code,
            _encode(self.title),
            _encode(self.author),
            _encode(self.publisher),
            self.edition,
            self.year,
            self.copies,
            self.next_pos,
        )

    @classmethod
    def from_bytes(cls, data: bytes) -> "Book":
        _check_size(data, cls.SIZE, "book")
        code, title, author, publisher, edition, year, copies, next_pos = _BOOK.unpack(data)
        return cls(
            code,
            _decode(title),
            _decode(author),
            _decode(publisher),
            edition,
            year,
            copies,
            next_pos,
        )


@dataclass
class User:
    """A user record."""

    SIZE: ClassVar[int] = _USER.size

    code: int
    name: str
    next_pos: int = NO_POSITION

    def __post_init__(self) -> None:
        self.name = _clip(self.name, 51)

    def to_bytes(self) -> bytes:
        return _USER.pack(self.code, _encode(self.name), self.next_pos)

    @classmethod
    def from_bytes(cls, data: bytes) -> "User":
        _check_size(data, cls.SIZE, "user")
        code, name, next_pos = _USER.unpack(data)
        return cls(code, _decode(name), next_pos)


@dataclass
class Loan:
    """A loan record; an empty return date means the loan is still active."""

    SIZE: ClassVar[int] = _LOAN.size

    user_code: int
    book_code: int
    loan_date: str
    return_date: str = ""
    next_pos: int = NO_POSITION

    def __post_init__(self) -> None:
        self.loan_date = _clip(self.loan_date, 11)
        self.return_date = _clip(self.return_date, 11)

    def to_bytes(self) -> bytes:
        return _LOAN.pack(
            self.user_code,
            self.book_code,
            _encode(self.loan_date),
            _encode(self.return_date),
            self.next_pos,
        )

    @classmethod
    def from_bytes(cls, data: bytes) -> "Loan":
        _check_size(data, cls.SIZE, "loan")
        user_code, book_code, loan_date, return_date, next_pos = _LOAN.unpack(data)
        return cls(user_code, book_code, _decode(loan_date), _decode(return_date), next_pos)

    def is_active(self) -> bool:
        return self.return_date == ""


Record = Union[Book, User, Loan]


class _RecordType(Protocol):
    SIZE: ClassVar[int]
    next_pos: int

    def to_bytes(self) -> bytes: ...


R = TypeVar("R", Book, User, Loan)


class LibraryFile:
    """An open library data file."""

    def __init__(self, handle: BinaryIO, path: Union[str, Path, None] = None) -> None:
        self._file = handle
        self.path = path

    @classmethod
    def open(cls, path: Union[str, Path]) -> "LibraryFile":
        """Open the data file, creating it with a fresh header if missing."""
        target = Path(path)
        try:
            handle = target.open("r+b")
        except FileNotFoundError:
            try:
                handle = target.open("w+b")
            except OSError as exc:
                raise LibraryError(f"Erro ao criar/abrir arquivo: {exc}") from exc
            handle.write(Header().to_bytes())
            handle.flush()
        except OSError as exc:
            raise LibraryError(f"Erro ao criar/abrir arquivo: {exc}") from exc
        return cls(handle, target)

    def read_header(self) -> Header:
        self._file.seek(0)
        return Header.from_bytes(self._file.read(Header.SIZE))

    def write_header(self, header: Header) -> None:
        self._file.seek(0)
        self._file.write(header.to_bytes())
        self._file.flush()

    def read_at(self, position: int, record_type: type[R]) -> R:
        if position < 0:
            raise LibraryError(f"Erro de leitura: posição inválida {position}")
        self._file.seek(position)
        data = self._file.read(record_type.SIZE)
        if len(data) != record_type.SIZE:
            raise LibraryError(f"Erro de leitura na posição {position}")
        return record_type.from_bytes(data)

    def write_at(self, position: int, record: Record) -> int:
        """Write a record at ``position`` and return the position just after it."""
        if position < 0:
            raise LibraryError(f"Erro de escrita: posição inválida {position}")
        data = record.to_bytes()
        self._file.seek(position)
        self._file.write(data)
        self._file.flush()
        return position + len(data)

    def walk(self, head: int, record_type: type[R]) -> Iterator[tuple[int, R]]:
        """Yield ``(position, record)`` pairs following the list from ``head``."""
        position = head
        while position != NO_POSITION:
            record = self.read_at(position, record_type)
            yield position, record
            position = record.next_pos

    def close(self) -> None:
        self._file.close()

    def __enter__(self) -> "LibraryFile":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


def format_header(header: Header) -> str:
    """Describe the header's positions and counters."""
    return (
        "\n=== INFORMAÇÕES DO ARQUIVO ===\n"
        f"Total de livros: {header.total_books}\n"
        f"Total de usuários: {header.total_users}\n"
        f"Total de empréstimos: {header.total_loans}\n"
        f"Primeira posição de livros: {header.book_head}\n"
        f"Próxima posição livre (livros): {header.book_top}\n"
        f"Primeira posição de usuários: {header.user_head}\n"
        f"Próxima posição livre (usuários): {header.user_top}\n"
        f"Primeira posição de empréstimos: {header.loan_head}\n"
        f"Próxima posição livre (emprestimos): {header.loan_top}\n"
        "==============================\n\n"
    )