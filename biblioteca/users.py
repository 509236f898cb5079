"""User records stored in the library data file."""

from __future__ import annotations

from dataclasses import replace
from typing import Iterator

from biblioteca.storage import (
    DuplicateCodeError,
    LibraryFile,
    NotFoundError,
    User,
)


def register_user(db: LibraryFile, user: User) -> User:
    """Store a new user at the head of the user list and return the stored record."""
    header = db.read_header()
    for _, existing in db.walk(header.user_head, User):
        if existing.code == user.code:
            raise DuplicateCodeError(f"Erro: Usuário com código {user.code} já existe.")

    stored = replace(user, next_pos=header.user_head)
    position = header.user_top
    header.user_top = db.write_at(position, stored)
    header.user_head = position
    header.total_users += 1
    db.write_header(header)
    return stored


def iter_users(db: LibraryFile) -> Iterator[User]:
    """Yield users, most recently registered first."""
    header = db.read_header()
    for _, user in db.walk(header.user_head, User):
        yield user


def user_exists(db: LibraryFile, code: int) -> bool:
    return any(user.code == code for user in iter_users(db))


def user_name(db: LibraryFile, code: int) -> str:
    """Return the name of the user with ``code``."""
    for user in iter_users(db):
        if user.code == code:
            return user.name
    raise NotFoundError(f"Usuário {code} não encontrado.")


def format_user_list(db: LibraryFile) -> str:
    """Describe every registered user."""
    header = db.read_header()
    if header.total_users == 0:
        return "Nenhum usuário cadastrado.\n"
    lines = ["\n=== LISTA DE USUÁRIOS ==="]
    lines.extend(f"Código: {user.code} | Nome: {user.name}" for user in iter_users(db))
    lines.append("========================\n\n")
    return "\n".join(lines)