"""Interactive menu for the library system."""

from __future__ import annotations

import argparse
import sys
from typing import Callable, Optional, TextIO

from biblioteca.books import (
    book_totals,
    find_book_by_code,
    find_book_by_title,
    format_book,
    format_book_list,
    register_book,
)
from biblioteca.loader import load_text_file
from biblioteca.loans import format_loan_list, lend_book, return_book
from biblioteca.storage import Book, LibraryError, LibraryFile, User, format_header
from biblioteca.users import register_user

DEFAULT_DATA_FILE = "biblioteca.dat"


def menu_text() -> str:
    """Return the main menu with its prompt."""
    return (
        "\n=== SISTEMA DE BIBLIOTECA ===\n"
        "1. Cadastrar livro\n"
        "2. Buscar livro por código\n"
        "3. Listar todos os livros\n"
        "4. Buscar livro por título\n"
        "5. Calcular total de livros\n"
        "6. Cadastrar usuário\n"
        "7. Emprestar livro\n"
        "8. Devolver livro\n"
        "9. Listar livros emprestados\n"
        "10. Carregar arquivo texto\n"
        "11. Mostrar informações do arquivo (opção extra)\n"
        "0. Sair\n"
        "Escolha uma opção: "
    )


class _BadNumber(Exception):
    """A number was expected and something else was typed."""


class _Input:
    """Character-level reader that mixes number and whole-line input."""

    def __init__(self, stream: TextIO) -> None:
        self._stream = stream
        self._pushed: list[str] = []

    def _getc(self) -> str:
        if self._pushed:
            return self._pushed.pop()
        return self._stream.read(1)

    def _ungetc(self, char: str) -> None:
        if char:
            self._pushed.append(char)

    def _skip_space(self) -> str:
        char = self._getc()
        while char and char.isspace():
            char = self._getc()
        if not char:
            raise EOFError
        return char

    def read_int(self) -> Optional[int]:
        """Read an integer after any whitespace; None if something else comes first."""
        char = self._skip_space()
        text = ""
        if char in "+-":
            text, char = char, self._getc()
        while char.isdigit():
            text += char
            char = self._getc()
        self._ungetc(char)
        if not text.lstrip("+-"):
            self._ungetc(text)
            return None
        return int(text)

    def read_number(self) -> int:
        value = self.read_int()
        if value is None:
            self.skip_word()
            raise _BadNumber
        return value

    def skip_word(self) -> None:
        char = self._skip_space()
        while char and not char.isspace():
            char = self._getc()
        self._ungetc(char)

    def getchar(self) -> str:
        return self._getc()

    def read_line(self) -> str:
        char = self._getc()
        if not char:
            raise EOFError
        chars: list[str] = []
        while char and char != "\n":
            chars.append(char)
            char = self._getc()
        return "".join(chars)


def _register_book(db: LibraryFile, inp: _Input) -> None:
    print("\n--- CADASTRAR LIVRO ---")
    print("Código: ", end="")
    code = inp.read_number()
    inp.getchar()
    print("Título: ", end="")
    title = inp.read_line()
    print("Autor: ", end="")
    author = inp.read_line()
    print("Editora: ", end="")
    publisher = inp.read_line()
    print("Edição: ", end="")
    edition = inp.read_number()
    print("Ano: ", end="")
    year = inp.read_number()
    print("Exemplares: ", end="")
    copies = inp.read_number()
    register_book(db, Book(code, title, author, publisher, edition, year, copies))
    print("Livro cadastrado com sucesso!")


def _find_by_code(db: LibraryFile, inp: _Input) -> None:
    print("\n--- BUSCAR LIVRO POR CÓDIGO ---")
    print("Digite o código do livro: ", end="")
    code = inp.read_number()
    print(format_book(find_book_by_code(db, code)), end="")


def _list_books(db: LibraryFile, inp: _Input) -> None:
    print(format_book_list(db), end="")


def _find_by_title(db: LibraryFile, inp: _Input) -> None:
    print("\n--- BUSCAR LIVRO POR TÍTULO ---")
    print("Digite o título do livro: ", end="")
    title = inp.read_line()
    print(format_book(find_book_by_title(db, title)), end="")


def _totals(db: LibraryFile, inp: _Input) -> None:
    print("\n--- TOTAL DE LIVROS CADASTRADOS ---")
    books, copies = book_totals(db)
    print(f"Total de livros cadastrados: {books}")
    print(f"Total de exemplares na biblioteca: {copies}")


def _register_user(db: LibraryFile, inp: _Input) -> None:
    print("\n--- CADASTRAR USUÁRIO ---")
    print("Código: ", end="")
    code = inp.read_number()
    inp.getchar()
    print("Nome: ", end="")
    name = inp.read_line()
    register_user(db, User(code, name))
    print("Usuário cadastrado com sucesso!")


def _lend(db: LibraryFile, inp: _Input) -> None:
    print("\n--- EMPRESTAR LIVRO ---")
    print("Código do usuário: ", end="")
    user_code = inp.read_number()
    print("Código do livro: ", end="")
    book_code = inp.read_number()
    loan = lend_book(db, user_code, book_code)
    print(f"Empréstimo realizado em {loan.loan_date}.")


def _return(db: LibraryFile, inp: _Input) -> None:
    print("\n--- DEVOLVER LIVRO ---")
    print("Código do usuário: ", end="")
    user_code = inp.read_number()
    print("Código do livro: ", end="")
    book_code = inp.read_number()
    loan = return_book(db, user_code, book_code)
    print(f"Devolução registrada em {loan.return_date}.")


def _list_loans(db: LibraryFile, inp: _Input) -> None:
    print(format_loan_list(db), end="")


def _load(db: LibraryFile, inp: _Input) -> None:
    print("\n--- CARREGAR ARQUIVO ---")
    print("Digite o nome do arquivo texto: ", end="")
    name = inp.read_line()
    load_text_file(db, name, sys.stdout)


def _show_header(db: LibraryFile, inp: _Input) -> None:
    print(format_header(db.read_header()), end="")


_ACTIONS: dict[int, Callable[[LibraryFile, _Input], None]] = {
    1: _register_book,
    2: _find_by_code,
    3: _list_books,
    4: _find_by_title,
    5: _totals,
    6: _register_user,
    7: _lend,
    8: _return,
    9: _list_loans,
    10: _load,
    11: _show_header,
}


def _run(db: LibraryFile, inp: _Input) -> None:
    while True:
        print(menu_text(), end="", flush=True)
        try:
            option = inp.read_int()
            if option is None:
                inp.skip_word()
                option = -1
        except EOFError:
            print()
            return
        inp.getchar()

        if option == 0:
            print("Saindo do sistema...")
            return
        action = _ACTIONS.get(option)
        if action is None:
            print("Opção inválida!")
            continue
        try:
            action(db, inp)
        except EOFError:
            print()
            return
        except _BadNumber:
            print("Entrada inválida!")
        except LibraryError as exc:
            print(exc)


def main(argv: Optional[list[str]] = None) -> int:
    """Run the interactive menu on the data file; return the exit status."""
    parser = argparse.ArgumentParser(prog="biblioteca", description="Sistema de biblioteca")
    parser.add_argument(
        "arquivo",
        nargs="?",
        default=DEFAULT_DATA_FILE,
        help="arquivo de dados (padrão: %(default)s)",
    )
    args = parser.parse_args(argv)
    try:
        db = LibraryFile.open(args.arquivo)
    except LibraryError as exc:
        print(exc, file=sys.stderr)
        print("Erro ao abrir arquivo da biblioteca!")
        return 1
    with db:
        _run(db, _Input(sys.stdin))
    return 0


if __name__ == "__main__":
    sys.exit(main())