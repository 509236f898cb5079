# biblioteca

A small library management system. It keeps books, users and loans in one
binary data file. Each kind of record has its own area of the file. The
records of each kind are chained as a linked list, with the newest record
first.

## Installation

```
pip install .
```

## Interactive use

```
biblioteca [arquivo]
```

The command opens the data file `arquivo`, or creates it if it does not exist.
If you give no file, it uses `biblioteca.dat` in the current directory. It
then shows this menu:

```
1. Cadastrar livro
2. Buscar livro por código
3. Listar todos os livros
4. Buscar livro por título
5. Calcular total de livros
6. Cadastrar usuário
7. Emprestar livro
8. Devolver livro
9. Listar livros emprestados
10. Carregar arquivo texto
11. Mostrar informações do arquivo (opção extra)
0. Sair
```

- Option 0 ends the session. The session also ends at the end of input.
- Any other number, or any text that is not a number, prints `Opção inválida!`.
- When an operation fails, for example on a duplicate code, an unknown book or
  no copies left, the menu prints the error message and shows the menu again.
- Loans made from the menu take today's date in the form `DD/MM/AAAA`.
- A return sets today's date on the most recent open loan of that book to that
  user.

## Batch files

Option 10 loads a UTF-8 text file with one record per line. Fields are
separated by `;`:

```
L;1;Dom Casmurro;Machado de Assis;Garnier;1;1899;3
U;10;Maria Silva
E;10;1;01/03/2024;
E;10;1;05/02/2024;12/02/2024
```

- `L;code;title;author;publisher;edition;year;copies` registers a book.
- `U;code;name` registers a user.
- `E;user;book;loan_date;return_date` records a loan and takes one copy of the
  book. Leave the return date empty for a loan that is still open. If the loan
  date is empty, today's date is used.

How the loader treats each line:

- Empty lines are skipped.
- Lines that start with anything other than `L;`, `U;` or `E;` are reported as
  `Linha inválida ignorada` and skipped.
- Lines that lack required fields are skipped without a message.
- Numeric fields are read leniently. Text that is not a number counts as 0.
- Duplicate codes are rejected with a message.
- A loan needs an existing user and a book with copies left.

At the end the loader prints a summary of books, users and loans. A loan line
with all its fields counts in the summary even when the loan itself was
refused.

## Use from Python

```python
from biblioteca.storage import LibraryFile, Book, User
from biblioteca.books import register_book, find_book_by_code
from biblioteca.users import register_user
from biblioteca.loans import lend_book, return_book, format_loan_list

with LibraryFile.open("biblioteca.dat") as db:
    register_book(db, Book(code=1, title="Dom Casmurro", author="Machado de Assis",
                           publisher="Garnier", edition=1, year=1899, copies=3))
    register_user(db, User(code=10, name="Maria Silva"))
    lend_book(db, 10, 1)
    print(find_book_by_code(db, 1).copies)   # 2
    return_book(db, 10, 1)
    print(format_loan_list(db))
```

Modules:

- `biblioteca.storage`: the file layout and its records.
  - `LibraryFile` opens the file and reads and writes records. Use `open`,
    `read_header`, `write_header`, `read_at`, `write_at` and `walk`. It also
    works as a context manager.
  - The record types are `Header`, `Book`, `User` and `Loan`.
  - `format_header` describes the header.
- `biblioteca.books`: `register_book`, `iter_books`, `find_book_by_code`,
  `find_book_by_title`, `book_totals`, `available_copies`, `adjust_copies`,
  `book_title`, `format_book`, `format_book_list` and `titles_equal`.
  - `find_book_by_title` ignores the case of ASCII letters only.
- `biblioteca.users`: `register_user`, `iter_users`, `user_exists`,
  `user_name` and `format_user_list`.
- `biblioteca.loans`: `lend_book`, `return_book`, `iter_loans`,
  `format_loan_list` and `today`.
  - `format_loan_list` lists every recorded loan, returned or not.
- `biblioteca.loader`: `load_text_file`, which returns a `LoadSummary`.
  - The module also has `process_book_line`, `process_user_line`,
    `process_loan_line` and `strip_field`.
- `biblioteca.cli`: `main` and `menu_text`.

Text fields are stored as UTF-8 in fields of fixed size. Longer values are cut
to fit: 150 bytes for a title, 200 for an author, 50 for a publisher or a user
name, and 10 for a date.

Failures raise exceptions derived from `biblioteca.storage.LibraryError`. These
are `DuplicateCodeError`, `NotFoundError` and `UnavailableError`.

## Limitations

- Records cannot be edited or deleted. The only exceptions are the copy count
  of a book and the return date of a loan.
- The user list (`format_user_list`) is available from Python only. The menu
  has no option for it.