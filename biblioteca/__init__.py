"""Library management of books, users and loans backed by a single binary data file."""

__version__ = "1.0.0"
__all__ = ["storage", "users", "books", "loans", "loader", "cli"]