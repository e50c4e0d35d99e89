"""Book metadata aggregation across Google Books, Open Library and Goodreads."""

__version__ = "0.1.0"
