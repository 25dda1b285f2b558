"""SheetDB - document database over header-row tables.

Stores collections of documents in spreadsheet-like tables whose first row
names the columns, and serves Mongo-style find/insert/update/delete over a
single JSON endpoint.
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
