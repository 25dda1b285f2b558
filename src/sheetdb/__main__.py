"""Entry point for 'python -m sheetdb' command."""

from sheetdb.cli import main

if __name__ == "__main__":
    main()
