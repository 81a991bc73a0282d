"""Main entry point when executing talentmatch as a package.

This allows running the package using python -m talentmatch.
"""

from talentmatch.main import cli_entry_point

if __name__ == "__main__":
    cli_entry_point()
