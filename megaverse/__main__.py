"""Main entry point when executing megaverse as a package.

This allows running the package using python -m megaverse.
"""

from megaverse.main import cli_entry_point

if __name__ == "__main__":
    cli_entry_point()
