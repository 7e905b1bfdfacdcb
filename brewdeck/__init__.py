"""brewdeck: drive Homebrew, keep a local inventory, search the catalogs."""

__version__ = "0.1.0"
