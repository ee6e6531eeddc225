"""imgbuilder package

Packs files into a single VER2 IMG archive: an 8-byte header, a directory
of 32-byte records, then each payload padded to 2048-byte sectors.

Prefer :mod:`imgbuilder.api` for programmatic builds and
:mod:`imgbuilder.cli` for the command line entry point.
"""

__version__ = "1.0.0"

__all__ = ["__version__"]
