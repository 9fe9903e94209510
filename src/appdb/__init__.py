"""
appdb

Top-level package for the shared application database handle.

Responsibilities:
- Expose package version metadata.
"""

__all__ = ["__version__"]

__version__ = "0.1.0"


# --- Module Notes -----------------------------------------------------------
# Importing this package never touches the network; connecting is an explicit,
# awaited step (`appdb.db.init_database`).
