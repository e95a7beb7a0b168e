"""zimmount: serve ZIM archives under per-archive URL prefixes."""

__version__ = "0.1.0"
