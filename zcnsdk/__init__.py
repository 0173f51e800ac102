"""Client toolkit for chain configuration, network discovery, sharder and block queries, and remote storage helpers."""

__version__ = "0.1.0"