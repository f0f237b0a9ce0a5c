"""benchotron: compare candidate implementations across input sizes."""

__version__ = "0.1.0"
