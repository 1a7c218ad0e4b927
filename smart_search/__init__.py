"""smart-search: field-aware filter chips compiled into an evaluable AST."""

__version__ = "0.1.0"
