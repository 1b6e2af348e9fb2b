"""Per-seller invoice number sequences with templated rendering and drift audit."""

__version__ = "0.1.0"
