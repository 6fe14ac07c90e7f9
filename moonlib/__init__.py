"""Pieces of a small scripting-language runtime: instruction encoding, parser
descriptors, value helpers, and the math, os and package libraries."""

__version__ = "0.1.0"