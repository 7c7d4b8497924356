"""Hereditary stratigraphy: column encodings, MRCA bounds, juxtaposition, priors and reconstruction tries."""

__version__ = "0.1.0"

__all__ = [
    "column",
    "juxtaposition",
    "mrca",
    "postprocessors",
    "priors",
    "serialization",
    "trie",
]