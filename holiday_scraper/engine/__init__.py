"""Engine components: fetch the page, then extract holiday records."""

from .extractor import Extractor, Record, normalize_cell, normalize_markup
from .fetcher import ClientStats, Fetcher
from .markup import MarkupBackend, MarkupNode, SelectolaxBackend

__all__ = [
    "ClientStats",
    "Extractor",
    "Fetcher",
    "MarkupBackend",
    "MarkupNode",
    "Record",
    "SelectolaxBackend",
    "normalize_cell",
    "normalize_markup",
]
