"""
Book Ingestor - chapter segmentation for plain-text, markdown and EPUB books.

This package turns manuscripts into an ordered list of numbered chapters,
with volume grouping and word counts, ready to be stored by a reading
application.
"""

from .chapter import Chapter, assign_book, count_characters, count_words
from .dispatch import detect_format, extract_chapters, get_segmenter
from .epub_segmenter import EpubSegmenter
from .errors import (
    ArchiveCorruptError,
    FileUnreadableError,
    IngestError,
    MissingDescriptorError,
    NoChaptersFoundError,
    UnsupportedFormatError,
)
from .markdown_segmenter import MarkdownSegmenter
from .natural_sort import natural_compare, natural_key
from .segmenter import Segmenter, SegmenterConfig
from .text_segmenter import TextSegmenter

__version__ = "0.1.0"

__all__ = [
    # Core data structures
    "Chapter",
    "assign_book",
    "count_words",
    "count_characters",
    # Dispatch
    "extract_chapters",
    "get_segmenter",
    "detect_format",
    # Segmenters
    "Segmenter",
    "SegmenterConfig",
    "TextSegmenter",
    "MarkdownSegmenter",
    "EpubSegmenter",
    # Ordering
    "natural_compare",
    "natural_key",
    # Errors
    "IngestError",
    "UnsupportedFormatError",
    "FileUnreadableError",
    "ArchiveCorruptError",
    "MissingDescriptorError",
    "NoChaptersFoundError",
]
