"""Selection of a segmenter from a declared format token."""

from pathlib import Path

from .chapter import Chapter
from .epub_segmenter import EpubSegmenter
from .errors import UnsupportedFormatError
from .markdown_segmenter import MarkdownSegmenter
from .segmenter import Segmenter, SegmenterConfig
from .text_segmenter import TextSegmenter

SEGMENTERS: dict[str, type[Segmenter]] = {
    fmt: cls
    for cls in (TextSegmenter, MarkdownSegmenter, EpubSegmenter)
    for fmt in cls.formats
}


def normalize_format(fmt: str) -> str:
    """Trim and lower-case a format token, rejecting unknown ones."""
    token = fmt.strip().lower()
    if token not in SEGMENTERS:
        raise UnsupportedFormatError(fmt)
    return token


def get_segmenter(fmt: str, config: SegmenterConfig | None = None) -> Segmenter:
    """Return a segmenter for a format token.

    Args:
        fmt: One of txt, md, markdown, epub (case-insensitive, surrounding
             whitespace ignored)
        config: Optional configuration passed to the segmenter

    Returns:
        A new segmenter instance.

    Raises:
        UnsupportedFormatError: If the token is not recognized.
    """
    return SEGMENTERS[normalize_format(fmt)](config)


def detect_format(path: str | Path) -> str:
    """Infer the format token from a file suffix.

    Raises:
        UnsupportedFormatError: If the suffix is not a supported format.
    """
    return normalize_format(Path(path).suffix.lstrip("."))


def extract_chapters(
    path: str | Path,
    fmt: str | None = None,
    config: SegmenterConfig | None = None,
) -> list[Chapter]:
    """Split a book file into chapters.

    Args:
        path: Path to the book file
        fmt: Format token; inferred from the file suffix when omitted
        config: Optional segmenter configuration

    Returns:
        At least one chapter, numbered 1..N in reading order.

    Raises:
        IngestError: If the format is unsupported or the file cannot be
            segmented.
    """
    if fmt is None:
        fmt = detect_format(path)
    return get_segmenter(fmt, config).segment(path)
