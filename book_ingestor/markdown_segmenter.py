"""Markdown chapter segmenter: every ``#`` heading starts a chapter."""

import logging
from collections.abc import Iterable
from pathlib import Path

from .chapter import Chapter, count_words
from .errors import FileUnreadableError
from .segmenter import Segmenter

logger = logging.getLogger(__name__)


def heading_title(line: str) -> str:
    """Strip the leading ``#`` markers and surrounding whitespace from a heading."""
    return line.strip().lstrip("#").strip()


class MarkdownSegmenter(Segmenter):
    """
    Segmenter for markdown manuscripts.

    Any line starting with ``#`` (at any heading level) opens a new chapter.
    Markdown has no volumes, so every chapter is in volume 1. A file without
    headings becomes a single chapter holding the file verbatim.
    """

    formats = ("md", "markdown")

    def segment(self, path: str | Path) -> list[Chapter]:
        path = Path(path)
        try:
            with path.open("r", encoding="utf-8", errors="replace", newline="") as f:
                chapters = self.segment_lines(f)
        except OSError as e:
            raise FileUnreadableError(path, str(e)) from e

        logger.info("Segmented %s into %d chapters", path, len(chapters))
        return chapters

    def segment_lines(self, lines: Iterable[str]) -> list[Chapter]:
        """
        Segment already decoded lines.

        Args:
            lines: Lines of markdown, with their line endings.

        Returns:
            At least one chapter, in reading order.
        """
        chapters: list[Chapter] = []
        title: str | None = None
        body: list[str] = []
        verbatim: list[str] | None = []

        def flush() -> None:
            if title is None:
                return
            content = self._clean("".join(body))
            number = len(chapters) + 1
            chapters.append(
                Chapter(
                    chapter_number=number,
                    title=self._clean(title),
                    content=content,
                    volume_number=1,
                    volume_chapter_number=number,
                    word_count=count_words(content),
                )
            )

        for raw_line in lines:
            line = raw_line.rstrip("\r\n")
            if line.strip().startswith("#"):
                flush()
                verbatim = None
                title = heading_title(line)
                body = []
            elif title is not None:
                body.append(line + "\n")
            elif verbatim is not None:
                verbatim.append(raw_line)

        flush()

        if chapters:
            return chapters

        content = self._clean("".join(verbatim or []))
        return [
            Chapter(
                chapter_number=1,
                title="Chapter 1",
                content=content,
                volume_number=1,
                volume_chapter_number=1,
                word_count=count_words(content),
            )
        ]
