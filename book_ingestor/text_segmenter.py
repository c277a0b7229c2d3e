"""Plain-text chapter segmenter with volume support."""

import logging
from collections.abc import Callable, Iterable
from pathlib import Path

from .chapter import Chapter, count_words
from .encoding import open_decoded
from .errors import FileUnreadableError
from .headings import is_chapter_title, is_volume_title, parse_volume_number
from .segmenter import Segmenter

logger = logging.getLogger(__name__)


class _ChapterBuilder:
    """Accumulates chapters for one pass over a text.

    A chapter opened by a heading stays pending until the next heading or
    end of input. Only committed chapters count towards numbering, so a
    pending chapter that is dropped for having no body leaves no gap.
    """

    def __init__(self, clean: Callable[[str], str]):
        self.chapters: list[Chapter] = []
        self.volume_number = 1
        self._clean = clean
        self._volume_chapters = 0
        self._title: str | None = None
        self._body: list[str] = []

    @property
    def is_open(self) -> bool:
        return self._title is not None

    def open_chapter(self, title: str) -> None:
        self.flush()
        self._title = title
        self._body = []

    def append(self, line: str) -> None:
        if self.is_open:
            self._body.append(line)
            self._body.append("\n")

    def flush(self, force: bool = False) -> None:
        """Commit the pending chapter, or drop it if blank and not forced."""
        if self._title is None:
            return
        content = "".join(self._body)
        title = self._title
        self._title = None
        self._body = []

        if not content.strip() and not force:
            logger.debug("Dropping empty chapter %r", title)
            return

        self._volume_chapters += 1
        content = self._clean(content)
        self.chapters.append(
            Chapter(
                chapter_number=len(self.chapters) + 1,
                title=self._clean(title),
                content=content,
                volume_number=self.volume_number,
                volume_chapter_number=self._volume_chapters,
                word_count=count_words(content),
            )
        )

    def start_volume(self, title: str) -> None:
        """Close the pending chapter and emit a volume marker pseudo-chapter."""
        self.flush()

        # An unnumbered marker continues from the previous volume; before
        # any chapter exists that is volume 1.
        parsed = parse_volume_number(title)
        if parsed > 0:
            self.volume_number = parsed
        elif self.chapters:
            self.volume_number += 1
        self._volume_chapters = 0

        self.chapters.append(
            Chapter(
                chapter_number=len(self.chapters) + 1,
                title=self._clean(title),
                content="",
                volume_number=self.volume_number,
                volume_chapter_number=0,
                word_count=0,
            )
        )


class TextSegmenter(Segmenter):
    """
    Segmenter for plain-text manuscripts.

    Each line is checked for a volume heading first, then for a chapter
    heading; every other line is body text of the open chapter. Text before
    the first heading is not attributed to any chapter. If the file has no
    headings at all, the whole text becomes a single chapter.

    Example:
        >>> segmenter = TextSegmenter()
        >>> chapters = segmenter.segment("novel.txt")
        >>> [c.title for c in chapters]
        ['第一卷', '第一章 开始', '第二章 远行']
    """

    formats = ("txt",)

    def segment(self, path: str | Path) -> list[Chapter]:
        path = Path(path)
        try:
            with open_decoded(
                path,
                sample_size=self.config.sample_size,
                fallback=self.config.fallback_encoding,
            ) as stream:
                chapters = self.segment_lines(stream)
        except OSError as e:
            raise FileUnreadableError(path, str(e)) from e

        logger.info("Segmented %s into %d chapters", path, len(chapters))
        return chapters

    def segment_lines(self, lines: Iterable[str]) -> list[Chapter]:
        """
        Segment already decoded lines.

        Args:
            lines: Lines of text, with or without trailing newlines.

        Returns:
            At least one chapter, in reading order.
        """
        builder = _ChapterBuilder(self._clean)
        max_length = self.config.max_volume_title_length
        preamble: list[str] | None = []

        for raw_line in lines:
            line = raw_line.rstrip("\r\n")

            if is_volume_title(line, max_length=max_length):
                preamble = None
                builder.start_volume(line.strip())
            elif is_chapter_title(line):
                preamble = None
                builder.open_chapter(line.strip())
            elif builder.is_open:
                builder.append(line)
            elif preamble is not None:
                preamble.append(line + "\n")

        builder.flush(force=True)

        if builder.chapters:
            return builder.chapters

        content = self._clean("".join(preamble or []))
        return [
            Chapter(
                chapter_number=1,
                title="Chapter 1",
                content=content,
                volume_number=builder.volume_number,
                volume_chapter_number=1,
                word_count=count_words(content),
            )
        ]
