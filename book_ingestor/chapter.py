"""Chapter data structure produced by every segmenter."""

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any


def _new_id() -> str:
    return str(uuid.uuid4())


def _now() -> datetime:
    return datetime.now(timezone.utc)


def count_words(text: str) -> int:
    """Count whitespace-separated tokens."""
    return len(text.split())


def count_characters(text: str) -> int:
    """Count code points, used for logographic prose where words are not spaced."""
    return len(text)


@dataclass
class Chapter:
    """An addressable unit of book content.

    Args:
        chapter_number: Dense 1-based position across the whole book
        title: Chapter title (the raw marker line for volume pseudo-chapters)
        content: Raw joined chapter text
        volume_number: 1-based volume the chapter belongs to
        volume_chapter_number: 1-based position inside the volume, 0 for a
                               volume marker pseudo-chapter
        word_count: Token or code-point count of ``content``
        id: Opaque unique identifier
        book_id: Owning book, assigned by the caller
        created_at: Creation timestamp (UTC)
    """

    chapter_number: int
    title: str
    content: str = ""
    volume_number: int = 1
    volume_chapter_number: int = 1
    word_count: int = 0
    id: str = field(default_factory=_new_id)
    book_id: str | None = None
    created_at: datetime = field(default_factory=_now)

    @property
    def is_volume_marker(self) -> bool:
        """True for the zero-content record standing in for a volume title."""
        return self.volume_chapter_number == 0

    def to_dict(self, include_content: bool = True) -> dict[str, Any]:
        """Convert the chapter to a JSON-ready dictionary.

        Args:
            include_content: If False, omit ``content`` (chapter summary form)

        Returns:
            Dictionary keyed by field name, with ``created_at`` in ISO-8601.
        """
        data: dict[str, Any] = {
            "id": self.id,
            "book_id": self.book_id,
            "chapter_number": self.chapter_number,
            "volume_number": self.volume_number,
            "volume_chapter_number": self.volume_chapter_number,
            "title": self.title,
            "word_count": self.word_count,
            "created_at": self.created_at.isoformat(),
        }
        if include_content:
            data["content"] = self.content
        return data

    def __repr__(self) -> str:
        return (
            f"Chapter(chapter_number={self.chapter_number}, "
            f"volume={self.volume_number}.{self.volume_chapter_number}, "
            f"title={self.title[:50]!r}, word_count={self.word_count})"
        )


def assign_book(
    chapters: list[Chapter],
    book_id: str,
    created_at: datetime | None = None,
) -> list[Chapter]:
    """Attach chapters to their owning book.

    Only chapters without a ``book_id`` are touched, so re-running this on an
    already assigned list is a no-op.

    Args:
        chapters: Chapters returned by a segmenter
        book_id: Identifier of the owning book
        created_at: Optional timestamp to stamp on the newly assigned chapters

    Returns:
        The same list, for chaining.
    """
    for chapter in chapters:
        if chapter.book_id is not None:
            continue
        chapter.book_id = book_id
        if created_at is not None:
            chapter.created_at = created_at
    return chapters
