"""Exceptions raised while ingesting a book.

Every failure surfaced by the engine derives from :class:`IngestError`, so
callers can keep a book record and report the problem without catching
unrelated errors.
"""

from pathlib import Path


class IngestError(Exception):
    """Base class for all ingestion failures."""


class UnsupportedFormatError(IngestError, ValueError):
    """The declared format token does not name a known segmenter."""

    def __init__(self, fmt: str):
        self.format = fmt
        super().__init__(
            f"Unsupported file format: {fmt!r} (supported: txt, md, markdown, epub)"
        )


class FileUnreadableError(IngestError):
    """The input could not be opened or read."""

    def __init__(self, path: str | Path, reason: str):
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"Failed to read {self.path}: {reason}")


class ArchiveCorruptError(IngestError):
    """The archive, or one of its entries, is malformed."""

    def __init__(self, path: str | Path, reason: str, entry: str | None = None):
        self.path = Path(path)
        self.entry = entry
        self.reason = reason
        where = f"{self.path}!{entry}" if entry else str(self.path)
        super().__init__(f"Corrupt archive {where}: {reason}")


class MissingDescriptorError(IngestError):
    """A required container or package document is absent from the archive."""

    def __init__(self, path: str | Path, entry: str, reason: str = "not found"):
        self.path = Path(path)
        self.entry = entry
        super().__init__(f"{entry} {reason} in {self.path}")


class NoChaptersFoundError(IngestError):
    """A structurally valid input produced no chapters after every fallback."""

    def __init__(self, path: str | Path, manifest_count: int, spine_count: int):
        self.path = Path(path)
        self.manifest_count = manifest_count
        self.spine_count = spine_count
        super().__init__(
            f"No chapters found in {self.path} "
            f"(manifest={manifest_count}, spine={spine_count})"
        )
