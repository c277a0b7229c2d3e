"""Character encoding detection for plain-text manuscripts."""

import codecs
import io
import logging
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

import chardet

from .segmenter import DEFAULT_SAMPLE_SIZE

logger = logging.getLogger(__name__)

# Detector charset names mapped to the Python codec used to decode them.
# ASCII is widened to UTF-8 so non-ASCII text past the sample still decodes.
_CHARSET_CODECS = {
    "utf-8": "utf-8",
    "utf8": "utf-8",
    "ascii": "utf-8",
    "utf-8-sig": "utf-8-sig",
    "big5": "big5",
    "big5-hkscs": "big5hkscs",
    "gbk": "gb18030",
    "gb2312": "gb18030",
    "gb-18030": "gb18030",
    "gb18030": "gb18030",
    "gb_18030": "gb18030",
    "windows-1252": "cp1252",
    "cp1252": "cp1252",
}


def codec_for_charset(name: str | None, fallback: str = "utf-8") -> str:
    """Map a detected charset name to a Python codec name.

    Args:
        name: Charset name reported by the detector, or None
        fallback: Codec returned when the name is unknown

    Returns:
        A codec name accepted by :func:`codecs.lookup`.
    """
    if not name:
        return fallback
    key = name.strip().lower()
    if key in _CHARSET_CODECS:
        return _CHARSET_CODECS[key]
    try:
        return codecs.lookup(key).name
    except LookupError:
        logger.debug("Unknown charset %r, using %s", name, fallback)
        return fallback


def detect_encoding(sample: bytes, fallback: str = "utf-8") -> str:
    """Guess the codec of a byte sample.

    Detection never raises: any detector failure yields ``fallback``.

    Args:
        sample: Leading bytes of the input
        fallback: Codec used when detection fails

    Returns:
        A codec name.
    """
    if not sample:
        return fallback
    try:
        result = chardet.detect(sample)
    except Exception as e:
        logger.warning("Charset detection failed (%s), using %s", e, fallback)
        return fallback

    charset = result.get("encoding") if result else None
    codec = codec_for_charset(charset, fallback=fallback)
    logger.debug(
        "Detected charset %r (confidence %s) -> %s",
        charset,
        result.get("confidence") if result else None,
        codec,
    )
    return codec


@contextmanager
def open_decoded(
    path: str | Path,
    sample_size: int = DEFAULT_SAMPLE_SIZE,
    fallback: str = "utf-8",
) -> Iterator[io.TextIOWrapper]:
    """Open a file as text in its detected encoding.

    The leading ``sample_size`` bytes are sniffed, then the whole file is
    decoded incrementally as it is iterated. Undecodable bytes are replaced.

    Args:
        path: File to open
        sample_size: Number of bytes sniffed for detection
        fallback: Codec used when detection fails

    Yields:
        A text stream over the file with universal newlines.

    Raises:
        OSError: If the file cannot be opened or read.
    """
    with open(path, "rb") as raw:
        codec = detect_encoding(raw.read(sample_size), fallback=fallback)
        raw.seek(0)
        stream = io.TextIOWrapper(raw, encoding=codec, errors="replace")
        try:
            yield stream
        finally:
            stream.detach()
