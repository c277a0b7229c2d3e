"""Heuristics for recognizing chapter and volume headings in plain text.

Handles English headings ("Chapter 3", "Vol. 2 The Return") and Chinese
ones ("第三章", "第二卷", "卷十二").
"""

import re

from .segmenter import DEFAULT_MAX_VOLUME_TITLE_LENGTH

_CJK_DIGITS = {
    "零": 0,
    "〇": 0,
    "一": 1,
    "二": 2,
    "两": 2,
    "三": 3,
    "四": 4,
    "五": 5,
    "六": 6,
    "七": 7,
    "八": 8,
    "九": 9,
}
_CJK_UNITS = {"十": 10, "百": 100, "千": 1000}
_CJK_NUMERALS = "".join(_CJK_DIGITS) + "".join(_CJK_UNITS)

_ENGLISH_VOLUME_RE = re.compile(r"^(volume|vol\.?)\s*[0-9]+(\s+.+)?$", re.IGNORECASE)
_CJK_VOLUME_RE = re.compile(
    rf"^(第[0-9{_CJK_NUMERALS}]+卷|卷[0-9{_CJK_NUMERALS}]+)(\s+.+)?$"
)
_ARABIC_RUN_RE = re.compile(r"[0-9]+")
_CJK_RUN_RE = re.compile(rf"[{_CJK_NUMERALS}]+")

CHAPTER_PREFIXES = ("chapter ", "chapter:", "ch.", "ch ")


def is_volume_title(
    line: str, max_length: int = DEFAULT_MAX_VOLUME_TITLE_LENGTH
) -> bool:
    """Check if a line is a volume heading such as "Volume 2" or "第一卷".

    Lines longer than ``max_length`` code points are rejected so prose that
    happens to start with "卷" is not mistaken for a heading.
    """
    trimmed = line.strip()
    if not trimmed or len(trimmed) > max_length:
        return False
    return bool(_ENGLISH_VOLUME_RE.match(trimmed) or _CJK_VOLUME_RE.match(trimmed))


def is_chapter_title(line: str) -> bool:
    """Check if a line is a chapter heading such as "Chapter 1" or "第1章".

    The Chinese form needs both "第" and "章", which keeps phrases like
    "第二天" (the second day) out.
    """
    trimmed = line.strip()
    if not trimmed:
        return False
    if trimmed.lower().startswith(CHAPTER_PREFIXES):
        return True
    return "第" in trimmed and "章" in trimmed


def cjk_numeral_to_int(numeral: str) -> int:
    """Convert a simple Chinese numeral ("一", "十二", "一百零三") to an int.

    Only digits and the ×10/×100/×1000 units are understood; anything
    larger or irregular is out of scope.
    """
    total = 0
    current = 0
    for idx, char in enumerate(numeral):
        if char in _CJK_DIGITS:
            current = _CJK_DIGITS[char]
            if idx == len(numeral) - 1:
                total += current
        elif char in _CJK_UNITS:
            total += (current or 1) * _CJK_UNITS[char]
            current = 0
    return total


def parse_volume_number(line: str) -> int:
    """Extract the volume number from a volume heading.

    Tries the first run of Arabic digits, then the first run of Chinese
    numerals.

    Returns:
        The volume number, or 0 when none can be parsed.
    """
    match = _ARABIC_RUN_RE.search(line)
    if match:
        number = int(match.group())
        if number > 0:
            return number

    match = _CJK_RUN_RE.search(line)
    if match:
        return cjk_numeral_to_int(match.group())

    return 0
