"""Natural ordering of names with embedded numbers (item2 before item10)."""

import functools


def _is_digit(char: str) -> bool:
    return "0" <= char <= "9"


def natural_compare(a: str, b: str) -> int:
    """Compare two strings, treating digit runs as numbers.

    When both sides are at a digit, each consumes its whole digit run. A
    shorter run is the smaller number; runs of equal length compare
    lexically. Everything else compares by code point, and a string that is
    a prefix of the other sorts first.

    Returns:
        -1, 0 or 1, like a classic ``cmp``.
    """
    i = j = 0
    while i < len(a) and j < len(b):
        ca, cb = a[i], b[j]
        if _is_digit(ca) and _is_digit(cb):
            start_a, start_b = i, j
            while i < len(a) and _is_digit(a[i]):
                i += 1
            while j < len(b) and _is_digit(b[j]):
                j += 1
            run_a, run_b = a[start_a:i], b[start_b:j]
            if run_a != run_b:
                if len(run_a) != len(run_b):
                    return -1 if len(run_a) < len(run_b) else 1
                return -1 if run_a < run_b else 1
            continue
        if ca != cb:
            return -1 if ca < cb else 1
        i += 1
        j += 1

    if len(a) != len(b):
        return -1 if len(a) < len(b) else 1
    return 0


natural_key = functools.cmp_to_key(natural_compare)


def natural_sorted(names: list[str]) -> list[str]:
    """Return ``names`` in natural order."""
    return sorted(names, key=natural_key)
