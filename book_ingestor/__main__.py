"""Command-line interface for book ingestor."""

import argparse
import json
import logging
import re
import sys
from pathlib import Path

from .chapter import Chapter
from .dispatch import extract_chapters
from .errors import IngestError
from .segmenter import SegmenterConfig


def safe_filename(name: str, default: str = "chapter") -> str:
    """Convert a string to a safe filename.

    Args:
        name: Name to clean
        default: Default name if result is empty

    Returns:
        A safe filename string
    """
    # Replace any non-word/non-dash/non-dot characters with underscore
    slug = re.sub(r"[^\w.-]+", "_", name.strip())
    # Remove leading/trailing underscores and dots
    slug = slug.strip("._")
    return slug or default


def write_chapters(chapters: list[Chapter], output_dir: Path) -> list[Path]:
    """Write chapters as text files named ``0001_title.txt``, ``0002_...``.

    The zero-padded prefix keeps lexicographic file order equal to reading
    order.

    Returns:
        Paths of the written files.
    """
    output_dir.mkdir(parents=True, exist_ok=True)
    written = []
    for chapter in chapters:
        stem = safe_filename(
            chapter.title, default=f"chapter_{chapter.chapter_number:04d}"
        )
        out_path = output_dir / f"{chapter.chapter_number:04d}_{stem}.txt"
        out_path.write_text(chapter.content, encoding="utf-8")
        written.append(out_path)
    return written


def main(argv: list[str] | None = None) -> int:
    """Main entry point for book ingestor CLI."""
    parser = argparse.ArgumentParser(
        prog="book_ingestor",
        description="Split TXT, Markdown and EPUB books into numbered chapters",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # List the chapters of a novel
  python -m book_ingestor novel.txt

  # Write chapters to a directory
  python -m book_ingestor book.epub --output chapters/

  # Force a format and print JSON summaries
  python -m book_ingestor manuscript.text --format txt --json

Output files will be named with lexicographic ordering:
  0001_Chapter_1.txt
  0002_Chapter_2.txt
  ...
        """,
    )

    parser.add_argument(
        "input",
        type=Path,
        help="Input book file (TXT, Markdown or EPUB)",
    )

    parser.add_argument(
        "--format",
        "-f",
        dest="fmt",
        type=str,
        default=None,
        help="Format token: txt, md, markdown or epub (defaults to the file suffix)",
    )

    parser.add_argument(
        "--output",
        "-o",
        type=Path,
        default=None,
        help="Directory to write one text file per chapter",
    )

    parser.add_argument(
        "--json",
        action="store_true",
        help="Print chapter summaries as JSON",
    )

    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="JSON file with segmenter configuration",
    )

    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Print detailed progress information",
    )

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if not args.input.exists():
        print(f"Error: Input file not found: {args.input}", file=sys.stderr)
        return 1

    try:
        config = SegmenterConfig.from_json(args.config) if args.config else None
    except (OSError, ValueError, TypeError) as e:
        print(f"Error: Invalid config {args.config}: {e}", file=sys.stderr)
        return 1

    if args.verbose:
        print(f"Extracting chapters from: {args.input}")

    try:
        chapters = extract_chapters(args.input, fmt=args.fmt, config=config)
    except IngestError as e:
        print(f"Error: {e}", file=sys.stderr)
        if args.verbose:
            import traceback
            traceback.print_exc()
        return 1

    if args.json:
        print(
            json.dumps(
                [c.to_dict(include_content=False) for c in chapters],
                ensure_ascii=False,
                indent=2,
            )
        )
    else:
        for chapter in chapters:
            marker = "vol" if chapter.is_volume_marker else "   "
            print(
                f"[{chapter.chapter_number:04d}] {marker} "
                f"{chapter.volume_number}.{chapter.volume_chapter_number} "
                f"{chapter.title} ({chapter.word_count})"
            )

    if args.output is not None:
        files = write_chapters(chapters, args.output)
        if args.verbose:
            for path in files:
                print(f"  wrote {path}")
        if not args.json:
            print(f"Successfully extracted {len(files)} chapters to {args.output}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
