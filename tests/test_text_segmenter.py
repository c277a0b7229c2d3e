"""Tests for the plain-text segmenter."""

from pathlib import Path

import pytest

from book_ingestor import FileUnreadableError, SegmenterConfig, TextSegmenter


def _write(tmp_path: Path, content: str, encoding: str = "utf-8") -> Path:
    path = tmp_path / "book.txt"
    path.write_bytes(content.encode(encoding))
    return path


def _numbers(chapters) -> list[int]:  # type: ignore[no-untyped-def]
    return [c.chapter_number for c in chapters]


class TestTextSegmenter:
    """Tests for TextSegmenter.segment."""

    def test_volume_then_chapter(self, tmp_path: Path) -> None:
        """Test a volume marker becomes a pseudo-chapter before its chapters."""
        chapters = TextSegmenter().segment(_write(tmp_path, "第一卷\n\n第一章\n正文\n"))

        assert len(chapters) == 2
        volume, chapter = chapters

        assert volume.title == "第一卷"
        assert volume.content == ""
        assert volume.word_count == 0
        assert volume.volume_chapter_number == 0
        assert volume.is_volume_marker

        assert chapter.title == "第一章"
        assert chapter.volume_chapter_number == 1
        assert chapter.content == "正文\n"
        assert chapter.content.strip() == "正文"
        assert _numbers(chapters) == [1, 2]

    def test_english_chapters(self, tmp_path: Path) -> None:
        """Test English headings split chapters and count words."""
        text = (
            "Chapter 1\nIt was a dark and stormy night.\n\n"
            "Chapter 2: Morning\nThe sun rose.\n"
        )
        chapters = TextSegmenter().segment(_write(tmp_path, text))

        assert [c.title for c in chapters] == ["Chapter 1", "Chapter 2: Morning"]
        assert chapters[0].content == "It was a dark and stormy night.\n\n"
        assert chapters[0].word_count == 7
        assert chapters[1].word_count == 3
        assert all(c.volume_number == 1 for c in chapters)
        assert [c.volume_chapter_number for c in chapters] == [1, 2]

    def test_consecutive_headings_collapse(self, tmp_path: Path) -> None:
        """Test an empty chapter between two headings is dropped and its number reused."""
        text = "Chapter 1\nChapter 2\nBody of two.\nChapter 3\nBody of three.\n"
        chapters = TextSegmenter().segment(_write(tmp_path, text))

        assert [c.title for c in chapters] == ["Chapter 2", "Chapter 3"]
        assert _numbers(chapters) == [1, 2]
        assert [c.volume_chapter_number for c in chapters] == [1, 2]

    def test_blank_lines_only_body_is_empty(self, tmp_path: Path) -> None:
        """Test a body of blank lines counts as empty for the flush rule."""
        text = "第一章\n\n   \n第二章\n内容\n"
        chapters = TextSegmenter().segment(_write(tmp_path, text))

        assert [c.title for c in chapters] == ["第二章"]
        assert chapters[0].chapter_number == 1

    def test_final_empty_chapter_is_kept(self, tmp_path: Path) -> None:
        """Test the end-of-input flush keeps an empty last chapter."""
        text = "Chapter 1\nBody.\nChapter 2\n"
        chapters = TextSegmenter().segment(_write(tmp_path, text))

        assert [c.title for c in chapters] == ["Chapter 1", "Chapter 2"]
        assert chapters[1].content == ""
        assert chapters[1].word_count == 0

    def test_preamble_is_discarded(self, tmp_path: Path) -> None:
        """Test lines before the first heading are not attributed to a chapter."""
        text = "Title Page\nBy Someone\n\nChapter 1\nBody.\n"
        chapters = TextSegmenter().segment(_write(tmp_path, text))

        assert len(chapters) == 1
        assert chapters[0].content == "Body.\n"

    def test_lines_after_volume_before_chapter_discarded(self, tmp_path: Path) -> None:
        """Test text between a volume marker and its first chapter is dropped."""
        text = "Volume 1\nIntroductory blurb.\nChapter 1\nBody.\n"
        chapters = TextSegmenter().segment(_write(tmp_path, text))

        assert [c.title for c in chapters] == ["Volume 1", "Chapter 1"]
        assert chapters[0].content == ""
        assert chapters[1].content == "Body.\n"

    def test_multiple_volumes(self, tmp_path: Path) -> None:
        """Test per-volume numbering restarts with each volume."""
        text = (
            "第一卷 起\n第一章\n甲\n第二章\n乙\n"
            "第二卷 承\n第一章\n丙\n"
        )
        chapters = TextSegmenter().segment(_write(tmp_path, text))

        assert [c.title for c in chapters] == [
            "第一卷 起",
            "第一章",
            "第二章",
            "第二卷 承",
            "第一章",
        ]
        assert _numbers(chapters) == [1, 2, 3, 4, 5]
        assert [c.volume_number for c in chapters] == [1, 1, 1, 2, 2]
        assert [c.volume_chapter_number for c in chapters] == [0, 1, 2, 0, 1]

    def test_volume_numbers_from_headings(self, tmp_path: Path) -> None:
        """Test explicit volume numbers are used as given."""
        text = "Volume 3\nChapter 1\nA.\nVol. 7 Finale\nChapter 1\nB.\n"
        chapters = TextSegmenter().segment(_write(tmp_path, text))

        assert [c.volume_number for c in chapters] == [3, 3, 7, 7]
        assert [c.volume_chapter_number for c in chapters] == [0, 1, 0, 1]

    def test_unnumbered_volume_increments(self, tmp_path: Path) -> None:
        """Test a volume marker without a usable number follows the previous one."""
        text = "Volume 2\nChapter 1\nA.\nVolume 0\nChapter 1\nB.\n"
        chapters = TextSegmenter().segment(_write(tmp_path, text))

        assert [c.volume_number for c in chapters] == [2, 2, 3, 3]

    def test_first_unnumbered_volume_defaults_to_one(self, tmp_path: Path) -> None:
        """Test the first marker with no number and no chapters is volume 1."""
        chapters = TextSegmenter().segment(_write(tmp_path, "第零卷\n第一章\n正文\n"))

        assert [c.volume_number for c in chapters] == [1, 1]

    def test_no_headings_yields_single_chapter(self, tmp_path: Path) -> None:
        """Test an unstructured file becomes one chapter holding everything."""
        text = "Just some prose.\nMore prose here.\n"
        chapters = TextSegmenter().segment(_write(tmp_path, text))

        assert len(chapters) == 1
        chapter = chapters[0]
        assert chapter.chapter_number == 1
        assert chapter.volume_chapter_number == 1
        assert chapter.title == "Chapter 1"
        assert chapter.content == text
        assert chapter.word_count == 6

    def test_empty_file(self, tmp_path: Path) -> None:
        """Test an empty file still yields one chapter."""
        chapters = TextSegmenter().segment(_write(tmp_path, ""))

        assert len(chapters) == 1
        assert chapters[0].content == ""

    def test_second_day_is_body_text(self, tmp_path: Path) -> None:
        """Test 第二天 stays in the chapter body instead of opening a chapter."""
        chapters = TextSegmenter().segment(_write(tmp_path, "第一章\n第二天\n他醒了。\n"))

        assert len(chapters) == 1
        assert chapters[0].content == "第二天\n他醒了。\n"

    def test_crlf_line_endings(self, tmp_path: Path) -> None:
        """Test Windows line endings are normalized."""
        chapters = TextSegmenter().segment(_write(tmp_path, "Chapter 1\r\nBody.\r\n"))

        assert chapters[0].title == "Chapter 1"
        assert chapters[0].content == "Body.\n"

    def test_gb18030_file(self, tmp_path: Path) -> None:
        """Test a GB18030-encoded novel decodes to the right headings."""
        text = "第一卷 风起\n" + "第一章 少年\n" + "少年站在山顶，看着远方的城市。\n" * 40
        chapters = TextSegmenter().segment(_write(tmp_path, text, encoding="gb18030"))

        assert [c.title for c in chapters] == ["第一卷 风起", "第一章 少年"]
        assert "少年站在山顶" in chapters[1].content

    def test_unreadable_file(self, tmp_path: Path) -> None:
        """Test a missing file raises FileUnreadableError."""
        with pytest.raises(FileUnreadableError) as excinfo:
            TextSegmenter().segment(tmp_path / "missing.txt")

        assert excinfo.value.path == tmp_path / "missing.txt"

    def test_directory_is_unreadable(self, tmp_path: Path) -> None:
        """Test a directory path raises FileUnreadableError."""
        with pytest.raises(FileUnreadableError):
            TextSegmenter().segment(tmp_path)


class TestSegmentLines:
    """Tests for TextSegmenter.segment_lines on in-memory text."""

    def test_numbers_are_dense(self) -> None:
        """Test chapter numbers are exactly 1..N whatever gets dropped."""
        lines = [
            "Volume 1",
            "Chapter 1",
            "Chapter 2",
            "text",
            "Volume 2",
            "Volume 3",
            "Chapter 1",
            "Chapter 2",
            "more text",
        ]
        chapters = TextSegmenter().segment_lines(lines)

        assert _numbers(chapters) == list(range(1, len(chapters) + 1))
        assert [c.title for c in chapters] == [
            "Volume 1",
            "Chapter 2",
            "Volume 2",
            "Volume 3",
            "Chapter 2",
        ]
        assert [c.volume_chapter_number for c in chapters] == [0, 1, 0, 0, 1]

    def test_custom_volume_length(self) -> None:
        """Test max_volume_title_length is honored."""
        segmenter = TextSegmenter(SegmenterConfig(max_volume_title_length=5))
        chapters = segmenter.segment_lines(["Volume 1 Long Name", "Chapter 1", "x"])

        assert [c.title for c in chapters] == ["Chapter 1"]

    def test_repair_mojibake(self) -> None:
        """Test titles and content are repaired when enabled."""
        segmenter = TextSegmenter(SegmenterConfig(repair_mojibake=True))
        chapters = segmenter.segment_lines(["Chapter 1 cafÃ©", "cafÃ© au lait"])

        assert chapters[0].title == "Chapter 1 café"
        assert chapters[0].content == "café au lait\n"
