"""EPUB chapter segmenter.

Chapters come from the package spine when the archive follows the EPUB
container/package layout. Archives with a broken or empty package document
fall back to every (X)HTML file in the archive, in natural filename order.
"""

import logging
import posixpath
import re
import zipfile
import zlib
from dataclasses import dataclass, field
from pathlib import Path
from urllib.parse import unquote
from xml.etree import ElementTree as ET

from .chapter import Chapter, count_characters
from .encoding import codec_for_charset
from .errors import (
    ArchiveCorruptError,
    FileUnreadableError,
    MissingDescriptorError,
    NoChaptersFoundError,
)
from .html_text import extract_html_title, strip_tags
from .natural_sort import natural_sorted
from .segmenter import Segmenter

logger = logging.getLogger(__name__)

CONTAINER_PATH = "META-INF/container.xml"

_NS = {
    "opf": "http://www.idpf.org/2007/opf",
    "dc": "http://purl.org/dc/elements/1.1/",
}

_HTML_SUFFIXES = (".html", ".xhtml")
_FALLBACK_EXCLUDES = ("nav", "cover", "toc")

_XML_DECL_RE = re.compile(
    rb"^\s*<\?xml[^>]*?\bencoding\s*=\s*[\"']([A-Za-z0-9._:-]+)[\"']"
)
_XML_DECL_TEXT_RE = re.compile(r"^\s*<\?xml[^>]*\?>")


@dataclass
class ManifestItem:
    href: str
    media_type: str

    @property
    def is_html(self) -> bool:
        return "html" in self.media_type.lower()


@dataclass
class Package:
    """The parts of an OPF package document the segmenter needs."""

    path: str
    title: str | None = None
    manifest: dict[str, ManifestItem] = field(default_factory=dict)
    spine: list[str] = field(default_factory=list)

    @property
    def base_dir(self) -> str:
        return posixpath.dirname(self.path)


def _normalize_name(name: str) -> str:
    return name.replace("\\", "/").lstrip("/")


def parse_xml(data: bytes) -> ET.Element:
    """Parse an XML document from archive bytes.

    Expat only decodes single-byte charsets and UTF-8/16 natively, so a
    document declaring e.g. GBK or Big5 is decoded with that codec first and
    parsed as text.

    Raises:
        xml.etree.ElementTree.ParseError: If the document is not well formed.
    """
    try:
        return ET.fromstring(data)
    except ValueError:
        match = _XML_DECL_RE.match(data)
        declared = match.group(1).decode("ascii") if match else None
        codec = codec_for_charset(declared)
        logger.debug("Decoding XML declared as %r with %s", declared, codec)
        text = data.decode(codec, errors="replace").lstrip("\ufeff")
        return ET.fromstring(_XML_DECL_TEXT_RE.sub("", text, count=1))


def resolve_href(base_dir: str, href: str) -> str:
    """Resolve a manifest href against the package directory.

    Fragments are dropped, percent-escapes decoded, backslashes treated as
    separators and ``.``/``..`` segments collapsed.
    """
    href = _normalize_name(unquote(href.split("#", 1)[0]))
    joined = posixpath.join(base_dir, href) if base_dir else href
    return posixpath.normpath(joined)


class _Archive:
    """Read access to the entries of an open zip file.

    Entry names are matched exactly first, then case-insensitively, with
    backslashes normalized to forward slashes.
    """

    def __init__(self, zf: zipfile.ZipFile, path: Path):
        self.zf = zf
        self.path = path
        self.entries: dict[str, zipfile.ZipInfo] = {}
        self._folded: dict[str, zipfile.ZipInfo] = {}
        for info in zf.infolist():
            if info.is_dir():
                continue
            name = _normalize_name(info.filename)
            self.entries.setdefault(name, info)
            self._folded.setdefault(name.lower(), info)

    def find(self, name: str) -> zipfile.ZipInfo | None:
        name = _normalize_name(name)
        return self.entries.get(name) or self._folded.get(name.lower())

    def read(self, info: zipfile.ZipInfo) -> bytes:
        try:
            with self.zf.open(info) as f:
                return f.read()
        except (
            zipfile.BadZipFile,
            zlib.error,
            EOFError,
            NotImplementedError,
            RuntimeError,
        ) as e:
            raise ArchiveCorruptError(self.path, str(e), entry=info.filename) from e
        except OSError as e:
            raise FileUnreadableError(self.path, str(e)) from e

    def read_text(self, info: zipfile.ZipInfo) -> str:
        return self.read(info).decode("utf-8-sig", errors="replace")


class EpubSegmenter(Segmenter):
    """
    Segmenter for EPUB archives.

    Reading order comes from the OPF spine. Chapter text is the visible text
    of each (X)HTML document; titles come from the book title (first spine
    item only), then ``<title>``, then ``<h1>``, then "Chapter N".

    Word counts are code-point counts, since EPUB imports are mostly
    unspaced Chinese prose.
    """

    formats = ("epub",)

    def segment(self, path: str | Path) -> list[Chapter]:
        path = Path(path)
        try:
            zf = zipfile.ZipFile(path)
        except zipfile.BadZipFile as e:
            raise ArchiveCorruptError(path, str(e)) from e
        except OSError as e:
            raise FileUnreadableError(path, str(e)) from e

        with zf:
            archive = _Archive(zf, path)
            package = self.read_package(archive)
            chapters = self._chapters_from_spine(archive, package)
            if not chapters:
                logger.warning(
                    "No chapters in spine of %s (manifest=%d, spine=%d), "
                    "scanning archive for HTML files",
                    path,
                    len(package.manifest),
                    len(package.spine),
                )
                chapters = self._chapters_from_listing(archive)

        if not chapters:
            raise NoChaptersFoundError(path, len(package.manifest), len(package.spine))

        logger.info("Segmented %s into %d chapters", path, len(chapters))
        return chapters

    def read_package(self, archive: _Archive) -> Package:
        """
        Locate and parse the OPF package document.

        Args:
            archive: The opened EPUB archive.

        Returns:
            The parsed package. A package document that is not valid XML
            yields an empty package so the archive-listing fallback can run.

        Raises:
            MissingDescriptorError: If the container or package entry is absent.
        """
        opf_path = self._find_opf_path(archive)
        info = archive.find(opf_path)
        if info is None:
            raise MissingDescriptorError(archive.path, opf_path)

        package = Package(path=_normalize_name(info.filename))
        try:
            root = parse_xml(archive.read(info))
        except (ET.ParseError, ValueError) as e:
            logger.warning("Malformed package document %s: %s", opf_path, e)
            return package

        title_el = root.find(".//opf:metadata/dc:title", _NS)
        if title_el is not None and title_el.text and title_el.text.strip():
            package.title = title_el.text.strip()

        for item in root.findall(".//opf:manifest/opf:item", _NS):
            item_id = item.get("id", "")
            href = item.get("href", "")
            if item_id and href:
                package.manifest[item_id] = ManifestItem(
                    href=href, media_type=item.get("media-type", "")
                )

        for itemref in root.findall(".//opf:spine/opf:itemref", _NS):
            idref = itemref.get("idref", "")
            if idref:
                package.spine.append(idref)

        logger.debug(
            "Package %s: title=%r, %d manifest items, %d spine entries",
            package.path,
            package.title,
            len(package.manifest),
            len(package.spine),
        )
        return package

    def _find_opf_path(self, archive: _Archive) -> str:
        info = archive.find(CONTAINER_PATH)
        if info is None:
            raise MissingDescriptorError(archive.path, CONTAINER_PATH)
        try:
            container = parse_xml(archive.read(info))
        except (ET.ParseError, ValueError) as e:
            raise MissingDescriptorError(
                archive.path, CONTAINER_PATH, f"is not valid XML ({e})"
            ) from e

        # {*} also matches containers written without the OCF namespace.
        rootfile = container.find(
            ".//{*}rootfile[@media-type='application/oebps-package+xml']"
        )
        if rootfile is None:
            rootfile = container.find(".//{*}rootfile")
        full_path = rootfile.get("full-path") if rootfile is not None else None
        if not full_path:
            raise MissingDescriptorError(
                archive.path, CONTAINER_PATH, "has no rootfile"
            )
        return full_path

    def _chapters_from_spine(self, archive: _Archive, package: Package) -> list[Chapter]:
        chapters: list[Chapter] = []
        for position, idref in enumerate(package.spine):
            item = package.manifest.get(idref)
            if item is None:
                logger.debug("Spine idref %r not in manifest", idref)
                continue
            if not item.is_html:
                logger.debug("Skipping %s (%s)", item.href, item.media_type)
                continue

            entry_name = resolve_href(package.base_dir, item.href)
            info = archive.find(entry_name)
            if info is None:
                logger.debug("Spine item %s missing from archive", entry_name)
                continue

            preferred_title = package.title if position == 0 else None
            chapter = self._make_chapter(
                archive.read_text(info), len(chapters) + 1, preferred_title
            )
            if chapter is not None:
                chapters.append(chapter)
        return chapters

    def _chapters_from_listing(self, archive: _Archive) -> list[Chapter]:
        names = []
        for name in archive.entries:
            lowered = name.lower()
            if not lowered.endswith(_HTML_SUFFIXES):
                continue
            if any(word in lowered for word in _FALLBACK_EXCLUDES):
                continue
            names.append(name)

        chapters: list[Chapter] = []
        for name in natural_sorted(names):
            chapter = self._make_chapter(
                archive.read_text(archive.entries[name]), len(chapters) + 1
            )
            if chapter is not None:
                chapters.append(chapter)
        return chapters

    def _make_chapter(
        self, raw: str, number: int, preferred_title: str | None = None
    ) -> Chapter | None:
        text = self._clean(strip_tags(raw))
        if not text.strip():
            return None
        title = preferred_title or extract_html_title(raw) or f"Chapter {number}"
        return Chapter(
            chapter_number=number,
            title=self._clean(title),
            content=text,
            volume_number=1,
            volume_chapter_number=number,
            word_count=count_characters(text),
        )
