"""
Base classes for chapter segmentation.

This module defines the abstract base class shared by the per-format
segmenters and the configuration they all read.
"""

import codecs
import json
from abc import ABC, abstractmethod
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, TypeVar

import ftfy

from .chapter import Chapter

T = TypeVar("T", bound="SegmenterConfig")

DEFAULT_SAMPLE_SIZE = 4096
DEFAULT_MAX_VOLUME_TITLE_LENGTH = 50


@dataclass
class SegmenterConfig:
    """
    Configuration shared by all segmenters.

    Args:
        sample_size: Leading bytes sniffed for charset detection (default: 4096)
        fallback_encoding: Codec used when detection fails (default: "utf-8")
        max_volume_title_length: Longest line, in code points, that may be
                                 classified as a volume title (default: 50)
        repair_mojibake: Run titles and content through ftfy's encoding
                         repair (default: False)
    """

    sample_size: int = DEFAULT_SAMPLE_SIZE
    fallback_encoding: str = "utf-8"
    max_volume_title_length: int = DEFAULT_MAX_VOLUME_TITLE_LENGTH
    repair_mojibake: bool = False

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if self.sample_size <= 0:
            raise ValueError(f"sample_size must be positive, got: {self.sample_size}")
        if self.max_volume_title_length <= 0:
            raise ValueError(
                "max_volume_title_length must be positive, "
                f"got: {self.max_volume_title_length}"
            )
        try:
            codecs.lookup(self.fallback_encoding)
        except LookupError as e:
            raise ValueError(
                f"Unknown fallback_encoding: {self.fallback_encoding!r}"
            ) from e

    @classmethod
    def from_dict(cls: type[T], config_dict: dict[str, Any]) -> T:
        """
        Create a configuration instance from a dictionary.

        Args:
            config_dict: Dictionary containing configuration parameters.

        Returns:
            Configuration instance.
        """
        return cls(**config_dict)

    @classmethod
    def from_json(cls: type[T], json_path: str | Path) -> T:
        """
        Load configuration from a JSON file.

        Args:
            json_path: Path to the JSON configuration file.

        Returns:
            Configuration instance.

        Raises:
            FileNotFoundError: If the JSON file doesn't exist.
            json.JSONDecodeError: If the JSON file is invalid.
        """
        path = Path(json_path)
        with path.open("r", encoding="utf-8") as f:
            config_dict = json.load(f)
        return cls.from_dict(config_dict)

    def to_dict(self) -> dict[str, Any]:
        """
        Convert configuration to a dictionary.

        Returns:
            Dictionary representation of the configuration.
        """
        return asdict(self)

    def to_json(self, json_path: str | Path, indent: int = 2) -> None:
        """
        Save configuration to a JSON file.

        Args:
            json_path: Path where the JSON file should be saved.
            indent: Number of spaces for JSON indentation (default: 2).
        """
        path = Path(json_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8") as f:
            json.dump(self.to_dict(), f, indent=indent)


class Segmenter(ABC):
    """
    Abstract base class for chapter segmenters.

    A segmenter reads one input file and turns it into an ordered list of
    chapters with dense ``chapter_number`` values starting at 1. Instances
    hold only configuration, so one instance may serve many calls.
    """

    #: Format tokens handled by this segmenter, used by the dispatcher.
    formats: tuple[str, ...] = ()

    def __init__(self, config: SegmenterConfig | None = None):
        """
        Initialize the segmenter with a configuration.

        Args:
            config: Configuration object for this segmenter (default: SegmenterConfig()).
        """
        self.config = config or SegmenterConfig()

    @abstractmethod
    def segment(self, path: str | Path) -> list[Chapter]:
        """
        Split a book file into chapters.

        Args:
            path: Path to the input file.

        Returns:
            At least one chapter, in reading order.

        Raises:
            IngestError: If the input cannot be read or yields no chapters.
        """
        pass

    def segment_batch(self, paths: list[str | Path]) -> list[list[Chapter]]:
        """
        Split several book files into chapters.

        Args:
            paths: Input file paths.

        Returns:
            List of chapter lists, one for each input.
        """
        return [self.segment(path) for path in paths]

    def _clean(self, text: str) -> str:
        if self.config.repair_mojibake:
            return ftfy.fix_encoding(text)
        return text

    def __repr__(self) -> str:
        return f"{type(self).__name__}(config={self.config!r})"
