"""Data models and constants for the color replacer."""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

import numpy as np

# Color spec that decodes to a fully transparent sample
TRANSPARENT = "transparent"

# AIDEV-NOTE: Defaults mirror the web tool - a new rule turns white into black
DEFAULT_SOURCE_COLOR = "#FFFFFF"
DEFAULT_TARGET_COLOR = "#000000"
DEFAULT_TOLERANCE = 15  # percent (0-100)

DEFAULT_ARCHIVE_NAME = "color-replaced-images.zip"

# Configuration file path
CONFIG_FILE = Path.home() / ".color_replacer_config.json"


class ImageState(Enum):
    """Processing states for one image in the pipeline."""

    IDLE = "Idle"
    DISPATCHED = "Dispatched"
    RUNNING = "Running"
    COMPLETED = "Completed"
    FAILED = "Failed"


@dataclass(frozen=True)
class ReplacementRule:
    """Replace colors close to ``source`` with ``target``.

    AIDEV-NOTE: Colors are kept as the user typed them (hex or the
    transparency sentinel) and decoded lazily, so a bad spec only
    disables this rule instead of failing the whole rule set.
    """

    source: str = DEFAULT_SOURCE_COLOR
    target: str = DEFAULT_TARGET_COLOR
    tolerance: int = DEFAULT_TOLERANCE  # 0-100

    def to_dict(self) -> dict:
        return {
            "sourceColor": self.source,
            "targetColor": self.target,
            "tolerance": self.tolerance,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ReplacementRule":
        return cls(
            source=data.get("sourceColor", DEFAULT_SOURCE_COLOR),
            target=data.get("targetColor", DEFAULT_TARGET_COLOR),
            tolerance=int(data.get("tolerance", DEFAULT_TOLERANCE)),
        )


@dataclass
class RasterBuffer:
    """Raw RGBA pixels, row-major, four bytes per pixel."""

    width: int
    height: int
    data: bytearray

    @property
    def expected_length(self) -> int:
        return self.width * self.height * 4

    def is_well_formed(self) -> bool:
        return (
            self.width >= 0
            and self.height >= 0
            and len(self.data) == self.expected_length
        )

    def copy(self) -> "RasterBuffer":
        return RasterBuffer(self.width, self.height, bytearray(self.data))

    def pixels(self) -> np.ndarray:
        """Writable (height, width, 4) view sharing memory with ``data``."""
        array = np.frombuffer(self.data, dtype=np.uint8)
        return array.reshape(self.height, self.width, 4)


@dataclass(frozen=True)
class ProcessingTask:
    """One unit of work: an image plus the rule set captured at dispatch."""

    image_id: str
    buffer: RasterBuffer
    rules: "tuple[ReplacementRule, ...]"
    generation: int = 0


@dataclass
class ProcessingResult:
    """Outcome of a processing task, tagged with its originating image."""

    image_id: str
    generation: int = 0
    buffer: RasterBuffer | None = None  # set on success
    error: str | None = None  # set on failure

    @property
    def succeeded(self) -> bool:
        return self.error is None and self.buffer is not None


@dataclass
class ExportedFile:
    """Encoded bytes ready to be written or downloaded."""

    file_name: str
    data: bytes
    media_type: str = "image/png"


@dataclass
class AppConfig:
    """User configuration persisted between runs."""

    rules: "list[ReplacementRule]" = field(
        default_factory=lambda: [ReplacementRule()]
    )
    output_dir: str = "color-replaced"
    archive_name: str = DEFAULT_ARCHIVE_NAME
