"""Options and creation of a new blank volume image."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from .engine import VolumeEngine
from .errors import InvalidArgumentError
from .session import translate_engine_error

logger = logging.getLogger(__name__)

KIB = 1024
MIB = 1024 * KIB
GIB = 1024 * MIB

MIN_IMAGE_BYTES = 800 * KIB
MAX_IMAGE_BYTES = 2 * GIB
DEFAULT_IMAGE_BYTES = 8 * MIB
MAX_VOLUME_NAME_LENGTH = 27
DEFAULT_VOLUME_NAME = "Untitled"


def binary_size_label(count: int) -> str:
    """Format ``count`` bytes as KiB/MiB/GiB."""
    if count >= GIB:
        return f"{count / GIB:.2f} GiB"
    if count >= MIB:
        return f"{count / MIB:.1f} MiB"
    return f"{count / KIB:.0f} KiB"


@dataclass(frozen=True)
class NewImageOptions:
    """Size and volume name for a blank image."""

    size_bytes: int = DEFAULT_IMAGE_BYTES
    volume_name: str = DEFAULT_VOLUME_NAME

    @property
    def trimmed_name(self) -> str:
        return self.volume_name.strip()

    @property
    def is_valid(self) -> bool:
        name = self.trimmed_name
        return (
            MIN_IMAGE_BYTES <= self.size_bytes <= MAX_IMAGE_BYTES
            and bool(name)
            and len(name) <= MAX_VOLUME_NAME_LENGTH
        )

    def size_label(self) -> str:
        return (
            f"{binary_size_label(self.size_bytes)}  "
            f"(min {binary_size_label(MIN_IMAGE_BYTES)}, max {binary_size_label(MAX_IMAGE_BYTES)})"
        )


def create_image(engine: VolumeEngine, path: Path, options: NewImageOptions) -> Path:
    """Ask the engine to format a new image at ``path``."""
    if not options.is_valid:
        raise InvalidArgumentError(
            f"invalid image options: {binary_size_label(options.size_bytes)}, name {options.volume_name!r}"
        )
    create_volume = getattr(engine, "create_volume", None)
    if create_volume is None:
        raise InvalidArgumentError("volume engine cannot create images")
    try:
        create_volume(path, options.size_bytes, options.trimmed_name)
    except Exception as exc:
        raise translate_engine_error(f"create {path}", exc) from exc
    logger.info("Created %s image %s at %s", binary_size_label(options.size_bytes), options.trimmed_name, path)
    return path


__all__ = [
    "DEFAULT_IMAGE_BYTES",
    "MAX_IMAGE_BYTES",
    "MAX_VOLUME_NAME_LENGTH",
    "MIN_IMAGE_BYTES",
    "NewImageOptions",
    "binary_size_label",
    "create_image",
]
