"""Embedded files and media assets attached to a page."""

from dataclasses import dataclass
from pathlib import Path

IMAGE = "image"
FILE = "file"


@dataclass(frozen=True)
class InsertedFile:
    """An inserted file object as reported by the notebook source."""
    name: str
    cache_path: Path


@dataclass(frozen=True)
class MediaAsset:
    """A media file after it has been renamed and relocated.

    ``reference`` is the path a page uses to link to the file, relative to
    the page and with spaces percent-encoded.
    """
    original_name: str
    renamed_name: str
    path: Path
    kind: str = IMAGE  # "image" or "file"
    page: str = ""
    reference: str = ""

    @property
    def is_image(self) -> bool:
        return self.kind == IMAGE
