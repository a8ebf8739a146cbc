"""Shared fixtures for the exporter tests."""

from pathlib import Path

import pytest

from onenote_md.converter.pandoc import ConversionResult
from onenote_md.errors import ConversionFailed

HEADER = ["Converted title", "m1", "m2", "m3", "m4", "m5"]


class FakeConverter:
    """Stands in for pandoc.

    Writes a converter-style document whose body is the page content, and
    drops ``image1.png`` into the media folder for pages listed in
    ``with_image``.
    """

    def __init__(self, with_image=(), fail=()):
        self.with_image = set(with_image)
        self.fail = set(fail)
        self.calls = []

    def convert(self, source_bytes, flavor, output_path, media_output_dir):
        body = source_bytes.decode("utf-8")
        self.calls.append((body, flavor, Path(output_path), Path(media_output_dir)))
        if body in self.fail:
            raise ConversionFailed(f"cannot convert {body}")

        lines = HEADER + [body]
        media_files = []
        if body in self.with_image:
            media_dir = Path(media_output_dir) / "media"
            media_dir.mkdir(parents=True, exist_ok=True)
            image = media_dir / "image1.png"
            image.write_bytes(b"\x89PNG")
            media_files.append(image)
            lines.append(f"![]({media_output_dir}/media/image1.png)")

        markdown = "\n".join(lines)
        Path(output_path).write_text(markdown, encoding="utf-8")
        return ConversionResult(markdown=markdown, media_files=media_files)


@pytest.fixture
def fake_converter():
    return FakeConverter()


@pytest.fixture
def read_content():
    """Page content is simply the page name."""
    return lambda page: (page.content_id or page.name).encode("utf-8")


@pytest.fixture
def make_converter():
    return FakeConverter
