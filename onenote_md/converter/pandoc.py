"""Pandoc wrapper used as the document-to-Markdown converter."""

import logging
import shutil
import subprocess
import tempfile
from dataclasses import dataclass, field
from pathlib import Path

from onenote_md.errors import ConversionFailed

logger = logging.getLogger(__name__)

MEDIA_SUBDIR = "media"


@dataclass
class ConversionResult:
    """Markdown produced for one page and the media files it extracted."""
    markdown: str
    media_files: list[Path] = field(default_factory=list)


def pandoc_available(executable: str = "pandoc") -> bool:
    return shutil.which(executable) is not None


def _snapshot(media_dir: Path) -> dict[Path, int]:
    if not media_dir.is_dir():
        return {}
    return {p: p.stat().st_mtime_ns for p in media_dir.rglob("*") if p.is_file()}


class PandocConverter:
    """Converts a .docx page export to Markdown by running pandoc.

    Pandoc extracts images into ``<media_output_dir>/media`` and writes
    absolute references to them; those are fixed up afterwards by the
    reference rewriter.
    """

    def __init__(self, executable: str = "pandoc") -> None:
        self.executable = executable

    def command(self, source: Path, flavor: str, output_path: Path, media_output_dir: Path) -> list[str]:
        return [
            self.executable,
            "--from=docx",
            f"--to={flavor}",
            "--wrap=none",
            "--markdown-headings=atx",
            f"--extract-media={media_output_dir}",
            "-o",
            str(output_path),
            str(source),
        ]

    def convert(
        self,
        source_bytes: bytes,
        flavor: str,
        output_path: Path,
        media_output_dir: Path,
    ) -> ConversionResult:
        """Convert one page. Raises ConversionFailed on any pandoc error."""
        media_dir = media_output_dir / MEDIA_SUBDIR
        before = _snapshot(media_dir)

        with tempfile.TemporaryDirectory() as tmp:
            source = Path(tmp) / "page.docx"
            source.write_bytes(source_bytes)
            cmd = self.command(source, flavor, output_path, media_output_dir)
            logger.debug("Running %s", " ".join(cmd))
            try:
                subprocess.run(cmd, check=True, capture_output=True, text=True)
            except FileNotFoundError as e:
                raise ConversionFailed(f"pandoc not found: {self.executable}") from e
            except subprocess.CalledProcessError as e:
                stderr = (e.stderr or "").strip()
                raise ConversionFailed(
                    f"pandoc exited with {e.returncode}: {stderr}"
                ) from e

        try:
            markdown = output_path.read_text(encoding="utf-8")
        except OSError as e:
            raise ConversionFailed(f"Cannot read pandoc output {output_path}: {e}") from e

        after = _snapshot(media_dir)
        media_files = sorted(p for p, mtime in after.items() if before.get(p) != mtime)
        return ConversionResult(markdown=markdown, media_files=media_files)
