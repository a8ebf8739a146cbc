"""Output location computed for a page."""

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class PageLocation:
    """Where a page's Markdown file goes and how it reaches the media root."""

    directory: Path
    file_stem: str
    prefix: tuple[str, ...] = ()
    relative_depth_prefix: str = "."

    @property
    def md_path(self) -> Path:
        return self.directory / f"{self.file_stem}.md"
