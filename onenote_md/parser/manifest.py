"""Notebook source backed by a JSON manifest.

The manifest describes the notebook tree the host application reported,
with each page pointing at its exported document on disk:

    {
      "notebooks": [
        {
          "name": "Work",
          "section_groups": [{"name": "Archive", "is_recycle_bin": false, ...}],
          "sections": [
            {
              "name": "Meetings",
              "pages": [
                {
                  "name": "Kickoff",
                  "content": "pages/kickoff.docx",
                  "level": 1,
                  "timestamp": "2023-05-01T10:00:00.000Z",
                  "inserted_files": [{"name": "Report.pdf", "cache_path": "cache/r.pdf"}]
                }
              ]
            }
          ]
        }
      ]
    }

Relative paths resolve against the manifest's directory.
"""

import json
import logging
from pathlib import Path

from onenote_md.model.asset import InsertedFile
from onenote_md.model.notebook import Notebook
from onenote_md.model.page import Page
from onenote_md.model.section import Section
from onenote_md.model.section_group import SectionGroup

logger = logging.getLogger(__name__)


class ManifestSource:
    """Loads notebooks from a manifest and serves page content bytes."""

    def __init__(self, manifest_path: str | Path) -> None:
        self.manifest_path = Path(manifest_path)
        self.base_dir = self.manifest_path.parent

    def load(self) -> list[Notebook]:
        """Parse the manifest into Notebook objects.

        Raises ValueError if the manifest is missing or malformed.
        """
        try:
            data = json.loads(self.manifest_path.read_text(encoding="utf-8"))
        except FileNotFoundError as e:
            raise ValueError(f"Manifest not found: {self.manifest_path}") from e
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid manifest {self.manifest_path}: {e}") from e

        if not isinstance(data, dict) or not isinstance(data.get("notebooks"), list):
            raise ValueError(f"Manifest {self.manifest_path} has no 'notebooks' list")

        notebooks = []
        for raw in data["notebooks"]:
            notebook = Notebook(name=raw.get("name", ""), source_path=str(self.manifest_path))
            self._fill_group(notebook, raw)
            notebooks.append(notebook)
        logger.info("Loaded %d notebook(s) from %s", len(notebooks), self.manifest_path)
        return notebooks

    def read_content(self, page: Page) -> bytes:
        """Return the raw document bytes for a page."""
        return self._resolve(page.content_id).read_bytes()

    def _fill_group(self, group: SectionGroup, raw: dict) -> None:
        for raw_group in raw.get("section_groups", []):
            child = SectionGroup(
                name=raw_group.get("name", ""),
                is_recycle_bin=bool(raw_group.get("is_recycle_bin", False)),
            )
            self._fill_group(child, raw_group)
            group.section_groups.append(child)

        for raw_section in raw.get("sections", []):
            section = Section(name=raw_section.get("name", ""))
            for raw_page in raw_section.get("pages", []):
                section.pages.append(self._page(raw_page))
            group.sections.append(section)

    def _page(self, raw: dict) -> Page:
        if "content" not in raw:
            raise ValueError(f"Page '{raw.get('name', '')}' has no 'content' path")
        try:
            level = int(raw.get("level", 1))
        except (TypeError, ValueError) as e:
            raise ValueError(f"Page '{raw.get('name', '')}' has an invalid level") from e
        return Page(
            name=raw.get("name", ""),
            content_id=str(raw["content"]),
            level=level,
            timestamp=raw.get("timestamp", ""),
            inserted_files=[
                InsertedFile(name=f["name"], cache_path=self._resolve(f["cache_path"]))
                for f in raw.get("inserted_files", [])
            ],
        )

    def _resolve(self, value: str) -> Path:
        path = Path(value)
        if not path.is_absolute():
            path = self.base_dir / path
        return path
