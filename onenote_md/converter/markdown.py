"""Notebook to Markdown export.

Walks the notebook tree, converts each page with the external converter and
runs the result through media relocation, reference rewriting and front
matter injection before writing the final file.
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable

from onenote_md.config import ExportConfig
from onenote_md.errors import (
    ConversionFailed,
    FilesystemUnavailable,
    MalformedTimestamp,
    ReferenceRewriteFailed,
)
from onenote_md.front_matter import inject_front_matter
from onenote_md.media import MediaRelocator, media_root_for
from onenote_md.model.notebook import Notebook
from onenote_md.model.page import Page
from onenote_md.model.section import Section
from onenote_md.model.section_group import SectionGroup
from onenote_md.paths import PathResolver
from onenote_md.rewrite import ReferenceRewriter
from onenote_md.utils import sanitize_name

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExportFailure:
    """A non-fatal failure recorded during the run."""
    page: str
    step: str
    message: str
    asset: str = ""

    def __str__(self) -> str:
        target = f"{self.page} [{self.asset}]" if self.asset else self.page
        return f"{self.step}: {target}: {self.message}"


@dataclass
class ExportReport:
    """Summary of an export run."""
    pages_exported: int = 0
    files_written: list[Path] = field(default_factory=list)
    failures: list[ExportFailure] = field(default_factory=list)


class MarkdownExporter:
    """Exports notebooks to a tree of Markdown files.

    ``converter`` needs a ``convert(source_bytes, flavor, output_path,
    media_output_dir)`` method returning a ConversionResult, and
    ``read_content`` returns the source document bytes of a page.
    """

    def __init__(
        self,
        config: ExportConfig,
        converter,
        read_content: Callable[[Page], bytes],
    ) -> None:
        self.config = config
        self.converter = converter
        self.read_content = read_content
        self.output_dir = (
            Path(config.destination_root) if config.destination_root is not None else None
        )
        self.relocator = MediaRelocator(config)
        self.rewriter = ReferenceRewriter(config)

    def check_destination(self) -> None:
        """Raise FilesystemUnavailable unless the destination is writable."""
        if self.output_dir is None:
            raise FilesystemUnavailable("No destination configured")
        if not self.output_dir.is_dir():
            raise FilesystemUnavailable(f"Destination does not exist: {self.output_dir}")
        if not os.access(self.output_dir, os.W_OK):
            raise FilesystemUnavailable(f"Destination is not writable: {self.output_dir}")

    def export(self, notebooks: list[Notebook]) -> ExportReport:
        """Export every notebook matching the configured filter."""
        self.check_destination()
        report = ExportReport()
        wanted = self.config.target_notebook_filter

        for notebook in notebooks:
            if wanted and notebook.name.lower() != wanted.lower():
                logger.info("Skipping notebook '%s'", notebook.name)
                continue
            self.export_notebook(notebook, report)

        return report

    def export_notebook(self, notebook: Notebook, report: ExportReport) -> None:
        notebook_dir = self.output_dir / self._dir_name(notebook.name)
        logger.info("Exporting notebook '%s' to %s", notebook.name, notebook_dir)
        self._export_group(notebook, notebook_dir, notebook_dir, 0, report)

    def _export_group(
        self,
        group: SectionGroup,
        group_dir: Path,
        notebook_dir: Path,
        depth: int,
        report: ExportReport,
    ) -> None:
        for section in group.sections:
            self.export_section(section, group_dir, notebook_dir, depth, report)

        for child in group.section_groups:
            if child.is_recycle_bin:
                logger.info("Skipping recycle bin '%s'", child.name)
                continue
            child_dir = group_dir / self._dir_name(child.name)
            self._export_group(child, child_dir, notebook_dir, depth + 1, report)

    def export_section(
        self,
        section: Section,
        parent_dir: Path,
        notebook_dir: Path,
        group_depth: int,
        report: ExportReport,
    ) -> None:
        """Export the pages of a section in order."""
        section_dir = parent_dir / self._dir_name(section.name)
        try:
            section_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.warning("Section '%s' skipped: %s", section.name, e)
            report.failures.append(ExportFailure(section.name, "filesystem", str(e)))
            return

        resolver = PathResolver(section_dir, self.config, group_depth)

        for page in section.pages:
            self.export_page(page, resolver, notebook_dir, report)

    def export_page(
        self,
        page: Page,
        resolver: PathResolver,
        notebook_dir: Path,
        report: ExportReport,
    ) -> Path | None:
        """Convert and post-process one page. Returns the written path.

        Any filesystem error is recorded against the page and the export
        moves on to the next one.
        """
        try:
            return self._export_page(page, resolver, notebook_dir, report)
        except OSError as e:
            self._fail(report, page, "filesystem", e)
            return None

    def _export_page(
        self,
        page: Page,
        resolver: PathResolver,
        notebook_dir: Path,
        report: ExportReport,
    ) -> Path | None:
        location = resolver.resolve(page)
        location.directory.mkdir(parents=True, exist_ok=True)
        media_root = media_root_for(location, notebook_dir, self.config)
        md_path = location.md_path

        try:
            source = self.read_content(page)
            result = self.converter.convert(
                source, self.config.converter_flavor, md_path, media_root
            )
        except (ConversionFailed, OSError) as e:
            self._fail(report, page, "conversion", e)
            return None

        assets = self.relocator.relocate(result.media_files, page, location, media_root)
        for error in self.relocator.failures:
            report.failures.append(
                ExportFailure(page.name, "asset", str(error), asset=error.asset)
            )

        text = result.markdown
        try:
            text = self.rewriter.rewrite(text, assets, location, media_root)
        except ReferenceRewriteFailed as e:
            self._fail(report, page, "rewrite", e)

        lines = text.split("\n")
        try:
            lines = inject_front_matter(lines, page, self.config)
        except MalformedTimestamp as e:
            self._fail(report, page, "front matter", e)
            lines = inject_front_matter(
                lines, page, self.config.with_overrides(include_timestamp_header=False)
            )

        md_path.write_text("\n".join(lines), encoding="utf-8")
        report.pages_exported += 1
        report.files_written.append(md_path)
        report.files_written.extend(a.path for a in assets)
        logger.info("Wrote %s", md_path)
        return md_path

    def _dir_name(self, name: str) -> str:
        return sanitize_name(name, self.config.preserve_spaces_in_names) or "Untitled"

    def _fail(self, report: ExportReport, page: Page, step: str, error: Exception) -> None:
        logger.warning("Page '%s' failed at %s: %s", page.name, step, error)
        logger.debug("Full traceback:", exc_info=True)
        report.failures.append(ExportFailure(page.name, step, str(error)))
