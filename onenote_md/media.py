"""Renaming and relocation of the media files produced for a page."""

import logging
import shutil
import time
from pathlib import Path

from onenote_md.config import ExportConfig, MediaScope
from onenote_md.errors import AssetCopyFailed
from onenote_md.model.asset import FILE, IMAGE, InsertedFile, MediaAsset
from onenote_md.model.location import PageLocation
from onenote_md.model.page import Page
from onenote_md.utils import MAX_NAME_LENGTH, link_target, sanitize_inserted_asset_name

logger = logging.getLogger(__name__)

MEDIA_DIR_NAME = "media"
STEM_PREFIX_LENGTH = 30


class UniqueTicks:
    """Nanosecond timestamps that strictly increase within the process.

    Clocks on some platforms only tick every few milliseconds, so two calls
    in a row can read the same time; the counter bumps past the last value.
    """

    def __init__(self) -> None:
        self._last = 0

    def __call__(self) -> int:
        now = time.time_ns()
        self._last = max(now, self._last + 1)
        return self._last


_ticks = UniqueTicks()


def media_root_for(location: PageLocation, notebook_dir: Path, config: ExportConfig) -> Path:
    """Folder holding the ``media`` directory for a page."""
    if config.media_scope == MediaScope.PER_FOLDER:
        return location.directory
    return notebook_dir


class MediaRelocator:
    """Gives media files process-wide unique names under the media root.

    Failures are per asset: the asset is logged, recorded in ``failures``
    and skipped, and the remaining assets are still relocated.
    """

    def __init__(self, config: ExportConfig, ticks=None) -> None:
        self.config = config
        self._ticks = ticks or _ticks
        self.failures: list[AssetCopyFailed] = []

    def relocate(
        self,
        media_files: list[Path],
        page: Page,
        location: PageLocation,
        media_root: Path,
    ) -> list[MediaAsset]:
        """Rename converter images in place and copy inserted files.

        Returns the assets that were relocated successfully.
        """
        self.failures = []
        assets: list[MediaAsset] = []

        for image_path in media_files:
            try:
                assets.append(self._rename_image(Path(image_path), page, location))
            except AssetCopyFailed as e:
                self._record(e)

        if page.inserted_files:
            media_dir = media_root / MEDIA_DIR_NAME
            media_dir.mkdir(parents=True, exist_ok=True)
            for inserted in page.inserted_files:
                try:
                    assets.append(self._copy_inserted(inserted, page, location, media_dir))
                except AssetCopyFailed as e:
                    self._record(e)

        return assets

    def unique_name(self, location: PageLocation, original_name: str) -> str:
        """'<stem[:30]>-<base>-<ticks><ext>' for a media file."""
        original = Path(original_name)
        stem = location.file_stem[:STEM_PREFIX_LENGTH]
        return f"{stem}-{original.stem}-{self._ticks()}{original.suffix}"

    def inserted_name(self, location: PageLocation, original_name: str) -> str:
        """Unique, link-safe name for an inserted file.

        Only the original base name is shortened to fit the length limit, so
        the page stem, the ticks and the extension always survive.
        """
        preserve = self.config.preserve_spaces_in_names
        original = Path(original_name)
        stem = sanitize_inserted_asset_name(
            location.file_stem[:STEM_PREFIX_LENGTH], preserve
        )
        suffix = sanitize_inserted_asset_name(original.suffix)
        ticks = str(self._ticks())
        room = MAX_NAME_LENGTH - len(stem) - len(ticks) - len(suffix) - 2
        base = sanitize_inserted_asset_name(original.stem, preserve)[: max(room, 0)].rstrip()
        return f"{stem}-{base}-{ticks}{suffix}"

    def _rename_image(
        self, image_path: Path, page: Page, location: PageLocation
    ) -> MediaAsset:
        target = image_path.with_name(self.unique_name(location, image_path.name))
        if target.exists():
            raise AssetCopyFailed(
                f"Target {target.name} already exists",
                page=page.name,
                asset=image_path.name,
            )
        try:
            image_path.rename(target)
        except OSError as e:
            raise AssetCopyFailed(
                f"Cannot rename {image_path}: {e}",
                page=page.name,
                asset=image_path.name,
            ) from e

        logger.debug("Renamed image %s -> %s", image_path.name, target.name)
        return self._asset(image_path.name, target, IMAGE, page, location)

    def _copy_inserted(
        self,
        inserted: InsertedFile,
        page: Page,
        location: PageLocation,
        media_dir: Path,
    ) -> MediaAsset:
        target = media_dir / self.inserted_name(location, inserted.name)
        if target.exists():
            raise AssetCopyFailed(
                f"Target {target.name} already exists",
                page=page.name,
                asset=inserted.name,
            )
        try:
            shutil.copyfile(inserted.cache_path, target)
        except OSError as e:
            raise AssetCopyFailed(
                f"Cannot copy {inserted.cache_path}: {e}",
                page=page.name,
                asset=inserted.name,
            ) from e

        logger.debug("Copied inserted file %s -> %s", inserted.name, target)
        return self._asset(inserted.name, target, FILE, page, location)

    @staticmethod
    def _asset(
        original_name: str, target: Path, kind: str, page: Page, location: PageLocation
    ) -> MediaAsset:
        reference = f"{location.relative_depth_prefix}/{MEDIA_DIR_NAME}/{target.name}"
        return MediaAsset(
            original_name=original_name,
            renamed_name=target.name,
            path=target,
            kind=kind,
            page=page.name,
            reference=link_target(reference),
        )

    def _record(self, error: AssetCopyFailed) -> None:
        logger.warning("Skipping asset '%s' of page '%s': %s", error.asset, error.page, error)
        self.failures.append(error)
