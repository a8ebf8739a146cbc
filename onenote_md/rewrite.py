"""Post-conversion rewrite of media references in a Markdown document.

The steps run in a fixed order and each can be turned off on its own:

1. inserted file names become links into the media folder
2. converter image names become their renamed counterparts
3. the absolute media root becomes a path relative to the page
4. optional whitespace collapsing
5. optional removal of backslash escapes
"""

import logging
import re
from pathlib import Path

from onenote_md.config import ExportConfig
from onenote_md.errors import ReferenceRewriteFailed
from onenote_md.media import MEDIA_DIR_NAME
from onenote_md.model.asset import MediaAsset
from onenote_md.model.location import PageLocation
from onenote_md.utils import link_target

logger = logging.getLogger(__name__)

NBSP = "\u00a0"

# Backslash escapes for the ASCII punctuation Markdown lets you escape.
_ESCAPE = re.compile(r"\\([!-/:-@\[-`{-~])")


class ReferenceRewriter:
    """Applies the rewrite pipeline to generated Markdown text."""

    def __init__(
        self,
        config: ExportConfig,
        links: bool = True,
        images: bool = True,
        relative_paths: bool = True,
    ) -> None:
        self.config = config
        self.links = links
        self.images = images
        self.relative_paths = relative_paths

    def rewrite(
        self,
        text: str,
        assets: list[MediaAsset],
        location: PageLocation,
        media_root: Path,
    ) -> str:
        """Return the rewritten document text."""
        if self.links:
            text = link_inserted_files(text, assets, location.relative_depth_prefix)
        if self.images:
            text = rename_image_references(text, assets)
        if self.relative_paths:
            text = relativize_media_root(text, media_root, location.relative_depth_prefix)
        if self.config.collapse_whitespace:
            text = collapse_whitespace(text)
        if self.config.strip_escapes:
            text = strip_escapes(text)
        logger.debug("Rewrote %d media reference(s) for %s", len(assets), location.md_path)
        return text


def _replace_literals(text: str, replacements: dict[str, str]) -> str:
    """Replace every literal key with its value in a single pass.

    Longer keys win where one name is contained in another, and text that
    was already replaced is never matched again.
    """
    if not replacements:
        return text
    for original in replacements:
        if not original:
            raise ReferenceRewriteFailed("Cannot rewrite an empty media name")
    keys = sorted(replacements, key=len, reverse=True)
    pattern = re.compile("|".join(re.escape(k) for k in keys))
    return pattern.sub(lambda m: replacements[m.group(0)], text)


def link_inserted_files(text: str, assets: list[MediaAsset], depth_prefix: str) -> str:
    """Turn inserted file display names into Markdown links."""
    links = {
        a.original_name: (
            f"[{a.renamed_name}]({depth_prefix}/{MEDIA_DIR_NAME}/{link_target(a.renamed_name)})"
        )
        for a in assets
        if not a.is_image
    }
    return _replace_literals(text, links)


def rename_image_references(text: str, assets: list[MediaAsset]) -> str:
    """Point image references at the renamed image files.

    Spaces in the new names are percent-encoded so the references stay
    valid link targets.
    """
    names = {a.original_name: link_target(a.renamed_name) for a in assets if a.is_image}
    return _replace_literals(text, names)


def relativize_media_root(text: str, media_root: Path, depth_prefix: str) -> str:
    """Replace the absolute media root with the page's relative prefix.

    Covers Markdown references and raw HTML ``src`` attributes, which the
    converter may write in native or forward-slash form.
    """
    roots = {str(media_root), media_root.as_posix()}
    return _replace_literals(text, {root: depth_prefix for root in roots})


def collapse_whitespace(text: str) -> str:
    """Turn non-breaking spaces into line breaks and halve doubled breaks."""
    return text.replace(NBSP, "\n").replace("\n\n", "\n")


def strip_escapes(text: str) -> str:
    """Remove backslash escapes the converter put before punctuation."""
    text = text.replace("\\\n", "\n")
    return _ESCAPE.sub(r"\1", text)
