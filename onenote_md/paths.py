"""Output path resolution for the pages of a section.

Pages carry no parent pointer; a subpage is recognized only by following its
ancestors in the page stream. ``PathContext`` tracks that running state as a
small state machine and ``PathResolver`` turns each page into a
``PageLocation``, asking an injected ``exists`` callable whether a candidate
file is already taken.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable

from onenote_md.config import ExportConfig, MediaScope, PrefixMode
from onenote_md.model.location import PageLocation
from onenote_md.model.page import Page
from onenote_md.utils import sanitize_name

logger = logging.getLogger(__name__)

MIN_LEVEL = 1
MAX_LEVEL = 3
PREFIX_JOINER = "_"


class LevelState(Enum):
    AT_LEVEL_1 = 1
    AT_LEVEL_2 = 2
    AT_LEVEL_3_RUN = 3


def clamp_level(level: int) -> int:
    """Bound a reported page level to 1..3."""
    return max(MIN_LEVEL, min(MAX_LEVEL, level))


@dataclass
class PathContext:
    """Running ancestor state for one section."""

    state: LevelState = LevelState.AT_LEVEL_1
    name_at_level1: str = ""
    name_at_level2: str = ""
    prefix: tuple[str, ...] = ()

    @property
    def previous_level(self) -> int:
        return self.state.value

    def advance(self, name: str, level: int) -> tuple[str, ...]:
        """Consume one page and return its ancestor prefix segments."""
        level = clamp_level(level)

        if level == 1:
            prefix: tuple[str, ...] = ()
            self.name_at_level1 = name
            self.name_at_level2 = ""
            self.state = LevelState.AT_LEVEL_1
        elif level == 2:
            prefix = _segments(self.name_at_level1)
            self.name_at_level2 = name
            self.state = LevelState.AT_LEVEL_2
        elif self.state == LevelState.AT_LEVEL_2:
            prefix = _segments(self.name_at_level1, self.name_at_level2)
            self.state = LevelState.AT_LEVEL_3_RUN
        elif self.state == LevelState.AT_LEVEL_1:
            # Level 3 directly under a level 1 page: the level 2 slot stays empty.
            prefix = (self.name_at_level1, "") if self.name_at_level1 else ()
            self.state = LevelState.AT_LEVEL_3_RUN
        else:
            prefix = self.prefix

        self.prefix = prefix
        return prefix


def _segments(*names: str) -> tuple[str, ...]:
    return tuple(n for n in names if n)


def relative_depth_prefix(depth: int) -> str:
    """Relative path that climbs ``depth`` directories ('.' for zero)."""
    if depth <= 0:
        return "."
    return "/".join([".."] * depth)


class PathResolver:
    """Assigns each page of one section a unique output location.

    ``group_depth`` is the number of section groups between the notebook
    folder and the section folder. A new resolver must be created for every
    section since the ancestor state does not carry across sections.
    """

    def __init__(
        self,
        section_dir: Path,
        config: ExportConfig,
        group_depth: int = 0,
        exists: Callable[[Path], bool] | None = None,
    ) -> None:
        self.section_dir = Path(section_dir)
        self.config = config
        self.group_depth = group_depth
        self.context = PathContext()
        self._exists = exists or Path.exists

    def resolve(self, page: Page) -> PageLocation:
        """Compute the directory and unique file stem for the next page."""
        name = sanitize_name(page.name, self.config.preserve_spaces_in_names)
        name = name or "Untitled"
        prefix = self.context.advance(name, page.level)
        folders = _segments(*prefix)

        if self.config.prefix_mode == PrefixMode.PREFIX:
            directory = self.section_dir
            stem = PREFIX_JOINER.join(prefix + (name,))
        else:
            directory = self.section_dir.joinpath(*folders)
            stem = name

        stem = self._unique_stem(directory, stem)

        if self.config.media_scope == MediaScope.PER_FOLDER:
            depth = 0
        else:
            # Group folders, the section folder, then any subpage folders.
            depth = self.group_depth + 1
            if self.config.prefix_mode == PrefixMode.SUBFOLDER:
                depth += len(folders)

        location = PageLocation(
            directory=directory,
            file_stem=stem,
            prefix=prefix,
            relative_depth_prefix=relative_depth_prefix(depth),
        )
        logger.debug("Resolved page '%s' -> %s", page.name, location.md_path)
        return location

    def _unique_stem(self, directory: Path, stem: str) -> str:
        """Append -1, -2, ... until no file with the stem exists."""
        candidate = stem
        counter = 0
        while self._exists(directory / f"{candidate}.md"):
            counter += 1
            candidate = f"{stem}-{counter}"
        if counter:
            logger.info("'%s' already exists in %s, using '%s'", stem, directory, candidate)
        return candidate
