"""Notebook model, the root section group."""

from dataclasses import dataclass

from onenote_md.model.section_group import SectionGroup


@dataclass
class Notebook(SectionGroup):
    """A notebook. Its own sections and groups form the top of the tree."""

    source_path: str = ""
