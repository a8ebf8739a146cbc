"""Section group model."""

from dataclasses import dataclass, field

from onenote_md.model.section import Section


@dataclass
class SectionGroup:
    """A named collection of sections and nested section groups."""

    name: str = ""
    section_groups: list["SectionGroup"] = field(default_factory=list)
    sections: list[Section] = field(default_factory=list)
    is_recycle_bin: bool = False
