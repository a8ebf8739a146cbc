"""Tests for onenote_md.model module."""

from pathlib import Path

from onenote_md.model.asset import FILE, IMAGE, InsertedFile, MediaAsset
from onenote_md.model.location import PageLocation
from onenote_md.model.notebook import Notebook
from onenote_md.model.page import Page
from onenote_md.model.section import Section
from onenote_md.model.section_group import SectionGroup


class TestPage:
    """Tests for Page dataclass."""

    def test_defaults(self):
        page = Page()
        assert page.name == ""
        assert page.content_id == ""
        assert page.level == 1
        assert page.timestamp == ""
        assert page.inserted_files == []

    def test_inserted_files_not_shared(self):
        p1 = Page()
        p2 = Page()
        p1.inserted_files.append(InsertedFile(name="a.pdf", cache_path=Path("a")))
        assert p2.inserted_files == []


class TestSectionGroup:
    """Tests for SectionGroup and Notebook dataclasses."""

    def test_defaults(self):
        group = SectionGroup(name="Archive")
        assert group.section_groups == []
        assert group.sections == []
        assert group.is_recycle_bin is False

    def test_notebook_is_a_section_group(self):
        nb = Notebook(name="Work", sections=[Section(name="S")])
        assert isinstance(nb, SectionGroup)
        assert nb.sections[0].name == "S"
        assert nb.source_path == ""


class TestMediaAsset:
    """Tests for MediaAsset dataclass."""

    def test_image_kind(self):
        asset = MediaAsset("image1.png", "P-image1-1.png", Path("x"))
        assert asset.kind == IMAGE
        assert asset.is_image is True

    def test_file_kind(self):
        asset = MediaAsset("Report.pdf", "P-Report-1.pdf", Path("x"), kind=FILE)
        assert asset.is_image is False

    def test_frozen(self):
        asset = MediaAsset("a", "b", Path("x"))
        try:
            asset.renamed_name = "c"
            assert False, "MediaAsset should be frozen"
        except AttributeError:
            pass

    def test_owner_and_reference(self):
        asset = MediaAsset("a.png", "b.png", Path("x"))
        assert asset.page == ""
        assert asset.reference == ""
        owned = MediaAsset("a.png", "b.png", Path("x"), page="Kickoff", reference="../media/b.png")
        assert owned.page == "Kickoff"
        assert owned.reference == "../media/b.png"


class TestPageLocation:
    """Tests for PageLocation."""

    def test_md_path(self):
        loc = PageLocation(directory=Path("/out/S"), file_stem="Notes-1")
        assert loc.md_path == Path("/out/S/Notes-1.md")

    def test_defaults(self):
        loc = PageLocation(directory=Path("/out"), file_stem="a")
        assert loc.prefix == ()
        assert loc.relative_depth_prefix == "."
