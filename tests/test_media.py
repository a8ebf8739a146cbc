"""Tests for onenote_md.media module."""

import re
from pathlib import Path
from unittest.mock import patch

from onenote_md.config import ExportConfig, MediaScope
from onenote_md.media import MediaRelocator, UniqueTicks, media_root_for
from onenote_md.model.asset import FILE, IMAGE, InsertedFile
from onenote_md.model.location import PageLocation
from onenote_md.model.page import Page


def _fixed_ticks():
    return 42


def _setup(tmp_path, stem="My-Page"):
    notebook_dir = tmp_path / "Work"
    location = PageLocation(directory=notebook_dir / "Meetings", file_stem=stem)
    media_dir = notebook_dir / "media"
    media_dir.mkdir(parents=True)
    return notebook_dir, location, media_dir


class TestUniqueTicks:
    """Tests for UniqueTicks."""

    def test_strictly_increasing_with_coarse_clock(self):
        ticks = UniqueTicks()
        with patch("onenote_md.media.time.time_ns", return_value=1000):
            values = [ticks() for _ in range(3)]
        assert values == [1000, 1001, 1002]

    def test_follows_clock(self):
        ticks = UniqueTicks()
        with patch("onenote_md.media.time.time_ns", side_effect=[10, 500]):
            assert ticks() == 10
            assert ticks() == 500


class TestMediaRootFor:
    """Tests for media_root_for."""

    def test_centralized(self):
        loc = PageLocation(directory=Path("/out/nb/S/A"), file_stem="p")
        assert media_root_for(loc, Path("/out/nb"), ExportConfig()) == Path("/out/nb")

    def test_per_folder(self):
        loc = PageLocation(directory=Path("/out/nb/S/A"), file_stem="p")
        config = ExportConfig(media_scope=MediaScope.PER_FOLDER)
        assert media_root_for(loc, Path("/out/nb"), config) == Path("/out/nb/S/A")


class TestRelocateImages:
    """Tests for renaming converter images."""

    def test_renames_in_place(self, tmp_path):
        notebook_dir, location, media_dir = _setup(tmp_path)
        image = media_dir / "image1.png"
        image.write_bytes(b"png")

        relocator = MediaRelocator(ExportConfig(), ticks=_fixed_ticks)
        assets = relocator.relocate([image], Page(name="My Page"), location, notebook_dir)

        assert len(assets) == 1
        asset = assets[0]
        assert asset.kind == IMAGE
        assert asset.original_name == "image1.png"
        assert asset.renamed_name == "My-Page-image1-42.png"
        assert asset.path == media_dir / "My-Page-image1-42.png"
        assert asset.path.read_bytes() == b"png"
        assert not image.exists()
        assert media_dir.is_dir()

    def test_stem_truncated_to_30_chars(self, tmp_path):
        notebook_dir, location, media_dir = _setup(tmp_path, stem="x" * 50)
        image = media_dir / "image1.png"
        image.write_bytes(b"png")

        relocator = MediaRelocator(ExportConfig(), ticks=_fixed_ticks)
        assets = relocator.relocate([image], Page(), location, notebook_dir)

        assert assets[0].renamed_name == "x" * 30 + "-image1-42.png"

    def test_names_unique_across_calls(self, tmp_path):
        notebook_dir, location, media_dir = _setup(tmp_path)
        relocator = MediaRelocator(ExportConfig())
        names = set()
        for _ in range(3):
            image = media_dir / "image1.png"
            image.write_bytes(b"png")
            assets = relocator.relocate([image], Page(), location, notebook_dir)
            names.add(assets[0].renamed_name)
        assert len(names) == 3

    def test_collision_skips_asset_only(self, tmp_path):
        notebook_dir, location, media_dir = _setup(tmp_path)
        (media_dir / "My-Page-image1-42.png").write_bytes(b"old")
        image1 = media_dir / "image1.png"
        image2 = media_dir / "image2.png"
        image1.write_bytes(b"one")
        image2.write_bytes(b"two")

        relocator = MediaRelocator(ExportConfig(), ticks=_fixed_ticks)
        assets = relocator.relocate([image1, image2], Page(), location, notebook_dir)

        assert [a.renamed_name for a in assets] == ["My-Page-image2-42.png"]
        assert len(relocator.failures) == 1
        assert relocator.failures[0].asset == "image1.png"
        assert image1.exists()
        assert (media_dir / "My-Page-image1-42.png").read_bytes() == b"old"

    def test_failures_reset_per_call(self, tmp_path):
        notebook_dir, location, media_dir = _setup(tmp_path)
        relocator = MediaRelocator(ExportConfig(), ticks=_fixed_ticks)
        relocator.relocate([media_dir / "missing.png"], Page(), location, notebook_dir)
        assert len(relocator.failures) == 1
        relocator.relocate([], Page(), location, notebook_dir)
        assert relocator.failures == []


class TestRelocateInsertedFiles:
    """Tests for copying inserted file objects."""

    def test_copies_into_media_folder(self, tmp_path):
        notebook_dir, location, media_dir = _setup(tmp_path, stem="Kickoff")
        cache = tmp_path / "cache" / "0001.bin"
        cache.parent.mkdir()
        cache.write_bytes(b"pdf data")
        page = Page(name="Kickoff", inserted_files=[InsertedFile("My Report.pdf", cache)])

        relocator = MediaRelocator(ExportConfig(), ticks=_fixed_ticks)
        assets = relocator.relocate([], page, location, notebook_dir)

        assert len(assets) == 1
        asset = assets[0]
        assert asset.kind == FILE
        assert asset.original_name == "My Report.pdf"
        assert asset.renamed_name == "Kickoff-My-Report-42.pdf"
        assert (media_dir / "Kickoff-My-Report-42.pdf").read_bytes() == b"pdf data"
        assert cache.exists()

    def test_strips_markdown_specials(self, tmp_path):
        notebook_dir, location, _ = _setup(tmp_path, stem="Budget")
        cache = tmp_path / "b.bin"
        cache.write_bytes(b"x")
        page = Page(inserted_files=[InsertedFile("Q1 $^'[draft].xlsx", cache)])

        relocator = MediaRelocator(ExportConfig(), ticks=_fixed_ticks)
        renamed = relocator.relocate([], page, location, notebook_dir)[0].renamed_name

        for ch in "$^'[]":
            assert ch not in renamed
        assert renamed.endswith(".xlsx")

    def test_creates_per_folder_media_dir(self, tmp_path):
        page_dir = tmp_path / "Work" / "Meetings"
        location = PageLocation(directory=page_dir, file_stem="Kickoff")
        cache = tmp_path / "c.bin"
        cache.write_bytes(b"x")
        page = Page(inserted_files=[InsertedFile("a.txt", cache)])

        relocator = MediaRelocator(ExportConfig(), ticks=_fixed_ticks)
        assets = relocator.relocate([], page, location, page_dir)

        assert assets[0].path == page_dir / "media" / "Kickoff-a-42.txt"

    def test_missing_cache_file_is_recorded(self, tmp_path):
        notebook_dir, location, _ = _setup(tmp_path)
        good = tmp_path / "good.bin"
        good.write_bytes(b"x")
        page = Page(
            inserted_files=[
                InsertedFile("gone.pdf", tmp_path / "nope.bin"),
                InsertedFile("good.pdf", good),
            ]
        )

        relocator = MediaRelocator(ExportConfig(), ticks=_fixed_ticks)
        assets = relocator.relocate([], page, location, notebook_dir)

        assert [a.original_name for a in assets] == ["good.pdf"]
        assert relocator.failures[0].asset == "gone.pdf"

    def test_long_names_keep_their_ticks(self, tmp_path):
        notebook_dir, location, media_dir = _setup(tmp_path, stem="Quarterly review")
        cache = tmp_path / "report.bin"
        cache.write_bytes(b"pdf")
        long_name = "Quarterly financial report " * 4 + ".pdf"
        page = Page(inserted_files=[InsertedFile(long_name, cache)])

        relocator = MediaRelocator(ExportConfig())
        first = relocator.relocate([], page, location, notebook_dir)
        second = relocator.relocate([], page, location, notebook_dir)

        assert relocator.failures == []
        names = [first[0].renamed_name, second[0].renamed_name]
        assert names[0] != names[1]
        for name in names:
            assert len(name) <= 130
            assert re.fullmatch(r"Quarterly-review-Quarterly-financial.*-\d{19}\.pdf", name)
        assert len(list(media_dir.iterdir())) == 2

    def test_long_name_with_fixed_ticks(self, tmp_path):
        notebook_dir, location, _ = _setup(tmp_path, stem="Kickoff")
        cache = tmp_path / "c.bin"
        cache.write_bytes(b"x")
        page = Page(inserted_files=[InsertedFile("a" * 200 + ".docx", cache)])

        relocator = MediaRelocator(ExportConfig(), ticks=_fixed_ticks)
        renamed = relocator.relocate([], page, location, notebook_dir)[0].renamed_name

        assert renamed == "Kickoff-" + "a" * (130 - len("Kickoff--42.docx")) + "-42.docx"
        assert len(renamed) == 130


class TestAssetOwnership:
    """Tests for the page and reference recorded on each asset."""

    def test_image_records_page_and_reference(self, tmp_path):
        notebook_dir, _, media_dir = _setup(tmp_path)
        location = PageLocation(
            directory=notebook_dir / "Meetings",
            file_stem="My-Page",
            relative_depth_prefix="..",
        )
        image = media_dir / "image1.png"
        image.write_bytes(b"png")

        relocator = MediaRelocator(ExportConfig(), ticks=_fixed_ticks)
        asset = relocator.relocate([image], Page(name="My Page"), location, notebook_dir)[0]

        assert asset.page == "My Page"
        assert asset.reference == "../media/My-Page-image1-42.png"

    def test_reference_encodes_spaces(self, tmp_path):
        notebook_dir, _, _ = _setup(tmp_path)
        location = PageLocation(
            directory=notebook_dir / "Meetings",
            file_stem="Team notes",
            relative_depth_prefix="..",
        )
        cache = tmp_path / "c.bin"
        cache.write_bytes(b"x")
        page = Page(name="Team notes", inserted_files=[InsertedFile("Plan v2.pdf", cache)])

        relocator = MediaRelocator(ExportConfig(preserve_spaces_in_names=True), ticks=_fixed_ticks)
        asset = relocator.relocate([], page, location, notebook_dir)[0]

        assert asset.renamed_name == "Team notes-Plan v2-42.pdf"
        assert asset.reference == "../media/Team%20notes-Plan%20v2-42.pdf"
        assert asset.page == "Team notes"

    def test_failure_names_the_page(self, tmp_path):
        notebook_dir, location, media_dir = _setup(tmp_path)
        relocator = MediaRelocator(ExportConfig(), ticks=_fixed_ticks)
        relocator.relocate(
            [media_dir / "missing.png"], Page(name="My Page"), location, notebook_dir
        )
        assert relocator.failures[0].page == "My Page"
