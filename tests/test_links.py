"""Tests for the EPUB link rewriter."""

import io
import re

import pytest

from bookprep.config import ToolConfig
from bookprep.console import Reporter
from bookprep.exceptions import InputError, UnresolvedLinkError
from bookprep.links import (
    FileIndex,
    build_file_index,
    link_key,
    rewrite_directory,
    rewrite_links,
)


def quiet():
    return Reporter(stream=io.StringIO())


class TestLinkKey:
    def test_leading_zero_stripped(self):
        assert link_key("section-1-lesson-04-widgets.md") == "/section-1/lesson-4-widgets"

    def test_two_digit_lesson_kept(self):
        assert link_key("section-2-lesson-12-maps.md") == "/section-2/lesson-12-maps"

    @pytest.mark.parametrize(
        "name", ["intro.md", "section-1-lesson-01-intro.xhtml", "section-1.md"]
    )
    def test_non_lesson_names(self, name):
        assert link_key(name) is None


class TestFileIndex:
    def test_positions_follow_sorted_listing(self):
        index = build_file_index(
            ["section-1-lesson-02-next.md", "cover.jpg", "section-1-lesson-01-intro.md"]
        )
        assert dict(index.items()) == {
            "/section-1/lesson-1-intro": "ch002.xhtml",
            "/section-1/lesson-2-next": "ch003.xhtml",
        }

    def test_longest_prefix_wins(self):
        index = FileIndex()
        index.add("/section-1/lesson-1-go", "ch001.xhtml")
        index.add("/section-1/lesson-1-go-deeper", "ch002.xhtml")
        assert index.resolve("/section-1/lesson-1-go-deeper") == ("ch002.xhtml", "")
        assert index.resolve("/section-1/lesson-1-go") == ("ch001.xhtml", "")
        assert index.resolve("/section-9/lesson-1-x") is None

    def test_custom_output_template(self):
        config = ToolConfig.defaults()
        config.links["output_template"] = "chapter-{index}.xhtml"
        index = build_file_index(["section-1-lesson-01-a.md"], config)
        assert index["/section-1/lesson-1-a"] == "chapter-1.xhtml"


class TestRewriteLinks:
    def setup_method(self):
        self.index = build_file_index(
            ["section-1-lesson-01-intro.md", "section-1-lesson-02-next.md"]
        )

    def test_anchor_preserved(self):
        out = rewrite_links("[x](/section-1/lesson-1-intro#anchor)", self.index)
        assert out == "[x](ch001.xhtml#anchor)"

    def test_without_anchor(self):
        out = rewrite_links("see [next](/section-1/lesson-2-next).", self.index)
        assert out == "see [next](ch002.xhtml)."

    def test_trailing_slash_dropped(self):
        out = rewrite_links("[x](/section-1/lesson-2-next/#top)", self.index)
        assert out == "[x](ch002.xhtml#top)"

    def test_deeper_path_keeps_remainder(self):
        out = rewrite_links("[x](/section-1/lesson-1-intro/figures#a)", self.index)
        assert out == "[x](ch001.xhtml/figures#a)"

    def test_deeper_path_trailing_slash_dropped(self):
        out = rewrite_links("[x](/section-1/lesson-2-next/notes/)", self.index)
        assert out == "[x](ch002.xhtml/notes)"

    def test_deeper_unresolved_link(self):
        with pytest.raises(UnresolvedLinkError) as excinfo:
            rewrite_links("[x](/section-2/lesson-1-gone/figures#a)", self.index)
        assert excinfo.value.target == "(/section-2/lesson-1-gone/figures#a)"

    def test_other_links_untouched(self):
        src = "[site](https://example.com) and [img](images/a.png)"
        assert rewrite_links(src, self.index) == src

    def test_unresolved_link(self):
        with pytest.raises(UnresolvedLinkError) as excinfo:
            rewrite_links("[x](/section-3/lesson-9-gone)", self.index, source="a.md")
        assert excinfo.value.target == "(/section-3/lesson-9-gone)"
        assert "a.md" in str(excinfo.value)


class TestRewriteDirectory:
    def test_rewrites_in_place(self, lesson_dir):
        changed = rewrite_directory(str(lesson_dir), reporter=quiet())
        target = lesson_dir / "section-1-lesson-02-next.md"
        assert changed == [str(target)]
        assert "[x](ch001.xhtml#anchor)" in target.read_text(encoding="utf-8")

    def test_no_section_links_remain(self, lesson_dir):
        rewrite_directory(str(lesson_dir), reporter=quiet())
        for path in lesson_dir.iterdir():
            assert not re.search(r"\(/section-\d+/", path.read_text(encoding="utf-8"))
        text = (lesson_dir / "section-1-lesson-02-next.md").read_text(encoding="utf-8")
        assert "![fig](ch001.xhtml/figures/cat.png)" in text

    def test_deterministic(self, lesson_dir, tmp_path):
        twin = tmp_path / "twin"
        twin.mkdir()
        for path in lesson_dir.iterdir():
            (twin / path.name).write_bytes(path.read_bytes())

        rewrite_directory(str(lesson_dir), reporter=quiet())
        rewrite_directory(str(twin), reporter=quiet())
        for path in lesson_dir.iterdir():
            assert path.read_bytes() == (twin / path.name).read_bytes()

    def test_dry_run_writes_nothing(self, lesson_dir):
        before = (lesson_dir / "section-1-lesson-02-next.md").read_text(encoding="utf-8")
        changed = rewrite_directory(str(lesson_dir), dry_run=True, reporter=quiet())
        assert len(changed) == 1
        after = (lesson_dir / "section-1-lesson-02-next.md").read_text(encoding="utf-8")
        assert after == before

    def test_unresolved_link_leaves_files_untouched(self, lesson_dir):
        (lesson_dir / "zz-appendix.md").write_text(
            "[gone](/section-4/lesson-1-missing)\n", encoding="utf-8"
        )
        with pytest.raises(UnresolvedLinkError):
            rewrite_directory(str(lesson_dir), reporter=quiet())
        text = (lesson_dir / "section-1-lesson-02-next.md").read_text(encoding="utf-8")
        assert "/section-1/lesson-1-intro#anchor" in text

    def test_binary_files_skipped(self, lesson_dir):
        (lesson_dir / "cover.jpg").write_bytes(b"\xff\xd8\xff\xe0binary")
        stream = io.StringIO()
        rewrite_directory(str(lesson_dir), reporter=Reporter(stream=stream))
        assert "cover.jpg" in stream.getvalue()
        assert (lesson_dir / "cover.jpg").read_bytes() == b"\xff\xd8\xff\xe0binary"

    def test_verbose_lists_entries(self, lesson_dir):
        stream = io.StringIO()
        rewrite_directory(str(lesson_dir), reporter=Reporter(verbose=True, stream=stream))
        log = stream.getvalue()
        assert "section-1-lesson-01-intro.md" in log
        assert re.search(r"Rewrote section-1-lesson-02-next\.md", log)

    def test_missing_directory(self, tmp_path):
        with pytest.raises(InputError):
            rewrite_directory(str(tmp_path / "nope"), reporter=quiet())
