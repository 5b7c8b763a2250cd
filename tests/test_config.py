"""Tests for bookprep.yaml loading."""

import pytest

from bookprep.config import ToolConfig
from bookprep.exceptions import ConfigError


class TestDefaults:
    def test_no_file_gives_defaults(self):
        config = ToolConfig.load()
        assert config.path is None
        assert config.encoding == "utf-8"
        assert config.links["output_template"] == "ch{index:03d}.xhtml"
        assert config.parse["json_indent"] is None

    def test_default_templates_render_macros(self):
        pre = ToolConfig.defaults().preprocess
        assert pre["lesson_heading"].format(title="T") == "\\chapter{T}"
        assert pre["section_heading"].format(title="T") == (
            "\\cleardoublepage\n{\\let\\newpage\\relax\\part{T}}"
        )

    def test_unknown_attribute(self):
        with pytest.raises(AttributeError):
            ToolConfig.defaults().missing_field


class TestLoad:
    def test_picks_up_file_in_cwd(self, isolated_cwd):
        (isolated_cwd / "bookprep.yaml").write_text(
            "links:\n  output_template: 'part{index:02d}.xhtml'\n", encoding="utf-8"
        )
        config = ToolConfig.load()
        assert config.links["output_template"] == "part{index:02d}.xhtml"
        assert config.preprocess["chunk_size"] == 65536

    def test_explicit_path(self, tmp_path):
        path = tmp_path / "conf.yaml"
        path.write_text("parse:\n  json_indent: 4\n", encoding="utf-8")
        config = ToolConfig.load(str(path))
        assert config.parse["json_indent"] == 4
        assert config.path == str(path)

    def test_encoding_alias_accepted(self, tmp_path):
        path = tmp_path / "conf.yaml"
        path.write_text("encoding: latin-1\n", encoding="utf-8")
        assert ToolConfig.load(str(path)).encoding == "latin-1"

    def test_empty_file(self, tmp_path):
        path = tmp_path / "conf.yaml"
        path.write_text("", encoding="utf-8")
        assert ToolConfig.load(str(path)).encoding == "utf-8"

    def test_explicit_path_must_exist(self, tmp_path):
        with pytest.raises(ConfigError, match="not found"):
            ToolConfig.load(str(tmp_path / "nope.yaml"))

    @pytest.mark.parametrize(
        "body",
        [
            "- just\n- a list\n",
            "links: [1, 2]\n",
            "preprocess:\n  chunk_size: 0\n",
            "parse:\n  json_indent: -1\n",
            "preprocess:\n  lesson_heading: '\\chapter{name}'\n",
            "links:\n  output_template: 'ch{number}.xhtml'\n",
            "key: [unclosed\n",
            "encoding: no-such-codec\n",
            "encoding: 12\n",
        ],
    )
    def test_invalid_files(self, tmp_path, body):
        path = tmp_path / "conf.yaml"
        path.write_text(body, encoding="utf-8")
        with pytest.raises(ConfigError):
            ToolConfig.load(str(path))
