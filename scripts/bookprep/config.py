"""
Tool configuration: load, validate, and provide defaults for bookprep.yaml.

The file is optional. Without one every tool runs on the defaults below,
which reproduce the stock output (ch001.xhtml names, \\chapter / \\part
heading macros).
"""

import codecs
import copy
import os

import yaml

from bookprep.exceptions import ConfigError


DEFAULT_FILENAME = "bookprep.yaml"

# Defaults applied if missing
DEFAULTS = {
    "encoding": "utf-8",
    "parse": {},
    "preprocess": {},
    "links": {},
}

PARSE_DEFAULTS = {
    "json_indent": None,
}

PREPROCESS_DEFAULTS = {
    "chunk_size": 65536,
    "lesson_heading": "\\chapter{{{title}}}",
    "section_heading": "\\cleardoublepage\n{{\\let\\newpage\\relax\\part{{{title}}}}}",
}

LINKS_DEFAULTS = {
    "output_template": "ch{index:03d}.xhtml",
}

SECTION_DEFAULTS = {
    "parse": PARSE_DEFAULTS,
    "preprocess": PREPROCESS_DEFAULTS,
    "links": LINKS_DEFAULTS,
}


class ToolConfig:
    """
    Loaded, validated tool configuration.

    Usage:
        config = ToolConfig.load()                  # ./bookprep.yaml or defaults
        config = ToolConfig.load("conf/book.yaml")  # explicit file, must exist
        config.encoding                             # "utf-8"
        config.links["output_template"]             # "ch{index:03d}.xhtml"
    """

    def __init__(self, data, path=None):
        self._data = data
        self.path = path

    @classmethod
    def defaults(cls):
        return cls(cls._apply_defaults({}))

    @classmethod
    def load(cls, path=None):
        """
        Load and validate a config file.

        An explicit path must exist. Without one, bookprep.yaml in the
        current directory is used when present, defaults otherwise.
        """
        if path is None:
            candidate = os.path.join(os.getcwd(), DEFAULT_FILENAME)
            if not os.path.exists(candidate):
                return cls.defaults()
            path = candidate
        elif not os.path.exists(path):
            raise ConfigError(f"Config file not found: {path}")

        try:
            with open(path, encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"{path} is not valid YAML: {e}") from e

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigError(
                f"{path} must be a YAML mapping, got {type(data).__name__}"
            )

        for section in SECTION_DEFAULTS:
            value = data.get(section)
            if value is not None and not isinstance(value, dict):
                raise ConfigError(
                    f"{path}: '{section}' must be a mapping, got {type(value).__name__}"
                )

        data = cls._apply_defaults(data)
        cls._validate(data, path)
        return cls(data, path)

    @staticmethod
    def _apply_defaults(data):
        for key, default in DEFAULTS.items():
            if data.get(key) is None:
                data[key] = copy.deepcopy(default)
        for section, defaults in SECTION_DEFAULTS.items():
            for key, default in defaults.items():
                data[section].setdefault(key, default)
        return data

    @staticmethod
    def _validate(data, path):
        encoding = data["encoding"]
        try:
            codecs.lookup(encoding)
        except (LookupError, TypeError) as e:
            raise ConfigError(f"{path}: encoding is not a known codec: {encoding!r}") from e

        chunk_size = data["preprocess"]["chunk_size"]
        if not isinstance(chunk_size, int) or chunk_size <= 0:
            raise ConfigError(f"{path}: preprocess.chunk_size must be a positive integer")

        indent = data["parse"]["json_indent"]
        if indent is not None and (not isinstance(indent, int) or indent < 0):
            raise ConfigError(f"{path}: parse.json_indent must be a non-negative integer")

        for key in ["lesson_heading", "section_heading"]:
            template = data["preprocess"][key]
            try:
                template.format(title="x")
            except (AttributeError, KeyError, IndexError, ValueError) as e:
                raise ConfigError(f"{path}: preprocess.{key} is not a valid template: {e}")

        try:
            data["links"]["output_template"].format(index=1)
        except (AttributeError, KeyError, IndexError, ValueError) as e:
            raise ConfigError(f"{path}: links.output_template is not a valid template: {e}")

    # ── Attribute access ───────────────────────────────────

    def __getattr__(self, name):
        if name.startswith("_"):
            raise AttributeError(name)
        try:
            return self._data[name]
        except KeyError:
            raise AttributeError(f"ToolConfig has no field '{name}'")

    def get(self, key, default=None):
        return self._data.get(key, default)

    def __getitem__(self, key):
        return self._data[key]

    def __contains__(self, key):
        return key in self._data
