"""
Rewrite cross-lesson links after the EPUB build renames chapter files.

Lesson files are authored as section-N-lesson-M-slug.md and link to each
other as (/section-N/lesson-M-slug#anchor). The EPUB packager emits the
same files, in listing order, as ch001.xhtml, ch002.xhtml, ... so every
such link has to point at the new name.

Usage:
    changed = rewrite_directory("build/epub")
"""

import os
import re

from bookprep.config import ToolConfig
from bookprep.console import Reporter
from bookprep.exceptions import InputError, UnresolvedLinkError


LESSON_FILE = re.compile(r"^(section-\d+)-(lesson-\d+-[^.]+)\.md$")

# Lesson numbers are zero-padded in file names but not in link targets
LESSON_LEADING_ZERO = re.compile(r"^lesson-0(\d)-")

# (/section-N/path[/][#anchor]); a trailing slash is dropped
LINK_TARGET = re.compile(r"\((/section-\d+/[^)#]+?)/?(?:#([^)]+))?\)")


# ── File index ─────────────────────────────────────────────────────────


class FileIndex:
    """
    Canonical link key → output file name, in listing order.

    Usage:
        index = FileIndex()
        index.add("/section-1/lesson-1-intro", "ch001.xhtml")
        index.resolve("/section-1/lesson-1-intro")  # ("ch001.xhtml", "")
    """

    def __init__(self):
        self.entries = {}

    def add(self, key, output_name):
        self.entries[key] = output_name

    def resolve(self, path):
        """
        Find the longest registered key that prefixes `path`.

        Returns (output_name, remainder) or None if nothing matches.
        """
        best = None
        for key in self.entries:
            if path.startswith(key) and (best is None or len(key) > len(best)):
                best = key
        if best is None:
            return None
        return self.entries[best], path[len(best):]

    def __len__(self):
        return len(self.entries)

    def __contains__(self, key):
        return key in self.entries

    def __getitem__(self, key):
        return self.entries[key]

    def items(self):
        return self.entries.items()


def link_key(filename):
    """
    Canonical link key for a lesson file name, or None if it isn't one.

    section-1-lesson-04-widgets.md → /section-1/lesson-4-widgets
    """
    match = LESSON_FILE.match(filename)
    if not match:
        return None
    section, lesson = match.groups()
    lesson = LESSON_LEADING_ZERO.sub(r"lesson-\1-", lesson)
    return f"/{section}/{lesson}"


def build_file_index(filenames, config=None):
    """
    Index lesson files by their position in the sorted listing.

    The chapter number counts every entry in the listing, so files that
    are not lessons still take up a number.
    """
    config = config or ToolConfig.defaults()
    template = config.links["output_template"]
    index = FileIndex()
    for position, filename in enumerate(sorted(filenames), start=1):
        key = link_key(filename)
        if key is not None:
            index.add(key, template.format(index=position))
    return index


# ── Rewriting ──────────────────────────────────────────────────────────


def rewrite_links(content, index, source=None):
    """Point every /section-N/... link in `content` at its output file."""

    def replace(match):
        path, anchor = match.groups()
        resolved = index.resolve(path)
        if resolved is None:
            raise UnresolvedLinkError(match.group(0), source)
        output_name, remainder = resolved
        fragment = f"#{anchor}" if anchor else ""
        return f"({output_name}{remainder}{fragment})"

    return LINK_TARGET.sub(replace, content)


def rewrite_directory(directory, config=None, dry_run=False, reporter=None):
    """
    Rewrite links in every file of `directory` in place.

    All files are read and rewritten in memory first; nothing is written
    unless every link resolves.

    Args:
        directory: Folder holding the renamed lesson files
        config:    ToolConfig (defaults if None)
        dry_run:   Report what would change without writing
        reporter:  console.Reporter for progress output

    Returns the list of paths whose content changed.
    """
    config = config or ToolConfig.defaults()
    reporter = reporter or Reporter()
    encoding = config.encoding

    try:
        filenames = sorted(os.listdir(directory))
    except OSError as e:
        raise InputError(f"Cannot list directory, {directory}: {e.strerror or e}") from e

    for filename in filenames:
        reporter.log(f"  {filename}")

    index = build_file_index(filenames, config)
    reporter.log(f"  Indexed {len(index)} lesson file(s)")

    planned = []
    for filename in filenames:
        path = os.path.join(directory, filename)
        if not os.path.isfile(path):
            continue

        try:
            with open(path, "r", encoding=encoding, newline="") as f:
                content = f.read()
        except UnicodeDecodeError:
            reporter.warn(f"Skipping {filename}: not {encoding} text")
            continue
        except OSError as e:
            raise InputError(f"Cannot open file, {path}: {e.strerror or e}") from e

        new_content = rewrite_links(content, index, source=filename)
        if new_content != content:
            planned.append((path, new_content))

    for path, new_content in planned:
        if dry_run:
            reporter.log(f"  Would rewrite {os.path.basename(path)}")
            continue
        with open(path, "w", encoding=encoding, newline="") as f:
            f.write(new_content)
        reporter.ok(f"Rewrote {os.path.basename(path)}")

    return [path for path, _ in planned]
