"""
Pre-process manuscript Markdown for the print (LaTeX) build.

Line-oriented rewrite of the Markdown stream:
    1. Pipe tables → grid tables, so the typesetter can size columns
    2. Drop the styled caption line that repeats an image's alt text
    3. "# Lesson N: Title"  → \\chapter{Title}
       "# Section N: Title" → \\cleardoublepage + unnumbered-page \\part{Title}

Every other line passes through untouched.

Library entry points: preprocess_text() for a string, preprocess_stream()
for file objects (the preprocess-markdown command wires it to stdin/stdout).
"""

import re

from bookprep.config import ToolConfig


LESSON_HEADING = re.compile(r"^# Lesson \d+:")
SECTION_HEADING = re.compile(r"^# Section \d+:")

CAPTION_CHARS = ("_", "*")

# Table states
IDLE = None
DIVIDER = "divider"
BODY = "body"


# ── Tables ─────────────────────────────────────────────────────────────


class Table:
    """A pipe table being collected line by line."""

    def __init__(self, header):
        self.header = header
        self.rows = []

    def add_row(self, cells):
        self.rows.append(cells)

    def normalized_rows(self):
        """Rows padded or cut to the header's cell count."""
        width = len(self.header)
        return [(row + [""] * width)[:width] for row in self.rows]

    def column_widths(self):
        widths = [len(cell) for cell in self.header]
        for row in self.normalized_rows():
            for i, cell in enumerate(row):
                widths[i] = max(widths[i], len(cell))
        return widths

    def render(self):
        """Grid table lines: rule, header, '=' rule, then row + rule pairs."""
        widths = self.column_widths()
        lines = [
            format_divider("-", widths),
            format_row(self.header, widths),
            format_divider("=", widths),
        ]
        for row in self.normalized_rows():
            lines.append(format_row(row, widths))
            lines.append(format_divider("-", widths))
        return lines


def split_cells(line):
    """Split a pipe row into trimmed cells, dropping the outer-pipe artifacts."""
    cells = [cell.strip() for cell in line.split("|")]
    return cells[1:-1]


def format_divider(char, widths):
    return "+" + "+".join(char * (w + 2) for w in widths) + "+"


def format_row(cells, widths):
    return "| " + " | ".join(cell.ljust(w) for cell, w in zip(cells, widths)) + " |"


# ── Line transducer ────────────────────────────────────────────────────


class Preprocessor:
    """
    Feed text in chunks of any size; completed lines are rewritten and
    passed to `write`, each ending in a newline.

    Usage:
        out = []
        pre = Preprocessor(write=out.append)
        pre.feed(chunk)
        pre.close()
    """

    def __init__(self, write=None, config=None):
        self.config = config or ToolConfig.defaults()
        self.output = []
        self.write = write if write is not None else self.output.append
        self.buffer = ""
        self.table = None
        self.table_state = IDLE
        self.in_figure = False

    def feed(self, chunk):
        self.buffer += chunk
        *lines, self.buffer = self.buffer.split("\n")
        for line in lines:
            self.process_line(line)

    def close(self):
        """End of input: a trailing partial line is a final line, then flush any table."""
        if self.buffer:
            line, self.buffer = self.buffer, ""
            self.process_line(line)
        if self.table_state is not IDLE:
            self.flush_table()

    def emit(self, line):
        self.write(line + "\n")

    def process_line(self, line):
        # Format tables as grid tables
        if line.startswith("|"):
            self.process_table_line(line)
            return
        if self.table_state is not IDLE:
            self.flush_table()

        # Strip duplicate figure caption
        if line.startswith("!["):
            self.in_figure = True
        elif self.in_figure and line.strip():
            self.in_figure = False
            if line.startswith(CAPTION_CHARS):
                return

        # Lesson and section headings
        if LESSON_HEADING.match(line):
            self.emit(self.config.preprocess["lesson_heading"].format(title=heading_title(line)))
            return
        if SECTION_HEADING.match(line):
            self.emit(self.config.preprocess["section_heading"].format(title=heading_title(line)))
            return

        self.emit(line)

    def process_table_line(self, line):
        cells = split_cells(line)
        if self.table_state is IDLE:
            self.table = Table(cells)
            self.table_state = DIVIDER
        elif self.table_state == DIVIDER:
            # The |---|---| line carries nothing the grid table needs
            self.table_state = BODY
        else:
            self.table.add_row(cells)

    def flush_table(self):
        for line in self.table.render():
            self.emit(line)
        self.table = None
        self.table_state = IDLE


def heading_title(line):
    """Text after the first colon, trimmed."""
    return line.partition(":")[2].strip()


# ── Convenience drivers ────────────────────────────────────────────────


def preprocess_text(text, config=None):
    """Preprocess a whole string; returns the rewritten text."""
    pre = Preprocessor(config=config)
    pre.feed(text)
    pre.close()
    return "".join(pre.output)


def preprocess_stream(infile, outfile, config=None):
    """Read `infile` chunk by chunk and write the rewritten stream to `outfile`."""
    config = config or ToolConfig.defaults()
    chunk_size = config.preprocess["chunk_size"]
    pre = Preprocessor(write=outfile.write, config=config)
    while True:
        chunk = infile.read(chunk_size)
        if not chunk:
            break
        pre.feed(chunk)
    pre.close()
    outfile.flush()
