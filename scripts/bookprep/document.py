"""
Markdown reader: source text → typed document tree.

A small recursive-descent reader covering what the book manuscripts use:
ATX headings, paragraphs with bold/emphasis/code spans, fenced code
blocks, and raw HTML blocks. Inline spans never nest and end at
whitespace; this is deliberately simpler than CommonMark.

Usage:
    doc = parse_markdown(open("lesson.md").read())
    doc.kind                 # "document"
    doc.children[0].kind     # "heading1"
"""

from bookprep.exceptions import DocumentError, InputError
from bookprep.scanner import Scanner


HEADING_KINDS = tuple(f"heading{level}" for level in range(1, 7))
SPAN_KINDS = ("bold", "emphasis", "code")
LEAF_KINDS = ("text", "html")

# Kinds that wrap exactly one text node
WRAPPER_KINDS = HEADING_KINDS + SPAN_KINDS + ("code_block",)

NODE_KINDS = ("document", "paragraph") + WRAPPER_KINDS + LEAF_KINDS

EMPHASIS_CHARS = ("*", "_")
BULLET_CHARS = ("-", "*")
FENCE = "```"


# ── Node model ─────────────────────────────────────────────────────────


class Node:
    """
    One node of the document tree.

    Leaves (text, html) carry their string in `text` and have no
    children. Every other kind holds an ordered list of child nodes.
    `info` is the language tag of a fenced code block.
    """

    def __init__(self, kind, children=None, text=None, info=None):
        if kind not in NODE_KINDS:
            raise DocumentError(f"Unknown node type: {kind}")
        children = list(children or [])

        if kind in LEAF_KINDS:
            if not isinstance(text, str):
                raise DocumentError(f"'{kind}' node needs a string payload")
            if children:
                raise DocumentError(f"'{kind}' node cannot have children")
        elif text is not None:
            raise DocumentError(f"'{kind}' node cannot carry a text payload")

        if kind in WRAPPER_KINDS and (
            len(children) != 1 or children[0].kind != "text"
        ):
            raise DocumentError(f"'{kind}' node must wrap exactly one text node")

        if info is not None and kind != "code_block":
            raise DocumentError(f"'{kind}' node cannot carry an info string")

        self.kind = kind
        self.children = children
        self.text = text
        self.info = info

    @property
    def level(self):
        """Heading level 1..6, or None for non-heading nodes."""
        if self.kind in HEADING_KINDS:
            return int(self.kind[len("heading"):])
        return None

    def plain_text(self):
        """Concatenated text payloads of this subtree."""
        if self.kind in LEAF_KINDS:
            return self.text
        return "".join(child.plain_text() for child in self.children)

    def __eq__(self, other):
        if not isinstance(other, Node):
            return NotImplemented
        return (
            self.kind == other.kind
            and self.text == other.text
            and self.info == other.info
            and self.children == other.children
        )

    def __repr__(self):
        if self.kind in LEAF_KINDS:
            return f"Node({self.kind!r}, text={self.text!r})"
        return f"Node({self.kind!r}, {self.children!r})"


def text(value):
    return Node("text", text=value)


def span(kind, value):
    """Build a heading, bold, emphasis, code or code_block node around `value`."""
    return Node(kind, [text(value)])


def heading(level, value):
    if not 1 <= level <= 6:
        raise DocumentError(f"Heading level must be 1..6, got {level}")
    return span(f"heading{level}", value)


# ── Reader ─────────────────────────────────────────────────────────────


class MarkdownReader:
    """Reads block and inline nodes from a Scanner."""

    def __init__(self, source):
        self.scanner = Scanner(source)

    def read_document(self):
        s = self.scanner
        chunks = []
        s.consume_whitespace()
        while not s.at_end():
            chunks.append(self._read_chunk())
            s.consume_whitespace()
        return Node("document", chunks)

    def _read_chunk(self):
        s = self.scanner
        s.consume_spaces()
        c = s.current()

        if c == "#" and 1 <= self._heading_run() <= 6:
            return self._read_heading()

        if c == "`" and s.startswith(FENCE):
            return self._read_code_fence()

        # Bullet lists are not built as their own node kind; list lines
        # read as paragraph text so they survive unchanged.
        if c in BULLET_CHARS and (s.peek() in BULLET_CHARS or s.peek() == " "):
            return self._read_paragraph()

        if c == "<":
            return self._read_html()

        return self._read_paragraph()

    # ── Blocks ─────────────────────────────────────────────

    def _heading_run(self):
        s = self.scanner
        end = s.pos
        while end < len(s.source) and s.source[end] == "#":
            end += 1
        return end - s.pos

    def _read_heading(self):
        s = self.scanner
        level = 0
        while s.current() == "#":
            level += 1
            s.advance()
        s.consume_spaces()
        title = s.read_line().rstrip()
        return heading(level, title)

    def _read_code_fence(self):
        s = self.scanner
        opening = s.read_line().strip()
        info = opening[len(FENCE):].strip() or None

        lines = []
        while not s.at_end():
            line = s.read_line()
            if line.lstrip().startswith(FENCE):
                break
            lines.append(line)

        return Node("code_block", [text("\n".join(lines))], info=info)

    def _read_html(self):
        s = self.scanner
        lines = [s.read_line()]
        while not s.rest_of_line_blank():
            lines.append(s.read_line())
        return Node("html", text="\n".join(lines).rstrip())

    def _read_paragraph(self):
        s = self.scanner
        children = []
        run = []

        def flush():
            children.append(text("".join(run)))
            run.clear()

        while not s.at_end():
            c = s.current()

            if c == "\n":
                s.advance()
                if s.rest_of_line_blank():
                    break
                run.append("\n")

            elif c in EMPHASIS_CHARS:
                flush()
                if s.peek() in EMPHASIS_CHARS:
                    children.append(self._read_bold())
                else:
                    children.append(self._read_emphasis())

            elif c == "`":
                flush()
                children.append(self._read_code())

            else:
                run.append(s.advance())

        tail = "".join(run).rstrip(" \t\n")
        if tail:
            children.append(text(tail))

        return Node("paragraph", children)

    # ── Inline spans ───────────────────────────────────────

    def _read_escaped_span(self, pair):
        """
        Read span content up to whitespace, EOF, or a closing delimiter.

        A backslash takes the next character literally. With `pair`, the
        span closes only on two adjacent emphasis characters.
        """
        s = self.scanner
        out = []
        escaped = False
        while not s.is_whitespace() and not s.at_end():
            c = s.advance()
            if escaped:
                escaped = False
                out.append(c)
                continue

            if c == "\\":
                escaped = True
                continue

            if c in EMPHASIS_CHARS:
                if not pair:
                    break
                if s.current() in EMPHASIS_CHARS:
                    s.advance()
                    break

            out.append(c)
        return "".join(out)

    def _read_emphasis(self):
        self.scanner.advance()
        return span("emphasis", self._read_escaped_span(pair=False))

    def _read_bold(self):
        self.scanner.advance()
        self.scanner.advance()
        return span("bold", self._read_escaped_span(pair=True))

    def _read_code(self):
        s = self.scanner
        s.advance()

        double = False
        if s.current() == "`":
            s.advance()
            double = True

        out = []
        while not s.is_whitespace() and not s.at_end():
            c = s.current()
            if c == "`":
                if not double:
                    s.advance()
                    break
                if s.peek() == "`":
                    s.advance()
                    s.advance()
                    break
            out.append(c)
            s.advance()

        return span("code", "".join(out))


def parse_markdown(source):
    """Parse a Markdown buffer into a document node."""
    return MarkdownReader(source).read_document()


def parse_file(path, encoding="utf-8"):
    """Read and parse a Markdown file. Raises InputError if it can't be read."""
    try:
        with open(path, "r", encoding=encoding) as f:
            source = f.read()
    except UnicodeDecodeError as e:
        raise InputError(f"Cannot open file, {path}: not valid {encoding} ({e.reason})") from e
    except OSError as e:
        raise InputError(f"Cannot open file, {path}: {e.strerror or e}") from e
    return parse_markdown(source)
