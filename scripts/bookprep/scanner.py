"""
Cursor over a text buffer, used by the Markdown reader.

The scanner never raises at end of input: reads past the end return the
EOF sentinel, so reader loops only need to test at_end().
"""

EOF = "\0"

SPACES = (" ", "\t")


class Scanner:
    def __init__(self, source):
        self.source = source
        self.pos = 0

    def current(self):
        if self.pos >= len(self.source):
            return EOF
        return self.source[self.pos]

    def peek(self):
        if self.pos + 1 >= len(self.source):
            return EOF
        return self.source[self.pos + 1]

    def advance(self):
        """Consume the current character and return it."""
        c = self.current()
        if self.pos < len(self.source):
            self.pos += 1
        return c

    def at_end(self):
        return self.pos >= len(self.source)

    def is_space(self):
        return self.current() in SPACES

    def is_whitespace(self):
        return self.is_space() or self.current() == "\n"

    def consume_spaces(self):
        while self.is_space():
            self.advance()

    def consume_whitespace(self):
        while self.is_whitespace():
            self.advance()

    def startswith(self, prefix):
        return self.source.startswith(prefix, self.pos)

    def rest_of_line_blank(self):
        """True if only spaces/tabs remain before the next newline or EOF."""
        i = self.pos
        while i < len(self.source) and self.source[i] in SPACES:
            i += 1
        return i >= len(self.source) or self.source[i] == "\n"

    def read_line(self):
        """Consume up to and including the next newline; return the line without it."""
        end = self.source.find("\n", self.pos)
        if end == -1:
            line = self.source[self.pos:]
            self.pos = len(self.source)
        else:
            line = self.source[self.pos:end]
            self.pos = end + 1
        return line
