"""
Status output for the command-line tools.

Everything goes to stderr: stdout is reserved for tool output (HTML,
JSON, the preprocessed stream).
"""

import sys


SYMBOL_COLOR = {
    "ok":      "\033[32m✓\033[0m",
    "error":   "\033[31m✗\033[0m",
    "warning": "\033[33m!\033[0m",
}

SYMBOL_PLAIN = {
    "ok":      "[OK]",
    "error":   "[ERROR]",
    "warning": "[WARN]",
}


class Reporter:
    """
    Prints progress and diagnostics to stderr.

    Usage:
        reporter = Reporter(verbose=True)
        reporter.log("  Scanning chapters/")
        reporter.error("Cannot open file, missing.md")
    """

    def __init__(self, verbose=False, color=None, stream=None):
        self.stream = stream if stream is not None else sys.stderr
        if color is None:
            color = hasattr(self.stream, "isatty") and self.stream.isatty()
        self.verbose = verbose
        self.symbols = SYMBOL_COLOR if color else SYMBOL_PLAIN

    def _print(self, msg):
        print(msg, file=self.stream)

    def log(self, msg):
        if self.verbose:
            self._print(msg)

    def ok(self, msg):
        self.log(f"  {self.symbols['ok']} {msg}")

    def warn(self, msg):
        self._print(f"  {self.symbols['warning']} {msg}")

    def error(self, msg):
        self._print(f"Error: {msg}")
