"""
Exceptions raised by the bookprep tools.

Library code raises these; the CLI turns them into an error line on
stderr and exit status 1.
"""


class BookprepError(Exception):
    """Base exception for bookprep operations."""


class ConfigError(BookprepError):
    """Raised when bookprep.yaml is missing or invalid."""


class InputError(BookprepError):
    """Input path missing, unreadable, or not valid UTF-8."""


class StructureError(BookprepError):
    """Structural failure: the input cannot be turned into valid output."""


class DocumentError(StructureError):
    """A document node was built in violation of its shape."""


class UnknownNodeError(StructureError):
    """An emitter was handed a node kind it has no template for."""

    def __init__(self, kind):
        super().__init__(f"Unknown node type: {kind}")
        self.kind = kind


class UnresolvedLinkError(StructureError):
    """A /section-N/... link target matches no file in the index."""

    def __init__(self, target, source=None):
        where = f" in {source}" if source else ""
        super().__init__(f"No replacement found{where}: {target}")
        self.target = target
        self.source = source
