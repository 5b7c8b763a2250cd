"""
Base emitter class for all output formats.

Subclasses set `format_name` and implement `emit()`. Dispatch on node
kind lives here: an emitter defines `emit_<kind>` methods (headings share
`emit_heading`) and anything without a handler is an UnknownNodeError.
"""

from abc import ABC, abstractmethod

from bookprep.document import HEADING_KINDS
from bookprep.exceptions import UnknownNodeError


class BaseEmitter(ABC):
    """
    Abstract base for document emitters.

    Subclasses must define:
        format_name:  str    — human-readable name ("HTML", "JSON")
        emit():       method — node → output string
    """

    format_name = None  # Override in subclass

    def __init__(self, config=None, **options):
        # Options a format does not take (--indent for HTML) are ignored
        self.config = config

    def handler_for(self, node):
        """Return the bound emit_<kind> method for a node."""
        name = "heading" if node.kind in HEADING_KINDS else node.kind
        handler = getattr(self, f"emit_{name}", None)
        if handler is None:
            raise UnknownNodeError(node.kind)
        return handler

    @abstractmethod
    def emit(self, node):
        """Render a node (usually the document root) to a string."""
        ...
