"""
JSON dump of the document tree.

Shape:
    {"kind": "paragraph", "children": [{"kind": "text", "text": "hi"}]}

Leaf nodes (text, html) carry "text" instead of "children"; fenced code
blocks add "info" when the fence names a language.
"""

import json

from bookprep.document import NODE_KINDS
from bookprep.emitters.base import BaseEmitter
from bookprep.exceptions import UnknownNodeError


class JsonEmitter(BaseEmitter):
    format_name = "JSON"

    def __init__(self, config=None, indent=None, **options):
        super().__init__(config=config, **options)
        if indent is None and config is not None:
            indent = config.parse.get("json_indent")
        self.indent = indent

    def emit(self, node):
        return json.dumps(self.to_dict(node), indent=self.indent, ensure_ascii=False)

    def to_dict(self, node):
        if node.kind not in NODE_KINDS:
            raise UnknownNodeError(node.kind)
        if node.text is not None:
            return {"kind": node.kind, "text": node.text}
        out = {
            "kind": node.kind,
            "children": [self.to_dict(child) for child in node.children],
        }
        if node.info:
            out["info"] = node.info
        return out
