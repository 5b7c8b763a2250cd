"""
HTML emitter for previewing a parsed chapter.

Text is written as-is; no escaping is applied.
"""

from bookprep.emitters.base import BaseEmitter


class HtmlEmitter(BaseEmitter):
    format_name = "HTML"

    def emit(self, node):
        return self.handler_for(node)(node)

    def emit_all(self, nodes):
        return "".join(self.emit(node) for node in nodes)

    # ── Block nodes ────────────────────────────────────────

    def emit_document(self, node):
        return self.emit_all(node.children)

    def emit_paragraph(self, node):
        return f"<p>{self.emit_all(node.children)}</p>\n"

    def emit_heading(self, node):
        level = node.level
        return f"<h{level}>{self.emit_all(node.children)}</h{level}>\n"

    def emit_code_block(self, node):
        attr = f' class="language-{node.info}"' if node.info else ""
        return f"<pre><code{attr}>{self.emit_all(node.children)}</code></pre>\n"

    def emit_html(self, node):
        return f"{node.text}\n"

    # ── Inline nodes ───────────────────────────────────────

    def emit_text(self, node):
        return node.text

    def emit_bold(self, node):
        return f"<strong>{self.emit_all(node.children)}</strong>"

    def emit_emphasis(self, node):
        return f"<emphasis>{self.emit_all(node.children)}</emphasis>"

    def emit_code(self, node):
        return f"<code>{self.emit_all(node.children)}</code>"
