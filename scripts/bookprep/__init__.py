"""
bookprep — Markdown preprocessing tools for the book build.

Public API:
    from bookprep.document import parse_markdown, parse_file
    from bookprep.emitters import EMITTERS, DEFAULT_EMITTER
    from bookprep.preprocess import preprocess_text, preprocess_stream
    from bookprep.links import build_file_index, rewrite_links, rewrite_directory
    from bookprep.config import ToolConfig
"""

__version__ = "1.0.0"
