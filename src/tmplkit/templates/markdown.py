"""
Markdown post-processing for templates whose source is a Markdown file.
"""
import logging
from typing import Any, Dict, List, Optional, Protocol, runtime_checkable

import markdown

from .tree import Writer

logger = logging.getLogger(__name__)


@runtime_checkable
class MarkdownConverter(Protocol):
    """Protocol for converting Markdown to HTML."""

    def convert(self, source: str, sink: Writer) -> None:
        """
        Convert Markdown source and write the HTML to sink.

        Args:
            source: Markdown text
            sink: Destination for the HTML

        Raises:
            Exception: If the source cannot be converted
        """
        ...


class MarkdownRenderer:
    """Converts Markdown with Python-Markdown."""

    def __init__(
        self,
        extensions: Optional[List[Any]] = None,
        extension_configs: Optional[Dict[str, Dict[str, Any]]] = None,
        output_format: str = "html",
    ):
        """
        Initialize the renderer.

        Args:
            extensions: Python-Markdown extensions, e.g. ``["extra", "toc"]``
            extension_configs: Per-extension settings
            output_format: ``"html"`` or ``"xhtml"``
        """
        self.extensions = list(extensions or [])
        self.extension_configs = dict(extension_configs or {})
        self.output_format = output_format

    def convert(self, source: str, sink: Writer) -> None:
        # markdown.Markdown instances keep per-document state, so each call gets its own.
        md = markdown.Markdown(
            extensions=self.extensions,
            extension_configs=self.extension_configs,
            output_format=self.output_format,
        )
        sink.write(md.convert(source))
