"""
Lazily compiled template trees with failure hooks and Markdown support.
"""
from .markdown import MarkdownConverter, MarkdownRenderer
from .registry import preregister, must_preregister, template_name
from .templater import Templater, Subtemplate, RenderFailFunc
from .tree import TemplateTree, Writer, build_tree, build_context

__all__ = [
    'Templater',
    'Subtemplate',
    'RenderFailFunc',
    'TemplateTree',
    'Writer',
    'build_tree',
    'build_context',
    'preregister',
    'must_preregister',
    'template_name',
    'MarkdownConverter',
    'MarkdownRenderer',
]
