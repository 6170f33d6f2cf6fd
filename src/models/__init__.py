"""
Models package for cowlick

Contains data structures and type definitions for the compilation pipeline.
"""

from .state import ProgramState, pipeline
from .extractor import DirectiveMatch, ExtractedTemplate, PlaceholderQueue
from .nodes import (
    Attr,
    CommentTag,
    DocumentFragment,
    Element,
    ElifTag,
    ElseTag,
    EndIfTag,
    ExpressionTag,
    IfTag,
    Literal,
    TextLiteral,
    Variable,
)

__all__ = [
    "ProgramState",
    "pipeline",
    "DirectiveMatch",
    "ExtractedTemplate",
    "PlaceholderQueue",
    "Attr",
    "CommentTag",
    "DocumentFragment",
    "Element",
    "ElifTag",
    "ElseTag",
    "EndIfTag",
    "ExpressionTag",
    "IfTag",
    "Literal",
    "TextLiteral",
    "Variable",
]
