"""
cowlick - HTML template compiler

Turns HTML with embedded {{ }}, {% %} and {# #} directives into a Python
render routine producing a virtual element tree.
"""

__version__ = "0.1.0"

from .lib import Template, Compiler, Host, VNode, markup_render, LOG, state_connectToLogger
from .errors import CowlickError, GrammarError, PlaceholderError, CompileError

__all__ = [
    "Template",
    "Compiler",
    "Host",
    "VNode",
    "markup_render",
    "LOG",
    "state_connectToLogger",
    "CowlickError",
    "GrammarError",
    "PlaceholderError",
    "CompileError",
    "__version__",
]
