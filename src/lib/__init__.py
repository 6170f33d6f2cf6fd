"""
cowlick - HTML template compiler

Compiles HTML templates with {{ }}, {% %} and {# #} directives into Python
routines that build virtual element trees.
"""

__version__ = "0.1.0"

from .grammar import directive_parse
from .extractor import directives_extract
from .adapter import TreeAdapter, html_parse
from .compiler import Compiler, code_load
from .host import Host, VNode, markup_render
from .template import Template
from .log import LOG, state_connectToLogger, state_disconnectFromLogger, state_logScope

__all__ = [
    "directive_parse",
    "directives_extract",
    "TreeAdapter",
    "html_parse",
    "Compiler",
    "code_load",
    "Host",
    "VNode",
    "markup_render",
    "Template",
    "LOG",
    "state_connectToLogger",
    "state_disconnectFromLogger",
    "state_logScope",
    "__version__",
]
