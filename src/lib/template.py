"""
Template façade

Runs the compilation stages in order over a ProgramState:

    template_extract   directives → placeholders + queue
    html_parse         rewritten HTML → combined tree
    code_generate      combined tree → Python source
    code_load          Python source → render(context)

Template wraps the pipeline and keeps the loaded routine for repeated
rendering.

Example:
    >>> template = Template('<p>{{ name }}</p>')
    >>> template.render({'name': 'Ada'})
    VNode(tag='p', props={}, children=['Ada'])
"""

import pprint
from typing import Any, Dict, Optional

from .adapter import html_parse
from .compiler import Compiler, code_load
from .extractor import directives_extract
from .host import Host, markup_render
from .log import LOG, state_logScope
from ..models import ProgramState, pipeline


def template_extract(inputstate: ProgramState) -> ProgramState:
    """
    Replace directives with placeholders.

    Returns:
        ProgramState with added fields:
            - rewritten: template text with placeholders
            - queue: parsed directives in source order
    """
    state = inputstate.copy()
    LOG("Extracting directives...", level=2, stage="extract")
    extracted = directives_extract(state.source)
    state.rewritten = extracted.rewritten
    state.queue = extracted.queue
    return state


def tree_build(inputstate: ProgramState) -> ProgramState:
    """
    Parse the rewritten template as HTML, splicing directives back in.

    Returns:
        ProgramState with added field:
            - tree: combined DocumentFragment
    """
    state = inputstate.copy()
    LOG("Parsing HTML...", level=2, stage="html")
    state.tree = html_parse(state.rewritten, state.queue, host=state.host)
    LOG(f"Combined tree:\n{pprint.pformat(state.tree)}", level=3, stage="html")
    return state


def code_generate(inputstate: ProgramState) -> ProgramState:
    """
    Compile the combined tree to Python source.

    Returns:
        ProgramState with added field:
            - code: source of render(context)
    """
    state = inputstate.copy()
    LOG("Generating render routine...", level=2, stage="compile")
    state.code = Compiler().compile(state.tree)
    LOG(f"Generated source:\n{state.code}", level=3, stage="compile")
    return state


def routine_load(inputstate: ProgramState) -> ProgramState:
    """
    Load the generated source.

    Returns:
        ProgramState with added field:
            - render: callable render(context)
    """
    state = inputstate.copy()
    state.render = code_load(state.code, host=state.host)
    return state


class Template:
    """
    Compiled HTML template

    Attributes:
        source: Raw template text
        code: Generated Python source
        tree: Combined tree the source was generated from
    """

    def __init__(self, source: str, host: Optional[Host] = None, verbosity: Optional[int] = None) -> None:
        """
        Compile a template

        Args:
            source: Template text mixing HTML and {{ }}, {% %}, {# #} directives
            host: Host element library (default: VNode host)
            verbosity: Logging verbosity; defaults to 3 in debug mode, else 1

        Raises:
            GrammarError: Malformed directive
            PlaceholderError: Directive in an unsupported position
            CompileError: Unbalanced if/endif
        """
        from ..config import appsettings

        if verbosity is None:
            verbosity = 3 if appsettings.debug_mode else 1

        self.host = host or Host()
        state = ProgramState(source=source, host=self.host, verbosity=verbosity)
        with state_logScope(state):
            state = pipeline(state, template_extract, tree_build, code_generate, routine_load)

        self.source = source
        self.tree = state.tree
        self.code = state.code
        self._render = state.render

    def render(self, context: Optional[Dict[str, Any]] = None) -> Any:
        """
        Build the element tree for context

        Raises:
            KeyError: The template references a name missing from context
        """
        return self._render(context if context is not None else {})

    def markup(self, context: Optional[Dict[str, Any]] = None) -> str:
        """Render to static HTML markup"""
        return markup_render(self.render(context))
