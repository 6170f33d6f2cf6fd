"""
Directive grammar for {{ }}, {% %} and {# #} template tags

The grammar is compiled once, at import time, into a parsimonious parser.
A NodeVisitor turns the parse tree into DirectiveTag models.

Supported forms:
    {{ expression }}                     interpolation
    {% if expression %} / {% elif expression %} / {% else %} / {% endif %}
    {# any text #}                       comment

Expressions are a single literal (true/false, "string", 'string', 1.5) or a
variable name. There are no operators and no nested expressions.

Example:
    >>> directive_parse('{{ name }}')
    ExpressionTag(body=Variable(name='name'))
    >>> directive_parse('{% if ok %}')
    IfTag(condition=Variable(name='ok'))
"""

from parsimonious.exceptions import IncompleteParseError, ParseError
from parsimonious.grammar import Grammar
from parsimonious.nodes import Node, NodeVisitor

from ..errors import GrammarError, SourceSpan
from ..models.nodes import (
    CommentTag,
    DirectiveTag,
    ElifTag,
    ElseTag,
    EndIfTag,
    ExpressionTag,
    IfTag,
    Literal,
    Variable,
)


GRAMMAR = r"""
tag            = statement_tag / expression_tag / comment_tag

statement_tag  = "{%" ws? statement ws? "%}"
statement      = if_stmt / elif_stmt / else_stmt / endif_stmt
if_stmt        = "if" ws expression
elif_stmt      = "elif" ws expression
else_stmt      = "else"
endif_stmt     = "endif"

expression_tag = "{{" ws? expression ws? "}}"

comment_tag    = "{#" ws? comment_text "#}"
comment_text   = ~r"(?:(?!#\}).)*"s

expression     = literal / variable
literal        = boolean / string / float
boolean        = ~r"(?:true|false|True|False)(?![a-zA-Z0-9_])"
string         = ~r'"[^"]+"' / ~r"'[^']+'"
float          = ~r"[0-9.]+"
variable       = ~r"[a-zA-Z][a-zA-Z0-9_]*"

ws             = ~r"[\n ]+"
"""

DIRECTIVE_GRAMMAR = Grammar(GRAMMAR)


class DirectiveVisitor(NodeVisitor):
    """Builds a DirectiveTag from a parsimonious parse tree"""

    grammar = DIRECTIVE_GRAMMAR
    unwrapped_exceptions = (ValueError,)

    def visit_tag(self, node, visited_children):
        return visited_children[0]

    def visit_statement_tag(self, node, visited_children):
        _, _, statement, _, _ = visited_children
        return statement

    def visit_statement(self, node, visited_children):
        return visited_children[0]

    def visit_if_stmt(self, node, visited_children):
        _, _, condition = visited_children
        return IfTag(condition=condition)

    def visit_elif_stmt(self, node, visited_children):
        _, _, condition = visited_children
        return ElifTag(condition=condition)

    def visit_else_stmt(self, node, visited_children):
        return ElseTag()

    def visit_endif_stmt(self, node, visited_children):
        return EndIfTag()

    def visit_expression_tag(self, node, visited_children):
        _, _, body, _, _ = visited_children
        return ExpressionTag(body=body)

    def visit_comment_tag(self, node, visited_children):
        return CommentTag(text=node.children[2].text.strip())

    def visit_expression(self, node, visited_children):
        return visited_children[0]

    def visit_literal(self, node, visited_children):
        return visited_children[0]

    def visit_boolean(self, node, visited_children):
        return Literal(value=node.text.lower() == "true")

    def visit_string(self, node, visited_children):
        return Literal(value=node.text[1:-1])

    def visit_float(self, node, visited_children):
        return Literal(value=float(node.text))

    def visit_variable(self, node, visited_children):
        return Variable(name=node.text)

    def generic_visit(self, node: Node, visited_children):
        return visited_children or node


_visitor = DirectiveVisitor()


def expectation_describe(error: ParseError) -> str:
    """Name of the grammar rule a ParseError failed on"""
    expr = error.expr
    if expr is None:
        return "directive"
    return expr.name or expr.as_rule()


def directive_parse(text: str) -> DirectiveTag:
    """
    Parse exactly one directive occupying all of text

    Args:
        text: Directive source starting at offset 0

    Returns:
        Parsed DirectiveTag

    Raises:
        GrammarError: text is not a single well-formed directive. When a
            directive matched but characters follow it, the error's
            expected list is ["end"] and location.end - 1 is the offset
            where the directive stops.

    Example:
        >>> directive_parse('{{ a }} tail')
        Traceback (most recent call last):
        ...
        cowlick.errors.GrammarError: ...
    """
    try:
        tree = DIRECTIVE_GRAMMAR.parse(text)
    except IncompleteParseError as e:
        raise GrammarError(
            f"Expected end of directive at line {e.line()}, column {e.column()}",
            expected=["end"],
            location=SourceSpan(e.pos, e.pos + 1),
            text=text,
        ) from e
    except ParseError as e:
        expected = expectation_describe(e)
        raise GrammarError(
            f"Invalid directive at line {e.line()}, column {e.column()}: "
            f"expected {expected}, found {text[e.pos:e.pos + 20]!r}",
            expected=[expected],
            location=SourceSpan(e.pos, e.pos + 1),
            text=text,
        ) from e

    try:
        return _visitor.visit(tree)
    except ValueError as e:
        raise GrammarError(
            f"Invalid number in directive {text!r}: {e}",
            expected=["float"],
            location=SourceSpan(0, len(text)),
            text=text,
        ) from e
