"""
Compiler for the combined tree to a Python render routine

Walks the combined tree depth-first and writes Python source for a small
stack machine that builds virtual elements:

    nodes   list being filled for the current sibling scope
    stack   saved `nodes` lists of the enclosing scopes

Element children and interpolated attribute values each get their own scope:
the enclosing list is pushed, the inner nodes are appended to a fresh list,
and the finished list is popped back out as `children` or as the attribute
string. {% if %} / {% elif %} / {% else %} / {% endif %} become Python
if/elif/else blocks around the statements of the nodes between them.

Example:
    "<p>{{ name }}</p>" compiles to

        def render(context):
            nodes = []
            stack = []
            stack.append(nodes)
            nodes = []
            nodes.append(stringify(context['name']))
            children = nodes or None
            nodes = stack.pop()
            attrs = {}
            nodes.append(make_element('p', attrs, children))
            ...
"""

import math
from typing import Any, Callable, Dict, List, Optional

from .host import Host, stringify
from .log import LOG
from ..errors import CompileError
from ..models.nodes import (
    CombinedNode,
    CommentTag,
    DocumentFragment,
    Element,
    ElifTag,
    ElseTag,
    EndIfTag,
    Expression,
    ExpressionTag,
    IfTag,
    Literal,
    TextLiteral,
    Variable,
)


# HTML attribute names the host library expects under a different prop name
RESERVED_ATTRIBUTES = {
    'class': 'className',
    'for': 'htmlFor',
}


class CodeBuilder:
    """
    Python source buffer with indentation and block tracking

    Every opened block starts with `pass`, so branches that compile to no
    statements (e.g. only a comment) stay valid Python.
    """

    INDENT_STEP = 4

    def __init__(self, indent: int = 0) -> None:
        self.code: List[str] = []
        self.indent_level = indent
        self.blocks = 0

    def __str__(self) -> str:
        return "".join(self.code)

    def line_add(self, line: str) -> None:
        self.code.append(" " * self.indent_level + line + "\n")

    def indent(self) -> None:
        self.indent_level += self.INDENT_STEP

    def dedent(self) -> None:
        self.indent_level -= self.INDENT_STEP

    def block_open(self, line: str) -> None:
        """Start a block such as `if x:`"""
        self.line_add(line)
        self.indent()
        self.line_add("pass")
        self.blocks += 1

    def block_continue(self, line: str) -> None:
        """Switch to a sibling branch such as `elif x:` or `else:`"""
        if not self.blocks:
            raise CompileError(f"'{line}' without a matching if")
        self.dedent()
        self.line_add(line)
        self.indent()
        self.line_add("pass")

    def block_close(self) -> None:
        if not self.blocks:
            raise CompileError("endif without a matching if")
        self.dedent()
        self.blocks -= 1


class Compiler:
    """
    Compiles a combined tree to the source of `render(context)`

    Responsibilities:
    - Emit scope push/pop statements for element children and
      interpolated attribute values
    - Translate control-flow directives into Python blocks
    - Key each element by its position among its siblings
    - Map reserved attribute names to host prop names

    The compiler does not validate the tree beyond what is needed to emit
    syntactically valid Python: variable names are not checked against any
    context and literal types are not checked.
    """

    def __init__(self, fragment_tag: Optional[str] = None) -> None:
        """
        Initialize compiler

        Args:
            fragment_tag: Wrapper tag for templates that render several
                          top-level nodes (default from settings)
        """
        if fragment_tag is None:
            from ..config import appsettings
            fragment_tag = appsettings.fragment_tag
        self.fragment_tag = fragment_tag
        self.builder = CodeBuilder()
        self.handlers: Dict[type, Callable[[Any, Optional[int]], None]] = {
            DocumentFragment: self.fragment_compile,
            Element: self.element_compile,
            TextLiteral: self.text_compile,
            ExpressionTag: self.interpolation_compile,
            IfTag: self.if_compile,
            ElifTag: self.elif_compile,
            ElseTag: self.else_compile,
            EndIfTag: self.endif_compile,
            CommentTag: self.comment_compile,
        }

    def compile(self, root: CombinedNode) -> str:
        """
        Compile the tree rooted at root

        Args:
            root: DocumentFragment (or a single node) from the adapter

        Returns:
            Python source defining render(context)

        Raises:
            CompileError: Unknown node type, or if/endif out of balance
        """
        builder = self.builder
        builder.line_add("def render(context):")
        builder.indent()
        builder.line_add("nodes = []")
        builder.line_add("stack = []")

        self.node_compile(root)

        if builder.blocks:
            raise CompileError(f"{builder.blocks} if block(s) without endif")

        builder.line_add("if len(nodes) == 1:")
        builder.line_add("    return nodes[0]")
        builder.line_add("if not nodes:")
        builder.line_add("    return None")
        builder.line_add(f"return make_element({self.fragment_tag!r}, None, nodes)")
        builder.dedent()

        code = str(builder)
        LOG(f"Generated {len(builder.code)} lines of render source", level=2)
        return code

    def node_compile(self, node: CombinedNode, key: Optional[int] = None) -> None:
        """
        Emit statements for one node

        Args:
            node: Node to compile
            key: Position among its siblings; None for the root and for
                 nodes inside attribute values
        """
        handler = self.handlers.get(type(node))
        if handler is None:
            raise CompileError(f"Unexpected node type: {type(node).__name__}")
        handler(node, key)

    def expression_compile(self, expression: Expression) -> str:
        """Python expression source for a literal or variable"""
        if isinstance(expression, Literal):
            value = expression.value
            if isinstance(value, float) and not math.isfinite(value):
                # repr() gives a bare inf/nan, which is not a Python literal
                return f"float({repr(value)!r})"
            return repr(value)
        if isinstance(expression, Variable):
            return f"context[{expression.name!r}]"
        raise CompileError(f"Unexpected node type: {type(expression).__name__}")

    def scope_push(self) -> None:
        self.builder.line_add("stack.append(nodes)")
        self.builder.line_add("nodes = []")

    def scope_pop(self, target: str, value: str) -> None:
        """Assign value (computed from the inner `nodes`) to target, then restore"""
        self.builder.line_add(f"{target} = {value}")
        self.builder.line_add("nodes = stack.pop()")

    def fragment_compile(self, node: DocumentFragment, key: Optional[int]) -> None:
        """
        Emit the top-level nodes

        A lone top-level node becomes the root and stays unkeyed. Several
        top-level nodes end up as children of the fragment_tag wrapper, so
        they are keyed by index like the children of any other element.
        """
        keyed = len(node.children) > 1
        for index, child in enumerate(node.children):
            self.node_compile(child, index if keyed else None)

    def text_compile(self, node: TextLiteral, key: Optional[int]) -> None:
        self.builder.line_add(f"nodes.append({node.value!r})")

    def interpolation_compile(self, node: ExpressionTag, key: Optional[int]) -> None:
        self.builder.line_add(f"nodes.append(stringify({self.expression_compile(node.body)}))")

    def if_compile(self, node: IfTag, key: Optional[int]) -> None:
        self.builder.block_open(f"if {self.expression_compile(node.condition)}:")

    def elif_compile(self, node: ElifTag, key: Optional[int]) -> None:
        self.builder.block_continue(f"elif {self.expression_compile(node.condition)}:")

    def else_compile(self, node: ElseTag, key: Optional[int]) -> None:
        self.builder.block_continue("else:")

    def endif_compile(self, node: EndIfTag, key: Optional[int]) -> None:
        self.builder.block_close()

    def comment_compile(self, node: CommentTag, key: Optional[int]) -> None:
        pass

    def element_compile(self, node: Element, key: Optional[int]) -> None:
        """
        Emit statements building one element

        Children are compiled first, inside their own scope, each keyed by
        its index among the element's children. Attributes follow; the
        key supplied by the parent is stored as attrs['key'].
        """
        builder = self.builder

        if node.children:
            self.scope_push()
            for index, child in enumerate(node.children):
                self.node_compile(child, index)
            self.scope_pop("children", "nodes or None")
        else:
            builder.line_add("children = None")

        builder.line_add("attrs = {}")
        for attr in node.attrs:
            name = RESERVED_ATTRIBUTES.get(attr.name, attr.name)
            if attr.interpolated:
                self.scope_push()
                for part in attr.value:
                    self.node_compile(part)
                self.scope_pop(
                    f"attrs[{name!r}]",
                    "''.join(stringify(value) for value in nodes)",
                )
            else:
                builder.line_add(f"attrs[{name!r}] = {attr.value!r}")

        if key is not None:
            builder.line_add(f"attrs['key'] = {str(key)!r}")

        builder.line_add(f"nodes.append(make_element({node.tag!r}, attrs, children))")


def code_load(code: str, host: Optional[Host] = None) -> Callable[[Dict[str, Any]], Any]:
    """
    Load generated source into a callable render routine

    Args:
        code: Source produced by Compiler.compile()
        host: Host library providing make_element (default: VNode host)

    Returns:
        render(context) function
    """
    host = host or Host()
    namespace: Dict[str, Any] = {
        "make_element": host.element_make,
        "stringify": stringify,
    }
    exec(compile(code, "<cowlick template>", "exec"), namespace)
    return namespace["render"]
