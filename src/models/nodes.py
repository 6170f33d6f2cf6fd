"""
Combined tree node models

Defines the directive tags produced by the directive grammar and the
HTML structure nodes produced by the tree-construction adapter. Both kinds
live side by side in one tree, which the compiler walks depth-first.

Example:
    "<p>{{ name }}</p>" becomes
    DocumentFragment(children=[
        Element(tag="p", namespace=XHTML, attrs=[], children=[
            ExpressionTag(body=Variable(name="name"))
        ])
    ])
"""

from dataclasses import dataclass, field
from typing import List, Optional, Union


class TreeNode:
    """
    Base class of every combined tree node

    Holds the back-reference to the parent node. The reference is only
    used to detach nodes while the HTML parser rearranges the tree; it is
    not a dataclass field, so it never takes part in equality or repr.
    """

    parent: Optional["TreeNode"] = None


# Expressions


@dataclass
class Literal(TreeNode):
    """Boolean, string or float literal"""
    value: Union[bool, str, float]


@dataclass
class Variable(TreeNode):
    """Context lookup by name"""
    name: str


Expression = Union[Literal, Variable]


# Directive tags


@dataclass
class IfTag(TreeNode):
    """{% if condition %} - opens a conditional block"""
    condition: Expression


@dataclass
class ElifTag(TreeNode):
    """{% elif condition %}"""
    condition: Expression


@dataclass
class ElseTag(TreeNode):
    """{% else %}"""


@dataclass
class EndIfTag(TreeNode):
    """{% endif %} - closes the innermost conditional block"""


@dataclass
class ExpressionTag(TreeNode):
    """{{ body }} - interpolation, rendered as a string"""
    body: Expression


@dataclass
class CommentTag(TreeNode):
    """{# text #} - discarded at compile time"""
    text: str


DirectiveTag = Union[IfTag, ElifTag, ElseTag, EndIfTag, ExpressionTag, CommentTag]


# HTML structure


@dataclass
class TextLiteral(TreeNode):
    """Literal text from the template"""
    value: str


@dataclass
class Attr:
    """
    Element attribute

    Attributes:
        name: Attribute name as reported by the HTML parser
        value: Plain string, or an ordered list of combined nodes when the
               raw value contained directives (interpolated attribute)
    """
    name: str
    value: Union[str, List["CombinedNode"]]

    @property
    def interpolated(self) -> bool:
        return not isinstance(self.value, str)


@dataclass
class Element(TreeNode):
    """HTML element with attributes and owned children"""
    tag: str
    namespace: Optional[str] = None
    attrs: List[Attr] = field(default_factory=list)
    children: List["CombinedNode"] = field(default_factory=list)


@dataclass
class DocumentFragment(TreeNode):
    """Root of the combined tree"""
    children: List["CombinedNode"] = field(default_factory=list)


CombinedNode = Union[DocumentFragment, Element, TextLiteral, DirectiveTag]


def children_adopt(node: TreeNode, children: List[TreeNode]) -> None:
    """Point the parent reference of each child at node"""
    for child in children:
        child.parent = node
