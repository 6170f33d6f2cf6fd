"""
Host element library

The render routine builds its output through a Host: element_make() creates
one virtual element and attribute_isBoolean() tells the adapter which HTML
attributes are boolean-valued. The default Host builds VNode objects, a
React-style element model (tag, props, children) that markup_render() can
serialize to static HTML.
"""

import html
import math
from dataclasses import dataclass
from typing import Any, Dict, List, Optional


# Attributes React treats as HAS_BOOLEAN_VALUE (lower-cased, as HTML
# parsers report them)
BOOLEAN_ATTRIBUTES = frozenset({
    'allowfullscreen',
    'async',
    'autofocus',
    'autoplay',
    'capture',
    'checked',
    'controls',
    'default',
    'defer',
    'disabled',
    'formnovalidate',
    'hidden',
    'itemscope',
    'loop',
    'multiple',
    'muted',
    'novalidate',
    'open',
    'playsinline',
    'readonly',
    'required',
    'reversed',
    'scoped',
    'seamless',
    'selected',
})

VOID_ELEMENTS = frozenset({
    'area', 'base', 'br', 'col', 'embed', 'hr', 'img', 'input',
    'link', 'meta', 'param', 'source', 'track', 'wbr',
})

# Host prop names that differ from their HTML attribute names
PROP_ATTRIBUTES = {
    'className': 'class',
    'htmlFor': 'for',
}


@dataclass
class VNode:
    """
    Virtual element

    Attributes:
        tag: Element tag name
        props: Attribute map, including the reserved 'key' prop
        children: Child nodes (VNode or plain values), or None
    """
    tag: str
    props: Dict[str, Any]
    children: Optional[List[Any]] = None

    @property
    def key(self) -> Optional[str]:
        return self.props.get('key')


class Host:
    """Default host library: builds VNode trees"""

    boolean_attributes = BOOLEAN_ATTRIBUTES

    def element_make(
        self, tag: str, attrs: Optional[Dict[str, Any]], children: Optional[List[Any]]
    ) -> VNode:
        return VNode(tag=tag, props=dict(attrs or {}), children=children)

    def attribute_isBoolean(self, name: str) -> bool:
        return name.lower() in self.boolean_attributes


def stringify(value: Any) -> str:
    """
    Convert a context or literal value to text the way a JavaScript host does

    Example:
        >>> [stringify(v) for v in (True, 2.0, 2.5, None, 'x', float('inf'))]
        ['true', '2', '2.5', '', 'x', 'Infinity']
    """
    if value is None:
        return ''
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, float) and math.isinf(value):
        return 'Infinity' if value > 0 else '-Infinity'
    if isinstance(value, float) and math.isnan(value):
        return 'NaN'
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def markup_render(node: Any) -> str:
    """
    Serialize a rendered tree to static HTML markup

    Text is escaped, 'key' is dropped, className/htmlFor map back to
    class/for, and boolean attributes render as name="" when truthy and
    are omitted when falsy. None and False render nothing.

    Example:
        >>> markup_render(VNode('p', {'className': 'x', 'key': '0'}, ['a < b']))
        '<p class="x">a &lt; b</p>'
    """
    if node is None or node is False or node is True:
        return ''
    if isinstance(node, (list, tuple)):
        return ''.join(markup_render(child) for child in node)
    if not isinstance(node, VNode):
        return html.escape(stringify(node), quote=False)

    parts = [f'<{node.tag}']
    for name, value in node.props.items():
        if name == 'key' or value is None:
            continue
        attribute = PROP_ATTRIBUTES.get(name, name)
        if attribute.lower() in BOOLEAN_ATTRIBUTES:
            if value:
                parts.append(f' {attribute}=""')
            continue
        parts.append(f' {attribute}="{html.escape(stringify(value))}"')
    parts.append('>')

    if node.tag in VOID_ELEMENTS:
        return ''.join(parts)

    parts.append(markup_render(node.children))
    parts.append(f'</{node.tag}>')
    return ''.join(parts)
