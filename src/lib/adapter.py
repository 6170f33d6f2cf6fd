"""
HTML tree-construction adapter

An html5lib TreeBuilder that lets the standard HTML5 tree-construction
algorithm (implied end tags, foster parenting, foreign content, ...) build
the combined tree directly. Whenever the parser inserts text or creates an
element with attributes, sentinel placeholders left by the extractor are
replaced by the next queued directive, so directives end up exactly where
they appeared in the source.

Node classes implement the html5lib node protocol; fragment_export() turns
the finished tree into plain model dataclasses for the compiler.
"""

from functools import partial
from typing import Any, Dict, List, Optional, Union

import html5lib
from html5lib.constants import namespaces
from html5lib.treebuilders import base

from .host import Host
from .log import LOG
from ..errors import PlaceholderError
from ..models.extractor import PlaceholderQueue
from ..models.nodes import (
    Attr,
    CombinedNode,
    DocumentFragment,
    Element,
    TextLiteral,
    children_adopt,
)


AttributeValue = Union[str, List[CombinedNode]]


class AdapterElement(base.Node):
    """
    Element under construction

    Children are either AdapterElement instances or finished leaf models
    (TextLiteral, directive tags, IgnoredNode).
    """

    def __init__(self, name: Optional[str], namespace: Optional[str], adapter: "TreeAdapter") -> None:
        # base.Node.__init__ assigns self.attributes, which needs the adapter
        self.adapter = adapter
        self._attributes: Dict[str, AttributeValue] = {}
        super().__init__(name)
        self.namespace = namespace

    @property
    def attributes(self) -> Dict[str, AttributeValue]:
        return self._attributes

    @attributes.setter
    def attributes(self, attributes: Dict[Any, str]) -> None:
        self._attributes = self.adapter.attributes_adapt(attributes)

    @property
    def nameTuple(self):
        return (self.namespace or namespaces["html"], self.name)

    def child_index(self, node: Any) -> int:
        for index, child in enumerate(self.childNodes):
            if child is node:
                return index
        raise ValueError(f"{node!r} is not a child of {self.name}")

    def appendChild(self, node: Any) -> None:
        self.childNodes.append(node)
        node.parent = self

    def insertBefore(self, node: Any, refNode: Any) -> None:
        self.childNodes.insert(self.child_index(refNode), node)
        node.parent = self

    def removeChild(self, node: Any) -> None:
        del self.childNodes[self.child_index(node)]
        node.parent = None

    def insertText(self, data: str, insertBefore: Any = None) -> None:
        for node in self.adapter.placeholders_expand(data):
            if insertBefore is not None:
                self.insertBefore(node, insertBefore)
                continue
            last = self.childNodes[-1] if self.childNodes else None
            if isinstance(node, TextLiteral) and isinstance(last, TextLiteral):
                last.value += node.value
            else:
                self.appendChild(node)

    def cloneNode(self) -> "AdapterElement":
        clone = AdapterElement(self.name, self.namespace, self.adapter)
        # Values are already adapted
        clone._attributes = {
            name: value if isinstance(value, str) else list(value)
            for name, value in self._attributes.items()
        }
        return clone

    def hasContent(self) -> bool:
        return bool(self.childNodes)


class AdapterFragment(AdapterElement):
    """Document or document fragment root"""

    def __init__(self, adapter: "TreeAdapter") -> None:
        super().__init__(None, None, adapter)


class IgnoredNode(base.Node):
    """HTML comment or doctype; kept during parsing, dropped on export"""

    def __init__(self) -> None:
        super().__init__(None)


class TreeAdapter(base.TreeBuilder):
    """
    html5lib tree builder that splices queued directives into the tree

    Args:
        namespaceHTMLElements: Passed through by html5lib.HTMLParser
        queue: Directives extracted from the template, in source order
        host: Host library consulted for boolean attributes
        placeholder: Sentinel character the extractor wrote

    Example:
        >>> extracted = directives_extract('<p>{{ name }}</p>')
        >>> fragment = html_parse(extracted.rewritten, extracted.queue)
        >>> fragment.children[0].children
        [ExpressionTag(body=Variable(name='name'))]
    """

    def __init__(
        self,
        namespaceHTMLElements: bool,
        queue: PlaceholderQueue,
        host: Optional[Host] = None,
        placeholder: Optional[str] = None,
    ) -> None:
        if placeholder is None:
            from ..config import appsettings
            placeholder = appsettings.placeholder
        self.queue = queue
        self.host = host or Host()
        self.placeholder = placeholder
        super().__init__(namespaceHTMLElements)

    # html5lib node factories

    def documentClass(self) -> AdapterFragment:
        return AdapterFragment(self)

    def fragmentClass(self) -> AdapterFragment:
        return AdapterFragment(self)

    def elementClass(self, name: str, namespace: Optional[str] = None) -> AdapterElement:
        return AdapterElement(name, namespace, self)

    def commentClass(self, data: str) -> IgnoredNode:
        # Directives inside an HTML comment still own a queue slot
        self.placeholders_expand(data)
        return IgnoredNode()

    def doctypeClass(self, name: str, publicId: Optional[str] = None, systemId: Optional[str] = None) -> IgnoredNode:
        return IgnoredNode()

    def testSerializer(self, node: Any) -> str:
        return repr(self.node_export(node))

    # Placeholder handling

    def placeholders_expand(self, text: str) -> List[CombinedNode]:
        """
        Split text on the sentinel and splice in queued directives

        Each of the n-1 split points receives the next directive from the
        queue. Non-empty text fragments become TextLiteral nodes; empty
        fragments (adjacent placeholders, placeholders at either end) are
        dropped.

        Example:
            'Hi 🐮!' with queue [ExpressionTag(name)] gives
            [TextLiteral('Hi '), ExpressionTag(name), TextLiteral('!')]
        """
        nodes: List[CombinedNode] = []
        for index, fragment in enumerate(text.split(self.placeholder)):
            if index:
                nodes.append(self.queue.pop())
            if fragment:
                nodes.append(TextLiteral(value=fragment))
        return nodes

    def attributes_adapt(self, attributes: Dict[Any, str]) -> Dict[str, AttributeValue]:
        """
        Prepare raw attributes of a new element

        Values containing placeholders become node lists (interpolated
        attributes). Empty values of boolean attributes are replaced by the
        attribute name, so the host sees a truthy value.
        """
        adapted: Dict[str, AttributeValue] = {}
        for name, value in attributes.items():
            if not isinstance(name, str):
                # Foreign content: (prefix, local name, namespace)
                prefix, local = name[0], name[1]
                name = f"{prefix}:{local}" if prefix else local
            if isinstance(value, str) and self.placeholder in value:
                adapted[name] = self.placeholders_expand(value)
            elif value == '' and self.host.attribute_isBoolean(name):
                adapted[name] = name
            else:
                adapted[name] = value
        return adapted

    # Export

    def node_export(self, node: Any) -> CombinedNode:
        if isinstance(node, AdapterFragment):
            fragment = DocumentFragment(children=self.children_export(node))
            children_adopt(fragment, fragment.children)
            return fragment
        if isinstance(node, AdapterElement):
            element = Element(
                tag=node.name,
                namespace=node.namespace,
                attrs=[Attr(name=name, value=value) for name, value in node.attributes.items()],
                children=self.children_export(node),
            )
            children_adopt(element, element.children)
            return element
        return node

    def children_export(self, node: AdapterElement) -> List[CombinedNode]:
        return [
            self.node_export(child)
            for child in node.childNodes
            if not isinstance(child, IgnoredNode)
        ]

    def fragment_export(self, fragment: AdapterFragment) -> DocumentFragment:
        return self.node_export(fragment)


def html_parse(
    rewritten: str,
    queue: PlaceholderQueue,
    host: Optional[Host] = None,
    container: Optional[str] = None,
    placeholder: Optional[str] = None,
) -> DocumentFragment:
    """
    Parse rewritten template text into the combined tree

    Args:
        rewritten: Template text with directives replaced by placeholders
        queue: Directives for those placeholders; fully drained on success
        host: Host library for boolean attribute coercion
        container: Context element for fragment parsing (default from settings)
        placeholder: Sentinel character (default from settings)

    Returns:
        DocumentFragment holding elements, text and directive nodes

    Raises:
        PlaceholderError: The placeholder count differs from the queue
            length, or some directives were not placed, e.g. because they
            appeared inside a tag name or an attribute name
    """
    from ..config import appsettings

    if container is None:
        container = appsettings.fragment_container

    expected = len(queue)
    sentinels = appsettings.placeholders_count(rewritten, placeholder)
    if sentinels != expected:
        raise PlaceholderError(
            f"Template has {sentinels} placeholders for {expected} directives"
        )

    parser = html5lib.HTMLParser(
        tree=partial(TreeAdapter, queue=queue, host=host, placeholder=placeholder),
        namespaceHTMLElements=appsettings.namespace_html_elements,
    )
    fragment = parser.parseFragment(rewritten, container=container)

    if not queue.drained:
        raise PlaceholderError(
            f"{len(queue)} of {expected} directives could not be placed; "
            "directives are only supported in text and attribute values"
        )

    tree = parser.tree.fragment_export(fragment)
    LOG(f"Placed {queue.popped} directives into the HTML tree", level=2)
    return tree
