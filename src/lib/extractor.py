"""
Directive extractor

Replaces every {{ }}, {% %} and {# #} directive in raw template text with a
single sentinel character, so the remaining text can go through a standard
HTML parser untouched. The parsed directives are queued in source order for
the tree-construction adapter to splice back in.

The grammar's top rule does not bound a directive by itself. To find where a
directive ends, the whole remaining suffix is handed to the grammar: a parse
that matches a directive and then finds more text fails with an "expected
end" GrammarError, whose location marks the directive's end. That failure
is the success signal. Every other GrammarError is a real syntax error and
propagates.

Example:
    >>> extracted = directives_extract('<p>{{ name }}</p>')
    >>> extracted.rewritten
    '<p>\\U0001F42E</p>'
    >>> list(extracted.queue)
    [ExpressionTag(body=Variable(name='name'))]
"""

import re
from typing import Optional

from .grammar import directive_parse
from .log import LOG
from ..errors import GrammarError, PlaceholderError
from ..models.extractor import DirectiveMatch, ExtractedTemplate, PlaceholderQueue
from ..models.nodes import DirectiveTag


OPENER_PATTERN = re.compile(r'\{[{%#]')


def directive_find(template: str, position: int) -> Optional[DirectiveMatch]:
    """
    Find the next directive opener at or after position

    Returns:
        DirectiveMatch, or None when no opener remains
    """
    match = OPENER_PATTERN.search(template, position)
    if not match:
        return None
    return DirectiveMatch(opener=match.group(0), position=match.start())


def directive_bound(template: str, position: int) -> tuple[DirectiveTag, int]:
    """
    Parse the one directive starting at position

    Args:
        template: Template text
        position: Offset of the directive opener

    Returns:
        (tag, end) where end is the offset just past the directive

    Raises:
        GrammarError: No well-formed directive starts at position
    """
    suffix = template[position:]
    try:
        return directive_parse(suffix), len(template)
    except GrammarError as e:
        if not e.trailing:
            raise
        end = position + e.location.end - 1

    return directive_parse(template[position:end]), end


def directives_extract(template: str, placeholder: Optional[str] = None) -> ExtractedTemplate:
    """
    Replace every directive in template by one placeholder character

    Args:
        template: Raw template text
        placeholder: Sentinel character (defaults to appsettings.placeholder)

    Returns:
        ExtractedTemplate with the rewritten text and the queue of parsed
        directives, one per placeholder, in source order

    Raises:
        GrammarError: A directive opener is not followed by a well-formed
            directive
        PlaceholderError: The template already contains the sentinel
    """
    if placeholder is None:
        from ..config import appsettings
        placeholder = appsettings.placeholder

    if placeholder in template:
        raise PlaceholderError(
            f"Template contains the reserved placeholder character {placeholder!r} "
            f"at position {template.index(placeholder)}"
        )

    queue = PlaceholderQueue()
    position = 0

    while position < len(template):
        match = directive_find(template, position)
        if not match:
            break

        position = match.position
        tag, end = directive_bound(template, position)
        LOG(f"{match.opener} directive {template[position:end]!r} at {position}: {tag!r}", level=3)

        queue.push(tag)
        template = template[:position] + placeholder + template[end:]
        position += len(placeholder)

    LOG(f"Extracted {len(queue)} directives", level=2)
    return ExtractedTemplate(rewritten=template, queue=queue)
