"""
Exception hierarchy for cowlick

Syntax-level failures subclass SyntaxError so callers that already catch
SyntaxError around template compilation keep working.
"""

from dataclasses import dataclass
from typing import List, Optional


class CowlickError(Exception):
    """Base class for all template compilation errors"""


@dataclass(frozen=True)
class SourceSpan:
    """
    Character span in a string, end exclusive

    Attributes:
        start: Offset of the first character
        end: Offset one past the last character
    """
    start: int
    end: int


class GrammarError(CowlickError, SyntaxError):
    """
    A directive did not parse

    Attributes:
        expected: What the grammar expected at the failure point. The single
                  entry "end" means a complete directive was matched and
                  further characters follow it.
        location: Span of the offending character(s), relative to the text
                  handed to the grammar
    """

    def __init__(
        self,
        message: str,
        expected: List[str],
        location: SourceSpan,
        text: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.expected = expected
        self.location = location
        self.text = text

    @property
    def trailing(self) -> bool:
        """True when the directive matched and trailing content follows it"""
        return bool(self.expected) and self.expected[0] == "end"


class PlaceholderError(CowlickError, SyntaxError):
    """Sentinel placeholders and queued directives got out of step"""


class CompileError(CowlickError):
    """The combined tree could not be turned into a render routine"""
