"""
File-driven template cases

Each tests/cases/*.txt file holds a template, an optional JSON context and
the expected markup, separated by lines containing only "---".
"""

import json
import re
from pathlib import Path

import pytest

from cowlick import Template


CASES_DIR = Path(__file__).parent / "cases"
SEPARATOR = re.compile(r"\n[^\S\n]*---[^\S\n]*\n")


def case_load(path):
    sections = SEPARATOR.split(path.read_text(encoding="utf-8"))
    if len(sections) == 2:
        template, expected = sections
        context = {}
    else:
        template, context_text, expected = sections
        context = json.loads(context_text)
    return template.strip(), context, expected.strip()


@pytest.mark.parametrize("path", sorted(CASES_DIR.glob("*.txt")), ids=lambda path: path.stem)
def test_case(path):
    template, context, expected = case_load(path)
    assert Template(template).markup(context) == expected
