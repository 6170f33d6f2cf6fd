"""
Logging tests

Tests verbosity gating of LOG() and that compiling a Template leaves the
caller's logging state in place.
"""

import pytest
from loguru import logger

from cowlick import Template
from cowlick.lib.log import LOG, state_connectToLogger, state_disconnectFromLogger, state_logScope
from cowlick.models import ProgramState


@pytest.fixture
def messages():
    captured = []
    sink = logger.add(captured.append, format="{extra[stage]}|{message}")
    yield captured
    logger.remove(sink)


class TestVerbosity:
    """Test LOG() gating on the bound state"""

    def test_level_within_verbosity(self, messages):
        with state_logScope(ProgramState(verbosity=2)):
            LOG("shown", level=2)
            LOG("hidden", level=3)

        assert [message.strip() for message in messages] == ["cowlick|shown"]

    def test_stage_label(self, messages):
        with state_logScope(ProgramState(verbosity=1)):
            LOG("parsing", stage="html")

        assert messages[0].strip() == "html|parsing"

    def test_nothing_bound(self, messages):
        with state_logScope(None):
            LOG("dropped", level=1)

        assert messages == []


class TestBinding:
    """Test connect/disconnect and scoped binding"""

    def test_scope_restores_previous_state(self, messages):
        outer = ProgramState(verbosity=1)
        token = state_connectToLogger(outer)
        try:
            with state_logScope(ProgramState(verbosity=0)):
                LOG("inner", level=1)
            LOG("outer", level=1)
        finally:
            state_disconnectFromLogger(token)

        assert [message.strip() for message in messages] == ["cowlick|outer"]

    def test_template_keeps_caller_state(self, messages):
        """A debug-level compile does not leak its verbosity to the caller"""
        token = state_connectToLogger(ProgramState(verbosity=0))
        try:
            Template("<p>{{ a }}</p>", verbosity=3)
            del messages[:]
            LOG("after compile", level=1)
        finally:
            state_disconnectFromLogger(token)

        assert messages == []
