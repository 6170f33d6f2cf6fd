"""
Compilation logging on top of loguru.

LOG() checks the verbosity of the ProgramState bound to the current context,
so the extractor, adapter and compiler can report progress without having
the state passed to them.

A Template binds its own state only while it compiles and puts the caller's
state back afterwards, so embedding Template in another pipeline (such as the
CLI) leaves that pipeline's verbosity in force.

Usage:
    from cowlick.lib.log import LOG, state_connectToLogger, state_logScope

    # CLI entry point: bind for the rest of the run
    state_connectToLogger(state)

    # Library code: bind for one block only
    with state_logScope(state):
        LOG("Extracted 3 directives", level=2)
        LOG("Generated source: ...", level=3)
"""

from contextlib import contextmanager
from contextvars import ContextVar, Token
from typing import Any, Iterator, Optional
import sys

from loguru import logger

_program_state: ContextVar[Optional[Any]] = ContextVar('program_state', default=None)

logger_format = (
    "<green>{time:HH:mm:ss}</green> │ "
    "<level>{level: <5}</level> │ "
    "<magenta>{extra[stage]: <8}</magenta> │ "
    "<cyan>{function: <20}</cyan> @ "
    "<cyan>{line: <4}</cyan> ║ "
    "<level>{message}</level>"
)

logger.remove()
logger.configure(extra={"stage": "cowlick"})
logger.add(sys.stderr, format=logger_format, level="DEBUG")


def state_connectToLogger(state: Any) -> Token:
    """
    Bind a ProgramState to the logging context.

    Args:
        state: ProgramState instance with a verbosity attribute

    Returns:
        Token for state_disconnectFromLogger() to restore the previous binding
    """
    return _program_state.set(state)


def state_disconnectFromLogger(token: Token) -> None:
    """Restore the binding that was active before state_connectToLogger()"""
    _program_state.reset(token)


@contextmanager
def state_logScope(state: Any) -> Iterator[Any]:
    """
    Bind state for the duration of a with-block.

    Example:
        >>> with state_logScope(ProgramState(verbosity=3)):
        ...     LOG("visible", level=3)
    """
    token = state_connectToLogger(state)
    try:
        yield state
    finally:
        state_disconnectFromLogger(token)


def LOG(message: str, level: int = 1, stage: Optional[str] = None, **kwargs: Any) -> None:
    """
    Log message if the bound state's verbosity allows.

    Args:
        message: Log message to display
        level: Minimum verbosity required (1=normal, 2=verbose, 3=debug)
        stage: Pipeline stage shown in the log line (defaults to "cowlick")
        **kwargs: Additional loguru metadata

    Verbosity levels:
        1 = Normal output (default)
        2 = Verbose (-v): stage progress, directive and node counts
        3 = Debug (-vv or higher): combined tree and generated source
    """
    state = _program_state.get()
    if state is None or getattr(state, 'verbosity', 0) < level:
        return

    # depth=1 reports the caller, not LOG itself
    bound = logger.bind(stage=stage) if stage else logger
    bound.opt(depth=1).debug(message, **kwargs)
