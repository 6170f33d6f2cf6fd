"""
Program state model and pipeline helper

Defines ProgramState dataclass for the functional pipeline pattern and
the pipeline() helper for composing transformation stages.
"""

from pathlib import Path
from argparse import Namespace
from typing import Any, Optional, Type, TypeVar, Dict, Callable, TYPE_CHECKING
from dataclasses import dataclass, field

# Forward reference for type hint - avoid circular import
if TYPE_CHECKING:
    from .extractor import PlaceholderQueue
    from .nodes import DocumentFragment


PS = TypeVar("PS", bound="ProgramState")


@dataclass
class ProgramState:
    """
    Central state container for the compilation pipeline (state bus pattern).

    This dataclass carries all program state through the functional pipeline,
    with each stage adding new fields as the compilation progresses.

    Compilation stages and their state additions:
        - Initial: source, verbosity, host
        - template_extract: rewritten, queue
        - tree_build: tree
        - code_generate: code
        - routine_load: render

    CLI stages and their state additions:
        - Initial: inputdir, outputdir, inputFile, contextFile, outputFile
        - env_check: inputSourceFile, contextSourceFile, htmlOutputdir, envOK
        - template_compile: everything above, via the compilation stages
        - markup_write: context, markup, outputPath

    Attributes:
        source: Raw template text
        verbosity: Logging verbosity level (1-3)
        host: Host element library used by the render routine
        rewritten: Template text with directives replaced by sentinels
        queue: Extracted directives awaiting placement (PlaceholderQueue)
        tree: Combined HTML + directive tree (DocumentFragment)
        code: Generated Python source of the render routine
        render: Loaded render routine
    """

    # CLI arguments
    inputdir: Optional[Path] = field(default=None)
    outputdir: Optional[Path] = field(default=None)
    verbosity: int = field(default=1)
    inputFile: str = field(default="")
    contextFile: Optional[str] = field(default=None)
    outputFile: str = field(default="index.html")

    # CLI pipeline state
    envOK: bool = field(default=False)
    inputSourceFile: Path = field(default=Path("/"))
    contextSourceFile: Optional[Path] = field(default=None)
    htmlOutputdir: Path = field(default=Path("/"))
    context: Dict[str, Any] = field(default_factory=dict)
    markup: str = field(default="")
    outputPath: Optional[Path] = field(default=None)

    # Compilation pipeline state
    source: str = field(default="")
    host: Any = field(default=None)
    rewritten: str = field(default="")
    queue: Optional["PlaceholderQueue"] = field(default=None)
    tree: Optional["DocumentFragment"] = field(default=None)
    code: str = field(default="")
    render: Optional[Callable[[Dict[str, Any]], Any]] = field(default=None)

    @classmethod
    def state_createFromNamespace(
        cls: Type["ProgramState"], options: Namespace, inputdir: Path, outputdir: Path
    ) -> "ProgramState":
        """
        Create ProgramState from argparse Namespace and directory paths.

        Merges CLI options with explicitly provided directories to create
        the initial program state for the CLI pipeline.

        Args:
            options: Parsed CLI arguments (inputFile, contextFile, etc.)
            inputdir: Directory containing template files
            outputdir: Directory for rendered output

        Returns:
            ProgramState instance with all CLI options as attributes
        """
        options_dict = vars(options)

        import dataclasses
        valid_fields = {f.name for f in dataclasses.fields(cls)}

        # Unknown CLI options (e.g. those added by chris_plugin) are ignored
        filtered_options = {k: v for k, v in options_dict.items() if k in valid_fields}

        merged_args = {**filtered_options, "inputdir": inputdir, "outputdir": outputdir}

        return cls(**merged_args)

    def copy(self: PS) -> PS:
        """
        Creates a shallow copy of the ProgramState instance.

        Returns:
            A new ProgramState instance.
        """
        return type(self)(**self.__dict__)


def pipeline(
    initial_state: ProgramState, *stages: Callable[[ProgramState], ProgramState]
) -> ProgramState:
    """
    Execute a functional pipeline of state transformations.

    Each stage is a function (ProgramState) -> ProgramState that receives
    the output of the previous stage and returns a new state.

    Args:
        initial_state: Starting ProgramState
        *stages: Variable number of stage functions to execute in order

    Returns:
        Final ProgramState after all transformations

    Example:
        final_state = pipeline(
            initial_state,
            template_extract,
            tree_build,
            code_generate,
            routine_load
        )

    This is equivalent to:
        routine_load(code_generate(tree_build(template_extract(initial_state))))

    But reads left-to-right instead of inside-out.
    """
    from functools import reduce
    return reduce(lambda state, stage: stage(state), stages, initial_state)
