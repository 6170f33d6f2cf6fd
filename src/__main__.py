#!/usr/bin/env python3
"""
cowlick - HTML template compiler

Renders an HTML template with {{ }}, {% %} and {# #} directives against a
JSON context and writes the resulting static markup.

As with other ChRIS plugins, the app takes an input and an output directory;
the template (and optional context file) are resolved relative to inputdir.

Usage:
    cowlick inputdir/ outputdir/ --inputFile page.html --contextFile context.json

Examples:
    # Render without a context
    cowlick . output/ --inputFile page.html

    # Render with a context and custom output name, dumping generated code
    cowlick . output/ --inputFile page.html --contextFile ctx.json --outputFile page.out.html -vv
"""

import json
import sys
from pathlib import Path
from argparse import ArgumentParser, Namespace, ArgumentDefaultsHelpFormatter

from chris_plugin import chris_plugin
from .lib import Template, markup_render, __version__, LOG, state_connectToLogger
from .errors import CowlickError
from .models import ProgramState, pipeline


# Define CLI arguments
parser = ArgumentParser(
    description="cowlick - compile HTML templates with directives to static markup",
    formatter_class=ArgumentDefaultsHelpFormatter,
)

parser.add_argument(
    "--inputFile", required=True, type=str, help="Template file (relative to inputdir)"
)

parser.add_argument(
    "--contextFile",
    default=None,
    type=str,
    help="JSON file with the render context (relative to inputdir)",
)

parser.add_argument(
    "--outputFile",
    default="index.html",
    type=str,
    help="Name of the rendered markup file within outputdir",
)

parser.add_argument(
    "-v",
    "--verbosity",
    action="count",
    default=1,
    help="Increase output verbosity (can be repeated: -v, -vv)",
)

parser.add_argument("-V", "--version", action="version", version=f"%(prog)s {__version__}")


def env_check(inputstate: ProgramState) -> ProgramState:
    """
    Validate environment and resolve all file paths.

    Returns:
        ProgramState with added fields:
            - inputSourceFile: Resolved template path
            - contextSourceFile: Resolved context path, if any
            - htmlOutputdir: Created output directory
            - envOK: True if environment is valid

    Exits:
        1 if the template or context file is not found
    """
    state = inputstate.copy()

    LOG("Checking environment...", level=2)

    input_file = state.inputdir / state.inputFile
    if not input_file.exists():
        print(f"Error: Input file not found: {input_file}", file=sys.stderr)
        state.envOK = False
        sys.exit(1)
    state.inputSourceFile = input_file
    LOG(f"Input file: {input_file}", level=2)

    if state.contextFile:
        context_file = state.inputdir / state.contextFile
        if not context_file.exists():
            print(f"Error: Context file not found: {context_file}", file=sys.stderr)
            state.envOK = False
            sys.exit(1)
        state.contextSourceFile = context_file
        LOG(f"Context file: {context_file}", level=2)

    state.htmlOutputdir = state.outputdir
    state.htmlOutputdir.mkdir(parents=True, exist_ok=True)
    LOG(f"Output directory: {state.htmlOutputdir}", level=2)

    state.envOK = True
    return state


def template_compile(inputstate: ProgramState) -> ProgramState:
    """
    Read and compile the template.

    Whitespace around the file contents is stripped before compiling.

    Returns:
        ProgramState with added fields:
            - source, tree, code, render

    Exits:
        1 if the file cannot be read or the template does not compile
    """
    state = inputstate.copy()

    LOG("Reading template...", level=1)
    try:
        state.source = state.inputSourceFile.read_text(encoding="utf-8").strip()
        LOG(f"Read {len(state.source)} characters from {state.inputSourceFile.name}", level=2)
    except OSError as e:
        print(f"Error reading input file: {e}", file=sys.stderr)
        sys.exit(1)

    LOG("Compiling template...", level=1)
    try:
        template = Template(state.source, verbosity=state.verbosity)
    except CowlickError as e:
        print(f"Template error: {e}", file=sys.stderr)
        sys.exit(1)

    state.tree = template.tree
    state.code = template.code
    state.render = template.render
    return state


def markup_write(inputstate: ProgramState) -> ProgramState:
    """
    Render the template with its context and write the markup.

    Returns:
        ProgramState with added fields:
            - context: Parsed JSON context
            - markup: Rendered static HTML
            - outputPath: File the markup was written to

    Exits:
        1 if the context is not a JSON object or rendering fails
    """
    state = inputstate.copy()

    if state.contextSourceFile:
        try:
            state.context = json.loads(state.contextSourceFile.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            print(f"Error reading context file: {e}", file=sys.stderr)
            sys.exit(1)
        if not isinstance(state.context, dict):
            print("Error: Context file must hold a JSON object", file=sys.stderr)
            sys.exit(1)

    LOG("Rendering...", level=1)
    try:
        state.markup = markup_render(state.render(state.context))
    except KeyError as e:
        print(f"Render error: context has no value for {e}", file=sys.stderr)
        sys.exit(1)

    state.outputPath = state.htmlOutputdir / state.outputFile
    state.outputPath.write_text(state.markup + "\n", encoding="utf-8")
    LOG(f"Wrote {state.outputPath}", level=2)
    return state


def results_report(inputstate: ProgramState) -> ProgramState:
    """
    Display rendering results to user.

    Exits:
        1 if nothing was written
    """
    state: ProgramState = inputstate.copy()
    if not state.outputPath:
        print("Error: Rendering failed", file=sys.stderr)
        sys.exit(1)

    LOG("\n✓ Rendering successful!", level=1)
    LOG(f"  Output: {state.outputPath}", level=1)
    LOG(f"  Size:   {len(state.markup)} characters", level=1)
    return state


@chris_plugin(
    parser=parser,
    title="cowlick - HTML template compiler",
    category="Utility",
    min_memory_limit="100Mi",
    min_cpu_limit="500m",
)
def main(options: Namespace, inputdir: Path, outputdir: Path):
    """
    Main entry point - render a template file to static markup.

    Orchestrates the pipeline:
        1. env_check: Validate paths
        2. template_compile: Read and compile the template
        3. markup_write: Render with the context and write markup
        4. results_report: Display results

    Note:
        This function is wrapped by @chris_plugin which handles CLI
        argument parsing and invokes this function with parsed values.
    """
    state: ProgramState = ProgramState.state_createFromNamespace(
        options=options, inputdir=inputdir, outputdir=outputdir
    )

    state_connectToLogger(state)

    pipeline(state, env_check, template_compile, markup_write, results_report)


if __name__ == "__main__":
    main()  # type: ignore  # @chris_plugin decorator transforms signature
