"""
CLI pipeline tests

Tests the env_check → template_compile → markup_write → results_report
stages on files in a temporary input directory.
"""

import json

import pytest

from cowlick.__main__ import env_check, markup_write, parser, results_report, template_compile
from cowlick.models import ProgramState, pipeline


def state_make(tmp_path, template, context=None, **kwargs):
    inputdir = tmp_path / "in"
    inputdir.mkdir()
    (inputdir / "page.html").write_text(template, encoding="utf-8")
    contextFile = None
    if context is not None:
        (inputdir / "context.json").write_text(json.dumps(context), encoding="utf-8")
        contextFile = "context.json"
    return ProgramState(
        inputdir=inputdir,
        outputdir=tmp_path / "out",
        inputFile="page.html",
        contextFile=contextFile,
        verbosity=0,
        **kwargs,
    )


class TestArguments:
    """Test CLI argument parsing into ProgramState"""

    def test_namespace_to_state(self, tmp_path):
        options = parser.parse_args(["--inputFile", "page.html", "--contextFile", "ctx.json", "-vv"])
        state = ProgramState.state_createFromNamespace(options, tmp_path, tmp_path / "out")

        assert state.inputFile == "page.html"
        assert state.contextFile == "ctx.json"
        assert state.outputFile == "index.html"
        assert state.verbosity == 3
        assert state.inputdir == tmp_path


class TestPipeline:
    """Test the full CLI pipeline"""

    def test_render_with_context(self, tmp_path):
        state = state_make(tmp_path, "<p>Hello, {{ name }}</p>\n", {"name": "Ada"})

        final = pipeline(state, env_check, template_compile, markup_write, results_report)

        assert final.outputPath == tmp_path / "out" / "index.html"
        assert final.outputPath.read_text(encoding="utf-8") == "<p>Hello, Ada</p>\n"

    def test_render_without_context(self, tmp_path):
        state = state_make(tmp_path, "<p>{{ 'static' }}</p>", outputFile="page.out.html")

        final = pipeline(state, env_check, template_compile, markup_write)

        assert final.outputPath.name == "page.out.html"
        assert final.markup == "<p>static</p>"

    def test_stages_do_not_mutate_input_state(self, tmp_path):
        state = state_make(tmp_path, "<p>x</p>")
        checked = env_check(state)

        assert checked.envOK
        assert not state.envOK


class TestFailures:
    """Test exit codes for bad input"""

    def test_missing_input_file(self, tmp_path):
        state = ProgramState(inputdir=tmp_path, outputdir=tmp_path / "out", inputFile="nope.html", verbosity=0)
        with pytest.raises(SystemExit) as info:
            env_check(state)
        assert info.value.code == 1

    def test_missing_context_file(self, tmp_path):
        state = state_make(tmp_path, "<p>x</p>")
        state.contextFile = "missing.json"
        with pytest.raises(SystemExit):
            env_check(state)

    def test_template_error(self, tmp_path):
        state = env_check(state_make(tmp_path, "<p>{% if a %}x</p>"))
        with pytest.raises(SystemExit) as info:
            template_compile(state)
        assert info.value.code == 1

    def test_context_must_be_an_object(self, tmp_path):
        state = state_make(tmp_path, "<p>x</p>", context=[1, 2])
        state = template_compile(env_check(state))
        with pytest.raises(SystemExit):
            markup_write(state)

    def test_missing_context_value(self, tmp_path):
        state = state_make(tmp_path, "<p>{{ name }}</p>", context={})
        state = template_compile(env_check(state))
        with pytest.raises(SystemExit):
            markup_write(state)
