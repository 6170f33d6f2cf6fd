"""
Compiler tests

Tests generated render source and the behaviour of the loaded routine for
hand-built combined trees.
"""

import pytest

from cowlick.errors import CompileError
from cowlick.lib.compiler import CodeBuilder, Compiler, code_load
from cowlick.lib.host import VNode
from cowlick.models.nodes import (
    Attr,
    CommentTag,
    DocumentFragment,
    Element,
    ElifTag,
    ElseTag,
    EndIfTag,
    ExpressionTag,
    IfTag,
    Literal,
    TextLiteral,
    Variable,
)


def compile_tree(*children):
    return Compiler(fragment_tag="div").compile(DocumentFragment(children=list(children)))


def render(context, *children):
    return code_load(compile_tree(*children))(context)


class TestCodeBuilder:
    """Test indentation and block bookkeeping"""

    def test_blocks_start_with_pass(self):
        builder = CodeBuilder()
        builder.block_open("if x:")
        builder.block_close()
        assert str(builder) == "if x:\n    pass\n"

    def test_continue_without_open_block(self):
        with pytest.raises(CompileError):
            CodeBuilder().block_continue("else:")

    def test_close_without_open_block(self):
        with pytest.raises(CompileError):
            CodeBuilder().block_close()


class TestLeaves:
    """Test text and interpolation"""

    def test_single_text_root(self):
        assert render({}, TextLiteral(value="hello")) == "hello"

    def test_empty_fragment_renders_none(self):
        assert render({}) is None

    def test_text_survives_quoting(self):
        text = 'quote " and \\ and\nnewline'
        root = render({}, Element(tag="p", children=[TextLiteral(value=text)]))
        assert root == VNode(tag="p", props={}, children=[text])

    def test_variable_interpolation(self):
        tree = Element(tag="p", children=[ExpressionTag(body=Variable(name="name"))])
        assert render({"name": "Ada"}, tree).children == ["Ada"]

    def test_interpolation_is_stringified(self):
        tree = Element(tag="p", children=[
            ExpressionTag(body=Literal(value=2.0)),
            ExpressionTag(body=Literal(value=2.5)),
            ExpressionTag(body=Literal(value=True)),
            ExpressionTag(body=Variable(name="n")),
        ])
        assert render({"n": 7}, tree).children == ["2", "2.5", "true", "7"]

    def test_overflowing_float_literal(self):
        tree = Element(tag="p", children=[ExpressionTag(body=Literal(value=float("inf")))])
        code = compile_tree(tree)
        assert "float('inf')" in code
        assert code_load(code)({}).children == ["Infinity"]

    def test_missing_variable_raises_key_error(self):
        tree = Element(tag="p", children=[ExpressionTag(body=Variable(name="missing"))])
        with pytest.raises(KeyError):
            render({}, tree)

    def test_comment_is_discarded(self):
        tree = Element(tag="p", children=[CommentTag(text="secret"), TextLiteral(value="x")])
        code = compile_tree(tree)
        assert "secret" not in code
        assert code_load(code)({}).children == ["x"]

    def test_comment_only_children_become_none(self):
        tree = Element(tag="p", children=[CommentTag(text="secret")])
        assert render({}, tree).children is None


class TestElements:
    """Test element construction, keys and attributes"""

    def test_root_element_has_no_key(self):
        root = render({}, Element(tag="p", children=[TextLiteral(value="x")]))
        assert root == VNode(tag="p", props={}, children=["x"])
        assert root.key is None

    def test_children_keyed_by_sibling_index(self):
        tree = Element(tag="ul", children=[
            Element(tag="li", children=[TextLiteral(value="a")]),
            TextLiteral(value=" "),
            Element(tag="li", children=[TextLiteral(value="b")]),
        ])
        root = render({}, tree)

        assert root.children[0].key == "0"
        assert root.children[1] == " "
        assert root.children[2].key == "2"

    def test_key_assignments_in_source(self):
        tree = Element(tag="ul", children=[Element(tag="li"), Element(tag="li"), Element(tag="li")])
        code = compile_tree(tree)
        assert [line.strip() for line in code.splitlines() if "'key'" in line] == [
            "attrs['key'] = '0'",
            "attrs['key'] = '1'",
            "attrs['key'] = '2'",
        ]

    def test_nested_elements(self):
        tree = Element(tag="div", children=[
            Element(tag="p", children=[Element(tag="b", children=[TextLiteral(value="x")])]),
        ])
        root = render({}, tree)
        assert root == VNode(tag="div", props={}, children=[
            VNode(tag="p", props={"key": "0"}, children=[
                VNode(tag="b", props={"key": "0"}, children=["x"]),
            ]),
        ])

    def test_reserved_attribute_names(self):
        tree = Element(tag="label", attrs=[Attr(name="for", value="x"), Attr(name="class", value="y")])
        assert render({}, tree).props == {"htmlFor": "x", "className": "y"}

    def test_interpolated_attribute(self):
        tree = Element(tag="a", attrs=[
            Attr(name="href", value=[TextLiteral(value="/u/"), ExpressionTag(body=Variable(name="id"))]),
        ])
        assert render({"id": 3}, tree).props == {"href": "/u/3"}

    def test_conditional_attribute(self):
        tree = Element(tag="p", attrs=[
            Attr(name="class", value=[
                TextLiteral(value="item"),
                IfTag(condition=Variable(name="active")),
                TextLiteral(value=" active"),
                EndIfTag(),
            ]),
        ])
        assert render({"active": True}, tree).props == {"className": "item active"}
        assert render({"active": False}, tree).props == {"className": "item"}

    def test_several_top_level_nodes_are_wrapped(self):
        root = render({}, Element(tag="p"), Element(tag="p"))
        assert root == VNode(tag="div", props={}, children=[
            VNode(tag="p", props={"key": "0"}, children=None),
            VNode(tag="p", props={"key": "1"}, children=None),
        ])

    def test_wrapped_nodes_keep_source_keys(self):
        """Top-level siblings are keyed by source index, text included"""
        root = render({}, Element(tag="li"), TextLiteral(value=" "), Element(tag="li"))
        assert [child.key for child in root.children if isinstance(child, VNode)] == ["0", "2"]


class TestControlFlow:
    """Test if/elif/else/endif translation"""

    CHAIN = [
        IfTag(condition=Variable(name="a")),
        TextLiteral(value="X"),
        ElifTag(condition=Variable(name="b")),
        TextLiteral(value="Y"),
        ElseTag(),
        TextLiteral(value="Z"),
        EndIfTag(),
    ]

    def tree(self):
        return Element(tag="p", children=list(self.CHAIN))

    def test_single_chain_in_source(self):
        code = compile_tree(self.tree())
        lines = [line.strip() for line in code.splitlines()]
        assert lines.count("if context['a']:") == 1
        assert lines.count("elif context['b']:") == 1
        assert lines.count("else:") == 1

    @pytest.mark.parametrize("context,expected", [
        ({"a": True}, ["X"]),
        ({"a": False, "b": True}, ["Y"]),
        ({"a": False, "b": False}, ["Z"]),
    ])
    def test_exactly_one_branch(self, context, expected):
        assert render(context, self.tree()).children == expected

    def test_literal_condition(self):
        tree = Element(tag="p", children=[
            IfTag(condition=Literal(value=False)),
            TextLiteral(value="no"),
            ElseTag(),
            TextLiteral(value="yes"),
            EndIfTag(),
        ])
        assert render({}, tree).children == ["yes"]

    def test_empty_branch(self):
        tree = Element(tag="p", children=[
            IfTag(condition=Variable(name="a")),
            ElseTag(),
            TextLiteral(value="x"),
            EndIfTag(),
        ])
        assert render({"a": True}, tree).children is None
        assert render({"a": False}, tree).children == ["x"]

    def test_conditional_elements_keep_source_keys(self):
        tree = Element(tag="ul", children=[
            IfTag(condition=Variable(name="a")),
            Element(tag="li"),
            EndIfTag(),
            Element(tag="li"),
        ])
        assert [child.key for child in render({"a": True}, tree).children] == ["1", "3"]
        assert [child.key for child in render({"a": False}, tree).children] == ["3"]


class TestCompileErrors:
    """Test failures raised while generating source"""

    def test_unknown_node_type(self):
        with pytest.raises(CompileError, match="Unexpected node type: str"):
            compile_tree("bogus")

    def test_unknown_expression_type(self):
        with pytest.raises(CompileError, match="Unexpected node type: TextLiteral"):
            compile_tree(ExpressionTag(body=TextLiteral(value="x")))

    def test_missing_endif(self):
        with pytest.raises(CompileError):
            compile_tree(IfTag(condition=Variable(name="a")), TextLiteral(value="x"))

    def test_endif_without_if(self):
        with pytest.raises(CompileError):
            compile_tree(TextLiteral(value="x"), EndIfTag())

    def test_else_without_if(self):
        with pytest.raises(CompileError):
            compile_tree(ElseTag())
