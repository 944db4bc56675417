from papermark.parser import Parameter, Span, TagStack, TextRun, TreeNode


def test_well_nested_tags_push_and_pop() -> None:
    stack = TagStack()
    stack.open("bold", span=Span(0, 6))
    stack.text("hi", Span(6, 8))
    stack.close("bold", Span(8, 15))
    tree = stack.toTree()

    assert tree.children == [TreeNode("bold", None, Span(0, 6), children=[TextRun("hi", Span(6, 8))])]
    assert tree.children[0].closeSpan == Span(8, 15)
    assert stack.diagnostics == []


def test_root_is_closed_with_an_empty_span() -> None:
    tree = TagStack().toTree()

    assert tree.isRoot
    assert tree.openSpan == Span(0, 0)
    assert tree.closeSpan == Span(0, 0)


def test_closing_with_nothing_open_is_ignored() -> None:
    stack = TagStack()
    stack.close("bold", Span(0, 7))
    stack.text("x")

    assert stack.depth == 1
    assert stack.toTree().children == [TextRun("x", Span(0, 0))]
    assert stack.diagnostics == []


def test_closing_a_tag_that_isnt_open_is_ignored() -> None:
    stack = TagStack()
    stack.open("bold", span=Span(0, 6))
    stack.close("italic", Span(6, 15))

    assert stack.top.tag == "bold"
    assert stack.diagnostics == []


def test_mismatched_close_splits_and_reopens() -> None:
    stack = TagStack()
    stack.open("bold", span=Span(0, 6))
    stack.open("italic", span=Span(6, 14))
    stack.text("hi", Span(14, 16))
    stack.close("bold", Span(16, 23))
    stack.text("bye", Span(23, 26))
    tree = stack.toTree()

    bold, italic = tree.children
    assert bold == TreeNode(
        "bold",
        None,
        Span(0, 6),
        children=[TreeNode("italic", None, Span(6, 14), children=[TextRun("hi", Span(14, 16))])],
    )
    assert italic == TreeNode("italic", None, Span(6, 14), children=[TextRun("bye", Span(23, 26))])

    innerItalic = bold.children[0]
    assert innerItalic.closeSpan == Span(16, 16)
    assert bold.closeSpan == Span(16, 23)
    assert italic.openSpan == Span(6, 14)
    assert italic.closeSpan is None

    assert [(d.span, d.message) for d in stack.diagnostics] == [
        (
            Span(16, 23),
            "Saw [/bold], but [italic] was still open inside it; closed and reopened them around the end tag.",
        ),
        (Span(6, 14), "Tag [italic] was not properly closed."),
    ]


def test_split_reopens_outermost_first_and_keeps_params() -> None:
    red = Parameter.color("red")
    stack = TagStack()
    stack.open("bold", span=Span(0, 6))
    stack.open("color", red, Span(6, 17))
    stack.open("italic", span=Span(17, 25))
    stack.close("bold", Span(25, 32))

    assert [str(node) for node in stack.tags] == ["root", "color=red", "italic"]
    assert stack.tags[1].param == red
    assert stack.printOpenTags() == ["[color=red]", "[italic]"]
    assert "[color], [italic] were still open" in stack.diagnostics[0].message


def test_split_closes_the_innermost_matching_tag() -> None:
    stack = TagStack()
    stack.open("bold", span=Span(0, 6))
    stack.open("italic", span=Span(6, 14))
    stack.open("bold", span=Span(14, 20))
    stack.open("head", Parameter.number(1), Span(20, 28))

    assert stack.getDeepestFromTag("bold") == 3
    stack.close("bold", Span(28, 35))

    assert [node.tag for node in stack.tags] == ["root", "bold", "italic", "head"]


def test_unclosed_tags_are_drained_with_diagnostics() -> None:
    stack = TagStack()
    stack.open("bold", span=Span(0, 6))
    stack.open("italic", span=Span(6, 14))
    tree = stack.toTree()

    assert [d.message for d in stack.diagnostics] == [
        "Tag [italic] was not properly closed.",
        "Tag [bold] was not properly closed.",
    ]
    assert tree.children[0].children[0].tag == "italic"
    assert not tree.children[0].isClosed


def test_finish_is_idempotent() -> None:
    stack = TagStack()
    stack.open("bold", span=Span(0, 6))
    first = stack.finish()
    second = stack.finish()

    assert first is second
    assert len(stack.diagnostics) == 1
