from papermark.parser import KeyValuePair, Match, Node, NoMatch, Parameter, ParamType, Span, grammar


def test_escape_sequences_drop_the_backslash() -> None:
    assert grammar.escapeSequence.parse("\\[") == Match("[", Span(0, 2))
    assert grammar.escapeSequence.parse("\\/") == Match("/", Span(0, 2))
    assert grammar.escapeSequence.parse("\\x") == NoMatch(0)


def test_text_joins_runs_and_escapes() -> None:
    res = grammar.text.parse("a\\[b\\]c")

    assert res.value == [Node.text("a[b]c", Span(0, 7))]
    assert res.value[0].span == Span(0, 7)


def test_text_stops_at_a_tag() -> None:
    res = grammar.text.parse("ab[bold]")

    assert res.value[0].value == "ab"
    assert res.span == Span(0, 2)


def test_param_string() -> None:
    res = grammar.paramValue.parse('"hi there"')

    assert res.value == Parameter.text("hi there")
    assert res.span == Span(0, 10)


def test_param_hex_colors() -> None:
    assert grammar.paramValue.parse("#ABC").value == Parameter.color("#ABC")
    assert grammar.paramValue.parse("#abcdef").value == Parameter.color("#abcdef")


def test_param_color_names_are_lowercased() -> None:
    param = grammar.paramValue.parse("Red").value

    assert param.type is ParamType.Color
    assert param.value == "red"
    assert param.source == "Red"


def test_unknown_color_names_fall_back_to_black() -> None:
    param = grammar.paramValue.parse("notacolor").value

    assert param.value == "black"
    assert param.source == "notacolor"


def test_digits_parse_as_numbers() -> None:
    param = grammar.paramValue.parse("800").value

    assert param == Parameter.number(800)
    assert param.type is ParamType.Number


def test_open_tag() -> None:
    res = grammar.tag.parse("[bold]")

    assert res.value == [Node.open("bold", Span(0, 6))]
    assert res.value[0].span == Span(0, 6)


def test_open_tag_with_parameter() -> None:
    (node,) = grammar.tag.parse("[color= red]").value

    assert node.value == "color"
    assert node.param == Parameter.color("red")


def test_open_tag_with_attributes() -> None:
    (node,) = grammar.tag.parse('[head=2 id="x" big]').value

    assert node.param == Parameter.number(2)
    assert node.attrs == (
        KeyValuePair("id", Parameter.text("x")),
        KeyValuePair("big", None),
    )
    assert str(node) == '[head=2 id="x" big]'


def test_closing_tag_tolerates_whitespace() -> None:
    res = grammar.tag.parse("[/ bold ]")

    assert res.value == [Node.close("bold", Span(0, 9))]
    assert res.span == Span(0, 9)


def test_self_closing_tag_expands_to_open_and_close() -> None:
    openNode, closeNode = grammar.tag.parse("[bullet/]").value

    assert openNode.isOpen
    assert openNode.selfClosing
    assert closeNode == Node.close("bullet", Span(7, 9))
    assert openNode.span == Span(0, 7)
    assert closeNode.span == Span(7, 9)


def test_unfinished_tag_is_not_a_tag() -> None:
    assert grammar.tag.parse("[bold") == NoMatch(0)
    assert grammar.tag.parse("[/]") == NoMatch(0)


def test_document_keeps_stray_brackets_as_text() -> None:
    nodes = grammar.document.parse("a[b").value

    assert [n.value for n in nodes] == ["a", "[", "b"]
    assert grammar.isStray(nodes[1])
    assert not grammar.isStray(nodes[0])


def test_escaped_bracket_is_not_stray() -> None:
    (node,) = grammar.document.parse("\\[").value

    assert node.value == "["
    assert not grammar.isStray(node)


def test_empty_document() -> None:
    assert grammar.document.parse("") == Match([], Span(0, 0))


def test_document_flattens_in_order() -> None:
    nodes = grammar.document.parse("x[bold]y[/bold][bullet/]").value

    assert [n.kind.value for n in nodes] == ["text", "open", "text", "close", "open", "close"]
    assert [n.span for n in nodes] == [
        Span(0, 1),
        Span(1, 7),
        Span(7, 8),
        Span(8, 15),
        Span(15, 22),
        Span(22, 24),
    ]
