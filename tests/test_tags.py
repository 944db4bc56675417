import pytest

from papermark.errors import RegistryError
from papermark.parser import DEFAULT_TAGS, Node, Parameter, ParamKind, Span, TagDef, TagRegistry


def messages(node: Node, registry: TagRegistry = DEFAULT_TAGS) -> list[str]:
    return [diag.message for diag in registry.verifyTag(node)]


def test_default_registry() -> None:
    assert [row.name for row in DEFAULT_TAGS] == ["color", "head", "bold", "italic", "bolditalic", "bullet"]
    assert DEFAULT_TAGS.get("bullet") == TagDef("bullet", selfClosing=True)
    assert DEFAULT_TAGS.get("color").param is ParamKind.color
    assert "nope" not in DEFAULT_TAGS


def test_known_tags_pass() -> None:
    assert messages(Node.open("bold", Span(0, 6))) == []
    assert messages(Node.open("head", Span(0, 8), Parameter.number(1))) == []
    assert messages(Node.open("bullet", Span(0, 7), selfClosing=True)) == []


def test_unknown_tag() -> None:
    assert messages(Node.open("nope", Span(0, 6))) == ["Unknown tag [nope]."]


def test_self_closing_required() -> None:
    (msg,) = messages(Node.open("bullet", Span(0, 8)))

    assert "must be self-closing" in msg
    assert "[bullet/]" in msg


def test_missing_and_unexpected_parameters() -> None:
    (missing,) = messages(Node.open("color", Span(0, 7)))
    (unexpected,) = messages(Node.open("bold", Span(0, 8), Parameter.number(1)))

    assert "requires a color parameter" in missing
    assert "doesn't take a parameter" in unexpected


def test_color_parameters_are_checked_against_their_source() -> None:
    fallback = Parameter.color("black", source="notacolor")
    (msg,) = messages(Node.open("color", Span(0, 17), fallback))

    assert msg == "[color=notacolor] has an invalid parameter; expected a color (#rgb, #rrggbb, or a color name)."
    assert messages(Node.open("color", Span(0, 11), Parameter.color("red", source="Red"))) == []
    assert messages(Node.open("color", Span(0, 11), Parameter.color("#abc"))) == []


def test_int_parameters() -> None:
    (msg,) = messages(Node.open("head", Span(0, 10), Parameter.text("x")))

    assert msg == '[head="x"] has an invalid parameter; expected a non-negative integer.'


def test_registry_from_json_extends_the_base() -> None:
    registry = TagRegistry.fromJson(
        '[{"name": "big", "param": "int"}, {"name": "rule", "selfClosing": true}]',
        base=DEFAULT_TAGS,
    )

    assert len(registry) == 8
    assert registry.get("big") == TagDef("big", param=ParamKind.int)
    assert registry.get("rule").selfClosing
    assert "big" not in DEFAULT_TAGS
    assert messages(Node.open("rule", Span(0, 6)), registry) != []


def test_registry_from_json_can_override() -> None:
    registry = TagRegistry.fromJson('[{"name": "bold", "param": "color"}]', base=DEFAULT_TAGS)

    assert registry.get("bold").param is ParamKind.color
    assert len(registry) == len(DEFAULT_TAGS)


@pytest.mark.parametrize(
    "text",
    [
        "not json",
        '{"name": "big"}',
        '[{"selfClosing": true}]',
        '[{"name": "1big"}]',
        '[{"name": "big", "selfClosing": "yes"}]',
        '[{"name": "big", "param": "float"}]',
    ],
)
def test_bad_registry_rows(text: str) -> None:
    with pytest.raises(RegistryError):
        TagRegistry.fromJson(text)


def test_registry_error_keeps_the_row() -> None:
    with pytest.raises(RegistryError) as excinfo:
        TagRegistry.fromJson('[{"name": "big", "param": "float"}]')

    assert excinfo.value.row == {"name": "big", "param": "float"}
    assert "'param' for tag 'big'" in str(excinfo.value)
