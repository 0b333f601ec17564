"""Tests for the Mermaid sequence diagram emitter."""

from testflow.compiler.models import DiagramAction, Participant
from testflow.constants import ActionKind
from testflow.diagrams.mermaid import ARROWS, emit, sanitize_label

PAGE = Participant("page", "Page", 0)
SUT = Participant("sut", "System Under Test", 1)


def _action(
    kind: ActionKind,
    index: int = 0,
    label: str = "label",
    block: str | None = None,
    source: Participant = PAGE,
    target: Participant = SUT,
) -> DiagramAction:
    return DiagramAction(
        source=source,
        target=target,
        label=label,
        kind=kind,
        sequence_index=index,
        block=block,
    )


class TestSanitizeLabel:
    def test_collapses_whitespace(self) -> None:
        assert sanitize_label("a\n\tb   c") == "a b c"

    def test_quotes_and_semicolons(self) -> None:
        assert sanitize_label('say "hi"; bye') == "say 'hi'#59; bye"

    def test_empty(self) -> None:
        assert sanitize_label("   ") == "(no label)"

    def test_truncates_before_escaping(self) -> None:
        out = sanitize_label("a;" * 20, max_chars=10)
        assert out == "a#59;a#59;a#59;a..."

    def test_short_text_not_truncated(self) -> None:
        assert sanitize_label("Click submit", max_chars=12) == (
            "Click submit"
        )

    def test_hash_escaped(self) -> None:
        assert sanitize_label("Click #submit") == "Click #35;submit"

    def test_hash_and_semicolon_escaped_once(self) -> None:
        assert sanitize_label("#a;") == "#35;a#59;"

    def test_existing_entity_text_escaped(self) -> None:
        assert sanitize_label("#59;") == "#35;59#59;"

    def test_keeps_colons(self) -> None:
        assert sanitize_label("Fill: a, b") == "Fill: a, b"


class TestArrows:
    def test_reply_kinds_dashed(self) -> None:
        for kind in (
            ActionKind.ASSERT,
            ActionKind.ASSERT_ABSENT,
            ActionKind.GRAB,
            ActionKind.SCREENSHOT,
        ):
            assert ARROWS[kind] == "-->>"

    def test_custom_falls_back_to_solid(self) -> None:
        assert ActionKind.CUSTOM not in ARROWS
        text = emit([_action(ActionKind.CUSTOM)], [PAGE, SUT])
        assert text.splitlines()[-1] == "    page->>sut: label"

    def test_evaluate_async_arrow(self) -> None:
        text = emit([_action(ActionKind.EVALUATE)], [PAGE, SUT])
        assert text.splitlines()[-1] == "    page-)sut: label"

    def test_wait_is_note(self) -> None:
        text = emit(
            [_action(ActionKind.WAIT, label="waitForTimeout: 500")],
            [PAGE, SUT],
        )
        assert text.splitlines()[-1] == (
            "    Note over page,sut: waitForTimeout: 500"
        )


class TestEmit:
    def test_header_and_participants(self) -> None:
        text = emit([_action(ActionKind.CLICK)], [PAGE, SUT])
        assert text.splitlines()[:3] == [
            "sequenceDiagram",
            "    participant page as Page",
            "    participant sut as System Under Test",
        ]

    def test_no_trailing_newline(self) -> None:
        text = emit([_action(ActionKind.CLICK)], [PAGE, SUT])
        assert not text.endswith("\n")

    def test_alias_omitted_when_same_as_id(self) -> None:
        popup = Participant("popup", "popup", 0)
        text = emit([_action(ActionKind.CLICK, source=popup)], [popup, SUT])
        assert "    participant popup" in text.splitlines()
        assert "popup as popup" not in text

    def test_display_name_colon_escaped(self) -> None:
        host = Participant("localhost_3000", "localhost:3000", 1)
        text = emit(
            [_action(ActionKind.REQUEST, target=host)], [PAGE, host]
        )
        assert "    participant localhost_3000 as localhost#58;3000" in (
            text.splitlines()
        )

    def test_display_name_hash_escaped(self) -> None:
        host = Participant("room_1", "room #1", 1)
        text = emit(
            [_action(ActionKind.REQUEST, target=host)], [PAGE, host]
        )
        assert "    participant room_1 as room #35;1" in text.splitlines()

    def test_block_title_hash_escaped(self) -> None:
        text = emit(
            [_action(ActionKind.CLICK, block="issue #42")], [PAGE, SUT]
        )
        assert "        Note over page,sut: issue #35;42" in (
            text.splitlines()
        )

    def test_orders_by_sequence_index(self) -> None:
        text = emit(
            [
                _action(ActionKind.CLICK, 1, label="second"),
                _action(ActionKind.CLICK, 0, label="first"),
            ],
            [PAGE, SUT],
        )
        assert text.splitlines()[-2:] == [
            "    page->>sut: first",
            "    page->>sut: second",
        ]

    def test_label_truncated(self) -> None:
        text = emit(
            [_action(ActionKind.CLICK, label="x" * 30)],
            [PAGE, SUT],
            label_max_chars=10,
        )
        assert text.splitlines()[-1] == "    page->>sut: xxxxxxx..."

    def test_blocks_wrapped_in_rect(self) -> None:
        text = emit(
            [
                _action(ActionKind.CLICK, 0, "a", block="first test"),
                _action(ActionKind.CLICK, 1, "b", block="second test"),
                _action(ActionKind.CLICK, 2, "c"),
            ],
            [PAGE, SUT],
        )
        assert text.splitlines()[3:] == [
            "    rect rgb(200, 220, 255)",
            "        Note over page,sut: first test",
            "        page->>sut: a",
            "    end",
            "    rect rgb(200, 220, 255)",
            "        Note over page,sut: second test",
            "        page->>sut: b",
            "    end",
            "    page->>sut: c",
        ]

    def test_no_actions(self) -> None:
        assert emit([], [PAGE]) == (
            "sequenceDiagram\n    participant page as Page"
        )
