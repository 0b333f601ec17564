"""Tests for the action model builder."""

from testflow.compiler.builder import build
from testflow.compiler.models import ClassifiedStatement
from testflow.constants import ActionKind, Framework


def _st(
    kind: ActionKind,
    line: int = 0,
    verb: str = "click",
    actor: str | None = None,
    target: str | None = None,
) -> ClassifiedStatement:
    return ClassifiedStatement(
        kind=kind,
        raw_line="",
        line_number=line,
        verb=verb,
        label=f"{kind} {line}",
        actor_hint=actor,
        target_hint=target,
    )


class TestBuild:
    def test_sequence_indices_follow_source(self) -> None:
        actions, _, _ = build(
            [_st(ActionKind.NAVIGATE, 0), _st(ActionKind.CLICK, 3)],
            Framework.PLAYWRIGHT,
        )
        assert [a.sequence_index for a in actions] == [0, 1]
        assert [a.line_number for a in actions] == [0, 3]

    def test_call_goes_actor_to_target(self) -> None:
        actions, _, _ = build(
            [_st(ActionKind.CLICK)], Framework.PLAYWRIGHT
        )
        assert actions[0].source.id == "page"
        assert actions[0].target.id == "sut"

    def test_reply_kinds_reversed(self) -> None:
        actions, _, _ = build(
            [
                _st(ActionKind.ASSERT),
                _st(ActionKind.ASSERT_ABSENT),
                _st(ActionKind.GRAB),
                _st(ActionKind.SCREENSHOT),
            ],
            Framework.CODECEPTJS,
        )
        for action in actions:
            assert action.source.id == "sut"
            assert action.target.id == "tester"

    def test_participant_order(self) -> None:
        _, participants, _ = build(
            [
                _st(ActionKind.ASSERT),
                _st(ActionKind.REQUEST, target="api.test"),
            ],
            Framework.PLAYWRIGHT,
        )
        assert [p.id for p in participants] == ["page", "sut", "api_test"]

    def test_custom_action_warns(self) -> None:
        actions, _, warnings = build(
            [_st(ActionKind.CUSTOM, 4, verb="say")],
            Framework.CODECEPTJS,
        )
        assert len(actions) == 1
        assert warnings == (
            "line 5: unrecognised action 'say' rendered as a generic "
            "message",
        )

    def test_truncation(self) -> None:
        statements = [_st(ActionKind.CLICK, i) for i in range(5)]
        actions, _, warnings = build(
            statements, Framework.PLAYWRIGHT, max_actions=3
        )
        assert len(actions) == 3
        assert warnings == (
            "diagram truncated: 2 action(s) dropped (limit 3)",
        )

    def test_truncated_actions_add_no_participants(self) -> None:
        statements = [
            _st(ActionKind.CLICK),
            _st(ActionKind.CLICK, 1, actor="popup"),
        ]
        _, participants, _ = build(
            statements, Framework.PLAYWRIGHT, max_actions=1
        )
        assert "popup" not in [p.id for p in participants]

    def test_no_warnings_for_known_kinds(self) -> None:
        _, _, warnings = build(
            [_st(ActionKind.FILL)], Framework.PLAYWRIGHT
        )
        assert warnings == ()
