"""End-to-end tests for compile_test_code."""

from pathlib import Path

import pytest

from testflow import compile_test_code
from testflow.compiler.pipeline import classify_source
from testflow.constants import ActionKind, Framework
from testflow.errors import NO_STEPS_MESSAGE

FIXTURES = Path(__file__).parent.parent / "fixtures" / "diagrams"


def _fixture(name: str) -> str:
    return (FIXTURES / name).read_text()


class TestScenarios:
    def test_playwright_css_id_selector(self) -> None:
        source = (
            "await page.goto('https://example.com');\n"
            "await page.click('#btn');"
        )
        result = compile_test_code(source, Framework.PLAYWRIGHT)
        assert result.actions[1].label == "Click #btn"
        assert result.diagram_text.splitlines()[-2:] == [
            "    page->>sut: Navigate to https://example.com",
            "    page->>sut: Click #35;btn",
        ]
        # Mermaid drops everything after a bare "#" as a comment
        assert "#btn" not in result.diagram_text

    def test_codeceptjs_simple(self) -> None:
        source = "I.amOnPage('/login');\nI.click('Sign In');"
        result = compile_test_code(source, Framework.CODECEPTJS)
        assert result.ok
        assert result.diagram_text == (
            "sequenceDiagram\n"
            "    participant tester as Tester\n"
            "    participant sut as System Under Test\n"
            "    tester->>sut: Navigate to /login\n"
            "    tester->>sut: Click Sign In"
        )

    def test_playwright_assertion_is_reply(self) -> None:
        source = (
            "await page.goto('https://example.com');\n"
            "await expect(page.locator('.title')).toBeVisible();"
        )
        result = compile_test_code(source, "playwright")
        assert [a.kind for a in result.actions] == [
            ActionKind.NAVIGATE,
            ActionKind.ASSERT,
        ]
        assert result.diagram_text.splitlines()[-1] == (
            "    sut-->>page: Assert toBeVisible (.title)"
        )

    def test_only_noise_is_an_error(self) -> None:
        source = "// just a comment\n\nconst x = 42;\n"
        result = compile_test_code(source, Framework.PLAYWRIGHT)
        assert not result.ok
        assert result.errors == (NO_STEPS_MESSAGE,)
        assert result.actions == ()
        assert result.participants == ()
        assert result.diagram_text == ""

    def test_wrong_framework_is_noise(self) -> None:
        source = _fixture("login_test.js")
        result = compile_test_code(source, Framework.PLAYWRIGHT)
        assert result.errors == (NO_STEPS_MESSAGE,)

    def test_empty_source(self) -> None:
        result = compile_test_code("", Framework.CODECEPTJS)
        assert result.errors == (NO_STEPS_MESSAGE,)


class TestFixtures:
    @pytest.mark.parametrize(
        ("source", "framework", "expected"),
        [
            ("login.spec.ts", Framework.PLAYWRIGHT, "login.spec.mmd"),
            ("login_test.js", Framework.CODECEPTJS, "login_test.mmd"),
            ("api.spec.ts", Framework.PLAYWRIGHT, "api.spec.mmd"),
        ],
    )
    def test_matches_expected_diagram(
        self, source: str, framework: Framework, expected: str
    ) -> None:
        result = compile_test_code(_fixture(source), framework)
        assert result.diagram_text == _fixture(expected).rstrip("\n")

    def test_api_fixture_warnings(self) -> None:
        result = compile_test_code(
            _fixture("api.spec.ts"), Framework.PLAYWRIGHT
        )
        assert result.warnings == (
            "line 6: unrecognised action 'customAction' rendered as a "
            "generic message",
        )

    def test_api_fixture_participants(self) -> None:
        result = compile_test_code(
            _fixture("api.spec.ts"), Framework.PLAYWRIGHT
        )
        assert [p.id for p in result.participants] == [
            "page",
            "api_example_com",
            "sut",
        ]
        assert result.participants[1].display_name == "api.example.com"


class TestInvariants:
    def test_deterministic(self) -> None:
        source = _fixture("login.spec.ts")
        first = compile_test_code(source, Framework.PLAYWRIGHT)
        second = compile_test_code(source, Framework.PLAYWRIGHT)
        assert first == second

    def test_block_comments_are_noise(self) -> None:
        source = _fixture("login_test.js")
        commented = source.replace(
            "  I.click('Sign In');",
            "  I.click('Sign In');\n  /*\n  I.click('Old button');\n  */",
        )
        clean = compile_test_code(source, Framework.CODECEPTJS)
        padded = compile_test_code(commented, Framework.CODECEPTJS)
        assert padded.actions == clean.actions
        assert padded.diagram_text == clean.diagram_text

    def test_commented_out_step_dropped(self) -> None:
        source = "/*\nI.click('Old button');\n*/\nI.amOnPage('/login');"
        result = compile_test_code(source, Framework.CODECEPTJS)
        assert [a.label for a in result.actions] == ["Navigate to /login"]

    def test_noise_lines_do_not_change_output(self) -> None:
        source = _fixture("login_test.js")
        noisy = "\n".join(
            f"{line}\n// note\n\nconst n = 1;"
            for line in source.splitlines()
        )
        clean = compile_test_code(source, Framework.CODECEPTJS)
        padded = compile_test_code(noisy, Framework.CODECEPTJS)
        assert padded.actions == clean.actions
        assert padded.diagram_text == clean.diagram_text

    def test_sequence_index_is_dense(self) -> None:
        result = compile_test_code(
            _fixture("api.spec.ts"), Framework.PLAYWRIGHT
        )
        assert [a.sequence_index for a in result.actions] == list(
            range(len(result.actions))
        )

    def test_every_action_endpoint_is_declared(self) -> None:
        result = compile_test_code(
            _fixture("api.spec.ts"), Framework.PLAYWRIGHT
        )
        declared = set(result.participants)
        for action in result.actions:
            assert action.source in declared
            assert action.target in declared

    def test_participant_order_is_first_seen(self) -> None:
        result = compile_test_code(
            _fixture("api.spec.ts"), Framework.PLAYWRIGHT
        )
        assert [p.first_seen_index for p in result.participants] == [
            0,
            1,
            2,
        ]

    def test_participants_are_unique(self) -> None:
        result = compile_test_code(
            _fixture("login_test.js"), Framework.CODECEPTJS
        )
        ids = [p.id for p in result.participants]
        assert len(ids) == len(set(ids))


class TestOptions:
    @pytest.mark.parametrize(
        ("options", "message"),
        [
            ({"max_actions": 0}, "max_actions must be at least 1, got 0"),
            ({"max_actions": -1}, "max_actions must be at least 1, got -1"),
            (
                {"label_max_chars": 5},
                "label_max_chars must be at least 10, got 5",
            ),
        ],
    )
    def test_invalid_limits_rejected(
        self, options: dict[str, int], message: str
    ) -> None:
        source = "I.click('a');\nI.click('b');\nI.click('c');"
        result = compile_test_code(source, Framework.CODECEPTJS, **options)
        assert not result.ok
        assert result.errors == (message,)
        assert result.actions == ()
        assert result.diagram_text == ""
        assert result.warnings == ()

    def test_unknown_framework(self) -> None:
        result = compile_test_code("I.click('a');", "cypress")
        assert result.framework is None
        assert result.errors == (
            "unknown framework 'cypress' (expected one of: codeceptjs, "
            "playwright)",
        )

    def test_max_actions(self) -> None:
        source = "\n".join(f"I.click('b{i}');" for i in range(4))
        result = compile_test_code(
            source, Framework.CODECEPTJS, max_actions=2
        )
        assert len(result.actions) == 2
        assert result.warnings == (
            "diagram truncated: 2 action(s) dropped (limit 2)",
        )
        assert "b2" not in result.diagram_text

    def test_label_max_chars(self) -> None:
        source = f"I.see('{'x' * 50}');"
        result = compile_test_code(
            source, Framework.CODECEPTJS, label_max_chars=20
        )
        last = result.diagram_text.splitlines()[-1]
        assert last == "    sut-->>tester: Verify: xxxxxxxxx..."

    def test_labels_keep_full_text_in_model(self) -> None:
        source = f"I.see('{'x' * 50}');"
        result = compile_test_code(
            source, Framework.CODECEPTJS, label_max_chars=20
        )
        assert result.actions[0].label == "Verify: " + "x" * 50


class TestClassifySource:
    def test_blocks_attached(self) -> None:
        statements = classify_source(
            _fixture("login_test.js"), Framework.CODECEPTJS
        )
        assert {s.block for s in statements} == {
            "login and verify dashboard"
        }
        assert statements[0].line_number == 3
