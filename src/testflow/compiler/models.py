"""Value types flowing through the compile pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field

from testflow.constants import ActionKind, Framework


@dataclass(frozen=True)
class SourceLine:
    """One line of input with its 0-based line number."""

    number: int
    text: str


@dataclass(frozen=True)
class ClassifiedStatement:
    """A source line recognised as a test action."""

    kind: ActionKind
    raw_line: str
    line_number: int
    verb: str
    label: str
    actor_hint: str | None = None
    target_hint: str | None = None
    argument: str | None = None
    block: str | None = None


@dataclass(frozen=True)
class Participant:
    """A named lifeline in the sequence diagram."""

    id: str
    display_name: str
    first_seen_index: int


@dataclass(frozen=True)
class DiagramAction:
    """One message in the diagram, in output order."""

    source: Participant
    target: Participant
    label: str
    kind: ActionKind
    sequence_index: int
    line_number: int = field(default=0, compare=False)
    block: str | None = None


@dataclass(frozen=True)
class CompilationResult:
    """Everything one compile call produces. Rebuilt on every call."""

    framework: Framework | None
    actions: tuple[DiagramAction, ...] = ()
    participants: tuple[Participant, ...] = ()
    diagram_text: str = ""
    warnings: tuple[str, ...] = ()
    errors: tuple[str, ...] = ()

    @property
    def ok(self) -> bool:
        """True when a diagram was produced."""
        return not self.errors
