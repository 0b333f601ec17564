"""JSON output schemas for compile results."""

from typing import Any

from pydantic import BaseModel, Field

from testflow.compiler.models import CompilationResult


class ParticipantPayload(BaseModel):
    id: str
    display_name: str
    first_seen_index: int


class ActionPayload(BaseModel):
    sequence_index: int
    source: str
    target: str
    kind: str
    label: str
    line: int = Field(description="1-based source line")
    block: str | None = None


class DiagramPayload(BaseModel):
    framework: str | None
    diagram: str
    participants: list[ParticipantPayload] = Field(default_factory=list)
    actions: list[ActionPayload] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)


class ConversionResponse(BaseModel):
    """Standard response envelope for ``testflow convert --format json``."""

    success: bool
    data: DiagramPayload | None = None
    error: str | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_result(
        cls,
        result: CompilationResult,
        **metadata: Any,
    ) -> "ConversionResponse":
        payload = DiagramPayload(
            framework=result.framework,
            diagram=result.diagram_text,
            participants=[
                ParticipantPayload(
                    id=p.id,
                    display_name=p.display_name,
                    first_seen_index=p.first_seen_index,
                )
                for p in result.participants
            ],
            actions=[
                ActionPayload(
                    sequence_index=a.sequence_index,
                    source=a.source.id,
                    target=a.target.id,
                    kind=a.kind,
                    label=a.label,
                    line=a.line_number + 1,
                    block=a.block,
                )
                for a in result.actions
            ],
            warnings=list(result.warnings),
        )
        return cls(
            success=result.ok,
            data=payload if result.ok else None,
            error="; ".join(result.errors) or None,
            metadata=metadata,
        )
