"""Test code to sequence diagram compiler."""

from testflow.compiler.classifier import classify, scan_blocks
from testflow.compiler.models import (
    ClassifiedStatement,
    CompilationResult,
    DiagramAction,
    Participant,
    SourceLine,
)
from testflow.compiler.pipeline import classify_source, compile_test_code
from testflow.compiler.resolver import ParticipantRegistry, resolve

__all__ = [
    "ClassifiedStatement",
    "CompilationResult",
    "DiagramAction",
    "Participant",
    "ParticipantRegistry",
    "SourceLine",
    "classify",
    "classify_source",
    "compile_test_code",
    "resolve",
    "scan_blocks",
]
