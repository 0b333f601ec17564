"""Diagram emission and rendering."""

from testflow.diagrams.mermaid import (
    ARROWS,
    emit,
    sanitize_label,
)
from testflow.diagrams.renderer import (
    is_mmdc_available,
    render_mermaid,
)

__all__ = [
    "ARROWS",
    "emit",
    "is_mmdc_available",
    "render_mermaid",
    "sanitize_label",
]
