"""testflow: Playwright and CodeceptJS tests as Mermaid sequence diagrams."""

from testflow.compiler.models import CompilationResult
from testflow.compiler.pipeline import compile_test_code
from testflow.constants import ActionKind, Framework

__version__ = "0.1.0"

__all__ = [
    "ActionKind",
    "CompilationResult",
    "Framework",
    "__version__",
    "compile_test_code",
]
