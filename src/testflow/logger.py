"""Structured JSON logger for compile runs."""

import json
import logging
from datetime import UTC, datetime
from pathlib import Path

from testflow.compiler.models import CompilationResult
from testflow.constants import ERROR_TRUNCATION_CHARS, LOG_FILE_NAME
from testflow.logging_config import LOG_DATEFMT, LOG_FORMAT

__all__ = ["CompilationLogger", "LOG_FORMAT", "LOG_DATEFMT"]


class CompilationLogger:
    """JSON-lines log of compile runs with request_id correlation."""

    def __init__(self, log_dir: Path, level: str = "INFO") -> None:
        self._log_dir = log_dir
        self._log_dir.mkdir(parents=True, exist_ok=True)
        self._logger = logging.getLogger("testflow.compile")
        self._logger.setLevel(getattr(logging, level.upper()))

        log_file = (log_dir / LOG_FILE_NAME).resolve()
        if not any(
            isinstance(h, logging.FileHandler)
            and Path(h.baseFilename) == log_file
            for h in self._logger.handlers
        ):
            handler = logging.FileHandler(log_file)
            handler.setFormatter(logging.Formatter("%(message)s"))
            self._logger.addHandler(handler)

    @property
    def log_file(self) -> Path:
        return self._log_dir / LOG_FILE_NAME

    def log_compilation(
        self,
        request_id: str,
        source_name: str,
        result: CompilationResult,
        duration_ms: float,
    ) -> None:
        self._logger.info(
            json.dumps({
                "type": "compile",
                "timestamp": datetime.now(UTC).isoformat(),
                "request_id": request_id,
                "source": source_name,
                "framework": result.framework,
                "actions": len(result.actions),
                "participants": len(result.participants),
                "warnings": list(result.warnings),
                "errors": list(result.errors),
                "duration_ms": duration_ms,
            })
        )

    def log_error(
        self,
        request_id: str,
        component: str,
        error: str,
    ) -> None:
        self._logger.error(
            json.dumps({
                "type": "error",
                "timestamp": datetime.now(UTC).isoformat(),
                "request_id": request_id,
                "component": component,
                "error": error[:ERROR_TRUNCATION_CHARS],
            })
        )
