"""CLI entry point: ``testflow convert`` and ``testflow sample``."""

from __future__ import annotations

import argparse
import asyncio
import sys
import time
import uuid
from pathlib import Path

from testflow import __version__
from testflow.compiler.models import CompilationResult
from testflow.compiler.pipeline import compile_test_code
from testflow.config import Settings
from testflow.constants import ID_HEX_LENGTH, Framework, OutputFormat
from testflow.logger import CompilationLogger
from testflow.logging_config import setup_logging
from testflow.samples import SAMPLES

_BINARY_FORMATS = (OutputFormat.PNG, OutputFormat.PDF)


def main(argv: list[str] | None = None) -> None:
    """Main CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.version:
        print(f"testflow {__version__}")
        return

    settings = Settings()
    setup_logging(settings.log_level)

    if args.command == "convert":
        _run_convert(args, settings)
    elif args.command == "sample":
        _run_sample(args, settings)
    else:
        parser.print_help()


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="testflow",
        description=(
            "Turn Playwright or CodeceptJS test code into "
            "Mermaid sequence diagrams."
        ),
    )
    parser.add_argument(
        "--version",
        action="store_true",
        help="Print version and exit",
    )

    sub = parser.add_subparsers(dest="command")
    frameworks = [f.value for f in Framework]

    convert = sub.add_parser(
        "convert",
        help="Convert a test file to a sequence diagram",
    )
    convert.add_argument(
        "source",
        type=str,
        help="Path to the test file, or '-' for stdin",
    )
    convert.add_argument(
        "--framework",
        "-F",
        choices=frameworks,
        default=None,
        help="Test framework grammar (default: from settings)",
    )
    convert.add_argument(
        "--output",
        "-o",
        default=None,
        help="Output file (default: stdout)",
    )
    convert.add_argument(
        "--format",
        "-f",
        choices=[f.value for f in OutputFormat],
        default=OutputFormat.MERMAID.value,
        help="Output format (default: mermaid)",
    )
    convert.add_argument(
        "--max-actions",
        type=_positive_int,
        default=None,
        help="Maximum diagram actions (default: from settings)",
    )

    sample = sub.add_parser(
        "sample",
        help="Print a sample test for a framework",
    )
    sample.add_argument(
        "--framework",
        "-F",
        choices=frameworks,
        default=None,
        help="Test framework (default: from settings)",
    )

    return parser


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(
            f"invalid int value: {value!r}"
        ) from None
    if number < 1:
        raise argparse.ArgumentTypeError(
            f"must be at least 1, got {number}"
        )
    return number


def _read_source(source: str) -> str:
    if source == "-":
        return sys.stdin.read()
    path = Path(source)
    if not path.is_file():
        print(f"Error: {path} does not exist", file=sys.stderr)
        sys.exit(1)
    return path.read_text(encoding="utf-8")


def _run_convert(args: argparse.Namespace, settings: Settings) -> None:
    """Execute the convert command."""
    code = _read_source(args.source)
    framework = Framework(args.framework or settings.default_framework)
    max_actions = (
        args.max_actions
        if args.max_actions is not None
        else settings.max_actions
    )
    fmt = OutputFormat(args.format)
    output = Path(args.output) if args.output else None

    if fmt in _BINARY_FORMATS and output is None:
        print(
            f"Error: --output is required for {fmt} output",
            file=sys.stderr,
        )
        sys.exit(1)

    start = time.monotonic()
    result = compile_test_code(
        code,
        framework,
        max_actions=max_actions,
        label_max_chars=settings.label_max_chars,
    )
    elapsed = (time.monotonic() - start) * 1000

    if settings.log_dir is not None:
        _log_run(
            settings.log_dir, settings.log_level, args.source, result, elapsed
        )

    for warning in result.warnings:
        print(f"Warning: {warning}", file=sys.stderr)

    if fmt == OutputFormat.JSON:
        from testflow.schemas import ConversionResponse

        response = ConversionResponse.from_result(
            result, source=args.source
        )
        _write_output(response.model_dump_json(indent=2), output)
    elif result.ok:
        _write_diagram(result, fmt, output, settings)

    if not result.ok:
        for error in result.errors:
            print(f"Error: {error}", file=sys.stderr)
        sys.exit(1)


def _log_run(
    log_dir: Path,
    level: str,
    source_name: str,
    result: CompilationResult,
    elapsed: float,
) -> None:
    """Append the run, and any errors, to the JSON compile log."""
    compile_log = CompilationLogger(log_dir, level)
    request_id = uuid.uuid4().hex[:ID_HEX_LENGTH]
    compile_log.log_compilation(request_id, source_name, result, elapsed)
    for error in result.errors:
        compile_log.log_error(request_id, "compiler", error)


def _write_diagram(
    result: CompilationResult,
    fmt: OutputFormat,
    output: Path | None,
    settings: Settings,
) -> None:
    """Write Mermaid text, or render it via mmdc when asked."""
    if fmt == OutputFormat.MERMAID:
        _write_output(result.diagram_text, output)
        return

    from testflow.diagrams.renderer import render_mermaid

    rendered = asyncio.run(
        render_mermaid(
            result.diagram_text,
            fmt.value,  # type: ignore[arg-type]
            output,
            timeout=settings.mmdc_timeout_seconds,
        )
    )
    if rendered == result.diagram_text:
        print(
            "Warning: Mermaid CLI (mmdc) unavailable or failed; "
            "writing Mermaid source instead",
            file=sys.stderr,
        )
        _write_output(
            result.diagram_text,
            output.with_suffix(".mmd") if output else None,
        )
        return
    if output is None:
        print(rendered if isinstance(rendered, str) else "")
    else:
        print(f"Output: {output}", file=sys.stderr)


def _write_output(content: str, output: Path | None) -> None:
    """Write text to ``output``, or stdout when None."""
    if output is None:
        print(content)
        return
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(content + "\n", encoding="utf-8")


def _run_sample(args: argparse.Namespace, settings: Settings) -> None:
    """Print the built-in sample for a framework."""
    framework = Framework(args.framework or settings.default_framework)
    print(SAMPLES[framework])


if __name__ == "__main__":
    main()
