"""Typed errors for shuff.

Single source of truth for exit codes lives here.

Policy:
- Errors are small and boring.
- Every error is fatal to the running compress/expand; nothing is retried.
- The CLI maps errors to stable exit codes (see EXIT_* constants).
- docs/exit_codes.md is generated from this module (scripts/gen_exit_codes_md.py).
"""

from __future__ import annotations

from dataclasses import dataclass

# -------------------------
# Exit codes (single source)
# -------------------------

EXIT_OK = 0
EXIT_USAGE = 2
EXIT_GENERIC = 10
EXIT_IO = 11
EXIT_CORRUPT = 12
EXIT_UNSUPPORTED_INPUT = 13


@dataclass(frozen=True, slots=True)
class ExitCodeInfo:
    code: int
    name: str
    description: str


EXIT_CODES: tuple[ExitCodeInfo, ...] = (
    ExitCodeInfo(EXIT_OK, "OK", "Success"),
    ExitCodeInfo(EXIT_USAGE, "USAGE", "Usage error (blank paths, operation run before setup)"),
    ExitCodeInfo(EXIT_GENERIC, "GENERIC", "Generic failure (unexpected error)"),
    ExitCodeInfo(EXIT_IO, "IO", "Source/sink could not be opened, read or written"),
    ExitCodeInfo(EXIT_CORRUPT, "CORRUPT", "Compressed input ends early or holds an invalid tree"),
    ExitCodeInfo(
        EXIT_UNSUPPORTED_INPUT,
        "UNSUPPORTED_INPUT",
        "Input the format cannot represent (marker byte 0x07, more than 2^24-1 bytes)",
    ),
)

_EXIT_CODE_BY_CODE: dict[int, ExitCodeInfo] = {e.code: e for e in EXIT_CODES}


def exit_code_info(code: int) -> ExitCodeInfo | None:
    return _EXIT_CODE_BY_CODE.get(int(code))


def render_exit_codes_markdown() -> str:
    """Render docs/exit_codes.md content."""
    lines: list[str] = []
    lines.append("# Exit codes\n")
    lines.append("> GENERATED FILE - do not edit manually.\n")
    lines.append("> Source of truth: `src/shuff/errors.py` (EXIT_CODES).\n")
    lines.append("> Regenerate: `python scripts/gen_exit_codes_md.py`.\n\n")
    lines.append("These are the CLI exit codes you can rely on.\n\n")
    lines.append("| Code | Name | Meaning |\n")
    lines.append("|---:|---|---|\n")
    for e in sorted(EXIT_CODES, key=lambda x: x.code):
        lines.append(f"| {e.code} | `{e.name}` | {e.description} |\n")
    lines.append("\n## Notes\n")
    lines.append("- Every internal error extends `ShuffError` and carries an `exit_code`.\n")
    lines.append("- `--debug` re-raises errors to show full stack traces.\n")
    lines.append("- A failed compress/expand may leave a partially written output file.\n")
    return "".join(lines)


# ---------------
# Typed exceptions
# ---------------


class ShuffError(Exception):
    """Base error for shuff."""

    exit_code: int = EXIT_GENERIC


class InvalidArgument(ShuffError):
    exit_code = EXIT_USAGE


class NotConfigured(ShuffError):
    exit_code = EXIT_USAGE


class IoFailure(ShuffError):
    exit_code = EXIT_IO


class EndOfStream(ShuffError):
    """A bit read asked for more data than the source holds."""

    exit_code = EXIT_CORRUPT


class CorruptHeader(EndOfStream):
    pass


class UnsupportedInput(ShuffError):
    exit_code = EXIT_UNSUPPORTED_INPUT


class SentinelCollision(UnsupportedInput):
    pass


class InputTooLarge(UnsupportedInput):
    pass
