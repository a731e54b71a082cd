"""
Error Reporting

Pattern: javac diagnostics (file:line:col, source line, caret)

Taxonomy:
- ConfigurationError: the run cannot start (bad source path, unreadable archive)
- JavaSourceError / ParseError: the input source is malformed
- JavaMaybeImplementationError: internal invariant broken (a bug in this package)

Resolution gaps and no-fork methods are not errors and never reach this module.
"""

import os
import sys
from dataclasses import dataclass
from typing import Optional, List, Dict
from .source_location import SourceLocation


# ---------------------------------------------------------------------------
# ANSI color helpers (disabled when NO_COLOR is set)
# ---------------------------------------------------------------------------

def _use_color() -> bool:
    if os.environ.get("NO_COLOR"):
        return False
    explicit = os.environ.get("JAVAMAYBE_COLOR", "").lower()
    if explicit in ("0", "false", "no", "never"):
        return False
    return sys.stderr.isatty()

_BOLD   = "\033[1m"
_RED    = "\033[31m"
_BLUE   = "\033[34m"
_RESET  = "\033[0m"

def _style(text: str, *codes: str, color: bool = True) -> str:
    if not color:
        return text
    prefix = "".join(codes)
    return f"{prefix}{text}{_RESET}" if prefix else text


@dataclass
class Error:
    """One diagnostic collected by ErrorReporter."""
    message: str
    location: Optional[SourceLocation]
    code: Optional[str] = None
    help: Optional[str] = None


def _format_diagnostic(error: Error, source_files: Dict[str, str], color: bool = False) -> str:
    """
    Render a diagnostic::

        error[E0100]: Parse error: unexpected token ';'
         --> Foo.java:3:17
          |
        3 |     int x = ;
          |             ^
    """
    code_str = f"[{error.code}]" if error.code else ""
    out: List[str] = [
        _style(f"error{code_str}", _BOLD, _RED, color=color)
        + _style(f": {error.message}", _BOLD, color=color)
    ]
    loc = error.location
    if loc is None:
        out.append(_style(" --> ", _BOLD, _BLUE, color=color) + "<unknown location>")
    else:
        gw = max(len(str(loc.line)), 1)
        out.append(_style(" " * gw + "--> ", _BOLD, _BLUE, color=color) + str(loc))
        source = source_files.get(loc.file)
        lines = source.split("\n") if source is not None else []
        if 0 < loc.line <= len(lines):
            code_line = lines[loc.line - 1]
            gutter = _style(" " * (gw + 1) + "|", _BOLD, _BLUE, color=color)
            out.append(gutter)
            out.append(_style(str(loc.line).rjust(gw) + " | ", _BOLD, _BLUE, color=color) + code_line)
            span = 1
            if loc.end_line == loc.line and loc.end_column > loc.column:
                span = loc.end_column - loc.column
            carets = " " * max(loc.column - 1, 0) + "^" * span
            out.append(gutter + " " + _style(carets, _BOLD, _RED, color=color))
    if error.help:
        out.append(f"  = help: {error.help}")
    return "\n".join(out)


class ErrorReporter:
    """Collects diagnostics for a whole run so the driver can report them together."""

    def __init__(self, source_files: Optional[Dict[str, str]] = None):
        self.source_files: Dict[str, str] = source_files if source_files is not None else {}
        self.errors: List[Error] = []

    def report_error(self, message: str, location: Optional[SourceLocation],
                     code: Optional[str] = None, help: Optional[str] = None) -> None:
        self.errors.append(Error(message=message, location=location, code=code, help=help))

    def report_exception(self, exc: 'JavaMaybeError') -> None:
        if isinstance(exc, JavaSourceError) and exc.source_code and exc.location:
            self.source_files.setdefault(exc.location.file, exc.source_code)
        self.report_error(exc.message, exc.location, code=getattr(exc, "error_code", None))

    def has_errors(self) -> bool:
        return len(self.errors) > 0

    def format_all_errors(self, color: Optional[bool] = None) -> str:
        use_color = color if color is not None else _use_color()
        parts = [_format_diagnostic(e, self.source_files, color=use_color) for e in self.errors]
        count = len(self.errors)
        parts.append(
            _style("error", _BOLD, _RED, color=use_color)
            + _style(f": aborting due to {count} previous error{'s' if count != 1 else ''}",
                     _BOLD, color=use_color)
        )
        return "\n\n".join(parts)


# ============================================================================
# Exception Classes
# ============================================================================

class JavaMaybeError(Exception):
    """Base exception for all javamaybe errors"""
    def __init__(self, message: str, location: Optional[SourceLocation] = None):
        super().__init__(message)
        self.message = message
        self.location = location

    def __str__(self):
        if self.location:
            return f"{self.message} ({self.location})"
        return self.message


class ConfigurationError(JavaMaybeError):
    """
    The type resolution environment or the options cannot be built.

    Fatal: raised before any compilation unit is processed.
    """


class ArchiveLoadError(ConfigurationError):
    """A class path archive cannot be opened or read."""
    def __init__(self, path: str, reason: str):
        super().__init__(f"cannot load archive {path}: {reason}")
        self.path = path
        self.reason = reason


class JavaSourceError(JavaMaybeError):
    """Error in the Java source being processed, rendered with a snippet."""
    def __init__(self,
                 message: str,
                 location: Optional[SourceLocation] = None,
                 error_code: str = "E0001",
                 source_code: Optional[str] = None):
        super().__init__(message, location)
        self.error_code = error_code
        self.source_code = source_code

    def __str__(self):
        source_files: Dict[str, str] = {}
        if self.source_code and self.location:
            source_files[self.location.file] = self.source_code
        err = Error(message=self.message, location=self.location, code=self.error_code)
        return _format_diagnostic(err, source_files, color=False)


class ParseError(JavaSourceError):
    """Parse error with source location"""
    def __init__(self, message: str, source_file: str,
                 location: Optional[SourceLocation] = None,
                 source_code: Optional[str] = None):
        super().__init__(message, location, error_code="E0100", source_code=source_code)
        self.source_file = source_file


class JavaMaybeImplementationError(Exception):
    """
    Error in this package's own code, never in the user's Java source.

    Use JavaSourceError for anything caused by the input.
    """
    def __init__(self, message: str, error_code: str = "E9999"):
        super().__init__(message)
        self.message = message
        self.error_code = error_code

    def __str__(self):
        return f"[{self.error_code}] {self.message}"
