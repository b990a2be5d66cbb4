"""
Error handling for the Chevron interpreter
Load-time errors (lexing, parsing) are exceptions; run-time input errors are values
"""

from dataclasses import dataclass
from typing import Any


INVALID_INPUT_MESSAGE = "Invalid input. Please enter an integer."


# ============================================================================
# PURE FUNCTIONS
# ============================================================================

def get_context_lines(source_text: str, line_num: int, col_num: int, context_lines: int = 1) -> str:
    """Get context lines around the error"""
    lines = source_text.split('\n')
    start_line = max(0, line_num - context_lines - 1)
    end_line = min(len(lines), line_num + context_lines)

    context_parts = []
    for i in range(start_line, end_line):
        line_prefix = f"{i+1:4d}: "
        context_parts.append(f"{line_prefix}{lines[i]}")
        if i == line_num - 1:  # Error line
            context_parts.append(f"{'':6}{' ' * (col_num - 1)}^ Error here")

    return '\n'.join(context_parts)


def format_error(kind: str, message: str, span: Any = None, context: str = "") -> str:
    """Format a load-time error as string"""
    if span is None:
        return f"{kind} error: {message}"

    result = f"{kind} error at {span}: {message}"
    if context:
        result += f"\n{context}"
    return result


# ============================================================================
# EXCEPTIONS
# ============================================================================

class ChevronError(Exception):
    """Base class for errors that stop a program from loading"""
    kind = "Chevron"

    def __init__(self, message: str, span: Any = None, context: str = ""):
        self.message = message
        self.span = span
        self.context = context
        super().__init__(format_error(self.kind, message, span, context))


class LexError(ChevronError):
    """Source text contains a character no token rule accepts"""
    kind = "Lex"

    def __init__(self, message: str, span: Any = None, context: str = "", token: Any = None):
        self.token = token
        super().__init__(message, span, context)


class ParseError(ChevronError):
    """Malformed statement in the token stream"""
    kind = "Parse"


# ============================================================================
# RUN-TIME INPUT ERRORS (values, never raised)
# ============================================================================

@dataclass(frozen=True)
class InputFormatError:
    """Rejected numeric input for an 'in' statement"""
    text: str
    message: str = INVALID_INPUT_MESSAGE

    def __str__(self) -> str:
        return self.message
