"""
Chevron Standard Library
Console I/O and integer conversion used by the statements
"""

from dataclasses import dataclass
from typing import Optional, TextIO, Union
import re
import sys

from error_handling import InputFormatError


# ============================================================================
# STREAMS
# ============================================================================

@dataclass(frozen=True)
class Streams:
  """The three console streams a program run talks to"""
  stdin: TextIO
  stdout: TextIO
  stderr: TextIO


def make_streams(stdin: Optional[TextIO] = None,
                 stdout: Optional[TextIO] = None,
                 stderr: Optional[TextIO] = None) -> Streams:
  """Bundle streams, falling back to the process streams at call time"""
  return Streams(
      stdin if stdin is not None else sys.stdin,
      stdout if stdout is not None else sys.stdout,
      stderr if stderr is not None else sys.stderr
  )


# ============================================================================
# PRINT / READ FUNCTIONS
# ============================================================================

def chevron_println(text: str, stream: TextIO) -> None:
  """Write one line and flush"""
  print(text, file=stream, flush=True)


def chevron_readline(stream: TextIO) -> str:
  """Read one line without its newline; end of input reads as ''"""
  line = stream.readline()
  if line.endswith('\n'):
    line = line[:-1]
  return line


def chevron_report(error: InputFormatError, stream: TextIO) -> None:
  """Write a run-time diagnostic as a single line"""
  chevron_println(error.message, stream)


# ============================================================================
# INTEGER CONVERSION
# ============================================================================

@dataclass(frozen=True)
class IntegerParsed:
  value: int

  @property
  def text(self) -> str:
    """Canonical decimal text: no sign on zero, no leading zeros"""
    return str(self.value)


IntegerResult = Union[IntegerParsed, InputFormatError]

# Leading whitespace, optional sign, digits; text after the digits is ignored
INTEGER_PREFIX = re.compile(r'[ \t\n\r\f\v]*([+-]?[0-9]+)')


def parse_integer(text: str) -> IntegerResult:
  """Parse the base-10 integer at the start of text"""
  match = INTEGER_PREFIX.match(text)
  if match is None:
    return InputFormatError(text)
  return IntegerParsed(int(match.group(1)))
