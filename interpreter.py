"""
Chevron Interpreter
Statements run in parse order against one mutable environment
Console I/O goes through stdlib; load-time errors abort before anything runs
"""

from typing import Dict, List, Optional, Sequence, TextIO

from parsing import OutStatement, InStatement, Statement, create_parser
from stdlib import (
    Streams,
    IntegerParsed,
    make_streams,
    parse_integer,
    chevron_println,
    chevron_readline,
    chevron_report,
)


# Bound when an 'in' statement receives something that is not an integer
DEFAULT_VALUE = "0"


# ============================================================================
# DATA STRUCTURES
# ============================================================================

def make_environment() -> Dict[str, str]:
  """Create the variable environment for one program run"""
  return {}


def make_execution_context(streams: Optional[Streams] = None, debug: bool = False) -> Dict:
  """Create the per-run execution context"""
  return {
      'streams': streams if streams is not None else make_streams(),
      'debug': debug
  }


def trace(context: Dict, message: str) -> None:
  if context['debug']:
    print(message, file=context['streams'].stderr)


# ============================================================================
# STATEMENT EXECUTION
# ============================================================================

def exec_out(statement: OutStatement, env: Dict[str, str], context: Dict) -> None:
  """Print each target, resolving bound names to their current value"""
  stdout = context['streams'].stdout
  for target in statement.targets:
    chevron_println(env.get(target, target), stdout)


def exec_in(statement: InStatement, env: Dict[str, str], context: Dict) -> None:
  """Read one line into the variable, falling back to 0 on bad input"""
  streams = context['streams']
  result = parse_integer(chevron_readline(streams.stdin))

  if isinstance(result, IntegerParsed):
    env[statement.name] = result.text
  else:
    chevron_report(result, streams.stderr)
    env[statement.name] = DEFAULT_VALUE

  trace(context, f"Bound: {statement.name} = {env[statement.name]}")


def execute_statement(statement: Statement, env: Dict[str, str], context: Optional[Dict] = None) -> None:
  """Execute one statement against env"""
  if context is None:
    context = make_execution_context()

  trace(context, f"Executing: {statement}")

  if isinstance(statement, OutStatement):
    exec_out(statement, env, context)
  elif isinstance(statement, InStatement):
    exec_in(statement, env, context)
  else:
    raise TypeError(f"Unknown statement type: {type(statement).__name__}")


# ============================================================================
# PROGRAM EXECUTION
# ============================================================================

def execute(statements: Sequence[Statement],
            stdin: Optional[TextIO] = None,
            stdout: Optional[TextIO] = None,
            stderr: Optional[TextIO] = None,
            debug: bool = False) -> None:
  """Run statements in order with a fresh environment"""
  context = make_execution_context(make_streams(stdin, stdout, stderr), debug)
  env = make_environment()

  for statement in statements:
    execute_statement(statement, env, context)

  trace(context, f"Executed {len(statements)} statements")


def load_program(source: str, filename: str = "<input>",
                 legacy_keywords: bool = False, debug: bool = False) -> List[Statement]:
  """Tokenize and parse; raises LexError or ParseError"""
  parser = create_parser(debug=debug, legacy_keywords=legacy_keywords)
  return parser.parse_string(source, filename)


def run_source(source: str,
               stdin: Optional[TextIO] = None,
               stdout: Optional[TextIO] = None,
               stderr: Optional[TextIO] = None,
               legacy_keywords: bool = False,
               debug: bool = False,
               filename: str = "<input>") -> None:
  """Load the whole program, then execute it"""
  program = load_program(source, filename, legacy_keywords, debug)
  execute(program, stdin, stdout, stderr, debug)


# ============================================================================
# FACTORY FUNCTIONS
# ============================================================================

class ChevronInterpreter:
  """Runs source text or parsed programs with fixed settings"""

  def __init__(self, debug: bool = False, legacy_keywords: bool = False):
    self.debug = debug
    self.legacy_keywords = legacy_keywords

  def interpret(self, statements: Sequence[Statement], stdin=None, stdout=None, stderr=None) -> None:
    execute(statements, stdin, stdout, stderr, self.debug)

  def run(self, source: str, stdin=None, stdout=None, stderr=None, filename: str = "<input>") -> None:
    run_source(source, stdin, stdout, stderr, self.legacy_keywords, self.debug, filename)


def create_interpreter(debug: bool = False, legacy_keywords: bool = False) -> ChevronInterpreter:
  """Factory function returning an interpreter"""
  return ChevronInterpreter(debug=debug, legacy_keywords=legacy_keywords)


def create_debug_interpreter() -> ChevronInterpreter:
  """Factory function returning a debug interpreter"""
  return create_interpreter(debug=True)
