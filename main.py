"""
Chevron - Main Entry Point
Runs the built-in sample program, or dumps its tokens/statements for debugging
"""

import sys
import argparse
from typing import List, Optional

from parsing import create_parser, pretty_print_tokens, pretty_print_statements
from interpreter import create_interpreter
from error_handling import ChevronError


VERSION = "Chevron v0.1.0"

SAMPLE_PROGRAM = 'out >> "enter a number:"; in << a; out >> a;'


def create_arg_parser() -> argparse.ArgumentParser:
  """Create command line argument parser"""
  parser = argparse.ArgumentParser(
      description='Chevron - out >> and in << statements',
      formatter_class=argparse.RawDescriptionHelpFormatter,
      epilog="""
Examples:
  %(prog)s                        # Run the sample program
  %(prog)s --tokens               # Show the token stream
  %(prog)s --parse                # Show parsed statements
  %(prog)s --debug                # Run with debug output on stderr
        """
  )

  parser.add_argument(
      '--tokens',
      action='store_true',
      help='Tokenize the program and show the tokens'
  )

  parser.add_argument(
      '--parse',
      action='store_true',
      help='Parse the program and show the statements'
  )

  parser.add_argument(
      '--legacy-keywords',
      action='store_true',
      help='Match keywords as prefixes ("output" lexes as out + put)'
  )

  parser.add_argument(
      '--debug',
      action='store_true',
      help='Enable debug output for all stages'
  )

  parser.add_argument(
      '--version',
      action='version',
      version=VERSION
  )

  return parser


def show_tokens(source: str, legacy_keywords: bool = False, debug: bool = False) -> None:
  """Tokenize source and print one token per line"""
  parser = create_parser(debug=debug, legacy_keywords=legacy_keywords)
  tokens = parser.tokenize(source)
  print(f"{len(tokens)} tokens:")
  print(pretty_print_tokens(tokens), end='')


def show_statements(source: str, legacy_keywords: bool = False, debug: bool = False) -> None:
  """Parse source and print one statement per line"""
  parser = create_parser(debug=debug, legacy_keywords=legacy_keywords)
  statements = parser.parse_string(source)
  print(f"{len(statements)} statements:")
  print(pretty_print_statements(statements), end='')


def main(argv: Optional[List[str]] = None) -> int:
  """Main entry point for Chevron"""
  args = create_arg_parser().parse_args(argv)

  try:
    if args.tokens:
      show_tokens(SAMPLE_PROGRAM, args.legacy_keywords, args.debug)
    elif args.parse:
      show_statements(SAMPLE_PROGRAM, args.legacy_keywords, args.debug)
    else:
      interpreter = create_interpreter(debug=args.debug, legacy_keywords=args.legacy_keywords)
      interpreter.run(SAMPLE_PROGRAM)
  except ChevronError as e:
    print(e, file=sys.stderr)
    return 1
  except KeyboardInterrupt:
    print("\nInterrupted", file=sys.stderr)
    return 130

  return 0


if __name__ == "__main__":
  sys.exit(main())
