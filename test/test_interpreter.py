"""
Execution tests for Chevron
"""

import io
import sys
import pytest
from parsing import OutStatement, InStatement
from interpreter import (
    execute, execute_statement, make_execution_context, run_source,
    create_interpreter, create_debug_interpreter
)
from stdlib import make_streams, parse_integer, IntegerParsed, chevron_readline
from error_handling import InputFormatError, LexError, ParseError, INVALID_INPUT_MESSAGE


PROGRAM = 'out >> "hi"; in << a; out >> a;'


class TestProgramRuns:
  """Test whole programs end to end"""

  def test_echo_integer(self, run_program):
    stdout, stderr = run_program(PROGRAM, "42\n")
    assert stdout == "hi\n42\n"
    assert stderr == ""

  def test_non_integer_defaults_to_zero(self, run_program):
    stdout, stderr = run_program(PROGRAM, "abc\n")
    assert stdout == "hi\n0\n"
    assert stderr == INVALID_INPUT_MESSAGE + "\n"

  def test_end_of_input_defaults_to_zero(self, run_program):
    stdout, stderr = run_program(PROGRAM, "")
    assert stdout == "hi\n0\n"
    assert stderr.count("\n") == 1

  def test_one_diagnostic_per_bad_input(self, run_program):
    stdout, stderr = run_program("in << a; in << b; in << c; out >> a >> b >> c", "x\n5\ny\n")
    assert stdout == "0\n5\n0\n"
    assert stderr.splitlines() == [INVALID_INPUT_MESSAGE, INVALID_INPUT_MESSAGE]

  def test_empty_out_prints_nothing(self, run_program):
    assert run_program("out; out stop") == ("", "")

  def test_canonical_decimal_text(self, run_program):
    stdout, _ = run_program("in << a; out >> a", "  +007\n")
    assert stdout == "7\n"

  def test_rebinding(self, run_program):
    stdout, _ = run_program("in << a; out >> a; in << a; out >> a", "1\n2\n")
    assert stdout == "1\n2\n"

  def test_tab_printed_verbatim(self, run_program):
    stdout, _ = run_program('out >> "x\ty"')
    assert stdout == "x\ty\n"


class TestTargetResolution:
  """Targets are resolved when the out statement runs"""

  def test_literal_before_binding(self, run_program):
    stdout, _ = run_program('out >> "a"; in << a; out >> "a"', "7\n")
    assert stdout == "a\n7\n"

  def test_unbound_identifier_prints_its_name(self, run_program):
    stdout, _ = run_program("out >> missing")
    assert stdout == "missing\n"

  def test_bound_name_shadows_string_literal(self, run_program):
    stdout, _ = run_program('in << hi; out >> "hi" >> hi', "5\n")
    assert stdout == "5\n5\n"


class TestLoadErrors:
  """Programs that fail to load never start running"""

  def test_parse_error_runs_nothing(self):
    stdout = io.StringIO()
    with pytest.raises(ParseError):
      run_source('out >> "x"; in a', io.StringIO("1\n"), stdout, io.StringIO())
    assert stdout.getvalue() == ""

  def test_lex_error_runs_nothing(self):
    stdout = io.StringIO()
    with pytest.raises(LexError):
      run_source('out >> "x"; @', io.StringIO(), stdout, io.StringIO())
    assert stdout.getvalue() == ""

  def test_filename_in_error(self):
    with pytest.raises(ParseError) as exc_info:
      run_source("in a", io.StringIO(), io.StringIO(), io.StringIO(), filename="prog.chv")
    error = exc_info.value
    assert error.span.filename == "prog.chv"
    assert "prog.chv:" in str(error)

  def test_interpreter_passes_filename(self):
    with pytest.raises(LexError) as exc_info:
      create_interpreter().run("@", io.StringIO(), io.StringIO(), io.StringIO(), filename="prog.chv")
    assert exc_info.value.span.filename == "prog.chv"


class TestStatementExecution:
  """Test single statements against an explicit environment"""

  @pytest.fixture
  def streams(self):
    return make_streams(io.StringIO("9\n"), io.StringIO(), io.StringIO())

  def test_in_binds_variable(self, streams):
    env = {}
    execute_statement(InStatement("a"), env, make_execution_context(streams))
    assert env == {"a": "9"}

  def test_out_reads_environment(self, streams):
    execute_statement(OutStatement(("a", "b")), {"a": "3"}, make_execution_context(streams))
    assert streams.stdout.getvalue() == "3\nb\n"

  def test_unknown_statement(self, streams):
    with pytest.raises(TypeError):
      execute_statement("out", {}, make_execution_context(streams))

  def test_each_run_starts_empty(self):
    stdout = io.StringIO()
    statements = [OutStatement(("a",)), InStatement("a"), OutStatement(("a",))]
    execute(statements, io.StringIO("4\n"), stdout, io.StringIO())
    execute(statements, io.StringIO("5\n"), stdout, io.StringIO())
    assert stdout.getvalue() == "a\n4\na\n5\n"


class TestDefaultStreams:
  """Without explicit streams the process streams are used"""

  def test_process_streams(self, capsys, monkeypatch):
    monkeypatch.setattr(sys, "stdin", io.StringIO("nope\n"))
    execute([InStatement("a"), OutStatement(("a",))])
    captured = capsys.readouterr()
    assert captured.out == "0\n"
    assert captured.err == INVALID_INPUT_MESSAGE + "\n"

  def test_interpreter_object(self, capsys, monkeypatch):
    monkeypatch.setattr(sys, "stdin", io.StringIO("12\n"))
    create_interpreter().run(PROGRAM)
    assert capsys.readouterr().out == "hi\n12\n"


class TestDebugOutput:
  """Debug tracing goes to stderr only"""

  def test_trace(self):
    stdout, stderr = io.StringIO(), io.StringIO()
    create_debug_interpreter().interpret([InStatement("a")], io.StringIO("3\n"), stdout, stderr)
    assert stdout.getvalue() == ""
    assert "Executing: InStatement(name='a')" in stderr.getvalue()
    assert "Bound: a = 3" in stderr.getvalue()


class TestIntegerParsing:
  """parse_integer reads a leading base-10 integer"""

  @pytest.mark.parametrize("text, expected", [
      ("42", "42"),
      ("-12", "-12"),
      ("+7", "7"),
      ("007", "7"),
      ("-0", "0"),
      ("  \t15", "15"),
      ("42abc", "42"),
      ("3.9", "3"),
      ("42\r", "42"),
      ("123456789012345678901234567890", "123456789012345678901234567890"),
  ])
  def test_accepted(self, text, expected):
    result = parse_integer(text)
    assert isinstance(result, IntegerParsed)
    assert result.text == expected

  @pytest.mark.parametrize("text", ["", "abc", "- 5", "+", "x42", "٣"])
  def test_rejected(self, text):
    result = parse_integer(text)
    assert result == InputFormatError(text)
    assert str(result) == INVALID_INPUT_MESSAGE

  def test_readline_strips_newline_only(self):
    stream = io.StringIO("a b \nnext\n")
    assert chevron_readline(stream) == "a b "
    assert chevron_readline(stream) == "next"
    assert chevron_readline(stream) == ""
