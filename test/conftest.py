"""
Test configuration for Chevron tests
"""

import io
import pytest
import sys
from pathlib import Path

# Add the project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from parsing import create_parser, create_tokenizer
from interpreter import run_source


@pytest.fixture
def tokenizer():
  """Provide a fresh tokenizer for each test"""
  return create_tokenizer()


@pytest.fixture
def parser():
  """Provide a fresh parser for each test"""
  return create_parser()


@pytest.fixture
def run_program():
  """Run source against canned stdin, returning (stdout, stderr) text"""
  def run(source, stdin_text=""):
    stdout, stderr = io.StringIO(), io.StringIO()
    run_source(source, io.StringIO(stdin_text), stdout, stderr)
    return stdout.getvalue(), stderr.getvalue()
  return run
