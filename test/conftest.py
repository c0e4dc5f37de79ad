"""
Test configuration for rpnblocks tests
"""

import pytest
import sys
from pathlib import Path

# Add the project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from interpreter import create_interpreter


@pytest.fixture
def output():
  """Collects everything written by puts"""
  return []


@pytest.fixture
def interpreter(output):
  """Provide a fresh interpreter for each test"""
  return create_interpreter(output=output.append)


@pytest.fixture
def run(interpreter):
  """Run source text as one unit and return the operand stack"""
  def run_text(text):
    return list(interpreter.run_source(text))
  return run_text
