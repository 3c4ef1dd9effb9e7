"""
Test configuration for Monkey interpreter tests
"""

import pytest
import sys
from pathlib import Path

# Add the project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from parsing import parse
from interpreter import create_global_env, evaluate


def run_source(source: str, env=None):
  """Parse and evaluate source, failing the test on any parse error"""
  program, errors = parse(source)
  assert errors == [], f"unexpected parse errors: {errors}"
  return evaluate(program, env if env is not None else create_global_env())


@pytest.fixture
def eval_source():
  """Evaluate a source string in a fresh global environment"""
  return run_source


@pytest.fixture
def examples_dir():
  """Directory holding the sample .monkey programs"""
  return project_root / "examples"
