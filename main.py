"""
Monkey Programming Language - Main Entry Point
Interactive REPL and script runner for the tree-walking interpreter
"""

import sys
import argparse
import getpass
from pathlib import Path
from typing import List, Optional
import os

from termcolor import colored

# Readline support for history and auto-completion
try:
  import readline
  READLINE_AVAILABLE = True
except ImportError:
  READLINE_AVAILABLE = False

from ast_nodes import LetStatement, Program, pretty_print_ast
from error_handling import MonkeyParseError, format_parse_error
from interpreter import create_interpreter, create_debug_interpreter, MonkeyInterpreter
from lexer import KEYWORDS
from objects import Error
from parsing import create_parser, create_debug_parser, parse
from stdlib import BUILTINS
from utilities import MonkeyRuntimeError


VERSION = "Monkey v0.1.0"
PROMPT = ">> "
HISTORY_FILE = os.path.expanduser("~/.monkey_history")
HISTORY_LENGTH = 1000

MONKEY_FACE = r'''
           __,__
  .--.  .-"     "-.  .--.
 / .. \/  .-. .-.  \/ .. \
| |  '|  /   Y   \  |'  | |
| \   \  \ 0 | 0 /  /   / |
 \ '- ,\.-"""""""-./, -' /
  ''-' /_   ^ ^   _\ '-''
      |  \._   _./  |
      \   \ '~' /   /
       '._ '-=-' _.'
          '-----'
'''

REPL_COMMANDS = [":parse", ":env", ":help", "exit"]


def paint(text: str, color: str, no_color: bool = False) -> str:
  """Color text for the terminal unless coloring is switched off"""
  if no_color:
    return text
  return colored(text, color, attrs=["bold"])


def create_arg_parser() -> argparse.ArgumentParser:
  """Create command line argument parser"""
  parser = argparse.ArgumentParser(
      description='Monkey Programming Language - tree-walking interpreter',
      formatter_class=argparse.RawDescriptionHelpFormatter,
      epilog="""
Examples:
  %(prog)s                         # Interactive mode
  %(prog)s script.monkey           # Run a Monkey script
  %(prog)s --parse script.monkey   # Parse and show the AST
  %(prog)s --debug script.monkey   # Run with debug output
        """
  )

  parser.add_argument(
      'script',
      nargs='?',
      help='Monkey script file to execute'
  )

  parser.add_argument(
      '-i', '--interactive',
      action='store_true',
      help='Start interactive mode'
  )

  parser.add_argument(
      '--parse',
      action='store_true',
      help='Parse file and show the AST (for debugging)'
  )

  parser.add_argument(
      '--debug',
      action='store_true',
      help='Enable debug output for parser and interpreter'
  )

  parser.add_argument(
      '--no-color',
      action='store_true',
      help='Disable colored error output'
  )

  parser.add_argument(
      '--version',
      action='version',
      version=VERSION
  )

  return parser


# ============================================================================
# OUTPUT HELPERS
# ============================================================================

def print_parse_errors(errors: List[str], no_color: bool = False) -> None:
  """Banner plus one tab-indented line per parser error"""
  print(MONKEY_FACE)
  print(paint("Woops! We ran into some monkey business here!", "yellow", no_color))
  print(" parser errors:")
  for error in errors:
    print(f"\t{error}")


def render_result(program: Program, result) -> Optional[str]:
  """Text the REPL shows for a result, or None when nothing is shown"""
  if program.statements and isinstance(program.statements[-1], LetStatement) and not isinstance(result, Error):
    return None
  return result.inspect()


def print_result(text: str, is_error: bool, no_color: bool = False) -> None:
  if is_error:
    print(paint(text, "red", no_color))
  else:
    print(text)


# ============================================================================
# SCRIPT MODE
# ============================================================================

def read_script(script_path: str) -> str:
  try:
    with open(script_path, 'r', encoding='utf-8') as f:
      return f.read()
  except FileNotFoundError:
    print(f"Error: Script file '{script_path}' not found")
    print(f"  Hint: Check the file path and make sure the file exists")
    sys.exit(1)
  except PermissionError:
    print(f"Error: Permission denied reading '{script_path}'")
    print(f"  Hint: Make sure you have read permissions for this file")
    sys.exit(1)
  except UnicodeDecodeError as e:
    print(f"Error: Cannot decode file '{script_path}': {e}")
    print(f"  Hint: Make sure the file is a text file with UTF-8 encoding")
    sys.exit(1)


def parse_file(script_path: str, debug: bool = False, no_color: bool = False) -> None:
  """Parse a Monkey script file and show the AST"""
  parser = create_debug_parser() if debug else create_parser()
  source = read_script(script_path)

  program, errors = parser.parse_string(source)
  if errors:
    for error in errors:
      print(paint(format_parse_error(error), "yellow", no_color))
    sys.exit(1)

  print(f"Parsed {len(program.statements)} top-level statements:")
  print("=" * 50)
  print(pretty_print_ast(program))
  print()
  print("Canonical source:")
  print(program)


def run_script_file(script_path: str, debug: bool = False, no_color: bool = False) -> None:
  """Run a Monkey script file with full interpretation"""
  interpreter = create_debug_interpreter() if debug else create_interpreter()

  try:
    result = interpreter.run(read_script(script_path))
  except MonkeyParseError as e:
    print(f"{len(e.errors)} parse error(s) in '{script_path}':")
    for error in e.errors:
      print(paint(format_parse_error(error), "yellow", no_color))
    sys.exit(1)
  except RecursionError:
    print(paint("ERROR: maximum recursion depth exceeded", "red", no_color))
    sys.exit(1)

  if isinstance(result, Error):
    print_result(result.inspect(), True, no_color)
    sys.exit(1)


# ============================================================================
# INTERACTIVE MODE
# ============================================================================

def setup_readline():
  """Setup readline with history and auto-completion"""
  if not READLINE_AVAILABLE:
    return

  try:
    readline.read_history_file(HISTORY_FILE)
  except (FileNotFoundError, PermissionError, OSError):
    pass  # First time, no history yet, or permission denied

  readline.set_history_length(HISTORY_LENGTH)

  completions = sorted(KEYWORDS) + sorted(BUILTINS) + REPL_COMMANDS

  def completer(text, state):
    options = [cmd for cmd in completions if cmd.startswith(text)]
    if state < len(options):
      return options[state]
    return None

  readline.set_completer(completer)
  readline.parse_and_bind("tab: complete")

  # Save history on exit
  import atexit
  atexit.register(save_history)


def save_history() -> None:
  try:
    readline.write_history_file(HISTORY_FILE)
  except OSError:
    pass  # Read-only home directory


def show_env(interpreter: MonkeyInterpreter) -> None:
  print("Current environment:")
  bindings = interpreter.user_bindings()
  if not bindings:
    print("  (no user-defined bindings)")
    return
  for name, value in bindings.items():
    val_str = value.inspect()
    if len(val_str) > 60:
      val_str = val_str[:57] + "..."
    print(f"  {name} = {val_str}")


def show_help() -> None:
  print("REPL Commands:")
  print("  :parse <code>     - Show parsed AST")
  print("  :env              - Show current environment")
  print("  :help             - Show this help")
  print("  exit              - Exit REPL")
  print()
  print("Language features:")
  print("  let x = 5;                          - Binding")
  print("  let add = fn(a, b) { a + b };       - Function")
  print("  if (x > 1) { \"big\" } else { \"small\" } - Conditional")
  print("  [1, 2, 3][0]  {\"a\": 1}[\"a\"]         - Arrays and hashes")
  print("  len first last rest push puts       - Builtins")


def eval_line(code: str, interpreter: MonkeyInterpreter, no_color: bool = False) -> None:
  """Parse one REPL input, then evaluate it or report its parse errors"""
  program, errors = parse(code, debug=interpreter.debug)
  if errors:
    print_parse_errors(errors, no_color)
    return

  try:
    result = interpreter.evaluate(program)
  except RecursionError:
    print(paint("ERROR: maximum recursion depth exceeded", "red", no_color))
    return

  text = render_result(program, result)
  if text is not None:
    print_result(text, isinstance(result, Error), no_color)


def handle_command(code: str, interpreter: MonkeyInterpreter, no_color: bool = False) -> bool:
  """Run a REPL command; False when the input is ordinary code"""
  stripped = code.strip()

  if stripped.startswith(":parse"):
    program, errors = parse(stripped[len(":parse"):])
    if errors:
      print_parse_errors(errors, no_color)
    else:
      print(pretty_print_ast(program))
    return True

  if stripped == ":env":
    show_env(interpreter)
    return True

  if stripped == ":help":
    show_help()
    return True

  return False


def run_interactive_mode(debug: bool = False, no_color: bool = False) -> None:
  """Run Monkey in interactive mode with one session-wide environment"""
  print(f"Hello {getpass.getuser()}! This is the Monkey programming language!")
  print("Feel free to type in commands")
  if debug:
    print("Debug mode enabled")

  setup_readline()

  interpreter = create_debug_interpreter() if debug else create_interpreter()

  while True:
    try:
      code = input(PROMPT)
    except (KeyboardInterrupt, EOFError):
      print("\nGoodbye!")
      break

    if code.strip() == "exit":
      break

    if not code.strip():
      continue

    if handle_command(code, interpreter, no_color):
      continue

    try:
      eval_line(code, interpreter, no_color)
    except MonkeyRuntimeError as e:
      print(paint(f"Internal error: {e.message}", "red", no_color))
      if debug:
        import traceback
        traceback.print_exc()


def main(argv: Optional[List[str]] = None) -> None:
  """Main entry point for Monkey"""
  arg_parser = create_arg_parser()
  args = arg_parser.parse_args(argv)

  if args.script and not args.interactive:
    if not Path(args.script).exists():
      print(f"Error: Script file '{args.script}' does not exist")
      sys.exit(1)

    if args.parse:
      parse_file(args.script, debug=args.debug, no_color=args.no_color)
    else:
      run_script_file(args.script, debug=args.debug, no_color=args.no_color)
    return

  run_interactive_mode(debug=args.debug, no_color=args.no_color)


if __name__ == "__main__":
  main()
