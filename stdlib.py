"""
Monkey Standard Library
Built-in functions available in every program
Arrays are treated as values: no builtin mutates its argument
"""

from typing import Any, Dict, List

from objects import Array, Builtin, Error, Integer, String, NULL
from utilities import argument_type_error, type_name_of, validate_arg_count


# ============================================================================
# PRINT FUNCTIONS
# ============================================================================

def monkey_puts(args: List[Any]) -> Any:
  """Print each argument on its own line"""
  for arg in args:
    print(arg.inspect())
  return NULL


# ============================================================================
# SEQUENCE FUNCTIONS
# ============================================================================

def monkey_len(args: List[Any]) -> Any:
  """Length of a string or array"""
  error = validate_arg_count(args, 1)
  if error:
    return error

  arg = args[0]
  if isinstance(arg, String):
    return Integer(len(arg.value))
  if isinstance(arg, Array):
    return Integer(len(arg.elements))
  return Error(f"argument to `len` not supported, got {type_name_of(arg)}")


def monkey_first(args: List[Any]) -> Any:
  """First element of an array, null when empty"""
  error = validate_arg_count(args, 1)
  if error:
    return error

  arr = args[0]
  if not isinstance(arr, Array):
    return argument_type_error("first", "Array", arr)
  return arr.elements[0] if arr.elements else NULL


def monkey_last(args: List[Any]) -> Any:
  """Last element of an array, null when empty"""
  error = validate_arg_count(args, 1)
  if error:
    return error

  arr = args[0]
  if not isinstance(arr, Array):
    return argument_type_error("last", "Array", arr)
  return arr.elements[-1] if arr.elements else NULL


def monkey_rest(args: List[Any]) -> Any:
  """New array without the first element, null when empty"""
  error = validate_arg_count(args, 1)
  if error:
    return error

  arr = args[0]
  if not isinstance(arr, Array):
    return argument_type_error("rest", "Array", arr)
  if not arr.elements:
    return NULL
  return Array(arr.elements[1:])


def monkey_push(args: List[Any]) -> Any:
  """New array with one element appended; the original is left alone"""
  error = validate_arg_count(args, 2)
  if error:
    return error

  arr, elem = args
  if not isinstance(arr, Array):
    return argument_type_error("push", "Array", arr)
  return Array(arr.elements + (elem,))


# ============================================================================
# BUILTIN TABLE
# ============================================================================

BUILTINS: Dict[str, Builtin] = {
    name: Builtin(name, fn) for name, fn in (
        ("len", monkey_len),
        ("first", monkey_first),
        ("last", monkey_last),
        ("rest", monkey_rest),
        ("push", monkey_push),
        ("puts", monkey_puts),
    )
}


def lookup_builtin(name: str):
  """Builtin by name, or None"""
  return BUILTINS.get(name)
