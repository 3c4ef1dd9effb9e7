"""
Utilities module for the Monkey interpreter
Contains common helper functions to reduce code duplication
"""

from typing import Any, Callable, List, Optional
import operator

from objects import Error, Integer, Boolean, ReturnValue, TRUE, FALSE, NULL


INT64_MIN = -2 ** 63
INT64_MAX = 2 ** 63 - 1


class MonkeyRuntimeError(Exception):
  """Internal interpreter fault (never a language-level error)"""
  def __init__(self, message: str):
    self.message = message
    super().__init__(message)


# ==================== VALUE CLASSIFICATION ====================

def is_unwinding(obj: Any) -> bool:
  """True for values that stop block iteration (return and error signals)"""
  return isinstance(obj, (ReturnValue, Error))


def is_truthy(obj: Any) -> bool:
  """Only null and false are falsy; 0, "" and [] are all truthy"""
  if obj is NULL:
    return False
  if isinstance(obj, Boolean):
    return obj.value
  return True


def native_bool_to_boolean(value: bool) -> Boolean:
  return TRUE if value else FALSE


def type_name_of(obj: Any) -> str:
  return getattr(obj, 'type_name', type(obj).__name__)


# ==================== ERROR MESSAGE BUILDERS ====================

def type_mismatch_error(left: Any, op: str, right: Any) -> Error:
  """
  Generate error for an operator applied to operands of different types

  Examples:
    type_mismatch_error(Integer(5), "+", TRUE) -> "type mismatch: Integer + Boolean"
  """
  return Error(f"type mismatch: {type_name_of(left)} {op} {type_name_of(right)}")


def unknown_infix_operator_error(left: Any, op: str, right: Any) -> Error:
  return Error(f"unknown operator: {type_name_of(left)} {op} {type_name_of(right)}")


def unknown_prefix_operator_error(op: str, right: Any) -> Error:
  return Error(f"unknown operator: {op}{type_name_of(right)}")


def arity_error(expected: int, got: int) -> Error:
  """
  Generate arity mismatch error

  Args:
    expected: Number of parameters the callee declares
    got: Number of arguments supplied

  Returns:
    Error value naming both counts
  """
  return Error(f"wrong number of arguments. got={got}, want={expected}")


def argument_type_error(func_name: str, expected: str, actual: Any) -> Error:
  """
  Generate builtin argument type error

  Examples:
    argument_type_error("first", "Array", Integer(1))
      -> "argument to `first` must be Array, got Integer"
  """
  return Error(f"argument to `{func_name}` must be {expected}, got {type_name_of(actual)}")


def validate_arg_count(args: List[Any], expected: int) -> Optional[Error]:
  """Return an arity Error if len(args) differs from expected, else None"""
  if len(args) != expected:
    return arity_error(expected, len(args))
  return None


# ==================== BINARY OPERATION FACTORIES ====================

def truncating_div(x: int, y: int) -> int:
  """Integer division rounding toward zero (Python's // floors)"""
  quotient = abs(x) // abs(y)
  return quotient if (x < 0) == (y < 0) else -quotient


def binary_arithmetic_op(op: Callable[[int, int], int], symbol: str) -> Callable[[int, int], Any]:
  """
  Factory for integer arithmetic kept inside the signed 64-bit range

  Args:
    op: Python operator function (e.g., operator.add)
    symbol: Operator as written in source, for error messages

  Returns:
    Function of two Python ints returning an Integer or an Error

  Examples:
    add = binary_arithmetic_op(operator.add, "+")
    add(2, 3) -> Integer(5)
  """
  def arithmetic(x: int, y: int) -> Any:
    if op is truncating_div and y == 0:
      return Error("division by zero")
    result = op(x, y)
    if not INT64_MIN <= result <= INT64_MAX:
      return Error(f"integer overflow: {x} {symbol} {y}")
    return Integer(result)

  return arithmetic


def binary_comparison_op(op: Callable[[Any, Any], bool]) -> Callable[[Any, Any], Boolean]:
  """
  Factory for comparisons returning the shared TRUE/FALSE singletons

  Examples:
    lt = binary_comparison_op(operator.lt)
    lt(1, 2) -> TRUE
  """
  def comparison(x: Any, y: Any) -> Boolean:
    return native_bool_to_boolean(op(x, y))

  return comparison


INTEGER_OPERATORS = {
    '+': binary_arithmetic_op(operator.add, '+'),
    '-': binary_arithmetic_op(operator.sub, '-'),
    '*': binary_arithmetic_op(operator.mul, '*'),
    '/': binary_arithmetic_op(truncating_div, '/'),
    '<': binary_comparison_op(operator.lt),
    '>': binary_comparison_op(operator.gt),
    '==': binary_comparison_op(operator.eq),
    '!=': binary_comparison_op(operator.ne),
}
