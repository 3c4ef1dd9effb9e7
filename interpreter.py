"""
Monkey Interpreter - tree-walking evaluator
Every node evaluates to a runtime value; return and error signals travel
as ordinary values and short-circuit block iteration
"""

import sys
from typing import Any, Dict, List

from ast_nodes import (
    Program, BlockStatement, LetStatement, ReturnStatement, ExpressionStatement,
    Identifier, IntegerLiteral, StringLiteral, BooleanLiteral,
    PrefixExpression, InfixExpression, IfExpression, FunctionLiteral,
    CallExpression, ArrayLiteral, IndexExpression, HashLiteral,
)
from objects import (
    Integer, Boolean, String, ReturnValue, Error, Function, Builtin, Array, Hash,
    NULL, is_hashable, make_runtime_env, new_enclosed_env, env_bind_value, env_lookup_value,
)
from error_handling import MonkeyParseError
from parsing import create_parser
from stdlib import lookup_builtin
from utilities import (
    INT64_MAX,
    INTEGER_OPERATORS,
    MonkeyRuntimeError,
    arity_error,
    is_truthy,
    is_unwinding,
    native_bool_to_boolean,
    type_mismatch_error,
    type_name_of,
    unknown_infix_operator_error,
    unknown_prefix_operator_error,
)


# Each Monkey call nests about a dozen Python frames
RECURSION_LIMIT = 10000


# ============================================================================
# EVALUATION DISPATCH
# ============================================================================

def eval_ast(ast_node: Any, env: Dict, debug: bool = False) -> Any:
  """Evaluate any AST node in env and return the resulting value"""
  if debug:
    print(f"Evaluating: {type(ast_node).__name__}")

  evaluator = NODE_EVALUATORS.get(type(ast_node))
  if evaluator is None:
    raise MonkeyRuntimeError(f"Unknown node type: {type(ast_node).__name__}")
  return evaluator(ast_node, env, debug)


# ============================================================================
# STATEMENTS
# ============================================================================

def eval_program(ast_node: Program, env: Dict, debug: bool = False) -> Any:
  """Run top-level statements; a return value is unwrapped here"""
  result = NULL

  for statement in ast_node.statements:
    result = eval_ast(statement, env, debug)

    if isinstance(result, ReturnValue):
      return result.value
    if isinstance(result, Error):
      return result

  return result


def eval_block_statement(ast_node: BlockStatement, env: Dict, debug: bool = False) -> Any:
  """Run a block; return and error signals pass through still wrapped"""
  result = NULL

  for statement in ast_node.statements:
    result = eval_ast(statement, env, debug)
    if is_unwinding(result):
      return result

  return result


def eval_expression_statement(ast_node: ExpressionStatement, env: Dict, debug: bool = False) -> Any:
  return eval_ast(ast_node.expression, env, debug)


def eval_let_statement(ast_node: LetStatement, env: Dict, debug: bool = False) -> Any:
  value = eval_ast(ast_node.value, env, debug)
  if is_unwinding(value):
    return value

  env_bind_value(env, ast_node.name.value, value)
  return NULL


def eval_return_statement(ast_node: ReturnStatement, env: Dict, debug: bool = False) -> Any:
  if ast_node.return_value is None:
    return ReturnValue(NULL)

  value = eval_ast(ast_node.return_value, env, debug)
  if is_unwinding(value):
    return value
  return ReturnValue(value)


# ============================================================================
# LITERALS AND IDENTIFIERS
# ============================================================================

def eval_integer_literal(ast_node: IntegerLiteral, env: Dict, debug: bool = False) -> Integer:
  return Integer(ast_node.value)


def eval_string_literal(ast_node: StringLiteral, env: Dict, debug: bool = False) -> String:
  return String(ast_node.value)


def eval_boolean_literal(ast_node: BooleanLiteral, env: Dict, debug: bool = False) -> Boolean:
  return native_bool_to_boolean(ast_node.value)


def eval_identifier(ast_node: Identifier, env: Dict, debug: bool = False) -> Any:
  """Scope chain first, then builtins, so user bindings shadow builtins"""
  value = env_lookup_value(env, ast_node.value)
  if value is not None:
    return value

  builtin = lookup_builtin(ast_node.value)
  if builtin is not None:
    return builtin

  return Error(f"identifier not found: {ast_node.value}")


def eval_function_literal(ast_node: FunctionLiteral, env: Dict, debug: bool = False) -> Function:
  return Function(ast_node.parameters, ast_node.body, env)


def eval_expressions(expressions, env: Dict, debug: bool = False) -> List[Any]:
  """Evaluate left to right; on the first error or return signal return just that value"""
  results = []

  for expression in expressions:
    evaluated = eval_ast(expression, env, debug)
    if is_unwinding(evaluated):
      return [evaluated]
    results.append(evaluated)

  return results


def eval_array_literal(ast_node: ArrayLiteral, env: Dict, debug: bool = False) -> Any:
  elements = eval_expressions(ast_node.elements, env, debug)
  if len(elements) == 1 and is_unwinding(elements[0]):
    return elements[0]
  return Array(tuple(elements))


def eval_hash_literal(ast_node: HashLiteral, env: Dict, debug: bool = False) -> Any:
  pairs = {}

  for key_node, value_node in ast_node.pairs:
    key = eval_ast(key_node, env, debug)
    if is_unwinding(key):
      return key

    if not is_hashable(key):
      return Error(f"unusable as hash key: {type_name_of(key)}")

    value = eval_ast(value_node, env, debug)
    if is_unwinding(value):
      return value

    pairs[key] = value

  return Hash(pairs)


# ============================================================================
# OPERATORS
# ============================================================================

def eval_prefix_expression(ast_node: PrefixExpression, env: Dict, debug: bool = False) -> Any:
  right = eval_ast(ast_node.right, env, debug)
  if is_unwinding(right):
    return right

  if ast_node.operator == '!':
    return eval_bang_operator(right)
  if ast_node.operator == '-':
    return eval_minus_prefix_operator(right)
  return unknown_prefix_operator_error(ast_node.operator, right)


def eval_bang_operator(right: Any) -> Boolean:
  return native_bool_to_boolean(not is_truthy(right))


def eval_minus_prefix_operator(right: Any) -> Any:
  if not isinstance(right, Integer):
    return unknown_prefix_operator_error('-', right)
  if -right.value > INT64_MAX:
    return Error(f"integer overflow: -{right.value}")
  return Integer(-right.value)


def objects_equal(left: Any, right: Any) -> bool:
  """Value equality for scalars, identity for everything else"""
  if type(left) is not type(right):
    return False
  if isinstance(left, (Integer, Boolean, String)):
    return left.value == right.value
  return left is right


def eval_infix_operator(operator: str, left: Any, right: Any) -> Any:
  if isinstance(left, Integer) and isinstance(right, Integer):
    return eval_integer_infix_operator(operator, left, right)

  # Equality is defined for every pair of values and never fails
  if operator == '==':
    return native_bool_to_boolean(objects_equal(left, right))
  if operator == '!=':
    return native_bool_to_boolean(not objects_equal(left, right))

  if type(left) is not type(right):
    return type_mismatch_error(left, operator, right)

  if isinstance(left, String) and operator == '+':
    return String(left.value + right.value)

  return unknown_infix_operator_error(left, operator, right)


def eval_integer_infix_operator(operator: str, left: Integer, right: Integer) -> Any:
  op = INTEGER_OPERATORS.get(operator)
  if op is None:
    return unknown_infix_operator_error(left, operator, right)
  return op(left.value, right.value)


def eval_infix_expression(ast_node: InfixExpression, env: Dict, debug: bool = False) -> Any:
  left = eval_ast(ast_node.left, env, debug)
  if is_unwinding(left):
    return left

  right = eval_ast(ast_node.right, env, debug)
  if is_unwinding(right):
    return right

  return eval_infix_operator(ast_node.operator, left, right)


# ============================================================================
# CONTROL FLOW
# ============================================================================

def eval_if_expression(ast_node: IfExpression, env: Dict, debug: bool = False) -> Any:
  """Branches run in their own scope enclosed by env"""
  condition = eval_ast(ast_node.condition, env, debug)
  if is_unwinding(condition):
    return condition

  if is_truthy(condition):
    return eval_block_statement(ast_node.consequence, new_enclosed_env(env), debug)
  if ast_node.alternative is not None:
    return eval_block_statement(ast_node.alternative, new_enclosed_env(env), debug)
  return NULL


# ============================================================================
# FUNCTION APPLICATION
# ============================================================================

def extend_function_env(function: Function, args: List[Any]) -> Dict:
  """New activation scope enclosed by the closure's captured env, not the caller's"""
  env = new_enclosed_env(function.env)
  for param, arg in zip(function.parameters, args):
    env_bind_value(env, param.value, arg)
  return env


def unwrap_return_value(obj: Any) -> Any:
  if isinstance(obj, ReturnValue):
    return obj.value
  return obj


def apply_function(function: Any, args: List[Any], debug: bool = False) -> Any:
  if isinstance(function, Function):
    if len(args) != len(function.parameters):
      return arity_error(len(function.parameters), len(args))

    extended_env = extend_function_env(function, args)
    evaluated = eval_block_statement(function.body, extended_env, debug)
    return unwrap_return_value(evaluated)

  if isinstance(function, Builtin):
    if debug:
      print(f"Calling builtin: {function.name}")
    return function.fn(args)

  return Error(f"not a function: {type_name_of(function)}")


def eval_call_expression(ast_node: CallExpression, env: Dict, debug: bool = False) -> Any:
  function = eval_ast(ast_node.function, env, debug)
  if is_unwinding(function):
    return function

  args = eval_expressions(ast_node.arguments, env, debug)
  if len(args) == 1 and is_unwinding(args[0]):
    return args[0]

  return apply_function(function, args, debug)


# ============================================================================
# COLLECTIONS
# ============================================================================

def eval_index_operator(left: Any, index: Any) -> Any:
  if isinstance(left, Array):
    # Out of range (negative included) and non-integer indexes are not fatal
    if isinstance(index, Integer) and 0 <= index.value < len(left.elements):
      return left.elements[index.value]
    return NULL

  if isinstance(left, Hash):
    if not is_hashable(index):
      return Error(f"unusable as hash key: {type_name_of(index)}")
    return left.pairs.get(index, NULL)

  return Error(f"index operator not supported: {type_name_of(left)}")


def eval_index_expression(ast_node: IndexExpression, env: Dict, debug: bool = False) -> Any:
  left = eval_ast(ast_node.left, env, debug)
  if is_unwinding(left):
    return left

  index = eval_ast(ast_node.index, env, debug)
  if is_unwinding(index):
    return index

  return eval_index_operator(left, index)


NODE_EVALUATORS = {
    Program: eval_program,
    BlockStatement: eval_block_statement,
    ExpressionStatement: eval_expression_statement,
    LetStatement: eval_let_statement,
    ReturnStatement: eval_return_statement,
    IntegerLiteral: eval_integer_literal,
    StringLiteral: eval_string_literal,
    BooleanLiteral: eval_boolean_literal,
    Identifier: eval_identifier,
    PrefixExpression: eval_prefix_expression,
    InfixExpression: eval_infix_expression,
    IfExpression: eval_if_expression,
    FunctionLiteral: eval_function_literal,
    CallExpression: eval_call_expression,
    ArrayLiteral: eval_array_literal,
    IndexExpression: eval_index_expression,
    HashLiteral: eval_hash_literal,
}


# ============================================================================
# ENTRY POINTS
# ============================================================================

def create_global_env() -> Dict:
  """Session-wide scope; builtins are resolved separately and never stored here"""
  if sys.getrecursionlimit() < RECURSION_LIMIT:
    sys.setrecursionlimit(RECURSION_LIMIT)
  return make_runtime_env()


def evaluate(node: Any, env: Dict) -> Any:
  """Evaluate a parsed node in env (normally the session's global env)"""
  return eval_ast(node, env)


class MonkeyInterpreter:
  """Holds the global environment for one session"""

  def __init__(self, debug: bool = False):
    self.debug = debug
    self.global_env = create_global_env()

  def evaluate(self, node: Any) -> Any:
    return eval_ast(node, self.global_env, self.debug)

  def run(self, source: str) -> Any:
    """Parse and evaluate source; raises MonkeyParseError on syntax errors"""
    program, errors = create_parser(self.debug).parse_string(source)
    if errors:
      raise MonkeyParseError(errors)
    return self.evaluate(program)

  def user_bindings(self) -> Dict[str, Any]:
    return dict(self.global_env['bindings'])


# Factory functions
def create_interpreter(debug: bool = False) -> MonkeyInterpreter:
  """Factory function returning an interpreter"""
  return MonkeyInterpreter(debug=debug)


def create_debug_interpreter() -> MonkeyInterpreter:
  """Factory function returning a debug interpreter"""
  return create_interpreter(debug=True)
