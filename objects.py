"""
Monkey Runtime Values and Environments
Closed set of value variants plus the shared, mutable scope chain
"""

from typing import Any, Callable, Dict, List, Optional, Tuple
from dataclasses import dataclass, field

from ast_nodes import BlockStatement, Identifier


# ============================================================================
# VALUE VARIANTS
# ============================================================================

@dataclass(frozen=True)
class Integer:
  value: int
  type_name = "Integer"

  def inspect(self) -> str:
    return str(self.value)


@dataclass(frozen=True)
class Boolean:
  value: bool
  type_name = "Boolean"

  def inspect(self) -> str:
    return "true" if self.value else "false"


@dataclass(frozen=True)
class String:
  value: str
  type_name = "String"

  def inspect(self) -> str:
    return self.value


@dataclass(frozen=True)
class Null:
  type_name = "Null"

  def inspect(self) -> str:
    return "null"


@dataclass(frozen=True)
class ReturnValue:
  """Control-flow signal: unwinds blocks up to the nearest call boundary"""
  value: Any
  type_name = "Return"

  def inspect(self) -> str:
    return self.value.inspect()


@dataclass(frozen=True)
class Error:
  """Runtime fault carried as an ordinary value; unwinds to the top level"""
  message: str
  type_name = "Error"

  def inspect(self) -> str:
    return f"ERROR: {self.message}"


@dataclass(frozen=True, eq=False)
class Function:
  """User function; `env` is the captured defining scope (the closure)"""
  parameters: Tuple[Identifier, ...]
  body: BlockStatement
  env: Dict = field(repr=False)
  type_name = "Function"

  def inspect(self) -> str:
    return "Function"


@dataclass(frozen=True, eq=False)
class Builtin:
  name: str
  fn: Callable[[List[Any]], Any] = field(repr=False)
  type_name = "Builtin"

  def inspect(self) -> str:
    return "builtin function"


@dataclass(frozen=True)
class Array:
  """Immutable sequence of values; builtins return new arrays"""
  elements: Tuple[Any, ...]
  type_name = "Array"

  def inspect(self) -> str:
    return "[" + ", ".join(e.inspect() for e in self.elements) + "]"


@dataclass(frozen=True)
class Hash:
  """Mapping from hashable key values (Integer, Boolean, String) to values"""
  pairs: Dict[Any, Any]
  type_name = "Hash"

  def inspect(self) -> str:
    items = [f"{k.inspect()}: {v.inspect()}" for k, v in self.pairs.items()]
    return "{" + ", ".join(items) + "}"


TRUE = Boolean(True)
FALSE = Boolean(False)
NULL = Null()

# Key equality is variant + value, which frozen dataclasses give us for free
HASHABLE_TYPES = (Integer, Boolean, String)


def is_hashable(obj: Any) -> bool:
  return isinstance(obj, HASHABLE_TYPES)


# ============================================================================
# ENVIRONMENT OPERATIONS
# ============================================================================

def make_runtime_env(parent: Optional[Dict] = None, bindings: Optional[Dict] = None) -> Dict:
  """Create a scope; the dict is shared by reference with every closure over it"""
  return {
      'parent': parent,
      'bindings': bindings if bindings is not None else {}
  }


def new_enclosed_env(outer: Dict) -> Dict:
  return make_runtime_env(parent=outer)


def env_bind_value(env: Dict, name: str, value: Any) -> Any:
  """Bind name in this exact scope; visible to every holder of the scope"""
  env['bindings'][name] = value
  return value


def env_lookup_value(env: Dict, name: str) -> Optional[Any]:
  """Look up a value in the environment chain"""
  scope = env
  while scope is not None:
    if name in scope['bindings']:
      return scope['bindings'][name]
    scope = scope['parent']
  return None
