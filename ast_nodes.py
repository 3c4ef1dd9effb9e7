"""
Monkey Abstract Syntax Tree
Immutable node types produced by the parser and walked by the interpreter.
Every node renders back to canonical, fully parenthesized source via str().
"""

from typing import Optional, Tuple, Union
from dataclasses import dataclass


# ============================================================================
# EXPRESSIONS
# ============================================================================

@dataclass(frozen=True)
class Identifier:
    value: str

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class IntegerLiteral:
    value: int

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class StringLiteral:
    value: str

    def __str__(self) -> str:
        return f'"{self.value}"'


@dataclass(frozen=True)
class BooleanLiteral:
    value: bool

    def __str__(self) -> str:
        return "true" if self.value else "false"


@dataclass(frozen=True)
class PrefixExpression:
    operator: str
    right: "Expression"

    def __str__(self) -> str:
        return f"({self.operator}{self.right})"


@dataclass(frozen=True)
class InfixExpression:
    left: "Expression"
    operator: str
    right: "Expression"

    def __str__(self) -> str:
        return f"({self.left} {self.operator} {self.right})"


@dataclass(frozen=True)
class IfExpression:
    condition: "Expression"
    consequence: "BlockStatement"
    alternative: Optional["BlockStatement"] = None

    def __str__(self) -> str:
        result = f"if ({self.condition}) {self.consequence}"
        if self.alternative is not None:
            result += f" else {self.alternative}"
        return result


@dataclass(frozen=True)
class FunctionLiteral:
    parameters: Tuple[Identifier, ...]
    body: "BlockStatement"

    def __str__(self) -> str:
        params = ", ".join(str(p) for p in self.parameters)
        return f"fn({params}) {self.body}"


@dataclass(frozen=True)
class CallExpression:
    function: "Expression"
    arguments: Tuple["Expression", ...]

    def __str__(self) -> str:
        args = ", ".join(str(a) for a in self.arguments)
        return f"{self.function}({args})"


@dataclass(frozen=True)
class ArrayLiteral:
    elements: Tuple["Expression", ...]

    def __str__(self) -> str:
        return "[" + ", ".join(str(e) for e in self.elements) + "]"


@dataclass(frozen=True)
class IndexExpression:
    left: "Expression"
    index: "Expression"

    def __str__(self) -> str:
        return f"({self.left}[{self.index}])"


@dataclass(frozen=True)
class HashLiteral:
    """Key/value pairs in source order; evaluated left to right"""
    pairs: Tuple[Tuple["Expression", "Expression"], ...]

    def __str__(self) -> str:
        return "{" + ", ".join(f"{k}: {v}" for k, v in self.pairs) + "}"


Expression = Union[
    Identifier, IntegerLiteral, StringLiteral, BooleanLiteral,
    PrefixExpression, InfixExpression, IfExpression, FunctionLiteral,
    CallExpression, ArrayLiteral, IndexExpression, HashLiteral,
]


# ============================================================================
# STATEMENTS
# ============================================================================

@dataclass(frozen=True)
class LetStatement:
    name: Identifier
    value: Expression

    def __str__(self) -> str:
        return f"let {self.name} = {self.value};"


@dataclass(frozen=True)
class ReturnStatement:
    return_value: Optional[Expression] = None

    def __str__(self) -> str:
        if self.return_value is None:
            return "return;"
        return f"return {self.return_value};"


@dataclass(frozen=True)
class ExpressionStatement:
    expression: Expression

    def __str__(self) -> str:
        return str(self.expression)


def render_statements(statements) -> str:
    """Join statements so the result parses back into the same sequence"""
    parts = []
    last = len(statements) - 1
    for i, statement in enumerate(statements):
        text = str(statement)
        if isinstance(statement, ExpressionStatement) and i < last:
            text += ";"
        parts.append(text)
    return " ".join(parts)


@dataclass(frozen=True)
class BlockStatement:
    statements: Tuple["Statement", ...]

    def __str__(self) -> str:
        if not self.statements:
            return "{ }"
        return "{ " + render_statements(self.statements) + " }"


Statement = Union[LetStatement, ReturnStatement, ExpressionStatement, BlockStatement]


@dataclass(frozen=True)
class Program:
    """Root node: top-level statements in source order"""
    statements: Tuple[Statement, ...]

    def __str__(self) -> str:
        return render_statements(self.statements)


Node = Union[Program, Statement, Expression]


# ============================================================================
# TREE UTILITIES
# ============================================================================

def pretty_print_ast(node: Node, indent: int = 0) -> str:
    """Indented outline of an AST, one node per line"""
    prefix = "  " * indent
    name = type(node).__name__

    if isinstance(node, Program):
        lines = [f"{prefix}{name}"]
        lines.extend(pretty_print_ast(s, indent + 1) for s in node.statements)
        return "\n".join(lines)

    if isinstance(node, BlockStatement):
        lines = [f"{prefix}{name}"]
        lines.extend(pretty_print_ast(s, indent + 1) for s in node.statements)
        return "\n".join(lines)

    if isinstance(node, LetStatement):
        return f"{prefix}{name} {node.name}\n" + pretty_print_ast(node.value, indent + 1)

    if isinstance(node, ReturnStatement):
        if node.return_value is None:
            return f"{prefix}{name}"
        return f"{prefix}{name}\n" + pretty_print_ast(node.return_value, indent + 1)

    if isinstance(node, ExpressionStatement):
        return f"{prefix}{name}\n" + pretty_print_ast(node.expression, indent + 1)

    return f"{prefix}{name} {node}"
