"""
Parser tests for the Monkey language
Covers statements, Pratt precedence, canonical rendering and error recovery
"""

import pytest
from ast_nodes import (
    Identifier, IntegerLiteral, StringLiteral, BooleanLiteral,
    PrefixExpression, InfixExpression, IfExpression, FunctionLiteral,
    CallExpression, ArrayLiteral, IndexExpression, HashLiteral,
    LetStatement, ReturnStatement, ExpressionStatement, BlockStatement,
    Program, pretty_print_ast,
)
from error_handling import MonkeyParseError
from parsing import parse, create_parser, create_debug_parser


def parse_ok(source):
  program, errors = parse(source)
  assert errors == [], f"unexpected parse errors: {errors}"
  return program


def single_expression(source):
  program = parse_ok(source)
  assert len(program.statements) == 1
  statement = program.statements[0]
  assert isinstance(statement, ExpressionStatement)
  return statement.expression


class TestStatements:
  """let, return and expression statements"""

  @pytest.mark.parametrize("source, name, value", [
      ("let x = 5;", "x", IntegerLiteral(5)),
      ("let y = true;", "y", BooleanLiteral(True)),
      ("let foobar = y;", "foobar", Identifier("y")),
      ("let s = \"hi\"", "s", StringLiteral("hi")),
  ])
  def test_let_statements(self, source, name, value):
    program = parse_ok(source)
    assert program.statements == (LetStatement(Identifier(name), value),)

  @pytest.mark.parametrize("source, value", [
      ("return 5;", IntegerLiteral(5)),
      ("return true;", BooleanLiteral(True)),
      ("return foobar;", Identifier("foobar")),
      ("return;", None),
      ("return", None),
  ])
  def test_return_statements(self, source, value):
    program = parse_ok(source)
    assert program.statements == (ReturnStatement(value),)

  def test_bare_return_inside_block(self):
    literal = single_expression("fn() { return }")
    assert literal.body == BlockStatement((ReturnStatement(None),))

  def test_semicolons_are_optional(self):
    program = parse_ok("let a = 1\nlet b = 2\na + b")
    assert len(program.statements) == 3
    assert str(program) == "let a = 1; let b = 2; (a + b)"

  def test_empty_program(self):
    assert parse_ok("") == Program(())


class TestExpressions:
  """Literal and compound expressions"""

  def test_identifier(self):
    assert single_expression("foobar;") == Identifier("foobar")

  def test_integer_literal(self):
    assert single_expression("5;") == IntegerLiteral(5)

  def test_string_literal(self):
    assert single_expression('"hello world";') == StringLiteral("hello world")

  @pytest.mark.parametrize("source, value", [("true;", True), ("false;", False)])
  def test_boolean_literal(self, source, value):
    assert single_expression(source) == BooleanLiteral(value)

  @pytest.mark.parametrize("source, operator, right", [
      ("!5;", "!", IntegerLiteral(5)),
      ("-15;", "-", IntegerLiteral(15)),
      ("!true;", "!", BooleanLiteral(True)),
      ("!false;", "!", BooleanLiteral(False)),
  ])
  def test_prefix_expressions(self, source, operator, right):
    assert single_expression(source) == PrefixExpression(operator, right)

  @pytest.mark.parametrize("operator", ["+", "-", "*", "/", ">", "<", "==", "!="])
  def test_infix_expressions(self, operator):
    expression = single_expression(f"5 {operator} 5;")
    assert expression == InfixExpression(IntegerLiteral(5), operator, IntegerLiteral(5))

  def test_if_expression(self):
    expression = single_expression("if (x < y) { x }")
    assert expression == IfExpression(
        InfixExpression(Identifier("x"), "<", Identifier("y")),
        BlockStatement((ExpressionStatement(Identifier("x")),)),
        None,
    )

  def test_if_else_expression(self):
    expression = single_expression("if (x < y) { x } else { y }")
    assert expression.alternative == BlockStatement((ExpressionStatement(Identifier("y")),))
    assert str(expression) == "if ((x < y)) { x } else { y }"

  def test_function_literal(self):
    expression = single_expression("fn(x, y) { x + y; }")
    assert expression == FunctionLiteral(
        (Identifier("x"), Identifier("y")),
        BlockStatement((ExpressionStatement(InfixExpression(Identifier("x"), "+", Identifier("y"))),)),
    )
    assert str(expression) == "fn(x, y) { (x + y) }"

  @pytest.mark.parametrize("source, names", [
      ("fn() {};", []),
      ("fn(x) {};", ["x"]),
      ("fn(x, y, z) {};", ["x", "y", "z"]),
  ])
  def test_function_parameters(self, source, names):
    expression = single_expression(source)
    assert [p.value for p in expression.parameters] == names
    assert expression.body == BlockStatement(())

  def test_call_expression(self):
    expression = single_expression("add(1, 2 * 3, 4 + 5);")
    assert isinstance(expression, CallExpression)
    assert expression.function == Identifier("add")
    assert len(expression.arguments) == 3
    assert str(expression) == "add(1, (2 * 3), (4 + 5))"

  def test_call_on_function_literal(self):
    expression = single_expression("fn(x) { x }(5)")
    assert isinstance(expression.function, FunctionLiteral)
    assert expression.arguments == (IntegerLiteral(5),)

  def test_array_literal(self):
    expression = single_expression("[1, 2 * 2, 3 + 3]")
    assert expression == ArrayLiteral((
        IntegerLiteral(1),
        InfixExpression(IntegerLiteral(2), "*", IntegerLiteral(2)),
        InfixExpression(IntegerLiteral(3), "+", IntegerLiteral(3)),
    ))

  def test_empty_array_literal(self):
    assert single_expression("[]") == ArrayLiteral(())

  def test_index_expression(self):
    expression = single_expression("myArray[1 + 1]")
    assert expression == IndexExpression(
        Identifier("myArray"),
        InfixExpression(IntegerLiteral(1), "+", IntegerLiteral(1)),
    )

  def test_hash_literal_keeps_source_order(self):
    expression = single_expression('{"one": 1, "two": 2, "three": 3}')
    assert expression == HashLiteral((
        (StringLiteral("one"), IntegerLiteral(1)),
        (StringLiteral("two"), IntegerLiteral(2)),
        (StringLiteral("three"), IntegerLiteral(3)),
    ))

  def test_empty_hash_literal(self):
    assert single_expression("{}") == HashLiteral(())

  def test_hash_literal_with_expressions(self):
    expression = single_expression('{"one": 0 + 1, true: 2, 3: "x"}')
    keys = [key for key, _ in expression.pairs]
    assert keys == [StringLiteral("one"), BooleanLiteral(True), IntegerLiteral(3)]
    assert str(expression) == '{"one": (0 + 1), true: 2, 3: "x"}'


class TestOperatorPrecedence:
  """Canonical rendering makes the grouping explicit"""

  @pytest.mark.parametrize("source, expected", [
      ("-a * b", "((-a) * b)"),
      ("!-a", "(!(-a))"),
      ("a + b + c", "((a + b) + c)"),
      ("a + b - c", "((a + b) - c)"),
      ("a * b * c", "((a * b) * c)"),
      ("a * b / c", "((a * b) / c)"),
      ("a + b / c", "(a + (b / c))"),
      ("a + b * c + d / e - f", "(((a + (b * c)) + (d / e)) - f)"),
      ("3 + 4; -5 * 5", "(3 + 4); ((-5) * 5)"),
      ("5 > 4 == 3 < 4", "((5 > 4) == (3 < 4))"),
      ("5 < 4 != 3 > 4", "((5 < 4) != (3 > 4))"),
      ("3 + 4 * 5 == 3 * 1 + 4 * 5", "((3 + (4 * 5)) == ((3 * 1) + (4 * 5)))"),
      ("true", "true"),
      ("false", "false"),
      ("3 > 5 == false", "((3 > 5) == false)"),
      ("3 < 5 == true", "((3 < 5) == true)"),
      ("1 + (2 + 3) + 4", "((1 + (2 + 3)) + 4)"),
      ("(5 + 5) * 2", "((5 + 5) * 2)"),
      ("2 / (5 + 5)", "(2 / (5 + 5))"),
      ("-(5 + 5)", "(-(5 + 5))"),
      ("!(true == true)", "(!(true == true))"),
      ("a + add(b * c) + d", "((a + add((b * c))) + d)"),
      ("add(a, b, 1, 2 * 3, 4 + 5, add(6, 7 * 8))", "add(a, b, 1, (2 * 3), (4 + 5), add(6, (7 * 8)))"),
      ("add(a + b + c * d / f + g)", "add((((a + b) + ((c * d) / f)) + g))"),
      ("a * [1, 2, 3, 4][b * c] * d", "((a * ([1, 2, 3, 4][(b * c)])) * d)"),
      ("add(a * b[2], b[1], 2 * [1, 2][1])", "add((a * (b[2])), (b[1]), (2 * ([1, 2][1])))"),
      ("f(x)(y)[0]", "(f(x)(y)[0])"),
  ])
  def test_operator_precedence(self, source, expected):
    assert str(parse_ok(source)) == expected


class TestCanonicalRendering:
  """Rendering a program and parsing it back gives the same tree"""

  @pytest.mark.parametrize("source", [
      "let x = 5; x",
      "let add = fn(a, b) { return a + b; }; add(1, 2 * 3)",
      "if (x < y) { let z = x; z } else { y }",
      'let h = {"a": [1, 2], 2: fn() { return; }}; h["a"][0]',
      "fn(x) { x }(5); -(-5); !true",
      "let f = fn() { }; f()",
  ])
  def test_render_then_reparse(self, source):
    program = parse_ok(source)
    assert parse_ok(str(program)) == program

  def test_let_and_return_rendering(self):
    program = parse_ok("let myVar = anotherVar; return myVar; return;")
    assert str(program) == "let myVar = anotherVar; return myVar; return;"

  def test_pretty_print_outline(self):
    outline = pretty_print_ast(parse_ok("1 + 2 * 3"))
    assert outline == "Program\n  ExpressionStatement\n    InfixExpression (1 + (2 * 3))"


class TestParseErrors:
  """Error messages carry the offending token and its position"""

  @pytest.mark.parametrize("source, message", [
      ("let = 5;", "expected next token to be IDENT, got = instead (line 1, column 5)"),
      ("let x 5;", "expected next token to be =, got INT instead (line 1, column 7)"),
      ("add(1, 2", "expected next token to be ), got EOF instead (line 1, column 9)"),
      ("}", "no prefix parse function for } found (line 1, column 1)"),
      ("5 @ 3", "illegal character '@' (line 1, column 3)"),
      ('let s = "abc', "unterminated string literal (line 1, column 9)"),
      ("99999999999999999999", "could not parse 99999999999999999999 as integer (line 1, column 1)"),
      ("fn(1) { 1 }", "expected next token to be IDENT, got INT instead (line 1, column 4)"),
      ("if (x) { x", "expected next token to be }, got EOF instead (line 1, column 11)"),
      ('{"a" 1}', "expected next token to be :, got INT instead (line 1, column 6)"),
      ('{"a": 1', "expected next token to be }, got EOF instead (line 1, column 8)"),
      ('{"a": 1,', "expected next token to be }, got EOF instead (line 1, column 9)"),
      ("{", "expected next token to be }, got EOF instead (line 1, column 2)"),
  ])
  def test_single_error(self, source, message):
    _, errors = parse(source)
    assert errors == [message]

  def test_int64_bounds_still_parse(self):
    program = parse_ok("9223372036854775807")
    assert program.statements[0].expression == IntegerLiteral(9223372036854775807)

  def test_huge_integer_literal_is_reported(self):
    program, errors = parse("1" * 5000 + "; 2")
    assert len(errors) == 1
    assert errors[0].startswith("could not parse 111")
    assert errors[0].endswith(" as integer (line 1, column 1)")
    assert program.statements == (ExpressionStatement(IntegerLiteral(2)),)

  def test_leading_zeros_do_not_count_against_range(self):
    assert single_expression("0" * 30 + "42") == IntegerLiteral(42)

  def test_position_on_later_line(self):
    _, errors = parse("let a = 1;\nlet = 2;")
    assert errors == ["expected next token to be IDENT, got = instead (line 2, column 5)"]

  def test_multiple_errors_in_order(self):
    _, errors = parse("let = 10; let 838383;")
    assert [e.split(" (line")[0] for e in errors] == [
        "expected next token to be IDENT, got = instead",
        "expected next token to be IDENT, got INT instead",
    ]


class TestErrorRecovery:
  """A broken statement is dropped and parsing resumes after it"""

  def test_statement_after_error_survives(self):
    program, errors = parse("let x 5; let y = 10; y")
    assert len(errors) == 1
    assert program.statements == (
        LetStatement(Identifier("y"), IntegerLiteral(10)),
        ExpressionStatement(Identifier("y")),
    )

  def test_error_inside_function_body_is_reported_once(self):
    program, errors = parse("let f = fn(x) { x + }; let y = 2;")
    assert errors == ["no prefix parse function for } found (line 1, column 21)"]
    assert program.statements == (LetStatement(Identifier("y"), IntegerLiteral(2)),)

  def test_nested_block_error(self):
    program, errors = parse("let f = fn() { if (x) { y + }; z }; f")
    assert len(errors) == 1
    assert program.statements == (ExpressionStatement(Identifier("f")),)

  def test_every_broken_statement_in_a_block_is_reported(self):
    _, errors = parse("fn() { let = 1; let = 2; 3 }")
    assert len(errors) == 2


class TestParserFrontEnd:
  """MonkeyParser wrapper used by the script runner"""

  def test_parse_string_returns_error_records(self):
    _, errors = create_parser().parse_string("let = 5;")
    assert len(errors) == 1
    record = errors[0]
    assert record['message'] == "expected next token to be IDENT, got = instead"
    assert (record['line'], record['column']) == (1, 5)
    assert record['got'] == "'= 5;'"
    assert "^ Error here" in record['context']

  def test_parse_file_raises_on_errors(self, tmp_path):
    script = tmp_path / "broken.monkey"
    script.write_text("let x = ;\n")
    with pytest.raises(MonkeyParseError) as excinfo:
      create_parser().parse_file(str(script))
    assert excinfo.value.filename == str(script)
    assert len(excinfo.value.errors) == 1

  def test_parse_file_success(self, tmp_path):
    script = tmp_path / "ok.monkey"
    script.write_text("let x = 1;\nx\n")
    program = create_parser().parse_file(str(script))
    assert len(program.statements) == 2

  def test_debug_parser_traces_statements(self, capsys):
    create_debug_parser().parse_string("let x = 1; x")
    out = capsys.readouterr().out
    assert "Parsed statement: let x = 1;" in out
    assert "Parsed statement: x" in out
