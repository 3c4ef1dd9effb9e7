"""
Lexer tests for the Monkey language
"""

import pytest
import lexer as tok
from lexer import Lexer, Token, tokenize


def types_and_literals(text):
  return [(t.type, t.literal) for t in tokenize(text)]


class TestNextToken:
  """Token-by-token scanning"""

  def test_operators_and_delimiters(self):
    assert types_and_literals("let five = 5; == != { } [ ]") == [
        (tok.LET, "let"),
        (tok.IDENT, "five"),
        (tok.ASSIGN, "="),
        (tok.INT, "5"),
        (tok.SEMICOLON, ";"),
        (tok.EQ, "=="),
        (tok.NOT_EQ, "!="),
        (tok.LBRACE, "{"),
        (tok.RBRACE, "}"),
        (tok.LBRACKET, "["),
        (tok.RBRACKET, "]"),
        (tok.EOF, ""),
    ]

  def test_full_program(self):
    source = """
let five = 5;
let ten = 10;

let add = fn(x, y) {
  x + y;
};

let result = add(five, ten);
!-/*5;
5 < 10 > 5;

if (5 < 10) {
  return true;
} else {
  return false;
}

10 == 10;
10 != 9;
"foobar"
"foo bar"
[1, 2];
{"foo": "bar"}
"""
    expected = [
        (tok.LET, "let"), (tok.IDENT, "five"), (tok.ASSIGN, "="), (tok.INT, "5"), (tok.SEMICOLON, ";"),
        (tok.LET, "let"), (tok.IDENT, "ten"), (tok.ASSIGN, "="), (tok.INT, "10"), (tok.SEMICOLON, ";"),
        (tok.LET, "let"), (tok.IDENT, "add"), (tok.ASSIGN, "="), (tok.FUNCTION, "fn"),
        (tok.LPAREN, "("), (tok.IDENT, "x"), (tok.COMMA, ","), (tok.IDENT, "y"), (tok.RPAREN, ")"),
        (tok.LBRACE, "{"), (tok.IDENT, "x"), (tok.PLUS, "+"), (tok.IDENT, "y"), (tok.SEMICOLON, ";"),
        (tok.RBRACE, "}"), (tok.SEMICOLON, ";"),
        (tok.LET, "let"), (tok.IDENT, "result"), (tok.ASSIGN, "="), (tok.IDENT, "add"),
        (tok.LPAREN, "("), (tok.IDENT, "five"), (tok.COMMA, ","), (tok.IDENT, "ten"), (tok.RPAREN, ")"),
        (tok.SEMICOLON, ";"),
        (tok.BANG, "!"), (tok.MINUS, "-"), (tok.SLASH, "/"), (tok.ASTERISK, "*"), (tok.INT, "5"),
        (tok.SEMICOLON, ";"),
        (tok.INT, "5"), (tok.LT, "<"), (tok.INT, "10"), (tok.GT, ">"), (tok.INT, "5"), (tok.SEMICOLON, ";"),
        (tok.IF, "if"), (tok.LPAREN, "("), (tok.INT, "5"), (tok.LT, "<"), (tok.INT, "10"), (tok.RPAREN, ")"),
        (tok.LBRACE, "{"), (tok.RETURN, "return"), (tok.TRUE, "true"), (tok.SEMICOLON, ";"), (tok.RBRACE, "}"),
        (tok.ELSE, "else"), (tok.LBRACE, "{"), (tok.RETURN, "return"), (tok.FALSE, "false"),
        (tok.SEMICOLON, ";"), (tok.RBRACE, "}"),
        (tok.INT, "10"), (tok.EQ, "=="), (tok.INT, "10"), (tok.SEMICOLON, ";"),
        (tok.INT, "10"), (tok.NOT_EQ, "!="), (tok.INT, "9"), (tok.SEMICOLON, ";"),
        (tok.STRING, "foobar"),
        (tok.STRING, "foo bar"),
        (tok.LBRACKET, "["), (tok.INT, "1"), (tok.COMMA, ","), (tok.INT, "2"), (tok.RBRACKET, "]"),
        (tok.SEMICOLON, ";"),
        (tok.LBRACE, "{"), (tok.STRING, "foo"), (tok.COLON, ":"), (tok.STRING, "bar"), (tok.RBRACE, "}"),
        (tok.EOF, ""),
    ]
    assert types_and_literals(source) == expected

  def test_eof_repeats_forever(self):
    lexer = Lexer("x")
    assert lexer.next_token().type == tok.IDENT
    for _ in range(3):
      assert lexer.next_token() == Token(tok.EOF, "", 1)

  def test_relexing_is_deterministic(self):
    source = 'let s = "hi"; s[0] != {1: [2]}'
    assert tokenize(source) == tokenize(source)


class TestWordsAndNumbers:
  """Identifiers, keywords and integer literals"""

  @pytest.mark.parametrize("word, token_type", [
      ("fn", tok.FUNCTION),
      ("let", tok.LET),
      ("true", tok.TRUE),
      ("false", tok.FALSE),
      ("if", tok.IF),
      ("else", tok.ELSE),
      ("return", tok.RETURN),
      ("letter", tok.IDENT),
      ("_private", tok.IDENT),
      ("x1_y2", tok.IDENT),
  ])
  def test_keyword_classification(self, word, token_type):
    token = Lexer(word).next_token()
    assert token.type == token_type
    assert token.literal == word

  def test_digit_run_stops_at_letter(self):
    assert types_and_literals("123abc") == [
        (tok.INT, "123"), (tok.IDENT, "abc"), (tok.EOF, ""),
    ]

  def test_no_signed_or_float_literals(self):
    assert types_and_literals("-3.5") == [
        (tok.MINUS, "-"), (tok.INT, "3"), (tok.ILLEGAL, "."), (tok.INT, "5"), (tok.EOF, ""),
    ]


class TestStringsAndIllegal:
  """String scanning and characters outside the language"""

  def test_no_escape_processing(self):
    token = Lexer(r'"a\nb"').next_token()
    assert token == Token(tok.STRING, r"a\nb", 0)

  def test_empty_string(self):
    assert Lexer('""').next_token() == Token(tok.STRING, "", 0)

  def test_unterminated_string_is_illegal(self):
    tokens = tokenize('let s = "abc')
    assert tokens[-2] == Token(tok.ILLEGAL, '"abc', 8)
    assert tokens[-1].type == tok.EOF

  def test_illegal_character(self):
    tokens = tokenize("5 @ 3")
    assert tokens[1] == Token(tok.ILLEGAL, "@", 2)
    assert tokens[2] == Token(tok.INT, "3", 4)

  def test_token_positions(self):
    positions = [t.pos for t in tokenize("let x\n  = 10;")]
    assert positions == [0, 4, 8, 10, 12, 13]
