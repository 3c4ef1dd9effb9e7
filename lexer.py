"""
Monkey Programming Language Lexer
Turns source text into a lazy stream of tokens, one call to next_token() at a time
"""

from typing import Iterator, List
from dataclasses import dataclass


# ============================================================================
# TOKEN TYPES
# ============================================================================

ILLEGAL = "ILLEGAL"
EOF = "EOF"

# Identifiers + literals
IDENT = "IDENT"
INT = "INT"
STRING = "STRING"

# Operators
ASSIGN = "="
PLUS = "+"
MINUS = "-"
ASTERISK = "*"
SLASH = "/"
BANG = "!"
LT = "<"
GT = ">"
EQ = "=="
NOT_EQ = "!="

# Delimiters
COMMA = ","
SEMICOLON = ";"
COLON = ":"
LPAREN = "("
RPAREN = ")"
LBRACE = "{"
RBRACE = "}"
LBRACKET = "["
RBRACKET = "]"

# Keywords
FUNCTION = "FUNCTION"
LET = "LET"
TRUE = "TRUE"
FALSE = "FALSE"
IF = "IF"
ELSE = "ELSE"
RETURN = "RETURN"

KEYWORDS = {
    "fn": FUNCTION,
    "let": LET,
    "true": TRUE,
    "false": FALSE,
    "if": IF,
    "else": ELSE,
    "return": RETURN,
}

# Single characters that always form a token on their own
SINGLE_CHAR_TOKENS = {
    "+": PLUS,
    "-": MINUS,
    "*": ASTERISK,
    "/": SLASH,
    "<": LT,
    ">": GT,
    ",": COMMA,
    ";": SEMICOLON,
    ":": COLON,
    "(": LPAREN,
    ")": RPAREN,
    "{": LBRACE,
    "}": RBRACE,
    "[": LBRACKET,
    "]": RBRACKET,
}

# One-character operators that may grow into a two-character one
TWO_CHAR_TOKENS = {
    "=": (ASSIGN, EQ),
    "!": (BANG, NOT_EQ),
}


@dataclass(frozen=True)
class Token:
    """Monkey token with the offset of its first character"""
    type: str
    literal: str
    pos: int = 0

    def __str__(self) -> str:
        return f"{self.type}({self.literal})"


def lookup_ident(ident: str) -> str:
    """Classify a word as a keyword token type or IDENT"""
    return KEYWORDS.get(ident, IDENT)


def is_letter(ch: str) -> bool:
    return ch.isalpha() or ch == "_"


def is_digit(ch: str) -> bool:
    return "0" <= ch <= "9"


# ============================================================================
# LEXER
# ============================================================================

class Lexer:
    """Character cursor over a source string producing Tokens on demand"""

    def __init__(self, text: str):
        self.text = text
        self.position = 0

    def _peek_char(self, offset: int = 0) -> str:
        index = self.position + offset
        if index >= len(self.text):
            return ""
        return self.text[index]

    def _skip_whitespace(self) -> None:
        while self.position < len(self.text) and self.text[self.position].isspace():
            self.position += 1

    def _read_while(self, predicate) -> str:
        start = self.position
        while self.position < len(self.text) and predicate(self.text[self.position]):
            self.position += 1
        return self.text[start:self.position]

    def _read_string(self, start: int) -> Token:
        """Scan from an opening quote to the matching closing quote"""
        closing = self.text.find('"', start + 1)
        if closing == -1:
            # Unterminated: hand the rest of the input to the parser as ILLEGAL
            self.position = len(self.text)
            return Token(ILLEGAL, self.text[start:], start)

        self.position = closing + 1
        return Token(STRING, self.text[start + 1:closing], start)

    def next_token(self) -> Token:
        """Consume and return exactly one token; EOF repeats forever at the end"""
        self._skip_whitespace()

        start = self.position
        ch = self._peek_char()

        if ch == "":
            return Token(EOF, "", start)

        if ch in TWO_CHAR_TOKENS:
            single, double = TWO_CHAR_TOKENS[ch]
            if self._peek_char(1) == "=":
                self.position += 2
                return Token(double, ch + "=", start)
            self.position += 1
            return Token(single, ch, start)

        if ch in SINGLE_CHAR_TOKENS:
            self.position += 1
            return Token(SINGLE_CHAR_TOKENS[ch], ch, start)

        if ch == '"':
            return self._read_string(start)

        if is_letter(ch):
            word = self._read_while(lambda c: is_letter(c) or is_digit(c))
            return Token(lookup_ident(word), word, start)

        if is_digit(ch):
            digits = self._read_while(is_digit)
            return Token(INT, digits, start)

        self.position += 1
        return Token(ILLEGAL, ch, start)

    def __iter__(self) -> Iterator[Token]:
        """Yield tokens up to and including the first EOF"""
        while True:
            token = self.next_token()
            yield token
            if token.type == EOF:
                return


def tokenize(text: str) -> List[Token]:
    """Lex a whole string eagerly, EOF token included"""
    return list(Lexer(text))
