"""
Monkey Programming Language Parser
Recursive descent for statements, Pratt (top-down operator precedence) for expressions
"""

from typing import Callable, Dict, List, Optional, Tuple

import lexer as tok
from lexer import Lexer, Token
from ast_nodes import (
    Identifier, IntegerLiteral, StringLiteral, BooleanLiteral,
    PrefixExpression, InfixExpression, IfExpression, FunctionLiteral,
    CallExpression, ArrayLiteral, IndexExpression, HashLiteral,
    LetStatement, ReturnStatement, ExpressionStatement, BlockStatement,
    Program, pretty_print_ast,
)
from error_handling import MonkeyParseError, build_parse_error, describe_position


# ============================================================================
# PRECEDENCE
# ============================================================================

LOWEST = 1
EQUALS = 2        # == !=
LESSGREATER = 3   # < >
SUM = 4           # + -
PRODUCT = 5       # * /
PREFIX = 6        # -x !x
CALL = 7          # f(x)
INDEX = 8         # a[i]

PRECEDENCES = {
    tok.EQ: EQUALS,
    tok.NOT_EQ: EQUALS,
    tok.LT: LESSGREATER,
    tok.GT: LESSGREATER,
    tok.PLUS: SUM,
    tok.MINUS: SUM,
    tok.ASTERISK: PRODUCT,
    tok.SLASH: PRODUCT,
    tok.LPAREN: CALL,
    tok.LBRACKET: INDEX,
}

INT64_MIN = -2 ** 63
INT64_MAX = 2 ** 63 - 1


# ============================================================================
# PARSER
# ============================================================================

class Parser:
    """Pratt parser over a Lexer; collects errors instead of raising them"""

    def __init__(self, lexer: Lexer, debug: bool = False):
        self.lexer = lexer
        self.debug = debug
        self.errors: List[str] = []
        self.error_details: List[Dict] = []
        # Unclosed `{` up to and including cur_token
        self.depth = 0

        self.cur_token: Token = Token(tok.EOF, "")
        self.peek_token: Token = Token(tok.EOF, "")

        self.prefix_parse_fns: Dict[str, Callable] = {
            tok.IDENT: self.parse_identifier,
            tok.INT: self.parse_integer_literal,
            tok.STRING: self.parse_string_literal,
            tok.TRUE: self.parse_boolean,
            tok.FALSE: self.parse_boolean,
            tok.BANG: self.parse_prefix_expression,
            tok.MINUS: self.parse_prefix_expression,
            tok.LPAREN: self.parse_grouped_expression,
            tok.IF: self.parse_if_expression,
            tok.FUNCTION: self.parse_function_literal,
            tok.LBRACKET: self.parse_array_literal,
            tok.LBRACE: self.parse_hash_literal,
            tok.ILLEGAL: self.parse_illegal,
        }

        self.infix_parse_fns: Dict[str, Callable] = {
            tok.PLUS: self.parse_infix_expression,
            tok.MINUS: self.parse_infix_expression,
            tok.ASTERISK: self.parse_infix_expression,
            tok.SLASH: self.parse_infix_expression,
            tok.EQ: self.parse_infix_expression,
            tok.NOT_EQ: self.parse_infix_expression,
            tok.LT: self.parse_infix_expression,
            tok.GT: self.parse_infix_expression,
            tok.LPAREN: self.parse_call_expression,
            tok.LBRACKET: self.parse_index_expression,
        }

        # Read two tokens so cur_token and peek_token are both set
        self.next_token()
        self.next_token()

    # ------------------------------------------------------------------
    # token cursor
    # ------------------------------------------------------------------

    def next_token(self) -> None:
        self.cur_token = self.peek_token
        self.peek_token = self.lexer.next_token()

        if self.cur_token.type == tok.LBRACE:
            self.depth += 1
        elif self.cur_token.type == tok.RBRACE:
            self.depth = max(0, self.depth - 1)

    def cur_token_is(self, token_type: str) -> bool:
        return self.cur_token.type == token_type

    def peek_token_is(self, token_type: str) -> bool:
        return self.peek_token.type == token_type

    def expect_peek(self, token_type: str) -> bool:
        """Advance only if the next token has the expected type"""
        if self.peek_token_is(token_type):
            self.next_token()
            return True
        self.peek_error(token_type)
        return False

    def peek_precedence(self) -> int:
        return PRECEDENCES.get(self.peek_token.type, LOWEST)

    def cur_precedence(self) -> int:
        return PRECEDENCES.get(self.cur_token.type, LOWEST)

    # ------------------------------------------------------------------
    # errors
    # ------------------------------------------------------------------

    def add_error(self, message: str, token: Token) -> None:
        source = self.lexer.text
        self.errors.append(f"{message} {describe_position(source, token.pos)}")
        self.error_details.append(build_parse_error(message, source, token.pos))

    def peek_error(self, token_type: str) -> None:
        message = f"expected next token to be {token_type}, got {self.peek_token.type} instead"
        self.add_error(message, self.peek_token)

    def no_prefix_parse_fn_error(self, token: Token) -> None:
        self.add_error(f"no prefix parse function for {token.type} found", token)

    def synchronize(self, depth: int = 0) -> None:
        """Skip to the end of the broken statement at brace nesting `depth`

        Stops on a semicolon, or just before a statement keyword or the
        closing brace of the enclosing block, so the caller's next_token()
        lands on a fresh statement. Returns at once if the enclosing block
        has already been closed.
        """
        while not self.cur_token_is(tok.EOF):
            if self.depth < depth:
                return
            if self.depth == depth:
                if self.cur_token_is(tok.SEMICOLON):
                    return
                if self.peek_token.type in (tok.LET, tok.RETURN, tok.EOF):
                    return
                if depth > 0 and self.peek_token_is(tok.RBRACE):
                    return
            self.next_token()

    # ------------------------------------------------------------------
    # statements
    # ------------------------------------------------------------------

    def parse_program(self) -> Program:
        statements = []

        while not self.cur_token_is(tok.EOF):
            statement = self.parse_statement()
            if statement is None:
                self.synchronize()
            else:
                if self.debug:
                    print(f"Parsed statement: {statement}")
                statements.append(statement)
            self.next_token()

        return Program(tuple(statements))

    def parse_statement(self):
        if self.cur_token_is(tok.LET):
            return self.parse_let_statement()
        if self.cur_token_is(tok.RETURN):
            return self.parse_return_statement()
        return self.parse_expression_statement()

    def parse_let_statement(self) -> Optional[LetStatement]:
        if not self.expect_peek(tok.IDENT):
            return None

        name = Identifier(self.cur_token.literal)

        if not self.expect_peek(tok.ASSIGN):
            return None

        self.next_token()
        value = self.parse_expression(LOWEST)
        if value is None:
            return None

        if self.peek_token_is(tok.SEMICOLON):
            self.next_token()

        return LetStatement(name, value)

    def parse_return_statement(self) -> Optional[ReturnStatement]:
        if self.peek_token.type in (tok.SEMICOLON, tok.RBRACE, tok.EOF):
            if self.peek_token_is(tok.SEMICOLON):
                self.next_token()
            return ReturnStatement(None)

        self.next_token()
        value = self.parse_expression(LOWEST)
        if value is None:
            return None

        if self.peek_token_is(tok.SEMICOLON):
            self.next_token()

        return ReturnStatement(value)

    def parse_expression_statement(self) -> Optional[ExpressionStatement]:
        expression = self.parse_expression(LOWEST)
        if expression is None:
            return None

        if self.peek_token_is(tok.SEMICOLON):
            self.next_token()

        return ExpressionStatement(expression)

    def parse_block_statement(self) -> Optional[BlockStatement]:
        """Parse `{ ... }` with cur_token on the opening brace

        A broken inner statement is reported and skipped so later errors in
        the same block are still found, but the block as a whole is dropped.
        """
        statements = []
        failed = False
        block_depth = self.depth
        self.next_token()

        while not self.cur_token_is(tok.RBRACE) and not self.cur_token_is(tok.EOF):
            statement = self.parse_statement()
            if statement is None:
                failed = True
                self.synchronize(block_depth)
                if self.depth < block_depth:
                    # the error was on this block's closing brace
                    break
            else:
                statements.append(statement)
            self.next_token()

        if self.cur_token_is(tok.EOF):
            self.add_error(f"expected next token to be {tok.RBRACE}, got {tok.EOF} instead", self.cur_token)
            return None

        if failed:
            return None
        return BlockStatement(tuple(statements))

    # ------------------------------------------------------------------
    # expressions
    # ------------------------------------------------------------------

    def parse_expression(self, precedence: int):
        prefix = self.prefix_parse_fns.get(self.cur_token.type)
        if prefix is None:
            self.no_prefix_parse_fn_error(self.cur_token)
            return None

        left = prefix()

        while left is not None and not self.peek_token_is(tok.SEMICOLON) and precedence < self.peek_precedence():
            infix = self.infix_parse_fns.get(self.peek_token.type)
            if infix is None:
                return left

            self.next_token()
            left = infix(left)

        return left

    def parse_identifier(self) -> Identifier:
        return Identifier(self.cur_token.literal)

    def parse_integer_literal(self) -> Optional[IntegerLiteral]:
        literal = self.cur_token.literal
        # int64 never needs more than 19 significant digits
        if len(literal.lstrip("0")) > 19 or not INT64_MIN <= int(literal) <= INT64_MAX:
            self.add_error(f"could not parse {literal} as integer", self.cur_token)
            return None
        return IntegerLiteral(int(literal))

    def parse_string_literal(self) -> StringLiteral:
        return StringLiteral(self.cur_token.literal)

    def parse_boolean(self) -> BooleanLiteral:
        return BooleanLiteral(self.cur_token_is(tok.TRUE))

    def parse_illegal(self) -> None:
        literal = self.cur_token.literal
        if literal.startswith('"'):
            self.add_error("unterminated string literal", self.cur_token)
        else:
            self.add_error(f"illegal character '{literal}'", self.cur_token)
        return None

    def parse_prefix_expression(self) -> Optional[PrefixExpression]:
        operator = self.cur_token.literal
        self.next_token()
        right = self.parse_expression(PREFIX)
        if right is None:
            return None
        return PrefixExpression(operator, right)

    def parse_infix_expression(self, left) -> Optional[InfixExpression]:
        operator = self.cur_token.literal
        precedence = self.cur_precedence()
        self.next_token()
        right = self.parse_expression(precedence)
        if right is None:
            return None
        return InfixExpression(left, operator, right)

    def parse_grouped_expression(self):
        self.next_token()
        expression = self.parse_expression(LOWEST)
        if expression is None:
            return None
        if not self.expect_peek(tok.RPAREN):
            return None
        return expression

    def parse_if_expression(self) -> Optional[IfExpression]:
        if not self.expect_peek(tok.LPAREN):
            return None

        self.next_token()
        condition = self.parse_expression(LOWEST)
        if condition is None:
            return None

        if not self.expect_peek(tok.RPAREN):
            return None
        if not self.expect_peek(tok.LBRACE):
            return None

        consequence = self.parse_block_statement()
        if consequence is None:
            return None

        alternative = None
        if self.peek_token_is(tok.ELSE):
            self.next_token()
            if not self.expect_peek(tok.LBRACE):
                return None
            alternative = self.parse_block_statement()
            if alternative is None:
                return None

        return IfExpression(condition, consequence, alternative)

    def parse_function_literal(self) -> Optional[FunctionLiteral]:
        if not self.expect_peek(tok.LPAREN):
            return None

        parameters = self.parse_function_parameters()
        if parameters is None:
            return None

        if not self.expect_peek(tok.LBRACE):
            return None

        body = self.parse_block_statement()
        if body is None:
            return None

        return FunctionLiteral(parameters, body)

    def parse_function_parameters(self) -> Optional[Tuple[Identifier, ...]]:
        if self.peek_token_is(tok.RPAREN):
            self.next_token()
            return ()

        if not self.expect_peek(tok.IDENT):
            return None
        identifiers = [Identifier(self.cur_token.literal)]

        while self.peek_token_is(tok.COMMA):
            self.next_token()
            if not self.expect_peek(tok.IDENT):
                return None
            identifiers.append(Identifier(self.cur_token.literal))

        if not self.expect_peek(tok.RPAREN):
            return None

        return tuple(identifiers)

    def parse_expression_list(self, end: str) -> Optional[tuple]:
        """Comma-separated expressions up to the `end` token"""
        if self.peek_token_is(end):
            self.next_token()
            return ()

        self.next_token()
        first = self.parse_expression(LOWEST)
        if first is None:
            return None
        items = [first]

        while self.peek_token_is(tok.COMMA):
            self.next_token()
            self.next_token()
            item = self.parse_expression(LOWEST)
            if item is None:
                return None
            items.append(item)

        if not self.expect_peek(end):
            return None

        return tuple(items)

    def parse_call_expression(self, function) -> Optional[CallExpression]:
        arguments = self.parse_expression_list(tok.RPAREN)
        if arguments is None:
            return None
        return CallExpression(function, arguments)

    def parse_array_literal(self) -> Optional[ArrayLiteral]:
        elements = self.parse_expression_list(tok.RBRACKET)
        if elements is None:
            return None
        return ArrayLiteral(elements)

    def parse_index_expression(self, left) -> Optional[IndexExpression]:
        self.next_token()
        index = self.parse_expression(LOWEST)
        if index is None:
            return None
        if not self.expect_peek(tok.RBRACKET):
            return None
        return IndexExpression(left, index)

    def parse_hash_literal(self) -> Optional[HashLiteral]:
        pairs = []

        while not self.peek_token_is(tok.RBRACE):
            if self.peek_token_is(tok.EOF):
                self.peek_error(tok.RBRACE)
                return None

            self.next_token()
            key = self.parse_expression(LOWEST)
            if key is None:
                return None

            if not self.expect_peek(tok.COLON):
                return None

            self.next_token()
            value = self.parse_expression(LOWEST)
            if value is None:
                return None

            pairs.append((key, value))

            if self.peek_token.type in (tok.RBRACE, tok.EOF):
                continue
            if not self.expect_peek(tok.COMMA):
                return None

        if not self.expect_peek(tok.RBRACE):
            return None

        return HashLiteral(tuple(pairs))


# ============================================================================
# ENTRY POINTS
# ============================================================================

def parse(text: str, debug: bool = False) -> Tuple[Program, List[str]]:
    """Parse source text into a Program and the ordered parse error messages"""
    parser = Parser(Lexer(text), debug=debug)
    program = parser.parse_program()
    return program, parser.errors


class MonkeyParser:
    """Front-end parser wrapper used by the REPL and script runner"""

    def __init__(self, debug: bool = False):
        self.debug = debug

    def parse_string(self, text: str) -> Tuple[Program, List[Dict]]:
        """Parse source, returning the Program and structured error records"""
        parser = Parser(Lexer(text), debug=self.debug)
        program = parser.parse_program()
        return program, parser.error_details

    def parse_file(self, filepath: str) -> Program:
        """Parse a Monkey source file, raising MonkeyParseError on syntax errors"""
        with open(filepath, 'r', encoding='utf-8') as f:
            content = f.read()

        program, errors = self.parse_string(content)
        if errors:
            raise MonkeyParseError(errors, filepath)
        return program


# Factory functions for creating parsers
def create_parser(debug: bool = False) -> MonkeyParser:
    """Create a Monkey parser"""
    return MonkeyParser(debug=debug)


def create_debug_parser() -> MonkeyParser:
    """Create a Monkey parser with debug enabled"""
    return MonkeyParser(debug=True)


__all__ = [
    "Parser", "MonkeyParser", "parse", "create_parser", "create_debug_parser",
    "pretty_print_ast", "LOWEST", "EQUALS", "LESSGREATER", "SUM", "PRODUCT",
    "PREFIX", "CALL", "INDEX",
]
