import logging

from .ast_nodes import (
    Assignment, BinaryOp, Exit, Goto, IfThen, Input, NumberLiteral, Operator,
    Print, Program, StringLiteral, Variable,
)
from .errors import BasicSyntaxError
from .lexer import Token, TokenType

logger = logging.getLogger(__name__)

class Parser:
    """
    Single forward pass over the token list. Statements are collected in
    order and labels are resolved to statement indexes as they are met.
    """
    def __init__(self, tokens):
        if not tokens or tokens[-1].type != TokenType.EOF:
            tokens = list(tokens) + [Token("", TokenType.EOF)]
        self.tokens = tokens
        self.pos = 0

    @property
    def current_token(self):
        return self.tokens[min(self.pos, len(self.tokens) - 1)]

    def peek(self, offset=1):
        return self.tokens[min(self.pos + offset, len(self.tokens) - 1)]

    def advance(self):
        token = self.current_token
        if self.pos < len(self.tokens) - 1:
            self.pos += 1
        return token

    def match(self, *types):
        """Consume the next len(types) tokens if their types line up."""
        for offset, token_type in enumerate(types):
            if self.peek(offset).type != token_type:
                return False
        for _ in types:
            self.advance()
        return True

    def is_keyword(self, word):
        token = self.current_token
        return token.type == TokenType.WORD and token.lexeme == word

    def expect(self, token_type, context):
        token = self.current_token
        if token.type != token_type:
            raise BasicSyntaxError(
                f"Line {token.line}:{token.column} - "
                f"Expected {token_type.name} {context}, found {token.type.name}('{token.lexeme}')",
                token.line, token.column,
            )
        return self.advance()

    def parse(self):
        try:
            return self.parse_program()
        except RecursionError:
            token = self.current_token
            raise BasicSyntaxError(
                f"Line {token.line}:{token.column} - Expression too deeply nested",
                token.line, token.column,
            ) from None

    def parse_program(self):
        statements = []
        labels = {}

        while True:
            token = self.current_token

            if self.match(TokenType.LABEL):
                labels[token.lexeme] = max(len(statements) - 1, 0)

            elif self.match(TokenType.WORD, TokenType.EQUALS):
                statements.append(Assignment(token.lexeme, self.parse_expression()))

            elif self.is_keyword("print"):
                self.advance()
                statements.append(Print(self.parse_expression()))

            elif self.is_keyword("input"):
                self.advance()
                statements.append(Input(self.expect(TokenType.WORD, "after 'input'").lexeme))

            elif self.is_keyword("goto"):
                self.advance()
                statements.append(Goto(self.expect(TokenType.WORD, "after 'goto'").lexeme))

            elif self.is_keyword("if"):
                self.advance()
                condition = self.parse_expression()
                if self.is_keyword("then"):
                    self.advance()
                label = self.expect(TokenType.WORD, "as 'if' target label").lexeme
                statements.append(IfThen(condition, label))

            elif self.is_keyword("exit"):
                self.advance()
                statements.append(Exit())

            else:
                break

        if self.current_token.type != TokenType.EOF:
            logger.debug("Parsing stopped at %s", self.current_token)
        logger.debug("Parsed %d statements, %d labels", len(statements), len(labels))
        return Program(statements, labels)

    def parse_expression(self):
        return self.parse_operator_chain()

    def parse_operator_chain(self):
        # One precedence tier, folded left to right
        expression = self.parse_atomic()

        while self.current_token.type in (TokenType.OPERATOR, TokenType.EQUALS):
            token = self.advance()
            try:
                operator = Operator(token.lexeme)
            except ValueError:
                raise BasicSyntaxError(
                    f"Line {token.line}:{token.column} - Unknown operator '{token.lexeme}'",
                    token.line, token.column,
                ) from None
            expression = BinaryOp(expression, operator, self.parse_atomic())

        return expression

    def parse_atomic(self):
        token = self.current_token

        if self.match(TokenType.WORD):
            return Variable(token.lexeme)

        if self.match(TokenType.NUMBER):
            return NumberLiteral(float(token.lexeme))

        if self.match(TokenType.STRING):
            return StringLiteral(token.lexeme)

        if self.match(TokenType.LEFT_PAREN):
            expression = self.parse_expression()
            self.expect(TokenType.RIGHT_PAREN, "to close '('")
            return expression

        raise BasicSyntaxError(
            f"Line {token.line}:{token.column} - "
            f"Couldn't parse expression: unexpected {token.type.name}('{token.lexeme}')",
            token.line, token.column,
        )

def parse(tokens):
    return Parser(tokens).parse()
