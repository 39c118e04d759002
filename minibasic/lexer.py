import logging
import string
from dataclasses import dataclass
from enum import Enum, auto

logger = logging.getLogger(__name__)

class TokenType(Enum):
    WORD = auto()
    NUMBER = auto()
    STRING = auto()
    LABEL = auto()
    EQUALS = auto()
    OPERATOR = auto()
    LEFT_PAREN = auto()
    RIGHT_PAREN = auto()
    EOF = auto()

class State(Enum):
    DEFAULT = auto()
    WORD = auto()
    NUMBER = auto()
    STRING = auto()
    COMMENT = auto()

@dataclass(frozen=True)
class Token:
    lexeme: str
    type: TokenType
    line: int = 0
    column: int = 0

    def __str__(self):
        return f"{self.type.name}: <{self.lexeme}>"

SINGLE_CHAR_TOKENS = {
    '=': TokenType.EQUALS,
    '+': TokenType.OPERATOR,
    '-': TokenType.OPERATOR,
    '*': TokenType.OPERATOR,
    '/': TokenType.OPERATOR,
    '<': TokenType.OPERATOR,
    '>': TokenType.OPERATOR,
    '(': TokenType.LEFT_PAREN,
    ')': TokenType.RIGHT_PAREN,
}

LETTERS = frozenset(string.ascii_letters)
DIGITS = frozenset(string.digits)
WORD_CHARS = LETTERS | DIGITS | {'_'}

class Lexer:
    """
    Character-level state machine that turns BASIC source into tokens.

    Unrecognised characters (whitespace and newlines included) are dropped,
    so tokenizing never fails.
    """
    def __init__(self, source):
        self.source = source
        self.pos = 0
        self.line = 1
        self.column = 1
        self.state = State.DEFAULT
        self.buffer = ""
        self.start = (1, 1)
        self.tokens = []

    def advance(self):
        if self.source[self.pos] == '\n':
            self.line += 1
            self.column = 0
        self.pos += 1
        self.column += 1

    def emit(self, token_type, lexeme=None):
        line, column = self.start
        self.tokens.append(Token(self.buffer if lexeme is None else lexeme, token_type, line, column))
        self.buffer = ""
        self.state = State.DEFAULT

    def begin(self, state, char=""):
        self.state = state
        self.buffer = char
        self.start = (self.line, self.column)

    def tokenize(self):
        while self.pos < len(self.source):
            char = self.source[self.pos]
            # Handlers return False to reprocess the character in DEFAULT
            if self._step(char):
                self.advance()

        if self.state == State.WORD:
            self.emit(TokenType.WORD)
        elif self.state == State.NUMBER:
            self.emit(TokenType.NUMBER)
        elif self.state == State.STRING:
            logger.debug("Discarding unterminated string at %d:%d", *self.start)

        self.start = (self.line, self.column)
        self.emit(TokenType.EOF, "")
        logger.debug("Produced %d tokens", len(self.tokens))
        return self.tokens

    def _step(self, char):
        if self.state == State.DEFAULT:
            if char in SINGLE_CHAR_TOKENS:
                self.start = (self.line, self.column)
                self.emit(SINGLE_CHAR_TOKENS[char], char)
            elif char in LETTERS:
                self.begin(State.WORD, char)
            elif char in DIGITS:
                self.begin(State.NUMBER, char)
            elif char == '"':
                self.begin(State.STRING)
            elif char == "'":
                self.begin(State.COMMENT)
            return True

        if self.state == State.WORD:
            if char in WORD_CHARS:
                self.buffer += char
            elif char == ':':
                self.emit(TokenType.LABEL)
            else:
                self.emit(TokenType.WORD)
                return False
            return True

        if self.state == State.NUMBER:
            # No decimal point: numbers are digit runs only
            if char in DIGITS:
                self.buffer += char
                return True
            self.emit(TokenType.NUMBER)
            return False

        if self.state == State.STRING:
            if char == '"':
                self.emit(TokenType.STRING)
            else:
                self.buffer += char
            return True

        if char == '\n':
            self.state = State.DEFAULT
        return True

def tokenize(source):
    return Lexer(source).tokenize()
