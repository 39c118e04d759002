from .errors import BasicError, BasicRuntimeError, BasicSyntaxError, StepLimitExceeded
from .interpreter import BufferedIO, ConsoleIO, Interpreter, interpret
from .lexer import Token, TokenType, tokenize
from .parser import parse

__version__ = "1.0.0"
