import logging
import math
import re
from collections import deque

from .ast_nodes import (
    Assignment, BinaryOp, Exit, Goto, IfThen, Input, NumberLiteral, Operator,
    Print, StringLiteral, Variable,
)
from .errors import BasicRuntimeError, StepLimitExceeded
from .lexer import tokenize
from .parser import parse

logger = logging.getLogger(__name__)

NUMERIC_PREFIX = re.compile(r'\s*[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?')

# Values are plain Python floats, strings and booleans.

def to_number(value):
    if isinstance(value, bool):
        return 1.0 if value else 0.0
    if isinstance(value, str):
        match = NUMERIC_PREFIX.match(value)
        return float(match.group()) if match else 0.0
    return float(value)

def to_int(value):
    number = to_number(value)
    if not math.isfinite(number):
        return 0
    return math.trunc(number)

def to_text(value):
    if isinstance(value, bool):
        return "1" if value else ""
    if isinstance(value, str):
        return value
    if value.is_integer() and abs(value) < 1e15:
        return str(int(value))
    return repr(value)

def is_truthy(value):
    if isinstance(value, str):
        return value not in ("", "0")
    return bool(value)

def apply_operator(operator, left, right):
    if operator is Operator.EQUALS:
        if isinstance(left, str):
            return left == to_text(right)
        return to_number(left) == to_int(right)
    if operator is Operator.ADD:
        if isinstance(left, str):
            return left + to_text(right)
        return to_number(left) + to_int(right)
    if operator is Operator.SUB:
        return to_number(left) - to_number(right)
    if operator is Operator.MUL:
        return to_number(left) * to_number(right)
    if operator is Operator.DIV:
        divisor = to_number(right)
        if divisor == 0:
            raise BasicRuntimeError("Division by zero")
        return to_number(left) / divisor
    if operator is Operator.LT:
        return to_number(left) < to_number(right)
    if operator is Operator.GT:
        return to_number(left) > to_number(right)
    raise BasicRuntimeError(f"Unknown operator '{operator}'")

class ConsoleIO:
    def write_line(self, text):
        print(text)

    def read_line(self):
        try:
            return input().rstrip("\r\n")
        except EOFError:
            return ""

class BufferedIO:
    """Feeds input from a list and collects output lines."""
    def __init__(self, inputs=()):
        self.inputs = deque(inputs)
        self.output = []

    def write_line(self, text):
        self.output.append(text)

    def read_line(self):
        if not self.inputs:
            raise BasicRuntimeError("No input available")
        return self.inputs.popleft()

class Interpreter:
    """
    Executes a parsed program.

    ``pc`` is the index of the next statement to run. A jump to a label
    recorded at index ``k`` resumes at ``k + 1``, i.e. the statement after
    the label's declaration point.
    """
    def __init__(self, program, io=None, max_steps=None, strict_labels=False):
        self.program = program
        self.io = io if io is not None else ConsoleIO()
        self.max_steps = max_steps
        self.strict_labels = strict_labels
        self.variables = {}
        self.pc = 0
        self.steps = 0
        self.halted = False

    @property
    def current_statement(self):
        if self.halted or self.pc >= len(self.program.statements):
            return None
        return self.program.statements[self.pc]

    def run(self):
        while self.step():
            pass
        return self.variables

    def step(self):
        """Execute one statement. Returns False once the program has halted."""
        stmt = self.current_statement
        if stmt is None:
            self.halted = True
            return False
        if self.max_steps is not None and self.steps >= self.max_steps:
            raise StepLimitExceeded(self.max_steps)

        self.pc += 1
        self.steps += 1
        try:
            self.execute(stmt)
        except RecursionError:
            raise BasicRuntimeError("Expression too deeply nested") from None
        return not self.halted

    def execute(self, stmt):
        if isinstance(stmt, Assignment):
            self.variables[stmt.var] = self.evaluate(stmt.expr)

        elif isinstance(stmt, Print):
            self.io.write_line(to_text(self.evaluate(stmt.expr)))

        elif isinstance(stmt, Input):
            self.variables[stmt.var] = self.io.read_line()

        elif isinstance(stmt, Goto):
            self.jump(stmt.label)

        elif isinstance(stmt, IfThen):
            if is_truthy(self.evaluate(stmt.condition)):
                self.jump(stmt.label)

        elif isinstance(stmt, Exit):
            self.halted = True

        else:
            raise BasicRuntimeError(f"Unknown statement: {type(stmt).__name__}")

    def jump(self, label):
        if label not in self.program.labels:
            if self.strict_labels:
                raise BasicRuntimeError(f"Unknown label '{label}'")
            logger.warning("Jump to unknown label '%s' ignored", label)
            return
        self.pc = self.program.labels[label] + 1
        logger.debug("Jump to '%s', resuming at statement %d", label, self.pc)

    def evaluate(self, expr):
        # Operator chains nest on the left; walk that spine without recursing
        chain = []
        while isinstance(expr, BinaryOp):
            chain.append(expr)
            expr = expr.left

        value = self.evaluate_operand(expr)
        for node in reversed(chain):
            value = apply_operator(node.operator, value, self.evaluate(node.right))
        return value

    def evaluate_operand(self, expr):
        if isinstance(expr, NumberLiteral):
            return expr.value
        elif isinstance(expr, StringLiteral):
            return expr.value
        elif isinstance(expr, Variable):
            return self.variables.get(expr.name, False)
        else:
            raise BasicRuntimeError(f"Invalid expression type: {type(expr).__name__}")

def interpret(source, io=None, **options):
    """Tokenize, parse and run ``source``. Returns the final variable store."""
    program = parse(tokenize(source))
    return Interpreter(program, io, **options).run()
