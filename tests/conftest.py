import pytest

from minibasic.interpreter import BufferedIO, Interpreter
from minibasic.lexer import tokenize
from minibasic.parser import parse


@pytest.fixture
def run_basic():
    """Run source with buffered IO and return the output lines."""
    def run(source, inputs=(), max_steps=1000, **options):
        io = BufferedIO(inputs)
        Interpreter(parse(tokenize(source)), io, max_steps=max_steps, **options).run()
        return io.output
    return run
