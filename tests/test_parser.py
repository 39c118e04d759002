import pytest

from minibasic.ast_nodes import (
    Assignment, BinaryOp, Exit, Goto, IfThen, Input, NumberLiteral, Operator,
    Print, StringLiteral, Variable,
)
from minibasic.errors import BasicSyntaxError
from minibasic.lexer import Token, TokenType, tokenize
from minibasic.parser import Parser, parse


def parse_source(source):
    return parse(tokenize(source))


def test_statements_in_order():
    program = parse_source('x = 1\nprint x\ninput name\ngoto done\nexit\n')
    assert program.statements == [
        Assignment("x", NumberLiteral(1.0)),
        Print(Variable("x")),
        Input("name"),
        Goto("done"),
        Exit(),
    ]


def test_label_maps_to_previous_statement():
    program = parse_source("print 1\nloop: print 2\ngoto loop")
    assert program.labels == {"loop": 0}
    assert len(program.statements) == 3


def test_label_before_any_statement_maps_to_zero():
    program = parse_source("start: print 1")
    assert program.labels == {"start": 0}


def test_label_after_several_statements():
    program = parse_source("a = 1\nb = 2\nc = 3\nhere:\nprint a")
    assert program.labels["here"] == 2


def test_operators_fold_left():
    program = parse_source("x = 1 + 2 * 3")
    assert program.statements[0].expr == BinaryOp(
        BinaryOp(NumberLiteral(1.0), Operator.ADD, NumberLiteral(2.0)),
        Operator.MUL,
        NumberLiteral(3.0),
    )


def test_parentheses_group():
    program = parse_source("x = 1 + (2 * 3)")
    assert program.statements[0].expr == BinaryOp(
        NumberLiteral(1.0),
        Operator.ADD,
        BinaryOp(NumberLiteral(2.0), Operator.MUL, NumberLiteral(3.0)),
    )


def test_equals_inside_expression_is_comparison():
    program = parse_source('if name = "bob" then greet')
    assert program.statements == [
        IfThen(BinaryOp(Variable("name"), Operator.EQUALS, StringLiteral("bob")), "greet"),
    ]


def test_if_without_then():
    program = parse_source("if x > 3 done")
    assert program.statements == [
        IfThen(BinaryOp(Variable("x"), Operator.GT, NumberLiteral(3.0)), "done"),
    ]


def test_unknown_statement_stops_parsing():
    program = parse_source("print 1\nwhile x\nprint 2")
    assert program.statements == [Print(NumberLiteral(1.0))]


def test_keywords_are_case_sensitive():
    program = parse_source("PRINT 1")
    assert program.statements == []


def test_keyword_can_be_assigned():
    program = parse_source("print = 3\nprint print")
    assert program.statements == [
        Assignment("print", NumberLiteral(3.0)),
        Print(Variable("print")),
    ]


def test_expression_failure_is_fatal():
    with pytest.raises(BasicSyntaxError, match="Couldn't parse expression") as info:
        parse_source("x = 1\nprint +")
    assert info.value.line == 2
    assert info.value.column == 7


def test_missing_expression_at_end():
    with pytest.raises(BasicSyntaxError, match="Couldn't parse expression"):
        parse_source("print")


def test_missing_close_paren():
    with pytest.raises(BasicSyntaxError, match="to close"):
        parse_source("print (1 + 2")


@pytest.mark.parametrize("source", ["input 5", "goto 10", 'if x "label"', "goto"])
def test_operand_must_be_word(source):
    with pytest.raises(BasicSyntaxError):
        parse_source(source)


def test_unknown_operator_symbol():
    tokens = [
        Token("print", TokenType.WORD),
        Token("1", TokenType.NUMBER),
        Token("%", TokenType.OPERATOR),
        Token("2", TokenType.NUMBER),
    ]
    with pytest.raises(BasicSyntaxError, match="Unknown operator '%'"):
        Parser(tokens).parse()


def test_tokens_without_eof_are_accepted():
    program = Parser([Token("exit", TokenType.WORD)]).parse()
    assert program.statements == [Exit()]


def test_string_token_is_not_a_keyword():
    assert parse_source('"print" 1').statements == []


def test_long_chain_parses_without_recursion():
    program = parse_source("x = " + "-".join(["1"] * 3000))
    expr = program.statements[0].expr
    depth = 0
    while isinstance(expr, BinaryOp):
        depth += 1
        expr = expr.left
    assert depth == 2999


def test_deeply_nested_parentheses_are_a_syntax_error():
    with pytest.raises(BasicSyntaxError, match="too deeply nested"):
        parse_source("print " + "(" * 5000 + "1" + ")" * 5000)
