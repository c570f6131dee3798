import sys

from lox.ast import (
    Assign, Binary, Grouping, Literal, Logical, Unary, Variable,
    Block, Expression, If, Print, Var, While,
)
from lox.errors import Diagnostics, PARSE
from lox.parser import parse_program
from lox.tokens import TokenType


def parse_ok(source):
    diagnostics = Diagnostics()
    statements = parse_program(source, diagnostics)
    assert not diagnostics.had_error
    return statements


def parse_expr(source):
    statements = parse_ok(source + ';')
    assert len(statements) == 1
    assert isinstance(statements[0], Expression)
    return statements[0].expression


def test_precedence_multiplication_binds_tighter():
    expr = parse_expr('1 + 2 * 3')
    assert isinstance(expr, Binary)
    assert expr.operator.type == TokenType.PLUS
    assert expr.left == Literal(1.0)
    assert isinstance(expr.right, Binary)
    assert expr.right.operator.type == TokenType.STAR


def test_subtraction_is_left_associative():
    expr = parse_expr('10 - 2 - 3')
    assert isinstance(expr, Binary)
    assert isinstance(expr.left, Binary)
    assert expr.left.left == Literal(10.0)
    assert expr.right == Literal(3.0)


def test_precedence_ladder():
    expr = parse_expr('a or b and c == d < e + f * -g')
    assert isinstance(expr, Logical) and expr.operator.type == TokenType.OR
    and_expr = expr.right
    assert isinstance(and_expr, Logical) and and_expr.operator.type == TokenType.AND
    equality = and_expr.right
    assert equality.operator.type == TokenType.EQUAL_EQUAL
    comparison = equality.right
    assert comparison.operator.type == TokenType.LESS
    term = comparison.right
    assert term.operator.type == TokenType.PLUS
    factor = term.right
    assert factor.operator.type == TokenType.STAR
    assert isinstance(factor.right, Unary)
    assert factor.right.operator.type == TokenType.MINUS


def test_grouping_overrides_precedence():
    expr = parse_expr('(1 + 2) * 3')
    assert expr.operator.type == TokenType.STAR
    assert isinstance(expr.left, Grouping)


def test_unary_nests():
    expr = parse_expr('!!true')
    assert isinstance(expr, Unary)
    assert isinstance(expr.right, Unary)
    assert expr.right.right == Literal(True)


def test_primary_literals():
    assert parse_expr('nil') == Literal(None)
    assert parse_expr('false') == Literal(False)
    assert parse_expr('"text"') == Literal('text')


def test_assignment_is_right_associative():
    expr = parse_expr('a = b = 3')
    assert isinstance(expr, Assign)
    assert expr.name.lexeme == 'a'
    assert isinstance(expr.value, Assign)
    assert expr.value.name.lexeme == 'b'
    assert expr.value.value == Literal(3.0)


def test_invalid_assignment_target_reports_and_continues(capsys):
    diagnostics = Diagnostics()
    statements = parse_program('a + b = c; print 1;', diagnostics)
    assert diagnostics.count(PARSE) == 1
    assert "Error at '=': Invalid assignment target." in capsys.readouterr().err
    # the left-hand side is kept and the next statement still parses
    assert isinstance(statements[0], Expression)
    assert isinstance(statements[0].expression, Binary)
    assert isinstance(statements[1], Print)


def test_var_declaration():
    statements = parse_ok('var a = 1; var b;')
    assert isinstance(statements[0], Var)
    assert statements[0].name.lexeme == 'a'
    assert statements[0].initializer == Literal(1.0)
    assert statements[1].initializer is None


def test_block_and_if_else():
    statements = parse_ok('if (x) { print 1; } else print 2;')
    stmt = statements[0]
    assert isinstance(stmt, If)
    assert isinstance(stmt.then_branch, Block)
    assert isinstance(stmt.else_branch, Print)


def test_dangling_else_binds_to_nearest_if():
    stmt = parse_ok('if (a) if (b) print 1; else print 2;')[0]
    assert stmt.else_branch is None
    assert isinstance(stmt.then_branch, If)
    assert isinstance(stmt.then_branch.else_branch, Print)


def test_while():
    stmt = parse_ok('while (i < 3) i = i + 1;')[0]
    assert isinstance(stmt, While)
    assert isinstance(stmt.body, Expression)


def test_for_desugars_to_while_in_block():
    stmt = parse_ok('for (var i = 0; i < 3; i = i + 1) print i;')[0]
    assert isinstance(stmt, Block)
    initializer, loop = stmt.statements
    assert isinstance(initializer, Var)
    assert isinstance(loop, While)
    assert isinstance(loop.condition, Binary)
    assert isinstance(loop.body, Block)
    body, increment = loop.body.statements
    assert isinstance(body, Print)
    assert isinstance(increment, Expression)
    assert isinstance(increment.expression, Assign)


def test_for_with_all_clauses_omitted():
    stmt = parse_ok('for (;;) print 1;')[0]
    assert isinstance(stmt, While)
    assert stmt.condition == Literal(True)
    assert isinstance(stmt.body, Print)


def test_for_with_expression_initializer():
    stmt = parse_ok('for (i = 0; i < 1;) print i;')[0]
    assert isinstance(stmt, Block)
    assert isinstance(stmt.statements[0], Expression)
    assert isinstance(stmt.statements[1].body, Print)


def test_missing_expression_reports_one_error_and_recovers(capsys):
    diagnostics = Diagnostics()
    statements = parse_program('var x = ; var y = 1; print y;', diagnostics)
    assert diagnostics.count(PARSE) == 1
    assert capsys.readouterr().err.strip() == "[line 1] Error at ';': Expect expression."
    assert len(statements) == 2
    assert isinstance(statements[0], Var)
    assert statements[0].name.lexeme == 'y'
    assert isinstance(statements[1], Print)


def test_independent_errors_are_all_collected():
    diagnostics = Diagnostics()
    statements = parse_program('print ;\nvar = 2;\nprint 3;\nvar ok = (1;', diagnostics)
    assert diagnostics.count(PARSE) == 3
    assert [d.line for d in diagnostics.messages] == [1, 2, 4]
    assert len(statements) == 1
    assert isinstance(statements[0], Print)


def test_error_at_end(capsys):
    diagnostics = Diagnostics()
    parse_program('print 1', diagnostics)
    assert capsys.readouterr().err.strip() == "[line 1] Error at end: Expect ';' after value."


def test_synchronize_skips_the_token_the_error_was_found_at():
    # The error is reported at 'var'; synchronization always steps over that
    # token first, so the 'var y' declaration is swallowed up to its ';'.
    diagnostics = Diagnostics()
    statements = parse_program('var x = (1 + 2 var y = 4; print y;', diagnostics)
    assert diagnostics.count(PARSE) == 1
    assert diagnostics.messages[0].where == " at 'var'"
    assert len(statements) == 1
    assert isinstance(statements[0], Print)
    assert statements[0].expression.name.lexeme == 'y'


def test_unclosed_block(capsys):
    diagnostics = Diagnostics()
    parse_program('{ print 1;', diagnostics)
    assert "Expect '}' after block." in capsys.readouterr().err


def test_reserved_words_are_not_expressions():
    diagnostics = Diagnostics()
    parse_program('print class;', diagnostics)
    assert diagnostics.messages[0].message == 'Expect expression.'


def test_too_deep_nesting_reports_and_recovers():
    depth = sys.getrecursionlimit()
    sources = [
        'print ' + '(' * depth + '1' + ')' * depth + ';\nprint 2;',
        '{' * depth + '}' * depth + '\nprint 2;',
    ]
    for source in sources:
        diagnostics = Diagnostics()
        statements = parse_program(source, diagnostics)
        assert diagnostics.count(PARSE) == 1
        assert diagnostics.messages[0].message == 'Too much nesting.'
        assert diagnostics.messages[0].line == 1
        assert statements == [Print(Literal(2.0))]


def test_moderate_nesting_parses():
    statements = parse_ok('print ' + '(' * 40 + '1' + ')' * 40 + ';')
    expr = statements[0].expression
    for _ in range(40):
        assert isinstance(expr, Grouping)
        expr = expr.expression
    assert expr == Literal(1.0)
