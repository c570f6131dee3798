from lox.errors import Diagnostics, LEX
from lox.scanner import scan
from lox.tokens import TokenType


def types_of(tokens):
    return [t.type for t in tokens]


def test_punctuation_and_operators():
    tokens = scan('(){},.-+;*/ ! != = == < <= > >=')
    assert types_of(tokens) == [
        TokenType.LEFT_PAREN, TokenType.RIGHT_PAREN, TokenType.LEFT_BRACE, TokenType.RIGHT_BRACE,
        TokenType.COMMA, TokenType.DOT, TokenType.MINUS, TokenType.PLUS, TokenType.SEMICOLON,
        TokenType.STAR, TokenType.SLASH,
        TokenType.BANG, TokenType.BANG_EQUAL, TokenType.EQUAL, TokenType.EQUAL_EQUAL,
        TokenType.LESS, TokenType.LESS_EQUAL, TokenType.GREATER, TokenType.GREATER_EQUAL,
        TokenType.EOF,
    ]


def test_two_char_operators_use_longest_match():
    tokens = scan('a>=b==c')
    assert [t.lexeme for t in tokens] == ['a', '>=', 'b', '==', 'c', '']


def test_keywords_and_identifiers():
    tokens = scan('var orchid = nil; while and_ print')
    assert types_of(tokens) == [
        TokenType.VAR, TokenType.IDENTIFIER, TokenType.EQUAL, TokenType.NIL, TokenType.SEMICOLON,
        TokenType.WHILE, TokenType.IDENTIFIER, TokenType.PRINT, TokenType.EOF,
    ]
    assert tokens[1].lexeme == 'orchid'


def test_number_literals():
    tokens = scan('123 45.67')
    assert tokens[0].type == TokenType.NUMBER
    assert tokens[0].literal == 123.0
    assert isinstance(tokens[0].literal, float)
    assert tokens[1].literal == 45.67
    assert tokens[1].lexeme == '45.67'


def test_trailing_dot_is_not_part_of_number():
    tokens = scan('12.')
    assert types_of(tokens) == [TokenType.NUMBER, TokenType.DOT, TokenType.EOF]
    assert tokens[0].lexeme == '12'
    assert tokens[0].literal == 12.0


def test_string_literal_keeps_text_without_quotes():
    tokens = scan('"hello world"')
    assert tokens[0].type == TokenType.STRING
    assert tokens[0].lexeme == '"hello world"'
    assert tokens[0].literal == 'hello world'


def test_multiline_string_counts_lines():
    tokens = scan('"one\ntwo"\nx')
    assert tokens[0].literal == 'one\ntwo'
    assert tokens[1].lexeme == 'x'
    assert tokens[1].line == 3


def test_line_comment_is_skipped():
    tokens = scan('// nothing here\nprint 1; // trailing')
    assert types_of(tokens) == [TokenType.PRINT, TokenType.NUMBER, TokenType.SEMICOLON, TokenType.EOF]
    assert tokens[0].line == 2


def test_nested_block_comment_produces_no_tokens(capsys):
    diagnostics = Diagnostics()
    tokens = scan('/* a /* b */ c */', diagnostics)
    assert types_of(tokens) == [TokenType.EOF]
    assert not diagnostics.had_error
    assert capsys.readouterr().err == ''


def test_block_comment_counts_lines():
    tokens = scan('/* one\ntwo\n*/ x')
    assert tokens[0].lexeme == 'x'
    assert tokens[0].line == 3


def test_unterminated_block_comment_reports_once(capsys):
    diagnostics = Diagnostics()
    tokens = scan('/* a', diagnostics)
    assert types_of(tokens) == [TokenType.EOF]
    assert diagnostics.count(LEX) == 1
    assert diagnostics.messages[0].message == 'Unterminated multiline comment.'
    assert capsys.readouterr().err.strip() == '[line 1] Error: Unterminated multiline comment.'


def test_unterminated_nested_block_comment_reports_once():
    diagnostics = Diagnostics()
    scan('/* a /* b */\n', diagnostics)
    assert diagnostics.count(LEX) == 1
    assert diagnostics.messages[0].line == 2


def test_unterminated_string(capsys):
    diagnostics = Diagnostics()
    tokens = scan('print "oops', diagnostics)
    assert types_of(tokens) == [TokenType.PRINT, TokenType.EOF]
    assert diagnostics.had_error
    assert capsys.readouterr().err.strip() == '[line 1] Error: Unterminated string.'


def test_unterminated_constructs_report_the_line_they_are_detected_on():
    for source in ('var s = "one\ntwo\nthree', 'print 1;\n/* one\n/* two */\nthree'):
        diagnostics = Diagnostics()
        scan(source, diagnostics)
        assert diagnostics.count(LEX) == 1
        assert diagnostics.messages[0].line == source.count('\n') + 1


def test_unexpected_character_is_skipped(capsys):
    diagnostics = Diagnostics()
    tokens = scan('1 @ 2 # 3', diagnostics)
    assert [t.literal for t in tokens if t.type == TokenType.NUMBER] == [1.0, 2.0, 3.0]
    assert diagnostics.count(LEX) == 2
    err = capsys.readouterr().err
    assert err.count('Unexpected character.') == 2


def test_lexemes_reconstruct_source_without_whitespace():
    source = 'var total = (a + 12.5) * b;\nif (total >= 10) print "big";'
    tokens = scan(source)
    rebuilt = ''.join(t.lexeme for t in tokens)
    assert rebuilt == ''.join(source.split())


def test_eof_token_carries_last_line():
    tokens = scan('a\nb\n')
    assert tokens[-1].type == TokenType.EOF
    assert tokens[-1].lexeme == ''
    assert tokens[-1].literal is None
    assert tokens[-1].line == 3
