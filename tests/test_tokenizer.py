"""
Unit tests for the SQL tokenizer.
Tests losslessness, token classification and malformed input handling.
"""
import types

import pytest

from sql_indent.tokenizer import Token, TokenType, tokenize

from conftest import SAMPLE_QUERIES


def significant(sql):
    """Return (type, value) pairs for non-whitespace tokens."""
    return [(t.type, t.value) for t in tokenize(sql) if t.type is not TokenType.WHITESPACE]


class TestLosslessness:
    """Joining token values must give back the input exactly."""

    @pytest.mark.parametrize("sql", [
        "",
        "   \n\t  ",
        "select  a,b\n\n  from\tt",
        "select 'unterminated",
        "select /* unterminated",
        "select \"a\"\"b\", [x]], `y` from t -- trailing",
        "select ¤ § from t )) ((",
        "select $$a;b$$, $fn$ x $fn$, $1, :name, @var, @@rowcount, ?",
        "select {{ user_id }}, e'\\n', -1.5e-3, .5, 0x1F",
        "a->>'k' #>> '{a}' x::int <> != <= >= ||",
    ])
    def test_round_trip(self, sql):
        """Test that token values concatenate to the input."""
        assert "".join(t.value for t in tokenize(sql)) == sql

    @pytest.mark.parametrize("name", sorted(SAMPLE_QUERIES))
    def test_round_trip_samples(self, name):
        """Test losslessness on the sample queries."""
        sql = SAMPLE_QUERIES[name]
        assert "".join(t.value for t in tokenize(sql)) == sql

    def test_positions_match_offsets(self):
        """Test that each token's pos is its offset in the input."""
        sql = "select a , 'b' from t"
        for token in tokenize(sql):
            assert sql[token.pos:token.pos + len(token.value)] == token.value

    def test_is_lazy(self):
        """Test that tokenize returns a generator."""
        stream = tokenize("select 1")
        assert isinstance(stream, types.GeneratorType)
        assert next(stream) == Token(TokenType.WORD, "select", 0)


class TestClassification:
    """Test token classification rules."""

    def test_basic_query(self):
        """Test words, punctuation, operators, strings and numbers."""
        assert significant("select a.b, 'x' from t where n >= 1.5;") == [
            (TokenType.WORD, "select"),
            (TokenType.WORD, "a"),
            (TokenType.DOT, "."),
            (TokenType.WORD, "b"),
            (TokenType.COMMA, ","),
            (TokenType.STRING, "'x'"),
            (TokenType.WORD, "from"),
            (TokenType.WORD, "t"),
            (TokenType.WORD, "where"),
            (TokenType.WORD, "n"),
            (TokenType.OPERATOR, ">="),
            (TokenType.NUMBER, "1.5"),
            (TokenType.SEMICOLON, ";"),
        ]

    def test_whitespace_run_is_one_token(self):
        """Test that a whitespace run becomes a single token."""
        tokens = list(tokenize("a \n\t b"))
        assert [t.type for t in tokens] == [TokenType.WORD, TokenType.WHITESPACE, TokenType.WORD]
        assert tokens[1].value == " \n\t "

    def test_escaped_quotes(self):
        """Test doubled quotes inside literals and identifiers."""
        assert significant("'it''s' \"My \"\"Col\"\"\"") == [
            (TokenType.STRING, "'it''s'"),
            (TokenType.QUOTED_IDENTIFIER, "\"My \"\"Col\"\"\""),
        ]

    def test_bracket_and_backtick_identifiers(self):
        """Test SQL Server and MySQL identifier quoting."""
        assert significant("[Order Details] `my table`") == [
            (TokenType.QUOTED_IDENTIFIER, "[Order Details]"),
            (TokenType.QUOTED_IDENTIFIER, "`my table`"),
        ]

    def test_subscripts_are_brackets(self):
        """Test that [ right after a word or ] opens a subscript."""
        assert significant("arr[1][2]") == [
            (TokenType.WORD, "arr"),
            (TokenType.OPEN_BRACKET, "["),
            (TokenType.NUMBER, "1"),
            (TokenType.CLOSE_BRACKET, "]"),
            (TokenType.OPEN_BRACKET, "["),
            (TokenType.NUMBER, "2"),
            (TokenType.CLOSE_BRACKET, "]"),
        ]

    def test_array_literal_keeps_commas(self):
        """Test that an array literal is not read as a quoted identifier."""
        assert significant("array[1,-2]") == [
            (TokenType.WORD, "array"),
            (TokenType.OPEN_BRACKET, "["),
            (TokenType.NUMBER, "1"),
            (TokenType.COMMA, ","),
            (TokenType.NUMBER, "-2"),
            (TokenType.CLOSE_BRACKET, "]"),
        ]

    def test_bracket_after_space_is_identifier(self):
        """Test that [name] after whitespace or a dot stays a quoted identifier."""
        assert significant("select [a b], dbo.[c]")[1] == (TokenType.QUOTED_IDENTIFIER, "[a b]")
        assert significant("select [a b], dbo.[c]")[-1] == (TokenType.QUOTED_IDENTIFIER, "[c]")

    def test_prefixed_strings(self):
        """Test E'' and N'' string prefixes stay in the literal."""
        assert significant("E'a\\tb' N'x'") == [
            (TokenType.STRING, "E'a\\tb'"),
            (TokenType.STRING, "N'x'"),
        ]

    def test_dollar_quoted_strings(self):
        """Test $$ and $tag$ quoted bodies."""
        assert significant("$$ select ';' $$ $body$ a $$ b $body$") == [
            (TokenType.STRING, "$$ select ';' $$"),
            (TokenType.STRING, "$body$ a $$ b $body$"),
        ]

    def test_comments(self):
        """Test line and block comments."""
        tokens = significant("a -- note\n/* multi\nline */ b")
        assert tokens == [
            (TokenType.WORD, "a"),
            (TokenType.LINE_COMMENT, "-- note"),
            (TokenType.BLOCK_COMMENT, "/* multi\nline */"),
            (TokenType.WORD, "b"),
        ]

    @pytest.mark.parametrize("sql,expected", [
        ("1", "1"),
        ("3.14", "3.14"),
        ("1e10", "1e10"),
        ("2.5E-3", "2.5E-3"),
        (".5", ".5"),
        ("0x1F", "0x1F"),
    ])
    def test_numbers(self, sql, expected):
        """Test numeric literal forms."""
        assert significant(sql) == [(TokenType.NUMBER, expected)]

    def test_signed_number_after_operator(self):
        """Test that a sign after an operator belongs to the number."""
        assert significant("x = -1") == [
            (TokenType.WORD, "x"),
            (TokenType.OPERATOR, "="),
            (TokenType.NUMBER, "-1"),
        ]

    def test_minus_after_operand_is_operator(self):
        """Test that a sign after an operand is a binary operator."""
        assert significant("a -1") == [
            (TokenType.WORD, "a"),
            (TokenType.OPERATOR, "-"),
            (TokenType.NUMBER, "1"),
        ]

    @pytest.mark.parametrize("operator", ["<>", "!=", "<=", ">=", "||", "::", "->", "->>", "#>>"])
    def test_multi_char_operators(self, operator):
        """Test greedy matching of multi-character operators."""
        assert significant(f"a{operator}b") == [
            (TokenType.WORD, "a"),
            (TokenType.OPERATOR, operator),
            (TokenType.WORD, "b"),
        ]

    @pytest.mark.parametrize("parameter", ["?", "$1", ":name", "@var", "@@rowcount"])
    def test_parameters(self, parameter):
        """Test bind parameter forms."""
        assert significant(f"id = {parameter}")[-1] == (TokenType.PARAMETER, parameter)

    def test_cast_is_not_a_parameter(self):
        """Test that :: is an operator, not a :name parameter."""
        assert significant("x::text") == [
            (TokenType.WORD, "x"),
            (TokenType.OPERATOR, "::"),
            (TokenType.WORD, "text"),
        ]

    def test_template_placeholder(self):
        """Test {{ ... }} template placeholders."""
        assert significant("id = {{user_id}}")[-1] == (TokenType.TEMPLATE, "{{user_id}}")

    def test_words_are_not_classified_as_keywords(self):
        """Test that keywords and identifiers are both plain words."""
        types_ = {t.type for t in tokenize("SELECT foo")} - {TokenType.WHITESPACE}
        assert types_ == {TokenType.WORD}


class TestMalformedInput:
    """Test that malformed input never raises."""

    def test_unterminated_string_runs_to_end(self):
        """Test that an unterminated literal stops at end of input."""
        tokens = significant("select 'abc, def")
        assert tokens[-1] == (TokenType.STRING, "'abc, def")

    def test_unterminated_block_comment(self):
        """Test that an unterminated block comment stops at end of input."""
        assert significant("a /* open")[-1] == (TokenType.BLOCK_COMMENT, "/* open")

    def test_unterminated_quoted_identifier(self):
        """Test that an unterminated quoted identifier stops at end of input."""
        assert significant('"abc')[-1] == (TokenType.QUOTED_IDENTIFIER, '"abc')

    def test_unknown_characters_are_operators(self):
        """Test the catch-all classification."""
        assert significant("a ¤ b") == [
            (TokenType.WORD, "a"),
            (TokenType.OPERATOR, "¤"),
            (TokenType.WORD, "b"),
        ]
