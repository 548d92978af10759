"""Tests for the filter lexer and parser."""

import pytest

from typed_rows.errors import FilterSyntaxError
from typed_rows.parsing.filter_lexer import FilterLexer
from typed_rows.parsing.filter_parser import And, Comparison, FilterOp, FilterParser, Or


class TestFilterLexer:
    """Tests for the filter lexer."""

    @pytest.fixture
    def lexer(self):
        lexer = FilterLexer()
        lexer.build()
        return lexer

    def test_tokenize_comparison(self, lexer):
        """Test tokenizing a comparison."""
        tokens = lexer.tokenize("x = 3")
        assert [t.type for t in tokens] == ["WORD", "EQ", "WORD"]
        assert [t.value for t in tokens] == ["x", "=", "3"]

    def test_tokenize_without_spaces(self, lexer):
        """Test tokenizing a filter without whitespace."""
        tokens = lexer.tokenize("x!=3&&y<=4")
        assert [t.type for t in tokens] == ["WORD", "NE", "WORD", "AND", "WORD", "LE", "WORD"]

    def test_tokenize_two_char_operators_first(self, lexer):
        """Test that two-character operators win over one-character ones."""
        tokens = lexer.tokenize(">= <= != > < =")
        assert [t.type for t in tokens] == ["GE", "LE", "NE", "GT", "LT", "EQ"]

    def test_tokenize_groups(self, lexer):
        """Test tokenizing parentheses."""
        tokens = lexer.tokenize("(a = 1 || b = 2)")
        assert [t.type for t in tokens] == [
            "LPAREN", "WORD", "EQ", "WORD", "OR", "WORD", "EQ", "WORD", "RPAREN",
        ]

    def test_tokenize_quoted_strings(self, lexer):
        """Test tokenizing quoted strings."""
        tokens = lexer.tokenize("name = 'a && b' || title = \"x (y)\"")
        strings = [t.value for t in tokens if t.type == "STRING"]
        assert strings == ["a && b", "x (y)"]

    def test_positions(self, lexer):
        """Test token positions."""
        tokens = lexer.tokenize("ab  = c")
        assert [t.lexpos for t in tokens] == [0, 4, 6]

    def test_single_ampersand_is_illegal(self, lexer):
        """Test that a single '&' is illegal."""
        with pytest.raises(FilterSyntaxError, match="Illegal character '&'"):
            lexer.tokenize("a = 1 & b = 2")

    def test_single_pipe_is_illegal(self, lexer):
        """Test that a single '|' is illegal."""
        with pytest.raises(FilterSyntaxError):
            lexer.tokenize("a = 1 | b = 2")

    def test_bang_alone_is_illegal(self, lexer):
        """Test that a lone '!' is illegal."""
        with pytest.raises(FilterSyntaxError):
            lexer.tokenize("a ! 1")

    def test_unterminated_string_is_illegal(self, lexer):
        """Test that an unterminated string is illegal."""
        with pytest.raises(FilterSyntaxError):
            lexer.tokenize("a = 'open")

    def test_lexer_is_reusable(self, lexer):
        """Test tokenizing several inputs with one lexer."""
        assert len(lexer.tokenize("a = 1")) == 3
        assert len(lexer.tokenize("b = 2 && c = 3")) == 7


class TestFilterParser:
    """Tests for parsing filters into the AST."""

    @pytest.fixture
    def parser(self):
        return FilterParser()

    def test_empty(self, parser):
        """Test parsing an empty filter."""
        assert parser.parse("") is None
        assert parser.parse("   ") is None

    def test_single_comparison(self, parser):
        """Test parsing a single comparison."""
        assert parser.parse("x = 3") == Comparison("x", FilterOp.EQ, "3")

    def test_not_equal(self, parser):
        """Test parsing a not-equal comparison."""
        assert parser.parse("name != bob") == Comparison("name", FilterOp.NE, "bob")

    def test_ordering_operators(self, parser):
        """Test parsing ordering operators."""
        assert parser.parse("a < 1").op is FilterOp.LT
        assert parser.parse("a <= 1").op is FilterOp.LE
        assert parser.parse("a > 1").op is FilterOp.GT
        assert parser.parse("a >= 1").op is FilterOp.GE

    def test_ordering_operators_disabled(self):
        """Test rejecting ordering operators when disabled."""
        parser = FilterParser(ordering_operators=False)
        assert parser.parse("a = 1") == Comparison("a", FilterOp.EQ, "1")
        with pytest.raises(FilterSyntaxError, match="Unsupported operator '<'"):
            parser.parse("a < 1")

    def test_disjunction(self, parser):
        """Test parsing a disjunction."""
        assert parser.parse("x = 3 || x = 4") == Or((
            Comparison("x", FilterOp.EQ, "3"),
            Comparison("x", FilterOp.EQ, "4"),
        ))

    def test_conjunction(self, parser):
        """Test parsing a conjunction."""
        assert parser.parse("x = 3 && y != 4") == And((
            Comparison("x", FilterOp.EQ, "3"),
            Comparison("y", FilterOp.NE, "4"),
        ))

    def test_outer_parentheses_are_stripped(self, parser):
        """Test that outer parentheses are stripped."""
        assert parser.parse("(x = 3 || x = 4)") == parser.parse("x = 3 || x = 4")
        assert parser.parse("(x = 3)") == Comparison("x", FilterOp.EQ, "3")

    def test_grouped_subexpression(self, parser):
        """Test parsing a parenthesized sub-group."""
        assert parser.parse("(x = 3 || x = 4) && y != foo") == And((
            Or((
                Comparison("x", FilterOp.EQ, "3"),
                Comparison("x", FilterOp.EQ, "4"),
            )),
            Comparison("y", FilterOp.NE, "foo"),
        ))

    def test_two_groups(self, parser):
        """Test parsing two sub-groups."""
        expr = parser.parse("(a = 1 || a = 2) && (b = 1 || b = 2)")
        assert isinstance(expr, And)
        assert all(isinstance(child, Or) for child in expr.children)

    def test_group_inside_outer_parentheses_rejected(self, parser):
        """Test that a sub-group inside the outer parentheses is a second level."""
        with pytest.raises(FilterSyntaxError, match="one level") as exc_info:
            parser.parse("((a = 1 || a = 2) && b = 3)")
        assert exc_info.value.position == 1

    def test_double_wrapped_comparison_rejected(self, parser):
        """Test that a comparison wrapped in two pairs of parentheses is rejected."""
        with pytest.raises(FilterSyntaxError, match="one level"):
            parser.parse("((a = 1))")

    def test_multi_word_value_is_verbatim(self, parser):
        """Test that a multi-word value keeps its whitespace."""
        assert parser.parse("title = hello   world").value == "hello   world"

    def test_quoted_value(self, parser):
        """Test parsing quoted values."""
        assert parser.parse("title = 'a || b'") == Comparison("title", FilterOp.EQ, "a || b")
        assert parser.parse('title = ""') == Comparison("title", FilterOp.EQ, "")

    def test_repeated_clauses_are_kept(self, parser):
        """Test that repeated clauses are not deduplicated."""
        expr = parser.parse("x = 1 || x = 1")
        assert len(expr.children) == 2

    def test_unbalanced_closing(self, parser):
        """Test an unmatched closing parenthesis."""
        with pytest.raises(FilterSyntaxError, match="Unbalanced"):
            parser.parse("x = 3)")

    def test_unbalanced_opening(self, parser):
        """Test an unmatched opening parenthesis."""
        with pytest.raises(FilterSyntaxError, match="Unbalanced"):
            parser.parse("(x = 3")

    def test_closing_before_opening(self, parser):
        """Test a closing parenthesis before its opening one."""
        with pytest.raises(FilterSyntaxError, match="Unbalanced"):
            parser.parse(")x = 3(")

    def test_mixed_operators(self, parser):
        """Test mixing connectives inside the outer parentheses."""
        with pytest.raises(FilterSyntaxError, match="Mixing"):
            parser.parse("(x = 3 && x = 5 || x = 7)")

    def test_mixed_operators_without_parentheses(self, parser):
        """Test mixing connectives without parentheses."""
        with pytest.raises(FilterSyntaxError, match="Mixing"):
            parser.parse("x = 3 || x = 5 && x = 7")

    def test_mixed_operators_inside_group(self, parser):
        """Test mixing connectives inside a sub-group."""
        with pytest.raises(FilterSyntaxError, match="Mixing"):
            parser.parse("(a = 1 && b = 2 || c = 3) && d = 4")

    def test_nested_groups_rejected(self, parser):
        """Test rejecting a group nested in a sub-group."""
        with pytest.raises(FilterSyntaxError, match="one level"):
            parser.parse("((a = 1 || a = 2) && b = 3) || c = 4")

    def test_triple_parentheses_rejected(self, parser):
        """Test rejecting three levels of parentheses."""
        with pytest.raises(FilterSyntaxError, match="one level"):
            parser.parse("(((a = 1)))")

    def test_empty_group(self, parser):
        """Test rejecting empty groups."""
        with pytest.raises(FilterSyntaxError, match="Empty group"):
            parser.parse("()")
        with pytest.raises(FilterSyntaxError, match="Empty group"):
            parser.parse("a = 1 && ()")

    def test_missing_operator(self, parser):
        """Test a comparison without operator."""
        with pytest.raises(FilterSyntaxError, match="comparison operator"):
            parser.parse("x 3")

    def test_missing_value(self, parser):
        """Test a comparison without value."""
        with pytest.raises(FilterSyntaxError, match="Expected a value"):
            parser.parse("x =")

    def test_double_equals(self, parser):
        """Test rejecting '=='."""
        with pytest.raises(FilterSyntaxError):
            parser.parse("x == 3")

    def test_dangling_connective(self, parser):
        """Test a connective without right operand."""
        with pytest.raises(FilterSyntaxError, match="Expected a comparison"):
            parser.parse("x = 3 &&")

    def test_invalid_column_name(self, parser):
        """Test rejecting a column name that is not an identifier."""
        with pytest.raises(FilterSyntaxError, match="column name"):
            parser.parse("x[0] = 3")

    def test_error_reports_position(self, parser):
        """Test the position reported by a syntax error."""
        with pytest.raises(FilterSyntaxError) as exc_info:
            parser.parse("x = 3 || x = 5 && x = 7")
        assert exc_info.value.position == 15
        assert exc_info.value.to_dict()["error"] == "FILTER_SYNTAX_ERROR"

    def test_is_a_syntax_error(self, parser):
        """Test that filter errors are SyntaxErrors."""
        with pytest.raises(SyntaxError):
            parser.parse("x = 3)")

    def test_pathological_parentheses_terminate(self, parser):
        """Test deeply nested parentheses."""
        with pytest.raises(FilterSyntaxError):
            parser.parse("(" * 10000 + "x = 1" + ")" * 9999)
