"""
Tests for the parser combinators.
"""

import pytest
from samples import Cardinal

from decodex import Err, FailureKind, Ok, parse


class TestSucceedFail:
    def test_succeed_consumes_nothing(self):
        assert parse.succeed(42).run("abc", 1) == Ok((42, 1))

    def test_fail_at_current_offset(self):
        result = parse.fail("no luck").run("abc", 2)
        assert isinstance(result, Err)
        assert result.error.offset == 2
        assert result.error.kind == FailureKind.INVALID_VALUE
        assert (result.error.line, result.error.column) == (1, 3)
        assert result.error.message == "no luck"

    def test_fail_with_kind(self):
        result = parse.fail("stop", FailureKind.UNEXPECTED_TOKEN).run("abc")
        assert isinstance(result, Err)
        assert result.error.kind == FailureKind.UNEXPECTED_TOKEN


class TestChompWhile:
    def test_consumes_digits(self):
        result = parse.chomp_while(str.isdigit).run("123abc", 0)
        assert result == Ok(("123", 3))

    def test_consumes_nothing(self):
        result = parse.chomp_while(str.isdigit).run("abc", 0)
        assert result == Ok(("", 0))

    def test_starts_at_offset(self):
        result = parse.chomp_while(str.isalpha).run("12ab3", 2)
        assert result == Ok(("ab", 4))

    def test_offset_outside_input(self):
        with pytest.raises(ValueError):
            parse.chomp_while(str.isdigit).run("abc", 4)


class TestToken:
    def test_match(self):
        assert parse.token("let").run("let x") == Ok(("let", 3))

    def test_mismatch_does_not_advance(self):
        result = parse.token("let").run("x = 1", 0)
        assert isinstance(result, Err)
        assert result.error.offset == 0
        assert result.error.kind == FailureKind.UNEXPECTED_TOKEN
        assert result.error.expected == frozenset({"'let'"})

    def test_end_of_input(self):
        result = parse.token("]").run("[1", 2)
        assert isinstance(result, Err)
        assert result.error.kind == FailureKind.UNEXPECTED_END

    def test_keyword_boundary(self):
        assert parse.keyword("let").run("let x") == Ok(("let", 3))
        assert isinstance(parse.keyword("let").run("letter"), Err)


class TestNumbers:
    @pytest.mark.parametrize(
        "text, expected",
        [
            ("42", (42, 2)),
            ("-7rest", (-7, 2)),
            ("+3", (3, 2)),
            ("007", (7, 3)),
        ],
    )
    def test_integer(self, text, expected):
        assert parse.integer.run(text) == Ok(expected)

    def test_integer_needs_digits(self):
        result = parse.integer.run("-x")
        assert isinstance(result, Err)
        assert result.error.offset == 1

    def test_number_with_fraction(self):
        assert parse.number.run("3.25") == Ok((3.25, 4))
        assert parse.number.run("-0.5") == Ok((-0.5, 4))

    def test_number_without_fraction_is_int(self):
        assert parse.number.run("12") == Ok((12, 2))

    def test_number_dot_without_digits_is_left(self):
        assert parse.number.run("12.") == Ok((12, 2))

    def test_unicode_digits_are_not_numbers(self):
        assert isinstance(parse.integer.run("²"), Err)

    @pytest.mark.parametrize("parser", [parse.integer, parse.number])
    def test_oversized_digit_run_fails(self, parser):
        result = parser.run("1" * 5000)
        assert isinstance(result, Err)
        assert result.error.kind == FailureKind.INVALID_VALUE
        assert result.error.offset == 0
        assert result.error.message == "Integer too large"

    def test_long_fraction_still_parses(self):
        text = "1." + "5" * 5000
        assert parse.number.run(text) == Ok((float(text), len(text)))


class TestSequence:
    def test_combine(self):
        point = parse.sequence(
            lambda _open, x, _comma, y, _close: (x, y),
            parse.token("("),
            parse.integer,
            parse.token(","),
            parse.integer,
            parse.token(")"),
        )
        assert point.run("(1,2)") == Ok(((1, 2), 5))

    def test_failure_located_where_it_happened(self):
        point = parse.sequence(
            lambda *parts: parts,
            parse.token("("),
            parse.integer,
            parse.token(","),
            parse.integer,
            parse.token(")"),
        )
        result = point.run("(1,x)")
        assert isinstance(result, Err)
        assert result.error.offset == 3
        assert result.error.column == 4

    def test_operators(self):
        parenthesized = (
            parse.token("(")
            >> parse.spaces
            >> parse.integer
            << parse.spaces
            << parse.token(")")
        )
        assert parenthesized.run("( 12 )") == Ok((12, 6))

    def test_spaces_always_succeeds(self):
        assert parse.spaces.run("x") == Ok((None, 0))
        assert parse.spaces.run(" \t\nx") == Ok((None, 3))


class TestOneOf:
    def test_backtracks(self):
        p = parse.one_of(
            [
                parse.token("a") >> parse.token("b"),
                parse.token("a") >> parse.token("c"),
            ]
        )
        assert p.run("ac") == Ok(("c", 2))

    def test_reports_furthest_failure(self):
        p = parse.token("x") | (parse.token("a") >> parse.token("b"))
        result = p.run("az")
        assert isinstance(result, Err)
        assert result.error.offset == 1
        assert result.error.expected == frozenset({"'b'"})

    def test_merges_expectations_at_same_offset(self):
        p = parse.keyword("true") | parse.keyword("false")
        result = p.run("maybe")
        assert isinstance(result, Err)
        assert result.error.offset == 0
        assert result.error.expected == frozenset({"'true'", "'false'"})


class TestAndThen:
    def test_length_prefixed(self):
        any_char = parse.chomp_if(lambda _: True, "any character")

        def take(n):
            return parse.chomped(parse.sequence(lambda *_: None, *[any_char] * n))

        p = (parse.integer << parse.token(":")).and_then(take)
        assert p.run("3:abcdef") == Ok(("abc", 5))

    def test_continuation_not_called_on_failure(self):
        def crash(_):
            raise AssertionError("continuation must not be invoked")

        result = parse.and_then(crash, parse.integer).run("x")
        assert isinstance(result, Err)

    def test_names_include_function(self):
        def double(n):
            return n * 2

        assert parse.integer.map(double).name == "map(double, integer)"
        assert parse.integer.and_then(parse.succeed).name == (
            "and_then(succeed, integer)"
        )


class TestChomping:
    def test_chomp_if(self):
        assert parse.chomp_if(str.isupper, "a capital").run("Ab") == Ok(("A", 1))
        result = parse.chomp_if(str.isupper, "a capital").run("ab")
        assert isinstance(result, Err)
        assert result.error.expected == frozenset({"a capital"})

    def test_chomp_until(self):
        comment = parse.token("/*") >> parse.chomp_until("*/") << parse.token("*/")
        assert comment.run("/* hi */x") == Ok((" hi ", 8))

    def test_chomp_until_missing(self):
        result = parse.chomp_until("*/").run("/* never closed")
        assert isinstance(result, Err)
        assert result.error.kind == FailureKind.UNEXPECTED_END
        assert result.error.offset == len("/* never closed")

    def test_chomped(self):
        identifier = parse.chomped(
            parse.chomp_if(str.isalpha) >> parse.chomp_while(str.isalnum)
        )
        assert identifier.run("abc1 rest") == Ok(("abc1", 4))


class TestRepetition:
    def test_many(self):
        digits = parse.many(parse.integer << parse.spaces)
        assert digits.run("1 2 3") == Ok(([1, 2, 3], 5))
        assert digits.run("x") == Ok(([], 0))

    def test_many_stops_without_progress(self):
        assert parse.many(parse.spaces).run("abc") == Ok(([], 0))

    def test_many1(self):
        assert isinstance(parse.many1(parse.integer).run("x"), Err)

    def test_sep_by(self):
        items = parse.sep_by(parse.integer, parse.token(","))
        assert items.run("1,2,3") == Ok(([1, 2, 3], 5))
        assert items.run("") == Ok(([], 0))
        assert items.run("1,2,") == Ok(([1, 2], 3))

    def test_optional(self):
        sign = parse.optional(parse.token("-"), default="+")
        assert sign.run("5") == Ok(("+", 0))
        assert sign.run("-5") == Ok(("-", 1))


class TestEnd:
    def test_end(self):
        assert parse.end.run("ab", 2) == Ok((None, 2))
        result = (parse.integer << parse.end).run("12x")
        assert isinstance(result, Err)
        assert result.error.offset == 2
        assert result.error.expected == frozenset({"end of input"})


class TestPosition:
    def test_line_and_column(self):
        p = parse.chomp_until("x") >> parse.current_position
        assert p.run("ab\ncd x") == Ok(((2, 4), 6))

    def test_failure_line_column(self):
        result = (parse.token("a\n") >> parse.token("b")).run("a\nc")
        assert isinstance(result, Err)
        assert (result.error.line, result.error.column) == (2, 1)
        assert result.error.describe().startswith("2:1: ")

    def test_current_offset(self):
        assert (parse.token("ab") >> parse.current_offset).run("abc") == Ok((2, 2))


class TestEnumOf:
    def test_west(self):
        assert parse.enum_of(Cardinal).run("west") == Ok((Cardinal.WEST, 4))

    def test_northeast_is_invalid(self):
        result = parse.enum_of(Cardinal).run("northeast")
        assert isinstance(result, Err)
        assert result.error.kind == FailureKind.INVALID_VALUE
        assert result.error.offset == 0
        assert "'northeast'" in result.error.message

    def test_located_at_word_start(self):
        result = (parse.token("go ") >> parse.enum_of(Cardinal)).run("go up")
        assert isinstance(result, Err)
        assert result.error.offset == 3

    def test_empty_word(self):
        result = parse.enum_of(Cardinal).run("!")
        assert isinstance(result, Err)
        assert result.error.kind == FailureKind.UNEXPECTED_TOKEN


class TestRun:
    def test_run_returns_value_only(self):
        assert parse.run(parse.integer, "12") == Ok(12)

    def test_run_failure(self):
        result = parse.run(parse.integer, "")
        assert isinstance(result, Err)
        assert result.error.kind == FailureKind.UNEXPECTED_END

    def test_lazy_recursive_grammar(self):
        def nested():
            return parse.integer | (
                parse.token("[") >> parse.lazy(nested) << parse.token("]")
            )

        assert parse.run(nested() << parse.end, "[[[7]]]") == Ok(7)
