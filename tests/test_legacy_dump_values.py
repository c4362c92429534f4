from __future__ import annotations

import unittest

from legacy_dump.values import OPAQUE, lex_row, parse_numeric_literal


class TestLexRow(unittest.TestCase):
    def test_comma_inside_string_does_not_split(self) -> None:
        values = lex_row(r"'a,b\'c', 5, NULL, 3.14")

        self.assertEqual(values, ["a,b'c", 5, None, 3.14])
        self.assertIsInstance(values[1], int)
        self.assertIsInstance(values[3], float)

    def test_doubled_quote_is_an_escaped_quote(self) -> None:
        self.assertEqual(lex_row("'O''Brien', 'x'"), ["O'Brien", "x"])

    def test_backslash_escapes_are_literal(self) -> None:
        self.assertEqual(lex_row(r"'a\nb', 'c\\d'"), ["anb", "c\\d"])

    def test_binary_payload_is_opaque_and_skipped_as_a_unit(self) -> None:
        values = lex_row(r"1, _binary 'ab,\'c', 'after'")

        self.assertEqual(len(values), 3)
        self.assertIs(values[1], OPAQUE)
        self.assertEqual(values[2], "after")

    def test_surrounding_whitespace_yields_no_empty_values(self) -> None:
        self.assertEqual(lex_row("   1 ,\t 2  \n"), [1, 2])

    def test_empty_quoted_string(self) -> None:
        self.assertEqual(lex_row("'', NULL"), ["", None])

    def test_null_is_case_sensitive(self) -> None:
        self.assertEqual(lex_row("null"), ["null"])

    def test_unexpected_bare_literal_is_kept_verbatim(self) -> None:
        self.assertEqual(lex_row("CURRENT_TIMESTAMP, -4"), ["CURRENT_TIMESTAMP", -4])

    def test_empty_input(self) -> None:
        self.assertEqual(lex_row(""), [])


class TestParseNumericLiteral(unittest.TestCase):
    def test_integer_and_float_split(self) -> None:
        self.assertEqual(parse_numeric_literal("42"), 42)
        self.assertIsInstance(parse_numeric_literal("42"), int)
        self.assertIsInstance(parse_numeric_literal("42.0"), float)
        self.assertEqual(parse_numeric_literal("-.5"), -0.5)
        self.assertEqual(parse_numeric_literal("1e3"), 1000.0)
        self.assertIsInstance(parse_numeric_literal("1e3"), float)

    def test_non_numeric(self) -> None:
        self.assertIsNone(parse_numeric_literal("abc"))
        self.assertIsNone(parse_numeric_literal(""))
        self.assertIsNone(parse_numeric_literal("1.2.3"))

    def test_opaque_renders_as_binary_marker(self) -> None:
        self.assertEqual(str(OPAQUE), "[BINARY]")
        self.assertEqual(repr(OPAQUE), "OPAQUE")


if __name__ == "__main__":
    unittest.main()
