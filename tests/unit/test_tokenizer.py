"""
Unit Tests - Numeric Tokenizer
"""
from salesdash.ingestion.tokenizer import tokenize


class TestTokenize:
    """Tests for tokenize"""

    def test_preserves_order_and_duplicates(self):
        assert tokenize("b 3 a 1 c 3 d 2") == [3.0, 1.0, 3.0, 2.0]

    def test_decimals(self):
        assert tokenize("Sales 139322.55 EGP, AOV 703.7") == [139322.55, 703.7]

    def test_empty_and_non_numeric_input(self):
        assert tokenize("") == []
        assert tokenize("no numbers here") == []

    def test_whitespace_and_newlines(self):
        assert tokenize("  12\n\t34\r\n56  ") == [12.0, 34.0, 56.0]

    def test_no_sign_or_thousands_separator(self):
        # "-5" is just 5; "1,200" is two tokens
        assert tokenize("-5 1,200") == [5.0, 1.0, 200.0]

    def test_no_scientific_notation(self):
        assert tokenize("1e5") == [1.0, 5.0]

    def test_trailing_dot_is_not_a_decimal(self):
        assert tokenize("Total 42. Next") == [42.0]

    def test_digits_inside_labels_are_tokens(self):
        assert tokenize("New Cairo 5th 100") == [5.0, 100.0]

    def test_non_ascii_digits_are_ignored(self):
        assert tokenize("التاريخ ٢٠٢٤ 5") == [5.0]
        assert tokenize("Total ۱۲۳ 7.5 ४२") == [7.5]
