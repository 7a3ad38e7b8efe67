"""
Tests for the Unicode subscript and superscript tables.
"""

import pytest

from mathml_to_ascii.symbols import (
    INLINE_SUPERSCRIPT_SYMBOLS,
    LARGE_OPERATORS,
    UNICODE_SUBSCRIPTS,
    UNICODE_SUPERSCRIPTS,
    normalize_superscript,
    try_unicode_subscript,
    try_unicode_superscript,
)


class TestSubscripts:
    """Test cases for try_unicode_subscript."""

    def test_digits_and_letters(self):
        """Every mapped character is converted."""
        assert try_unicode_subscript("1") == "₁"
        assert try_unicode_subscript("ij") == "ᵢⱼ"
        assert try_unicode_subscript("i,k") == "ᵢ,ₖ"
        assert try_unicode_subscript("n+1") == "ₙ₊₁"

    def test_single_unmappable_character_rejects_everything(self):
        """One character without a subscript form fails the whole conversion."""
        assert try_unicode_subscript("b") is None
        assert try_unicode_subscript("ib") is None
        assert try_unicode_subscript("left") is None

    def test_disabled_or_empty(self):
        """Conversion is a no-op when disabled or given nothing."""
        assert try_unicode_subscript("1", use_unicode=False) is None
        assert try_unicode_subscript("") is None

    @pytest.mark.parametrize("char", sorted(UNICODE_SUBSCRIPTS))
    def test_table_is_single_characters(self, char):
        """Each entry maps one character to one character."""
        assert len(char) == 1
        assert len(UNICODE_SUBSCRIPTS[char]) == 1


class TestSuperscripts:
    """Test cases for try_unicode_superscript and its normalization."""

    def test_basic_conversion(self):
        """Digits, letters and operators are converted."""
        assert try_unicode_superscript("2") == "²"
        assert try_unicode_superscript("T") == "ᵀ"
        assert try_unicode_superscript("(i)") == "⁽ⁱ⁾"
        assert try_unicode_superscript("-1") == "⁻¹"

    def test_special_symbols(self):
        """Theta, the ASCII prime, the transpose glyph and asterisk have forms."""
        assert try_unicode_superscript("θ") == "ᶿ"
        assert try_unicode_superscript("'") == "′"
        assert try_unicode_superscript("⊺") == "ᵀ"
        assert try_unicode_superscript("z*5") == "ᶻ·⁵"

    def test_inline_symbols_pass_through(self):
        """Primes, daggers and the degree sign are kept as they are."""
        for symbol in INLINE_SUPERSCRIPT_SYMBOLS:
            assert try_unicode_superscript(symbol) == symbol
        assert try_unicode_superscript("2†") == "²†"

    def test_unmappable_character_rejects_everything(self):
        """Letters without a superscript glyph fail the conversion."""
        assert try_unicode_superscript("q") is None
        assert try_unicode_superscript("q1") is None
        assert try_unicode_superscript("C") is None

    def test_disabled_or_empty(self):
        """Conversion is a no-op when disabled or given nothing."""
        assert try_unicode_superscript("2", use_unicode=False) is None
        assert try_unicode_superscript("") is None

    def test_tight_operators_drop_whitespace(self):
        """Whitespace disappears when the text contains * / or =."""
        assert normalize_superscript("z * 5") == "z*5"
        assert normalize_superscript("a = b") == "a=b"
        assert try_unicode_superscript("z * 5") == "ᶻ·⁵"

    def test_plain_text_keeps_word_breaks(self):
        """Runs of whitespace collapse to one space in plain text."""
        assert normalize_superscript("next   step") == "next step"
        assert try_unicode_superscript("(next step)") == "⁽ⁿᵉˣᵗ ˢᵗᵉᵖ⁾"


class TestOperatorSet:
    """Test cases for the large operator set."""

    def test_members(self):
        """Sums, products, integrals and big set operators are large."""
        assert set("∏∑∫⋃⋂⋁⋀") == LARGE_OPERATORS
        assert "+" not in LARGE_OPERATORS

    def test_transpose_matches_capital_t(self):
        """Superscript table holds the transpose glyph alongside T."""
        assert UNICODE_SUPERSCRIPTS["⊺"] == UNICODE_SUPERSCRIPTS["T"]
