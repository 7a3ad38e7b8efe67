"""
Unicode subscript and superscript tables.

The tables are module constants built once at import time and never
mutated, so conversions may read them from any thread.
"""

from typing import Optional

# Unicode subscript mappings
UNICODE_SUBSCRIPTS = {
    '0': '₀', '1': '₁', '2': '₂', '3': '₃', '4': '₄', '5': '₅', '6': '₆', '7': '₇', '8': '₈', '9': '₉',
    'a': 'ₐ', 'e': 'ₑ', 'i': 'ᵢ', 'j': 'ⱼ', 'o': 'ₒ', 'u': 'ᵤ', 'x': 'ₓ', 'h': 'ₕ', 'k': 'ₖ', 'l': 'ₗ',
    'm': 'ₘ', 'n': 'ₙ', 'p': 'ₚ', 'r': 'ᵣ', 's': 'ₛ', 't': 'ₜ', 'v': 'ᵥ', 'ə': 'ₔ',
    '+': '₊', '-': '₋', '=': '₌', '(': '₍', ')': '₎', ',': ',', ' ': ' ',
}

# Unicode superscript mappings
UNICODE_SUPERSCRIPTS = {
    '0': '⁰', '1': '¹', '2': '²', '3': '³', '4': '⁴', '5': '⁵', '6': '⁶', '7': '⁷', '8': '⁸', '9': '⁹',
    'a': 'ᵃ', 'b': 'ᵇ', 'c': 'ᶜ', 'd': 'ᵈ', 'e': 'ᵉ', 'f': 'ᶠ', 'g': 'ᵍ', 'h': 'ʰ', 'i': 'ⁱ', 'j': 'ʲ',
    'k': 'ᵏ', 'l': 'ˡ', 'm': 'ᵐ', 'n': 'ⁿ', 'o': 'ᵒ', 'p': 'ᵖ', 'r': 'ʳ', 's': 'ˢ', 't': 'ᵗ', 'u': 'ᵘ',
    'v': 'ᵛ', 'w': 'ʷ', 'x': 'ˣ', 'y': 'ʸ', 'z': 'ᶻ',
    'A': 'ᴬ', 'B': 'ᴮ', 'D': 'ᴰ', 'E': 'ᴱ', 'G': 'ᴳ', 'H': 'ᴴ', 'I': 'ᴵ', 'J': 'ᴶ', 'K': 'ᴷ',
    'L': 'ᴸ', 'M': 'ᴹ', 'N': 'ᴺ', 'O': 'ᴼ', 'P': 'ᴾ', 'R': 'ᴿ', 'T': 'ᵀ', 'U': 'ᵁ', 'V': 'ⱽ', 'W': 'ᵂ',
    '+': '⁺', '-': '⁻', '=': '⁼', '(': '⁽', ')': '⁾',
    'θ': 'ᶿ', "'": '′', '⊺': 'ᵀ', ' ': ' ', '*': '·',
}

# Glyphs that are already superscript-sized: primes, daggers, degree
INLINE_SUPERSCRIPT_SYMBOLS = frozenset('′″‴†‡°')

# Operators drawn as a tall stacked glyph when they carry limits
LARGE_OPERATORS = frozenset('∏∑∫⋃⋂⋁⋀')

# Superscripts containing these are packed tightly ("z * 5" -> "ᶻ·⁵")
_TIGHT_OPERATORS = frozenset('*/=')


def try_unicode_subscript(text: str, use_unicode: bool = True) -> Optional[str]:
    """Try to convert text to Unicode subscripts, return None if not possible."""
    if not use_unicode or not text:
        return None

    result = ""
    for char in text:
        if char not in UNICODE_SUBSCRIPTS:
            return None
        result += UNICODE_SUBSCRIPTS[char]
    return result


def normalize_superscript(text: str) -> str:
    """Collapse whitespace, dropping it entirely around tight operators."""
    if any(char in _TIGHT_OPERATORS for char in text):
        return ''.join(text.split())
    return ' '.join(text.split())


def try_unicode_superscript(text: str, use_unicode: bool = True) -> Optional[str]:
    """Try to convert text to Unicode superscripts, return None if not possible."""
    if not use_unicode or not text:
        return None

    result = ""
    for char in normalize_superscript(text):
        if char in UNICODE_SUPERSCRIPTS:
            result += UNICODE_SUPERSCRIPTS[char]
        elif char in INLINE_SUPERSCRIPT_SYMBOLS:
            result += char
        else:
            return None  # Can't convert this character
    return result
