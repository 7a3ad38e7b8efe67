"""Find MathML inside HTML or free text and render it for the terminal."""

import logging
import re
from typing import List, Optional

from .errors import MathMLError
from .parser import MathMLParser

logger = logging.getLogger(__name__)

MATH_PATTERN = re.compile(r'<math\b[^>]*>.*?</math>', re.DOTALL)


def find_math(html: str) -> List[str]:
    """Return every top-level math element in the text, in order."""
    return MATH_PATTERN.findall(html)


def mathml_to_ascii(html: str, use_unicode: bool = True) -> str:
    """Convert HTML with MathML to ASCII representation.

    Only the first math element is rendered. Text without any math element
    is returned unchanged.

    Args:
        html: HTML string containing MathML
        use_unicode: If True, use Unicode subscripts/superscripts when possible.
                    If False, fall back to base_sub notation or multiline positioning.

    Raises:
        XmlParseError: the math element is not well-formed XML.
        InvalidStructureError: an element has the wrong number of children.
    """
    match = MATH_PATTERN.search(html)
    if match is None:
        # No math elements found - return original HTML
        return html

    parser = MathMLParser(use_unicode=use_unicode)
    return parser.parse(match.group(0)).render()


def replace_math(html: str, use_unicode: bool = True, placeholder: Optional[str] = None) -> str:
    """Render every math element in place.

    Single-line renderings are substituted inline; taller ones are put on
    lines of their own so their columns stay aligned. When ``placeholder``
    is given, an element that fails to convert is replaced by it instead of
    raising.
    """
    def render(match):
        try:
            rendered = MathMLParser(use_unicode=use_unicode).parse(match.group(0)).render()
        except MathMLError as exc:
            if placeholder is None:
                raise
            logger.debug("Substituting placeholder for unconvertible math: %s", exc)
            return placeholder
        if '\n' in rendered:
            return f'\n{rendered}\n'
        return rendered

    result, count = MATH_PATTERN.subn(render, html)
    logger.debug("Rendered %d math element(s)", count)
    return result
