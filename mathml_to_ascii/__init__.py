"""
Render MathML as aligned Unicode/ASCII text for terminal display.
"""

from .box import MathBox
from .converter import find_math, mathml_to_ascii, replace_math
from .errors import InvalidStructureError, MathMLError, XmlParseError
from .parser import MathMLParser
from .symbols import try_unicode_subscript, try_unicode_superscript

__version__ = "0.1.0"

__all__ = [
    "MathBox",
    "MathMLParser",
    "MathMLError",
    "XmlParseError",
    "InvalidStructureError",
    "mathml_to_ascii",
    "find_math",
    "replace_math",
    "try_unicode_subscript",
    "try_unicode_superscript",
]
