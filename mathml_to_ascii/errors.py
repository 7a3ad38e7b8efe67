"""Exceptions raised while converting MathML to ASCII."""

from typing import Optional


class MathMLError(Exception):
    """Base exception for MathML conversion errors."""

    prefix = "MathML error"

    def __init__(self, details: str, message: Optional[str] = None):
        self.message = message or self.prefix
        self.details = details
        super().__init__(str(self))

    def __str__(self) -> str:
        if self.details:
            return f"{self.message}: {self.details}"
        return self.message


class XmlParseError(MathMLError):
    """Raised when the markup is not well-formed XML."""

    prefix = "XML parsing error"


class InvalidStructureError(MathMLError):
    """Raised when an element has the wrong number of children."""

    prefix = "Invalid MathML structure"
