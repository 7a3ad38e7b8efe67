"""The character grid every MathML element is rendered into."""

from dataclasses import dataclass
from typing import Iterable, List


@dataclass
class MathBox:
    """Represents a rendered math element with its dimensions and content."""
    width: int
    height: int
    baseline: int  # Distance from top to baseline
    content: List[List[str]]  # 2D grid of characters

    def __init__(self, text: str = ""):
        """Initialize a simple text box; empty text gives the empty box."""
        self.width = len(text)
        self.height = 1 if text else 0
        self.baseline = 0
        self.content = [list(text)] if text else []

    @staticmethod
    def create_empty(width: int, height: int, baseline: int) -> 'MathBox':
        """Create an empty box with given dimensions."""
        box = MathBox()
        box.width = width
        box.height = height
        box.baseline = baseline
        box.content = [[' ' for _ in range(width)] for _ in range(height)]
        return box

    @staticmethod
    def from_lines(lines: List[str], baseline: int = 0) -> 'MathBox':
        """Create a box from rows of text, padding short rows with spaces."""
        width = max((len(line) for line in lines), default=0)
        box = MathBox.create_empty(width, len(lines), baseline)
        for y, line in enumerate(lines):
            for x, char in enumerate(line):
                box.content[y][x] = char
        return box

    @property
    def is_empty(self) -> bool:
        return self.width == 0 or self.height == 0

    def get_char(self, x: int, y: int) -> str:
        """Get character at position, return space if out of bounds."""
        if 0 <= y < self.height and 0 <= x < self.width:
            return self.content[y][x]
        return ' '

    def set_char(self, x: int, y: int, char: str):
        """Set character at position; writes outside the grid are dropped."""
        if 0 <= y < self.height and 0 <= x < self.width:
            self.content[y][x] = char

    def paste(self, other: 'MathBox', x_offset: int, y_offset: int, opaque: bool = False):
        """Copy another box onto this one at the given offset.

        Spaces are background and are skipped unless ``opaque`` is set, so
        padding from a neighbouring box never erases existing content.
        """
        for y in range(other.height):
            for x in range(other.width):
                char = other.get_char(x, y)
                if opaque or char != ' ':
                    self.set_char(x + x_offset, y + y_offset, char)

    def row_text(self, y: int = 0) -> str:
        """Return one row as a string."""
        if 0 <= y < self.height:
            return ''.join(self.content[y])
        return ''

    def rows(self) -> Iterable[str]:
        for row in self.content:
            yield ''.join(row)

    def flatten(self) -> str:
        """Join the trimmed, non-blank rows into one line of text."""
        return ''.join(line.strip() for line in self.rows() if line.strip()).strip()

    def render(self) -> str:
        """Render the box as a string."""
        return '\n'.join(line.rstrip() for line in self.rows())
