"""
Multi-line glyphs: radical signs, tall parentheses, brackets and braces.
"""

from typing import List

from .box import MathBox

# top, middle, bottom
PAREN_GLYPHS = {
    '(': ('⎛', '⎜', '⎝'),
    ')': ('⎞', '⎟', '⎠'),
    '[': ('⎡', '⎢', '⎣'),
    ']': ('⎤', '⎥', '⎦'),
}

# top, connector, extension, bottom
BRACE_GLYPHS = {
    '{': ('⎧', '⎨', '⎪', '⎩'),
    '}': ('⎫', '⎬', '⎪', '⎭'),
}

MATCHING_DELIMITERS = {'(': ')', '[': ']', '{': '}'}

SQRT_MIN_HEIGHT = 3


def delimiter_column(char: str, height: int) -> List[str]:
    """Return the glyph for each row of a delimiter ``height`` rows tall."""
    if height <= 1:
        return [char] * height

    if char in PAREN_GLYPHS:
        top, middle, bottom = PAREN_GLYPHS[char]
        return [top] + [middle] * (height - 2) + [bottom]

    if char in BRACE_GLYPHS:
        top, connector, extension, bottom = BRACE_GLYPHS[char]
        column = [top]
        for i in range(1, height - 1):
            column.append(connector if i == height // 2 else extension)
        column.append(bottom)
        return column

    # Unknown delimiter: repeat it on every row
    return [char] * height


def create_multiline_paren(char: str, height: int) -> MathBox:
    """Create a one-column delimiter box for content ``height`` rows tall."""
    if height < 3:
        # Short content keeps the plain character
        return MathBox(char)
    return MathBox.from_lines(delimiter_column(char, height), baseline=height // 2)


def create_multi_line_brace(content: MathBox) -> MathBox:
    """Create a multi-line left brace around content.

    Only the left brace is drawn, as for cases; the last column stays blank.
    """
    height = content.height
    width = content.width + 2  # Space for brace

    result = MathBox.create_empty(width, height, content.baseline)

    if height == 1:
        result.set_char(0, 0, '{')
    else:
        for y, char in enumerate(delimiter_column('{', height)):
            result.set_char(0, y, char)

    result.paste(content, 1, 0)
    return result


def create_multi_line_delimiters(content: MathBox, open_delim: str, close_delim: str) -> MathBox:
    """Create multi-line delimiters (parentheses, brackets) around content."""
    height = content.height
    width = content.width + 2  # Space for delimiters

    result = MathBox.create_empty(width, height, content.baseline)

    if len(open_delim) == 1:
        for y, char in enumerate(delimiter_column(open_delim, height)):
            result.set_char(0, y, char)

    result.paste(content, 1, 0)

    if len(close_delim) == 1:
        for y, char in enumerate(delimiter_column(close_delim, height)):
            result.set_char(width - 1, y, char)

    return result


def generate_sqrt_radical(height: int, length: int) -> List[str]:
    """Generate square root radical symbol with given height and length.

    The result is ``height`` lines: an overline starting with a diagonal,
    rising strokes indented one column less per line, the ``_  ╱`` hook and
    the ``\\╱`` tail.
    """
    height = max(height, SQRT_MIN_HEIGHT)

    lines = []

    # Top line: overline with diagonal start
    top_padding = height + 1
    lines.append(" " * top_padding + "⟋" + "─" * length)

    # Middle diagonal lines
    for i in range(1, height - 2):
        padding = height + 1 - i
        lines.append(" " * padding + "╱  ")

    # Second to last line: connecting part
    lines.append("_  ╱  ")

    # Last line: tail
    lines.append(" \\╱  ")

    return lines


def generate_nth_root_radical(formula_height: int, formula_width: int) -> List[str]:
    """Generate the radical for an nth root around a multi-line radicand."""
    overline = "⟋" + "─" * (formula_width + 4)

    # A three-row radicand (a plain fraction) uses the square root shape
    if formula_height == 3:
        return [
            " " * 5 + overline,
            " " * 4 + "╱  ",
            "_  ╱  ",
            " \\╱  ",
        ]

    line_count = formula_height + 2
    lines = [" " * (line_count - 1) + overline]

    for i in range(1, line_count):
        padding = line_count - 1 - i
        if i == line_count - 1:
            # Tail at the bottom
            lines.append(" " * padding + "\\╱  ")
        elif i == line_count - 2:
            # Hook carrying the index
            lines.append("_" + " " * padding + "╱  ")
        else:
            lines.append(" " * (padding + 1) + "╱  ")

    return lines


def attach_root_index(lines: List[str], index_text: str) -> List[str]:
    """Write the root index in front of the hook line and shift the rest."""
    indented = []
    for line in lines:
        if line.lstrip().startswith("_"):
            indented.append(" " + index_text + line)
        else:
            indented.append(" " * (len(index_text) + 1) + line)
    return indented


def nth_root_content_offset(formula_height: int, index_width: int) -> int:
    """Column where the radicand starts, clear of the strokes and index."""
    if formula_height == 3:
        return 7 + index_width
    return formula_height + 3 + index_width + 1
