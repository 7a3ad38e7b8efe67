"""
Layout engine: walks a MathML element tree and renders each construct
into a MathBox, joining siblings on a shared baseline.
"""

import logging
from enum import Enum
from typing import Callable, Dict, List, Optional
from xml.etree import ElementTree as ET

from . import glyphs
from .box import MathBox
from .errors import InvalidStructureError, XmlParseError
from .symbols import LARGE_OPERATORS, try_unicode_subscript, try_unicode_superscript

logger = logging.getLogger(__name__)

MATHML_NAMESPACE = 'http://www.w3.org/1998/Math/MathML'
DEFAULT_MAX_DEPTH = 200

PREFIX_FUNCTIONS = ('log', 'ln', 'sin', 'cos', 'tan', 'exp')
BINARY_OPERATORS = ('=', '+', '-', '*', '/', '≠')
BRACKETS = ('(', ')', '[', ']', '{', '}')

# Constructs that stack limits above or below their base
STACKED_TAGS = ('msubsup', 'munderover', 'munder', 'mover')

# Compact notation limits, measured in UTF-8 bytes
SUBSCRIPT_FLATTEN_LIMIT = 20
SUBSUP_FLATTEN_LIMIT = 10
COMPACT_SUBSCRIPT_LIMIT = 20
COMPACT_SUPERSCRIPT_LIMIT = 2
COMPACT_SUBSCRIPT_PUNCTUATION = '-+/ '

FRACTION_RULE = '─'
CELL_SEPARATOR = '  '


def local_name(tag: str) -> str:
    """Strip the ``{namespace}`` prefix from an element tag."""
    return tag.split('}')[-1] if '}' in tag else tag


def _byte_length(text: str) -> int:
    return len(text.encode('utf-8'))


def _is_zero_thickness(value: str) -> bool:
    """True for linethickness values like ``0``, ``0pt`` or ``0.0em``."""
    number = value.strip().rstrip('abcdefghijklmnopqrstuvwxyz%')
    if not number:
        return False
    try:
        return float(number) == 0
    except ValueError:
        return False


class Construct(Enum):
    """The MathML elements the renderer knows how to lay out."""
    ROOT = 'math'
    GROUP = 'mrow'
    IDENTIFIER = 'mi'
    OPERATOR = 'mo'
    NUMBER = 'mn'
    TEXT = 'mtext'
    SPACE = 'mspace'
    FRACTION = 'mfrac'
    SUBSCRIPT = 'msub'
    SUPERSCRIPT = 'msup'
    SUBSUP = 'msubsup'
    UNDER = 'munder'
    UNDEROVER = 'munderover'
    SQRT = 'msqrt'
    NTH_ROOT = 'mroot'
    TABLE = 'mtable'
    TABLE_ROW = 'mtr'
    TABLE_CELL = 'mtd'
    FENCED = 'mfenced'
    UNKNOWN = None

    @classmethod
    def of(cls, elem: ET.Element) -> 'Construct':
        try:
            return cls(local_name(elem.tag))
        except ValueError:
            return cls.UNKNOWN


class MathMLParser:
    """Parser for MathML expressions.

    A parser tracks the nesting depth of the element it is rendering, so
    one instance should not be shared between threads. Create one per
    conversion; construction is cheap.
    """

    def __init__(self, use_unicode=True, max_depth=DEFAULT_MAX_DEPTH):
        self.use_unicode = use_unicode
        self.max_depth = max_depth
        self._depth = 0

        self._handlers: Dict[Construct, Callable[[ET.Element], MathBox]] = {
            Construct.ROOT: self.process_math,
            Construct.GROUP: self.process_mrow,
            Construct.IDENTIFIER: self.process_token,
            Construct.OPERATOR: self.process_operator,
            Construct.NUMBER: self.process_token,
            Construct.TEXT: self.process_token,
            Construct.SPACE: self.process_space,
            Construct.FRACTION: self.process_fraction,
            Construct.SUBSCRIPT: self.process_subscript,
            Construct.SUPERSCRIPT: self.process_superscript,
            Construct.SUBSUP: self.process_subsup,
            Construct.UNDER: self.process_under,
            Construct.UNDEROVER: self.process_underover,
            Construct.SQRT: self.process_square_root,
            Construct.NTH_ROOT: self.process_nth_root,
            Construct.TABLE: self.process_table,
            Construct.TABLE_ROW: self.process_table_row,
            Construct.TABLE_CELL: self.process_table_cell,
            Construct.FENCED: self.process_fenced,
            Construct.UNKNOWN: self.process_unknown,
        }

    def parse(self, mathml: str) -> MathBox:
        """Parse MathML string and return rendered ASCII box."""
        mathml = mathml.strip()

        # Wrap bare fragments in math tags
        if not mathml.startswith('<math'):
            mathml = f'<math xmlns="{MATHML_NAMESPACE}">{mathml}</math>'

        try:
            root = ET.fromstring(mathml)
        except ET.ParseError as exc:
            logger.debug("Rejecting malformed MathML: %s", exc)
            raise XmlParseError(str(exc)) from exc

        return self.process_element(root)

    def process_element(self, elem: ET.Element) -> MathBox:
        """Process a MathML element and return its rendered box."""
        if self._depth >= self.max_depth:
            raise InvalidStructureError(f"Nesting deeper than {self.max_depth} levels")

        self._depth += 1
        try:
            return self._handlers[Construct.of(elem)](elem)
        finally:
            self._depth -= 1

    def _children(self, elem: ET.Element, count: int, message: str) -> List[ET.Element]:
        """Return the element children, insisting on exactly ``count`` of them."""
        children = list(elem)
        if len(children) != count:
            raise InvalidStructureError(message)
        return children

    # Leaves and generic containers

    def process_math(self, elem: ET.Element) -> MathBox:
        """Process the root math element."""
        children = list(elem)
        if len(children) == 1:
            return self.process_element(children[0])
        if children:
            # Multiple children - concatenate horizontally
            return self.horizontal_concat([self.process_element(child) for child in children])
        return MathBox(elem.text or '')

    def process_token(self, elem: ET.Element) -> MathBox:
        """Process an identifier, number or text run."""
        return MathBox(elem.text or '')

    def process_space(self, elem: ET.Element) -> MathBox:
        """Render mspace as one column whatever its declared width."""
        return MathBox(' ')

    def process_operator(self, elem: ET.Element) -> MathBox:
        """Process an operator, padding binary operators with spaces."""
        text = elem.text or ''
        form = elem.get('form', '')

        # Prefix operators and function names don't get extra spacing
        if form == 'prefix' or text in PREFIX_FUNCTIONS:
            return MathBox(text)
        if text in BINARY_OPERATORS:
            return MathBox(f' {text} ')
        # Brackets, large operators and everything else stay as they are
        return MathBox(text)

    def process_unknown(self, elem: ET.Element) -> MathBox:
        """Default: concatenate children horizontally."""
        logger.debug("No layout for <%s>, flattening its children", local_name(elem.tag))
        children = list(elem)
        if children:
            return self.horizontal_concat([self.process_element(child) for child in children])
        return MathBox(elem.text or '')

    def process_mrow(self, elem: ET.Element) -> MathBox:
        """Process an mrow (horizontal group) element."""
        boxes = []

        # Process text before first child
        if elem.text and elem.text.strip():
            boxes.append(MathBox(elem.text.strip()))

        prev_child_tag = None
        for child in elem:
            child_tag = local_name(child.tag)

            # Keep a fraction from touching the limits of a following operator
            if prev_child_tag == 'mfrac' and child_tag in STACKED_TAGS:
                boxes.append(MathBox('  '))

            child_box = self.process_element(child)
            if child_box.width > 0:  # Only add non-empty boxes
                boxes.append(child_box)

            # Process text after each child (tail)
            if child.tail and child.tail.strip():
                boxes.append(MathBox(child.tail.strip()))

            prev_child_tag = child_tag

        return self.horizontal_concat(boxes)

    # Stacking helpers

    @staticmethod
    def _stack_centered(parts: List[MathBox], width: int, baseline: int) -> MathBox:
        """Stack boxes top to bottom, centering each one horizontally."""
        height = sum(part.height for part in parts)
        result = MathBox.create_empty(width, height, baseline)

        y_offset = 0
        for part in parts:
            result.paste(part, (width - part.width) // 2, y_offset)
            y_offset += part.height

        return result

    @staticmethod
    def _is_inline(box: MathBox) -> bool:
        return box.height == 1 and box.baseline == 0

    # Fractions

    def process_fraction(self, elem: ET.Element) -> MathBox:
        """Process a fraction element."""
        children = self._children(elem, 2, "Fraction needs exactly 2 children")

        numerator = self.process_element(children[0])
        denominator = self.process_element(children[1])
        width = max(numerator.width, denominator.width)

        # linethickness="0pt" stacks the parts without a bar, e.g. conditions under a sum
        if _is_zero_thickness(elem.get('linethickness', '')):
            baseline = max(numerator.height - 1, 0)
            return self._stack_centered([numerator, denominator], width, baseline)

        # Regular fraction with the bar on the baseline
        bar = MathBox.create_empty(width, 1, 0)
        for x in range(width):
            bar.set_char(x, 0, FRACTION_RULE)

        return self._stack_centered([numerator, bar, denominator], width, numerator.height)

    # Scripts

    def _flatten_script(self, script: MathBox, limit: int) -> str:
        """Return script text on one line, or '' if it is too long to inline."""
        if self._is_inline(script):
            return script.row_text().strip()
        flattened = script.flatten()
        if _byte_length(flattened) <= limit:
            return flattened
        return ''

    def _compact_subscript(self, base_text: str, text: str) -> Optional[str]:
        """Format ``base_text`` as a LaTeX-like subscript when it stays readable."""
        if _byte_length(text) > COMPACT_SUBSCRIPT_LIMIT:
            return None
        if not all(char.isalnum() or char in COMPACT_SUBSCRIPT_PUNCTUATION for char in text):
            return None
        return f'{base_text}_{text}'

    def _compact_superscript(self, base_text: str, text: str) -> Optional[str]:
        if _byte_length(text) > COMPACT_SUPERSCRIPT_LIMIT:
            return None
        if not all(char.isalnum() for char in text):
            return None
        return f'{base_text}^{text}'

    def process_subscript(self, elem: ET.Element) -> MathBox:
        """Process a subscript element."""
        children = self._children(elem, 2, "Subscript needs exactly 2 children")

        base = self.process_element(children[0])
        subscript = self.process_element(children[1])

        # Try a single line first: Unicode subscripts, then base_sub notation
        if self._is_inline(base):
            subscript_text = self._flatten_script(subscript, SUBSCRIPT_FLATTEN_LIMIT)
            if subscript_text:
                base_text = base.row_text().strip()

                unicode_sub = try_unicode_subscript(subscript_text, self.use_unicode)
                if unicode_sub is not None:
                    return MathBox(base_text + unicode_sub)

                compact = self._compact_subscript(base_text, subscript_text)
                if compact is not None:
                    return MathBox(compact)

        logger.debug("Laying out subscript %r on separate rows", subscript.flatten())

        # Fall back to multiline positioning
        width = base.width + subscript.width
        height = max(base.height, base.baseline + 1 + subscript.height)
        result = MathBox.create_empty(width, height, base.baseline)

        result.paste(base, 0, 0)
        # Place subscript (below and to the right)
        result.paste(subscript, base.width, base.baseline + 1)

        return result

    def process_superscript(self, elem: ET.Element) -> MathBox:
        """Process a superscript element."""
        children = self._children(elem, 2, "Superscript needs exactly 2 children")

        base = self.process_element(children[0])
        superscript = self.process_element(children[1])

        # Try a single line first: Unicode superscripts, then base^sup notation
        if self._is_inline(base) and self._is_inline(superscript):
            base_text = base.row_text().strip()
            superscript_text = superscript.row_text().strip()

            unicode_sup = try_unicode_superscript(superscript_text, self.use_unicode)
            if unicode_sup is not None:
                return MathBox(base_text + unicode_sup)

            compact = self._compact_superscript(base_text, superscript_text)
            if compact is not None:
                return MathBox(compact)

        # Fall back to multiline positioning
        width = base.width + superscript.width
        height = superscript.height + base.height
        baseline = superscript.height + base.baseline
        result = MathBox.create_empty(width, height, baseline)

        # Place superscript (above and to the right of base)
        result.paste(superscript, base.width, 0)
        # Place base (below superscript)
        result.paste(base, 0, superscript.height)

        return result

    def process_subsup(self, elem: ET.Element) -> MathBox:
        """Process an element with both subscript and superscript."""
        children = self._children(elem, 3, "Subscript-superscript needs exactly 3 children")

        base = self.process_element(children[0])
        subscript = self.process_element(children[1])
        superscript = self.process_element(children[2])

        is_large_operator = self._is_inline(base) and base.row_text().strip() in LARGE_OPERATORS

        if is_large_operator:
            # Operator with range: super/base/sub stacked and centered
            width = max(base.width, subscript.width, superscript.width)
            baseline = superscript.height + base.baseline
            return self._stack_centered([superscript, base, subscript], width, baseline)

        # Try Unicode if both scripts are simple
        if self._is_inline(base):
            sub_text = self._flatten_script(subscript, SUBSUP_FLATTEN_LIMIT)
            sup_text = superscript.row_text().strip() if self._is_inline(superscript) else ''

            if sub_text and sup_text:
                unicode_sub = try_unicode_subscript(sub_text, self.use_unicode)
                unicode_sup = try_unicode_superscript(sup_text, self.use_unicode)
                if unicode_sub is not None and unicode_sup is not None:
                    return MathBox(base.row_text().strip() + unicode_sub + unicode_sup)

        # For regular base with both sub and superscript, arrange diagonally
        width = base.width + max(subscript.width, superscript.width)
        height = superscript.height + base.height + subscript.height
        baseline = superscript.height + base.baseline
        result = MathBox.create_empty(width, height, baseline)

        result.paste(base, 0, superscript.height)
        # Place superscript (to the right and above)
        result.paste(superscript, base.width, 0)
        # Place subscript (to the right and below)
        result.paste(subscript, base.width, superscript.height + base.height)

        return result

    # Under and over

    @staticmethod
    def _is_summation(elem: ET.Element) -> bool:
        return '∑' in (elem[0].text or '')

    def process_under(self, elem: ET.Element) -> MathBox:
        """Process an under element (like summation with subscript)."""
        children = self._children(elem, 2, "Under element needs exactly 2 children")

        base = self.process_element(children[0])
        under = self.process_element(children[1])

        width = max(base.width, under.width)
        if self._is_summation(elem):
            width = max(width, 2)  # Ensure minimum width for summation

        return self._stack_centered([base, under], width, base.baseline)

    def process_underover(self, elem: ET.Element) -> MathBox:
        """Process an underover element (like summation with both limits)."""
        children = self._children(elem, 3, "Underover element needs exactly 3 children")

        base = self.process_element(children[0])
        under = self.process_element(children[1])
        over = self.process_element(children[2])

        width = max(base.width, under.width, over.width)
        if self._is_summation(elem):
            width = max(width, 2)  # Ensure minimum width for summation

        return self._stack_centered([over, base, under], width, over.height + base.baseline)

    # Radicals

    def _draw_radical(self, lines: List[str], inner: MathBox, content_x_offset: int,
                      total_width: int, total_height: int) -> MathBox:
        """Draw radical lines and paste the radicand under the overline."""
        result = MathBox.create_empty(total_width, total_height, inner.baseline + 1)

        for y, line in enumerate(lines):
            for x, char in enumerate(line):
                if char != ' ':
                    result.set_char(x, y, char)

        result.paste(inner, content_x_offset, 1)
        return result

    def process_square_root(self, elem: ET.Element) -> MathBox:
        """Process a square root element."""
        children = list(elem)
        if not children:
            return MathBox('√')

        if len(children) == 1:
            inner = self.process_element(children[0])
        else:
            # Multiple children - treat as horizontal group
            inner = self.horizontal_concat([self.process_element(child) for child in children])

        # For single line expressions, use simple format
        if inner.height <= 1:
            return MathBox(f'√({inner.row_text().strip()})')

        radical_lines = glyphs.generate_sqrt_radical(inner.height + 1, inner.width + 4)

        total_width = max(len(radical_lines[0]), inner.width + 10)  # Extra padding
        content_x_offset = inner.height + 3  # Clear of the diagonal

        return self._draw_radical(radical_lines, inner, content_x_offset,
                                  total_width, len(radical_lines))

    def process_nth_root(self, elem: ET.Element) -> MathBox:
        """Process an nth root element (mroot)."""
        children = self._children(
            elem, 2, "Nth root needs exactly 2 children (radicand and index)")

        radicand = self.process_element(children[0])
        index = self.process_element(children[1])

        # Single line: ³√(x), or [3]√(x) when the index has no superscript form
        if radicand.height <= 1 and index.height <= 1:
            radicand_text = radicand.row_text().strip()
            index_text = index.row_text().strip()

            unicode_index = try_unicode_superscript(index_text, self.use_unicode)
            if unicode_index is not None:
                return MathBox(f'{unicode_index}√({radicand_text})')
            return MathBox(f'[{index_text}]√({radicand_text})')

        index_text = ''.join(index.rows()).strip()
        lines = glyphs.attach_root_index(
            glyphs.generate_nth_root_radical(radicand.height, radicand.width), index_text)

        total_width = max(max(len(line) for line in lines),
                          radicand.width + 10 + len(index_text))
        total_height = max(len(lines), 1 + radicand.height)
        content_x_offset = glyphs.nth_root_content_offset(radicand.height, len(index_text))

        return self._draw_radical(lines, radicand, content_x_offset, total_width, total_height)

    # Tables

    @staticmethod
    def _cell_mentions_where(row: ET.Element) -> bool:
        """True if a cell of the row, or one of its direct children, says 'where'."""
        for cell in row:
            if local_name(cell.tag) != 'mtd':
                continue
            texts = [cell.text or '']
            for child in cell:
                texts.append(child.text or '')
                texts.append(child.tail or '')
            if any('where' in text.lower() for text in texts):
                return True
        return False

    def process_table(self, elem: ET.Element) -> MathBox:
        """Process a table element."""
        row_elems = [child for child in elem if local_name(child.tag) == 'mtr']
        rows = [self.process_table_row(child) for child in row_elems]

        if not rows:
            return MathBox()

        max_width = max(row.width for row in rows)

        # An equation followed by a "where" clause gets a blank line between them
        has_where_clause = len(rows) >= 2 and self._cell_mentions_where(row_elems[1])

        total_height = sum(row.height for row in rows)
        if has_where_clause:
            total_height += 1

        result = MathBox.create_empty(max_width, total_height, 0)

        y_offset = 0
        for i, row in enumerate(rows):
            if has_where_clause and i == 1:
                y_offset += 1

            # Center align if row is narrower than max width
            result.paste(row, (max_width - row.width) // 2, y_offset, opaque=True)
            y_offset += row.height

        # Set baseline to middle of table
        result.baseline = total_height // 2

        return result

    def process_table_row(self, elem: ET.Element) -> MathBox:
        """Process a table row element."""
        cells = [self.process_table_cell(child) for child in elem
                 if local_name(child.tag) == 'mtd']

        if not cells:
            return MathBox()

        # Concatenate cells horizontally with spacing
        boxes_with_spacing = []
        for i, cell in enumerate(cells):
            boxes_with_spacing.append(cell)
            if i < len(cells) - 1:
                boxes_with_spacing.append(MathBox(CELL_SEPARATOR))

        return self.horizontal_concat(boxes_with_spacing)

    def process_table_cell(self, elem: ET.Element) -> MathBox:
        """Process a table cell element."""
        boxes = [box for box in (self.process_element(child) for child in elem) if box.width > 0]
        if boxes:
            return self.horizontal_concat(boxes)

        # Handle text content
        return MathBox(elem.text or '')

    # Fences

    def process_fenced(self, elem: ET.Element) -> MathBox:
        """Process a fenced expression (with braces, brackets, etc.)."""
        open_delim = elem.get('open', '(')
        close_delim = elem.get('close', ')')
        separators = elem.get('separators', ',')

        children = list(elem)
        boxes = []
        for i, child in enumerate(children):
            child_box = self.process_element(child)
            if child_box.width > 0:
                boxes.append(child_box)
                # Add separator between elements if specified
                if i < len(children) - 1 and separators:
                    boxes.append(MathBox(separators))

        content_box = self.horizontal_concat(boxes)

        # For empty or single-line content, just add delimiters
        if content_box.height <= 1:
            return MathBox(open_delim + content_box.row_text() + close_delim)

        # Special handling for braces - need multi-line
        if open_delim == '{':
            return glyphs.create_multi_line_brace(content_box)

        return glyphs.create_multi_line_delimiters(content_box, open_delim, close_delim)

    # Horizontal composition

    @staticmethod
    def needs_operator_spacing(box: MathBox) -> bool:
        """True for a large operator drawn with limits above and below it.

        Only boxes of three or more rows qualify, so a sum with a single
        limit stays tight against its neighbours.
        """
        if box.height <= 2:
            return False
        return any(char in LARGE_OPERATORS for row in box.content for char in row)

    def add_operator_spacing(self, boxes: List[MathBox]) -> List[MathBox]:
        """Add a space on each side of large operators with limits."""
        result = []
        last = len(boxes) - 1

        for i, box in enumerate(boxes):
            spaced = self.needs_operator_spacing(box)
            if spaced and i > 0:
                result.append(MathBox(' '))
            result.append(box)
            if spaced and i < last:
                result.append(MathBox(' '))

        return result

    @staticmethod
    def single_bracket(box: MathBox) -> Optional[str]:
        """Return the bracket if the box holds nothing but one bracket character."""
        if box.height == 1 and box.width == 1 and box.content[0][0] in BRACKETS:
            return box.content[0][0]
        return None

    def upgrade_parentheses(self, boxes: List[MathBox]) -> List[MathBox]:
        """Replace single brackets around tall content with multi-line ones."""
        if len(boxes) < 3:
            return boxes  # Need at least opening paren, content, closing paren

        result = []
        i = 0
        while i < len(boxes):
            open_char = self.single_bracket(boxes[i]) if i + 2 < len(boxes) else None
            close_char = glyphs.MATCHING_DELIMITERS.get(open_char)

            if close_char is not None:
                close_idx = self._matching_bracket(boxes, i, open_char, close_char)
                if close_idx is not None:
                    content = boxes[i + 1:close_idx]
                    max_height = max((box.height for box in content), default=0)

                    if max_height >= 3:
                        result.append(glyphs.create_multiline_paren(open_char, max_height))
                        result.extend(content)
                        result.append(glyphs.create_multiline_paren(close_char, max_height))
                        i = close_idx + 1
                        continue

            result.append(boxes[i])
            i += 1

        return result

    def _matching_bracket(self, boxes: List[MathBox], start: int,
                          open_char: str, close_char: str) -> Optional[int]:
        depth = 1
        for j in range(start + 1, len(boxes)):
            char = self.single_bracket(boxes[j])
            if char == open_char:
                depth += 1
            elif char == close_char:
                depth -= 1
                if depth == 0:
                    return j
        return None

    def horizontal_concat(self, boxes: List[MathBox]) -> MathBox:
        """Concatenate boxes horizontally, aligning at baseline."""
        boxes = [box for box in boxes if not box.is_empty]

        if not boxes:
            return MathBox()

        if len(boxes) == 1:
            return boxes[0]

        boxes = self.add_operator_spacing(boxes)
        boxes = self.upgrade_parentheses(boxes)

        # Keep flat expressions on a single text line
        if all(box.height <= 1 for box in boxes):
            return MathBox(''.join(box.row_text() for box in boxes))

        width = sum(box.width for box in boxes)
        max_above = max(box.baseline for box in boxes)
        max_below = max(box.height - box.baseline for box in boxes)
        height = max_above + max_below
        baseline = max_above

        result = MathBox.create_empty(width, height, baseline)

        # Place each box so its baseline lands on the shared one
        x_offset = 0
        for box in boxes:
            result.paste(box, x_offset, baseline - box.baseline)
            x_offset += box.width

        return result
