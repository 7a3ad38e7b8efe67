"""Worked examples of MathML to ASCII conversion, one per construct."""

from typing import List, Tuple

from .converter import mathml_to_ascii

EXAMPLES: List[Tuple[str, str]] = [
    ("Fraction with expressions", '''
    <math xmlns="http://www.w3.org/1998/Math/MathML">
        <mrow>
            <mi>y</mi><mo>=</mo>
            <mfrac>
                <mrow><mi>a</mi><mo>+</mo><mi>b</mi></mrow>
                <mi>c</mi>
            </mfrac>
        </mrow>
    </math>
    '''),

    ("Scripts", '''
    <math xmlns="http://www.w3.org/1998/Math/MathML">
        <mrow>
            <msub><mi>x</mi><mi>i</mi></msub><mo>+</mo>
            <msup><mi>y</mi><mn>2</mn></msup><mo>+</mo>
            <msub><mi>G</mi><mtext>left</mtext></msub>
        </mrow>
    </math>
    '''),

    ("Product with limits", '''
    <math xmlns="http://www.w3.org/1998/Math/MathML">
        <mrow>
            <mi>P</mi><mo>=</mo>
            <msubsup><mo>∏</mo><mrow><mi>i</mi><mo>=</mo><mn>1</mn></mrow><mi>n</mi></msubsup>
            <msub><mi>p</mi><mi>i</mi></msub>
        </mrow>
    </math>
    '''),

    ("Square root of a fraction", '''
    <math xmlns="http://www.w3.org/1998/Math/MathML">
        <msqrt>
            <mfrac>
                <mrow><msup><mi>x</mi><mn>2</mn></msup><mo>+</mo><mn>1</mn></mrow>
                <mrow><mi>n</mi><mo>-</mo><mn>1</mn></mrow>
            </mfrac>
        </msqrt>
    </math>
    '''),

    ("Cube root", '''
    <math xmlns="http://www.w3.org/1998/Math/MathML">
        <mroot><mi>x</mi><mn>3</mn></mroot>
    </math>
    '''),

    ("Fenced fraction", '''
    <math xmlns="http://www.w3.org/1998/Math/MathML">
        <mfenced open="[" close="]">
            <mfrac><mi>p</mi><mi>q</mi></mfrac>
        </mfenced>
    </math>
    '''),

    ("Definition with a where clause", '''
    <math xmlns="http://www.w3.org/1998/Math/MathML">
        <mtable>
            <mtr>
                <mtd><mi>f</mi><mo>(</mo><mi>x</mi><mo>)</mo></mtd>
                <mtd><mo>=</mo><msup><mi>x</mi><mn>2</mn></msup></mtd>
            </mtr>
            <mtr>
                <mtd><mtext>where</mtext></mtd>
                <mtd><mi>x</mi><mo>&gt;</mo><mn>0</mn></mtd>
            </mtr>
        </mtable>
    </math>
    '''),
]


def render_demo(use_unicode: bool = True) -> str:
    """Render every example under a title banner."""
    sections = []
    for title, mathml in EXAMPLES:
        sections.append(f"{title}:\n{'=' * 60}\n{mathml_to_ascii(mathml, use_unicode)}\n{'=' * 60}")
    return '\n\n'.join(sections)
