"""
Pytest configuration for mathml_to_ascii
"""

import logging

import pytest

from mathml_to_ascii import MathMLParser

MATHML_NS = 'http://www.w3.org/1998/Math/MathML'


@pytest.fixture(autouse=True)
def configure_logging():
    """Reset the package logger so handlers installed by the CLI don't leak between tests."""
    package_logger = logging.getLogger('mathml_to_ascii')
    package_logger.handlers.clear()
    package_logger.setLevel(logging.NOTSET)

    yield

    package_logger.handlers.clear()
    package_logger.setLevel(logging.NOTSET)


@pytest.fixture
def parser():
    """A parser using Unicode scripts."""
    return MathMLParser()


@pytest.fixture
def render():
    """Render a MathML fragment (wrapped in a math element) to text."""
    def _render(fragment, use_unicode=True):
        markup = f'<math xmlns="{MATHML_NS}">{fragment}</math>'
        return MathMLParser(use_unicode=use_unicode).parse(markup).render()
    return _render
