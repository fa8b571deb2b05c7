"""Shared test fixtures."""

import pytest

from pycomp2iter.target.javascript import JavaScriptTarget
from pycomp2iter.target.python import PythonTarget
from pycomp2iter.target.rust import RustTarget


@pytest.fixture
def python_target():
    return PythonTarget()


@pytest.fixture
def rust_target():
    return RustTarget()


@pytest.fixture
def js_target():
    return JavaScriptTarget()
