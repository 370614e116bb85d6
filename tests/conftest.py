"""Shared test fixtures."""

import pytest

import pycomprehension


@pytest.fixture
def comp():
    return pycomprehension.new()


@pytest.fixture
def env():
    return {"d": 5, "double": lambda v: v * 2}
