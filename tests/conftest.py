"""
Pytest configuration file for the lazy sequence tests.

This file ensures that the project root is in the Python path
so that test files can import lazy, adapters, models and utils.
"""

import sys
from pathlib import Path

# Add the project root and this directory to the Python path
for path in (Path(__file__).parent.parent, Path(__file__).parent):
    if str(path) not in sys.path:
        sys.path.insert(0, str(path))

import pytest

from fruit_models import Fruit, make_fruit_basket
from utils import clear_performance_metrics


@pytest.fixture
def fruit_list():
    """The fruit basket shared by the filter tests"""
    return [
        Fruit("banana"),
        Fruit("apple"),
        Fruit("pear"),
        Fruit("pineapple"),
        Fruit("strawberry"),
        Fruit("grapes"),
        Fruit("kiwi"),
    ]


@pytest.fixture
def fruit_basket(fruit_list):
    return make_fruit_basket(*fruit_list)


@pytest.fixture
def call_counter():
    """Identity function that counts how often it was called"""
    class Counter:
        def __init__(self):
            self.calls = 0

        def __call__(self, x):
            self.calls += 1
            return x

    return Counter()


@pytest.fixture(autouse=True)
def clean_performance_metrics():
    """Every test starts with an empty performance ledger"""
    clear_performance_metrics()
    yield
    clear_performance_metrics()
