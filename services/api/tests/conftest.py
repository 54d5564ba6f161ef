import sys
import os

import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from fakes import HEADER, FakeSpreadsheet, make_store


@pytest.fixture
def sample_rows():
    return [
        HEADER,
        ["1", "Ana", "Silva", "555-0101", "pending", '{"tier":"gold"}'],
        ["2", "Ben", "Okafor", "555-0102", "shipped", "not json"],
        ["3", "Cy"],
    ]


@pytest.fixture
def spreadsheet(sample_rows):
    return FakeSpreadsheet(sample_rows)


@pytest.fixture
def store(spreadsheet):
    return make_store(spreadsheet)
