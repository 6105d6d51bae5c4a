"""
Pytest configuration and fixtures
"""

import os

# Settings are read at import time.
os.environ.setdefault("PORT", "8000")
os.environ.setdefault("RUN_ETL_ON_STARTUP", "false")

import pytest
from ingestion.loaders.snapshot_store import JsonSnapshotStore
from tests.helpers import make_university


@pytest.fixture
def mock_api_data():
    """Raw records as returned by the directory API"""
    return [
        {
            "name": "Test University",
            "country": "United States",
            "alpha_two_code": "US",
            "domains": ["test.edu"],
            "web_pages": ["https://test.edu"],
            "state-province": "California",
        },
        {
            "name": "Sample College",
            "country": "United States",
            "alpha_two_code": "US",
            "domains": ["sample.edu", "sample.org"],
            "web_pages": ["https://sample.edu"],
            "state-province": None,
        },
    ]


@pytest.fixture
def snapshot_path(tmp_path):
    return tmp_path / "data" / "universities.json"


@pytest.fixture
def store(snapshot_path):
    return JsonSnapshotStore(str(snapshot_path))


@pytest.fixture
def five_universities():
    return [make_university(f"University {i}") for i in range(5)]
