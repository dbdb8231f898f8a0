"""Shared fixtures for asset cleaner tests."""
from pathlib import Path

import pytest

from asset_cleaner.config import ScanConfig


FIXTURE_APP = Path(__file__).parent / 'fixtures' / 'flutter_app'


@pytest.fixture
def fixture_app():
    """Path to the static Flutter fixture project."""
    return FIXTURE_APP


@pytest.fixture
def scan_config():
    """Default Flutter scan configuration."""
    return ScanConfig()


@pytest.fixture
def make_project(tmp_path):
    """Build a throwaway project from a {relative path: content} mapping.

    str content is written as UTF-8 text, bytes content as-is.
    """
    def _make(files):
        for relative_path, content in files.items():
            target = tmp_path / relative_path
            target.parent.mkdir(parents=True, exist_ok=True)
            if isinstance(content, bytes):
                target.write_bytes(content)
            else:
                target.write_text(content, encoding='utf-8')
        return tmp_path

    return _make
