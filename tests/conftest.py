"""Shared pytest fixtures for all tests."""

import pytest
import pytest_asyncio

from common.config import Config
from fakes import FakeWriteStore
from transfer.write_api_client import WriteAPIClient


@pytest.fixture
def temp_config_dir(tmp_path):
    """
    Create temporary config directory.

    Returns:
        Path to temporary .flaredrive directory
    """
    config_dir = tmp_path / '.flaredrive'
    config_dir.mkdir()
    return config_dir


@pytest.fixture
def temp_config(temp_config_dir):
    """Config instance backed by a temp config file."""
    return Config(temp_config_dir / 'config.json')


@pytest.fixture
def store():
    return FakeWriteStore()


@pytest_asyncio.fixture
async def write_client(temp_config, store):
    """WriteAPIClient whose HTTP session talks to the fake store."""
    client = WriteAPIClient(temp_config, transport=store)
    yield client
    await client.close()


@pytest.fixture
def sample_file(tmp_path):
    """
    Create a sample file for testing file uploads.

    Returns:
        Path to sample text file
    """
    file_path = tmp_path / 'test.txt'
    file_path.write_text('Sample content for testing')
    return file_path


@pytest.fixture
def multiple_sample_files(tmp_path):
    """
    Create multiple sample files for testing bulk operations.

    Returns:
        List of Paths to sample files
    """
    files = []
    for i in range(3):
        file_path = tmp_path / f'test{i}.txt'
        file_path.write_text(f'Sample content {i}')
        files.append(file_path)
    return files
