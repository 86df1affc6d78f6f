"""Pytest fixtures for infrastructure tests."""

from pathlib import Path

import pytest

from IAC.configs.base import EnvironmentConfig
from IAC.techhealth import create_techhealth_stack


@pytest.fixture
def iac_project_root():
    """Return the IAC project root directory."""
    return Path(__file__).parent.parent.parent / "IAC"


@pytest.fixture
def python_files_in_iac(iac_project_root):
    """Return all Python files in IAC directory."""
    return [f for f in iac_project_root.rglob("*.py") if "__pycache__" not in str(f)]


@pytest.fixture
def dev_config() -> EnvironmentConfig:
    """Development environment configuration."""
    return EnvironmentConfig(environment="dev")


@pytest.fixture
def techhealth_stack(dev_config):
    """TechHealth stack declared for dev."""
    return create_techhealth_stack(dev_config)
