"""
Pytest configuration and shared fixtures.
"""

import json
import logging
from pathlib import Path

import pytest

FIXTURES = Path(__file__).parent / "fixtures"


@pytest.fixture(autouse=True)
def reset_package_logger():
    """CLI runs attach handlers bound to CliRunner streams; drop them between tests."""
    yield
    logger = logging.getLogger("api_module_agent")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def spec_path() -> Path:
    return FIXTURES / "manage_openapi.json"


@pytest.fixture
def spec(spec_path: Path) -> dict:
    return json.loads(spec_path.read_text(encoding="utf-8"))
