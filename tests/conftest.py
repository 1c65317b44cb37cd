"""
Shared pytest fixtures for resiliency-simulator tests.
"""

import logging
from pathlib import Path

import pytest

from resiliencysim.core import SimulationContext
from resiliencysim.random_source import RandomSource


@pytest.fixture(scope="session")
def test_output_root() -> Path:
    """
    Returns the root test_output directory. Created once per test session.
    Files here persist after tests complete for easy access.
    """
    output_dir = Path(__file__).parent.parent / "test_output"
    output_dir.mkdir(exist_ok=True)
    return output_dir


@pytest.fixture
def test_output_dir(request, test_output_root) -> Path:
    """
    Returns a directory for the current test to write output files.
    Directory structure: test_output/<module_name>/<test_name>/

    Trial CSVs and plots written here can be inspected after the run.
    """
    module_name = request.module.__name__.split(".")[-1]
    test_name = request.node.name

    test_dir = test_output_root / module_name / test_name
    test_dir.mkdir(parents=True, exist_ok=True)
    for stale in test_dir.glob("*.csv"):
        stale.unlink()
    return test_dir


@pytest.fixture
def context() -> SimulationContext:
    """A fresh trial context with a fixed seed."""
    return SimulationContext(rng=RandomSource(1234))


@pytest.fixture(autouse=True)
def reset_resiliencysim_logging():
    """Reset logging state before each test.

    Removes all handlers except a NullHandler and resets the level so a
    test enabling console or file logging does not leak into the next one.
    """
    logger = logging.getLogger("resiliencysim")

    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
        if not isinstance(handler, logging.NullHandler):
            handler.close()
    logger.addHandler(logging.NullHandler())
    logger.setLevel(logging.NOTSET)

    yield

    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
        if not isinstance(handler, logging.NullHandler):
            handler.close()
    logger.addHandler(logging.NullHandler())
    logger.setLevel(logging.NOTSET)
