"""
Pytest configuration and shared fixtures for all javamaybe tests.

The parser (Earley tables) and the built-in type table are the expensive
parts, so they are shared per session; processors and facades hold no
per-unit state and are safe to share as well.
"""

import sys
import pytest
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))
sys.path.insert(0, str(Path(__file__).parent.parent))
from javamaybe.frontend.parser import default_parser
from javamaybe.resolution.facade import TypeFacade
from javamaybe.resolution.solvers import CombinedTypeSolver, ReflectionTypeSolver
from javamaybe.compiler.processor import SyncTaskProcessor


# =============================================================================
# Session-scoped fixtures (shared across all tests)
# =============================================================================

@pytest.fixture(scope="session")
def session_parser():
    """Process-wide parser; building it is the slow part of a test run."""
    return default_parser()


@pytest.fixture(scope="session")
def session_type_solver():
    """Built-in library types only."""
    return CombinedTypeSolver(ReflectionTypeSolver())


# =============================================================================
# Class-scoped fixtures (shared within a test class)
# =============================================================================

@pytest.fixture(scope="class")
def parser(session_parser):
    return session_parser


@pytest.fixture(scope="class")
def type_solver(session_type_solver):
    return session_type_solver


@pytest.fixture(scope="class")
def facade(session_type_solver):
    return TypeFacade(session_type_solver)


@pytest.fixture(scope="class")
def processor(session_type_solver):
    return SyncTaskProcessor(session_type_solver)


# =============================================================================
# Helper fixtures
# =============================================================================

@pytest.fixture
def specialize_factory(parser, processor):
    """
    Factory fixture: parse a source string and run the full pass pipeline.
    Returns the processed CompilationUnit.
    """
    from tests.test_utils import specialize

    def _specialize(source: str, source_file: str = "Main.java"):
        return specialize(source, parser=parser, processor=processor, source_file=source_file)

    return _specialize


def pytest_configure(config):
    """Register custom markers for test organization."""
    config.addinivalue_line(
        "markers", "integration: marks tests as end-to-end tests"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )
