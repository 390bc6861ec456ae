import pytest

from leak_intake.catalog import StepCatalog


@pytest.fixture(scope="session")
def catalog():
    """Load the bundled StepCatalog once for the entire test session."""
    c = StepCatalog()
    c.load()
    return c


@pytest.fixture
def full_steps(catalog):
    return catalog.get_flow("full")


@pytest.fixture
def compact_steps(catalog):
    return catalog.get_flow("compact")
