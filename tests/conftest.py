import pytest

from certified_algebraics.config import set_default_budget, set_default_precision


@pytest.fixture(autouse=True)
def _fresh_session_defaults():
    """Every test starts from the environment-derived session defaults."""
    set_default_precision(None)
    set_default_budget(None)
    yield
    set_default_precision(None)
    set_default_budget(None)
