import os

import pytest

# Keep test runs independent of a developer's .env and external services
os.environ["APP_ENV"] = "testing"
os.environ["SENTRY_ENABLED"] = "false"
os.environ.pop("SUPABASE_URL", None)
os.environ.pop("SUPABASE_ANON_KEY", None)

from cognita_gateway.services import background_tasks  # noqa: E402
from cognita_gateway.services import connection_pool  # noqa: E402
from tests.helpers.mocks import make_settings  # noqa: E402


@pytest.fixture
def settings():
    """Settings with every vendor credential set and Supabase disabled."""
    return make_settings()


@pytest.fixture
def supabase_settings():
    return make_settings(supabase=True)


@pytest.fixture(autouse=True)
def _reset_module_state():
    """Connection pools and background task sets are module-level; isolate tests."""
    yield
    connection_pool._async_client_pool.clear()
    connection_pool._async_http_pool.clear()
    background_tasks._background_tasks.clear()
