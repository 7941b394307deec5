# tests/conftest.py
"""
Global test bootstrap
- Sets the admin identity and signing secret BEFORE the package is imported
  (settings are read from the environment at import time)
- Pulls in the shared fixtures (store, app, client, auth, factories)
"""

import os

os.environ["ADMIN_EMAIL"] = "admin@example.com"
os.environ["ADMIN_PASSWORD"] = "s3cret-pass"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["ENVIRONMENT"] = "test"
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest  # noqa: E402

from tests.fixtures.app import *        # noqa: F401,F403,E402
from tests.fixtures.auth import *       # noqa: F401,F403,E402
from tests.fixtures.factories import *  # noqa: F401,F403,E402


@pytest.fixture()
def anyio_backend() -> str:
    return "asyncio"
