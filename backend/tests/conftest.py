import os

import pytest


@pytest.fixture(autouse=True, scope="session")
def _clear_srccheck_env():
    # Ensure tests don't inherit SRCCHECK_* settings from CI/host
    for key in [k for k in os.environ if k.upper().startswith("SRCCHECK_")]:
        os.environ.pop(key, None)
