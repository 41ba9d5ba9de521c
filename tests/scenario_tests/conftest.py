import os
from pathlib import Path

import pytest

SCENARIO_DIR = Path(__file__).parent

# Read before the root mock_env_vars fixture scrubs them; live tests get them back
LIVE_SETTINGS = (
    "AZURE_TEST_MODE",
    "TEST_CSM_ORGID_AUTHENTICATION",
    "TEST_ORGID_AUTHENTICATION",
    "AZURE_STORAGE_ACCOUNT",
)
_live_environment = {name: os.environ[name] for name in LIVE_SETTINGS if name in os.environ}


@pytest.fixture(autouse=True)
def scenario_settings(request, mock_env_vars, monkeypatch):
    """Recordings and app settings checked in next to the scenario tests."""
    monkeypatch.setenv("TEST_HTTPMOCK_OUTPUT", str(SCENARIO_DIR / "SessionRecords"))
    monkeypatch.setenv("AZCMDLETS_APP_SETTINGS", str(SCENARIO_DIR / "appsettings.json"))

    if request.node.get_closest_marker("live"):
        for name, value in _live_environment.items():
            monkeypatch.setenv(name, value)
