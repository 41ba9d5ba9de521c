from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Record/playback
    AZURE_TEST_MODE: str = "Playback"
    TEST_HTTPMOCK_OUTPUT: str = ""

    # Test environment connection strings (Key=Value;Key=Value)
    TEST_CSM_ORGID_AUTHENTICATION: str = ""
    TEST_ORGID_AUTHENTICATION: str = ""

    # Context of a fresh (non-test) session; credentials come from azure-identity
    AZURE_SUBSCRIPTION_ID: str = ""
    AZURE_TENANT_ID: str = ""

    # Default storage account attached to the test subscription
    AZURE_STORAGE_ACCOUNT: str = ""

    # JSON file holding test app settings (TenantUser1, AadEnvironment, ...)
    AZCMDLETS_APP_SETTINGS: str = "appsettings.json"

    AZCMDLETS_DEBUG: bool = False

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


def get_settings() -> Settings:
    """Read settings from the environment on every call so tests can monkeypatch them."""
    return Settings()
