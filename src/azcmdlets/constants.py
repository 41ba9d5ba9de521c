# ==========================================
# 1. Environment Variables
# ==========================================
ENV_TEST_MODE = "AZURE_TEST_MODE"
ENV_HTTPMOCK_OUTPUT = "TEST_HTTPMOCK_OUTPUT"
ENV_CSM_CONNECTION_STRING = "TEST_CSM_ORGID_AUTHENTICATION"
ENV_RDFE_CONNECTION_STRING = "TEST_ORGID_AUTHENTICATION"
ENV_STORAGE_ACCOUNT = "AZURE_STORAGE_ACCOUNT"
ENV_APP_SETTINGS = "AZCMDLETS_APP_SETTINGS"

# ==========================================
# 2. Test Session Defaults
# ==========================================
TEST_ENVIRONMENT_NAME = "__test-environment"
TEST_SUBSCRIPTION_NAME = "__test-subscriptions"
PLACEHOLDER_ENVIRONMENT_NAME = "foo"
DEFAULT_TEST_USER = "fakeuser@microsoft.com"
FAKE_SUBSCRIPTION_ID = "00000000-0000-0000-0000-000000000000"
FAKE_TENANT_ID = "00000000-0000-0000-0000-000000000000"
FAKE_ACCESS_TOKEN = "fake-access-token"

SESSION_RECORDS_DIR_NAME = "SessionRecords"
RECORDING_EXTENSION = ".yaml"
VARIABLES_EXTENSION = ".variables.json"

# Variable names stored next to a recording
VARIABLE_SUBSCRIPTION_ID = "SubscriptionId"
VARIABLE_TENANT_ID = "TenantId"

PROFILE_DIRECTORY = "~/.azcmdlets"
PROFILE_FILE = "AzureProfile.json"

DEFAULT_APP_SETTINGS_FILE = "appsettings.json"

# ==========================================
# 3. Cloud Endpoints
# ==========================================
AZURE_CLOUD_NAME = "AzureCloud"
AZURE_STACK_ENVIRONMENT_NAME = "AzureStack"

AZURE_CLOUD_ENDPOINTS = {
    "ActiveDirectory": "https://login.microsoftonline.com/",
    "ActiveDirectoryServiceEndpointResourceId": "https://management.core.windows.net/",
    "Gallery": "https://gallery.azure.com/",
    "ServiceManagement": "https://management.core.windows.net/",
    "ResourceManager": "https://management.azure.com/",
    "Graph": "https://graph.windows.net/",
    "AzureDataLakeStoreFileSystemEndpointSuffix": "azuredatalakestore.net",
    "AzureDataLakeAnalyticsCatalogAndJobEndpointSuffix": "azuredatalakeanalytics.net",
}

# ==========================================
# 4. API Versions
# ==========================================
AZURE_STACK_API_VERSION = "2015-11-01"
AZURE_STACK_SUBSCRIPTIONS_NAMESPACE = "Microsoft.Subscriptions"
AUTHORIZATION_API_VERSION = "2014-07-01-preview"

# ==========================================
# 5. Script Host
# ==========================================
ERROR_STREAM_FAILURE_MESSAGE = (
    "Test failed due to a non-empty error stream, check the error stream "
    "in the test log for more details."
)
PREFERENCE_STOP = "Stop"
PREFERENCE_CONTINUE = "Continue"
PREFERENCE_SILENTLY_CONTINUE = "SilentlyContinue"
