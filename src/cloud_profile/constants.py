"""Constants for cloud-profile."""

# Well-known public client id shared by every environment
DEFAULT_CLIENT_ID = "04b07795-8ddb-461a-bbee-02f9e1bf7b46"

# Default environment used when none is configured
DEFAULT_ENVIRONMENT = "AzureCloud"

# Profile home (overridable through CLOUD_PROFILE_HOME)
PROFILE_HOME_ENV = "CLOUD_PROFILE_HOME"
PROFILE_APP_NAME = "cloud-profile"

# Files inside the profile home
CONFIG_FILE = "config.yaml"
ENVIRONMENTS_FILE = "environments.yaml"
LOCK_SUFFIX = ".lock"

# Query parameter carrying the home realm hint
REALM_QUERY_PARAM = "whr"

# Classic service management API version
ASM_API_VERSION = "2014-06-01"

# Version
PROFILE_VERSION = "0.1.0"
