import os
import warnings

# Ignore warnings from third-party instrumentation
warnings.filterwarnings("ignore", category=DeprecationWarning, module="logfire.*")

# Set test environment variables before golive reads its config
os.environ.update(
    {
        "DEMO_MODE": "true",
        "PRIMARY_PLATFORM": "",
        "LOGFIRE_ENABLE": "false",
    }
)

# Import go-live fixtures so they are available to all tests
from tests.fixtures.go_live_fixtures import *  # noqa: E402, F403
