"""Global constants for cf-deploy"""

import re

APP_NAME = "cf-deploy"

# Project files
CONFIG_FILE_NAMES = ["cf-deploy.yml", "cf-deploy.yaml"]
WRANGLER_CONFIG_FILE = "wrangler.toml"
DEFAULT_VERSION_SOURCE = "package.json"
DEFAULT_ASSETS_DIR = "public"
VERSIONS_JSON_NAME = "versions.json"

# Worker defaults
DEFAULT_WORKER_NAME = "my-worker"
DEFAULT_DOMAIN = "workers.dev"
DEFAULT_WRANGLER_COMMAND = "bun x wrangler"
DEFAULT_TEST_COMMAND = "bun x playwright test"

# Version that means "no version configured"
ZERO_VERSION = "0.0.0"

# Health checks
DEFAULT_HEALTH_PATH = "/api/health"
DEFAULT_HEALTH_TIMEOUT = 5.0  # seconds, per probe during manifest generation
DEFAULT_SMOKE_TIMEOUT = 10.0  # seconds, per request during smoke tests

# Traffic
FULL_TRAFFIC_PERCENT = 100

# Tag patterns
RELEASE_TAG_PATTERN = re.compile(r"^v\d")
PREVIEW_TAG_PREFIX = "pr-"
UNTAGGED_MARKER = "-"

# `wrangler versions list` field markers
VERSION_ID_MARKER = re.compile(r"^Version ID:\s+(.+)")
CREATED_MARKER = re.compile(r"^Created:\s+(.+)")
TAG_MARKER = re.compile(r"^Tag:\s+(.+)")

# Logging
LOG_FORMAT = "%(message)s"


# Error codes
class ErrorCode:
    CONFIG_ERROR = "CD001"
    MANIFEST_NOT_FOUND = "CD002"
    MANIFEST_INVALID = "CD003"
    VERSION_NOT_FOUND = "CD004"
    MISSING_VERSION_ID = "CD005"
    NOT_ENOUGH_RELEASES = "CD006"
    NO_TARGET_URL = "CD007"
    HEALTH_CHECK_FAILED = "CD008"
    SMOKE_CHECK_FAILED = "CD009"
    WRANGLER_FAILED = "CD010"
    PROJECT_EXISTS = "CD011"
    E2E_TESTS_FAILED = "CD012"


# Environment variables
ENV_CONFIG_PATH = "CF_DEPLOY_CONFIG"
ENV_WORKER_NAME = "CF_DEPLOY_NAME"
ENV_WORKER_DOMAIN = "CF_DEPLOY_DOMAIN"
ENV_WORKER_DIR = "CF_DEPLOY_DIR"
ENV_PRODUCTION_URL = "CF_DEPLOY_PRODUCTION_URL"
ENV_GITHUB_REPO = "CF_DEPLOY_GITHUB_REPO"
ENV_VERSION_SOURCE = "CF_DEPLOY_VERSION_SOURCE"
ENV_OUTPUT_FILE = "CF_DEPLOY_OUTPUT"
ENV_SMOKE_EXTRA = "CF_DEPLOY_SMOKE_EXTRA"
ENV_TEST_COMMAND = "CF_DEPLOY_TEST_CMD"
ENV_WRANGLER_COMMAND = "CF_DEPLOY_WRANGLER"
ENV_APP_VERSION = "APP_VERSION"
ENV_CHECK_HEALTH = "CHECK_HEALTH"

# Injected into child processes
ENV_SMOKE_URL = "SMOKE_URL"
ENV_TARGET_URL = "TARGET_URL"

# Display constants
EMOJI_SUCCESS = "✓"
EMOJI_ERROR = "✗"
EMOJI_WARNING = "⚠"
EMOJI_ARROW = "→"
EMOJI_ROCKET = "🚀"
EMOJI_LINK = "🔗"

# Messages templates
MSG_UPLOADING = "Uploading{label}..."
MSG_PREVIEW_URL = f"{EMOJI_LINK} Preview: {{url}}"
MSG_PROMOTING = f"{EMOJI_ROCKET} Promoting {{version_id}} ({{tag}}, commit {{sha}}) to 100%..."
MSG_ROLLING_BACK = f"Rolling back: {{current}} {EMOJI_ARROW} {{previous}}"
MSG_MANIFEST_WRITTEN = "versions.json: {versions} versions, {previews} PR previews"
MSG_RUN_VERSIONS_JSON = "Run 'cf-deploy versions-json' first"
