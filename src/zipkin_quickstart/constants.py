"""
Constants and configuration values for the Zipkin quick-start installer.

This module contains all hardcoded values, URLs, timeouts, and other constants
used throughout the application.
"""

# Registry endpoints
REGISTRY_SEARCH_URL = "https://api.bintray.com/search/packages/maven"
REGISTRY_DOWNLOAD_BASE = "https://dl.bintray.com/openzipkin/maven"
REGISTRY_SUBJECT = "openzipkin"

# Project links shown when something goes wrong
ISSUES_URL = "https://github.com/openzipkin/zipkin/issues/new"

# Default artifact (no CLI arguments)
DEFAULT_GROUP = "io.zipkin.java"
DEFAULT_ARTIFACT_ID = "zipkin-server"
DEFAULT_CLASSIFIER = "exec"
DEFAULT_TARGET = "zipkin.jar"
LATEST_VERSION = "LATEST"
EXEC_CLASSIFIER = "exec"
ARTIFACT_EXTENSION = ".jar"

# Network settings (in seconds)
DEFAULT_REQUEST_TIMEOUT = 30
DEFAULT_CHUNK_SIZE = 8192

# Verification side-files, appended to the artifact URL and filename
CHECKSUM_SUFFIX = ".md5"
SIGNATURE_SUFFIX = ".asc"
SIDE_FILE_SUFFIXES = (
    CHECKSUM_SUFFIX,
    SIGNATURE_SUFFIX,
    CHECKSUM_SUFFIX + SIGNATURE_SUFFIX,
)
CHECKSUM_ALGORITHM = "md5"

# GPG settings
SIGNING_KEY_ID = "D401AB61"
KEYSERVER = "keyserver.ubuntu.com"
GPG_BINARY = "gpg"
SIGNING_KEY_OWNER = "JFrog BinTray"
# Release versions are plain MAJOR.MINOR.PATCH in ASCII digits, nothing else
# Release versions are plain MAJOR.MINOR.PATCH, nothing else
VERSION_REGEX_PATTERN = r"^[0-9]+\.[0-9]+\.[0-9]+$"

# Logging configuration
LOGGER_NAME = "zipkin_quickstart"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
LOG_LEVEL_ENV_VAR = "ZIPKIN_QUICKSTART_LOG_LEVEL"

# Configuration file
APP_NAME = "zipkin-quickstart"
CONFIG_FILE_NAME = "quickstart.yaml"
CONFIG_ENV_PREFIX = "ZIPKIN_QUICKSTART_"
