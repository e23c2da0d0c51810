"""Constants used throughout Groot."""

# Directory names
GROOT_DIR = ".groot"
OBJECTS_DIR = "objects"

# File names
HEAD_FILE = "HEAD"
INDEX_FILE = "index"

# Special reference accepted wherever a commit id is expected
HEAD_REF = "HEAD"

# Hash algorithm
HASH_ALGORITHM = "sha256"
HASH_LENGTH = 64  # SHA-256 produces 64 hex characters

# Shortest hex prefix accepted when resolving a commit id
MIN_PREFIX_LENGTH = 4
SHORT_HASH_LENGTH = 7

# Serialization format version for commit and index records
FORMAT_VERSION = 1

# Exit codes
EXIT_USER_ERROR = 1
EXIT_SYSTEM_ERROR = 2

# Environment variables read by the CLI
ENV_REPO = "GROOT_REPO"
ENV_LOG_FILE = "GROOT_LOG_FILE"
