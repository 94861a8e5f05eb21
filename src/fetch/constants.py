"""HTTP and cache constants for the fetch layer.

Centralizes all fetch-related constants to avoid duplication across modules.
"""

# HTTP Status Code Ranges
HTTP_STATUS_OK_MIN = 200
HTTP_STATUS_OK_MAX = 300
HTTP_STATUS_BAD_REQUEST = 400
HTTP_STATUS_TOO_MANY_REQUESTS = 429
HTTP_STATUS_SERVER_ERROR_MIN = 500

# TMDb defaults
DEFAULT_BASE_URL = "https://api.themoviedb.org/3"
API_KEY_PARAM = "api_key"
DEFAULT_USER_AGENT = "movie-mcp-server/1.0"
DEFAULT_TIMEOUT_SECONDS = 10.0

# Retry defaults
DEFAULT_MAX_ATTEMPTS = 3
DEFAULT_BASE_DELAY_MS = 1000
MAX_ATTEMPTS_LIMIT = 10

# Response Size Limits
DEFAULT_MAX_RESPONSE_SIZE_BYTES = 10 * 1024 * 1024  # 10 MB

# Cache defaults
DEFAULT_CACHE_TTL_MS = 5 * 60 * 1000
DEFAULT_CACHE_MAX_ENTRIES = 1000
DEFAULT_CACHE_MAX_MEMORY_MB = 50
DEFAULT_CACHE_CLEANUP_INTERVAL_MS = 60 * 1000
BYTES_PER_MB = 1024 * 1024

# Size estimation (bytes)
SIZE_NONE = 8
SIZE_NUMBER = 8
SIZE_BOOLEAN = 4
SIZE_CONTAINER_OVERHEAD = 24

# Log component names
COMPONENT_CACHE = "cache"
COMPONENT_FETCH = "fetch"
COMPONENT_RETRY = "retry"
