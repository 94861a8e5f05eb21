"""Remediation hints for environment variable validation failures."""

from typing import Final


DEFAULT_HINT: Final = "See the README for the accepted values."

# Keyed by pydantic error type
ERROR_HINTS: Final[dict[str, str]] = {
    "missing": "This variable is required. Set it in the environment or in .env.",
    "int_parsing": "Use a whole number.",
    "float_parsing": "Use a number.",
    "bool_parsing": "Use true or false.",
    "greater_than_equal": "The value is below the allowed minimum.",
    "greater_than": "The value is below the allowed minimum.",
    "less_than_equal": "The value is above the allowed maximum.",
    "literal_error": "The value is not one of the accepted choices.",
    "value_error": "The value is malformed.",
}

# Keyed by environment variable; these win over ERROR_HINTS
VARIABLE_HINTS: Final[dict[str, str]] = {
    "TMDB_API_KEY": "Create a v3 API key at https://www.themoviedb.org/settings/api.",
    "TMDB_BASE_URL": "Use an http(s) URL such as 'https://api.themoviedb.org/3'.",
    "TMDB_API_RETRIES": "Must be between 0 and 10.",
    "TMDB_CACHE_TTL_MS": "Must be 0 or more milliseconds.",
    "LOG_LEVEL": "Must be one of: debug, info, warn, error.",
}


def hint_for(error_type: str, variable: str | None = None) -> str:
    """Pick the most specific hint for a failing variable.

    Args:
        error_type: Pydantic error type, e.g. 'missing'.
        variable: Environment variable name, if known.

    Returns:
        Hint text.
    """
    if variable is not None:
        specific = VARIABLE_HINTS.get(variable.upper())
        if specific is not None:
            return specific
    return ERROR_HINTS.get(error_type, DEFAULT_HINT)


def describe_setting_error(variable: str, message: str, error_type: str) -> str:
    """Render one failing variable as '<VAR>: <message> (hint: ...)'."""
    return f"{variable}: {message} (hint: {hint_for(error_type, variable)})"
