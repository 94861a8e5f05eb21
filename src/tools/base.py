"""Base class and result model for MCP tools."""

from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any, ClassVar, Generic, Protocol, TypeVar

import structlog
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from src.fetch.errors import (
    ConfigurationError,
    FetchValidationError,
    TmdbApiError,
)


logger = structlog.get_logger()

InputT = TypeVar("InputT", bound=BaseModel)

ERROR_CODE_VALIDATION = "VALIDATION_ERROR"
ERROR_CODE_TMDB_API = "TMDB_API_ERROR"
ERROR_CODE_CONFIG = "CONFIG_ERROR"
ERROR_CODE_UNKNOWN = "UNKNOWN_ERROR"


class TmdbFetcher(Protocol):
    """Anything that can fetch a TMDb endpoint (the client, or a test fake)."""

    def fetch(
        self, endpoint: str, params: Mapping[str, str | int | None] | None = None
    ) -> Any:
        """Fetch an endpoint and return the parsed payload."""
        ...


class ToolResult(BaseModel):
    """Outcome of a tool call, ready to be rendered as MCP text content."""

    model_config = ConfigDict(frozen=True)

    text: str
    is_error: bool = False
    error_code: str | None = None
    error_type: str | None = None
    data: dict[str, Any] | None = Field(
        default=None, description="Structured output, when the call succeeded"
    )


def error_code_for(error: BaseException) -> str:
    """Map a failure to the error code reported to MCP clients.

    Args:
        error: The failure raised while executing a tool.

    Returns:
        Machine-readable error code.
    """
    code = getattr(error, "code", None)
    if isinstance(code, str):
        return code
    if isinstance(error, FetchValidationError):
        return ERROR_CODE_VALIDATION
    if isinstance(error, TmdbApiError):
        return ERROR_CODE_TMDB_API
    if isinstance(error, ConfigurationError):
        return ERROR_CODE_CONFIG
    return ERROR_CODE_UNKNOWN


class BaseTool(ABC, Generic[InputT]):
    """A single MCP tool backed by the TMDb client.

    Subclasses declare their metadata and input model and implement
    ``execute``. ``run`` wraps execution with input validation and turns
    every failure into an error result instead of raising.
    """

    name: ClassVar[str]
    title: ClassVar[str]
    description: ClassVar[str]
    input_model: ClassVar[type[BaseModel]]

    def __init__(self, client: TmdbFetcher) -> None:
        """Initialize the tool.

        Args:
            client: TMDb fetcher used by the tool.
        """
        self._client = client

    def run(self, arguments: Mapping[str, Any] | None = None) -> ToolResult:
        """Validate arguments and execute the tool.

        Args:
            arguments: Raw tool arguments from the MCP client.

        Returns:
            Success or error result; never raises.
        """
        with structlog.contextvars.bound_contextvars(tool=self.name):
            try:
                params = self.validate_input(arguments or {})
                return self.execute(params)
            except Exception as e:  # noqa: BLE001
                return self.format_error(e)

    def validate_input(self, arguments: Mapping[str, Any]) -> InputT:
        """Validate raw arguments against the input model.

        Args:
            arguments: Raw tool arguments.

        Returns:
            Parsed input model.

        Raises:
            FetchValidationError: If the arguments are invalid.
        """
        try:
            return self.input_model.model_validate(dict(arguments))  # type: ignore[return-value]
        except ValidationError as e:
            field_errors = ", ".join(
                f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}"
                for err in e.errors()
            )
            msg = f"Invalid input: {field_errors}"
            raise FetchValidationError(msg) from None

    @abstractmethod
    def execute(self, params: InputT) -> ToolResult:
        """Run the tool with validated input."""

    def format_success(
        self, text: str, data: BaseModel | None = None
    ) -> ToolResult:
        """Build a success result.

        Args:
            text: Text shown to the user.
            data: Optional structured output.

        Returns:
            Success ToolResult.
        """
        logger.debug("tool_execution_succeeded", tool=self.name)
        return ToolResult(
            text=text,
            data=data.model_dump() if data is not None else None,
        )

    def format_error(self, error: BaseException) -> ToolResult:
        """Build an error result and log the failure.

        Args:
            error: The failure raised during the call.

        Returns:
            Error ToolResult with code and type.
        """
        error_code = error_code_for(error)
        error_type = type(error).__name__
        message = str(error)
        logger.error(
            "tool_execution_failed",
            tool=self.name,
            error=message,
            error_code=error_code,
            error_type=error_type,
        )
        return ToolResult(
            text=f"Error: {message}",
            is_error=True,
            error_code=error_code,
            error_type=error_type,
        )
