"""Configuration loading from environment variables and files."""

import json
import logging
import os

from dotenv import load_dotenv
from pydantic import BaseModel, Field, HttpUrl, TypeAdapter, field_validator

__all__ = ["Settings", "load_settings"]

load_dotenv()

logger = logging.getLogger(__name__)
_http_url_adapter = TypeAdapter(HttpUrl)


def _validate_http_url(v: str, label: str) -> str:
    try:
        url = _http_url_adapter.validate_python(v)
        if url.scheme not in ("http", "https"):
            raise ValueError("Only http:// and https:// endpoints allowed")
    except Exception as e:
        raise ValueError(f"Invalid {label}: {e}") from e
    return v


class Settings(BaseModel):
    """Runtime configuration for a one-shot JSON POST.

    Attributes:
        http_post_endpoint: HTTP endpoint that receives the payload.
        http_health_endpoint: Optional endpoint to probe before sending.
        payload_file_path: Path to the JSON file sent as request body.
        payload: Raw JSON text (loaded from file).
        headers: Extra headers sent with the request.
        timeout_sec: Transport-level timeout for one exchange.
        retries: Connection attempts per send.
        cancel_after_sec: Optional deadline after which the request is cancelled.
    """

    http_post_endpoint: str = Field(..., description="HTTP endpoint that receives the payload.")
    http_health_endpoint: str | None = Field(
        default=None,
        description=(
            "Optional HTTP endpoint to probe for health. "
            "If not set, no health check is performed."
        ),
    )
    payload_file_path: str = Field(..., description="Path to JSON file containing the request body")
    payload: str = Field(default="", description="Request body (populated from file).")
    headers: dict[str, str] = Field(default_factory=dict, description="Extra request headers.")
    timeout_sec: float = Field(default=30.0, gt=0, description="Transport timeout in seconds.")
    retries: int = Field(default=3, ge=1, description="Connection attempts per send.")
    cancel_after_sec: float | None = Field(
        default=None,
        description="Cancel the request if it has not completed after this many seconds.",
    )

    @field_validator("http_post_endpoint")
    @classmethod
    def validate_http_post_endpoint(cls, v: str) -> str:
        """Validate that endpoint is a valid HTTP(S) URL.

        Raises:
            ValueError: If URL is invalid or not http(s).
        """
        return _validate_http_url(v, "HTTP endpoint")

    @field_validator("http_health_endpoint")
    @classmethod
    def validate_http_health_endpoint(cls, v: str | None) -> str | None:
        """Validate that health endpoint (if provided) is a valid HTTP(S) URL."""
        if v is None:
            return v
        return _validate_http_url(v, "health endpoint")

    def load_payload(self) -> None:
        """Load and validate the request body from the payload file.

        The text is kept verbatim so the exact bytes are sent.

        Raises:
            ValueError: If file not found or does not contain valid JSON.
        """
        try:
            with open(self.payload_file_path, encoding="utf-8") as f:
                text = f.read()
        except FileNotFoundError as e:
            raise ValueError(f"Payload file not found: {self.payload_file_path}") from e

        try:
            json.loads(text)
        except json.JSONDecodeError as e:
            raise ValueError(f"Payload file contains invalid JSON: {self.payload_file_path}") from e

        self.payload = text
        logger.debug(f"Loaded {len(text)} characters of payload from {self.payload_file_path}")


def _parse_headers(raw: str | None) -> dict[str, str]:
    # Header values may carry credentials; errors name keys only
    if not raw:
        return {}
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise RuntimeError(
            f"REQUEST_HEADERS must be a JSON object (not valid JSON at position {e.pos})"
        ) from None
    if not isinstance(data, dict):
        raise RuntimeError(
            f"REQUEST_HEADERS must be a JSON object (got a JSON {type(data).__name__})"
        )
    bad_keys = [k for k, v in data.items() if not isinstance(v, str)]
    if bad_keys:
        raise RuntimeError(
            f"REQUEST_HEADERS must map header names to strings "
            f"(non-string value for: {', '.join(bad_keys)})"
        )
    return data


def load_settings() -> Settings:
    """Load and validate settings from environment and files.

    Required environment variables:
    - HTTP_POST_ENDPOINT: Valid HTTP(S) URL to POST to.
    - PAYLOAD_FILE_PATH: Path to JSON file with the request body.

    Optional:
    - HEALTH_CHECK_ENDPOINT: URL to probe before sending.
    - REQUEST_HEADERS: JSON object with extra headers.
    - REQUEST_TIMEOUT_SECONDS: Positive number (default 30).
    - REQUEST_RETRIES: Positive integer (default 3).
    - CANCEL_AFTER_SECONDS: Positive number; cancels the request after it.

    Returns:
        Validated Settings object.

    Raises:
        RuntimeError: If required env vars missing or malformed.
        ValueError: If configuration is invalid.
    """
    try:
        http_endpoint = os.environ["HTTP_POST_ENDPOINT"]
        payload_path = os.environ["PAYLOAD_FILE_PATH"]
    except KeyError as e:
        raise RuntimeError(f"Missing required environment variable: {e.args[0]}") from e

    timeout_raw = os.getenv("REQUEST_TIMEOUT_SECONDS", "30")
    retries_raw = os.getenv("REQUEST_RETRIES", "3")
    cancel_after_raw = os.getenv("CANCEL_AFTER_SECONDS")

    try:
        timeout_sec = float(timeout_raw)
        if timeout_sec <= 0:
            raise ValueError("Must be positive")
    except ValueError as e:
        raise RuntimeError(
            f"REQUEST_TIMEOUT_SECONDS must be a positive number (got: {timeout_raw})"
        ) from e

    try:
        retries = int(retries_raw)
        if retries <= 0:
            raise ValueError("Must be positive")
    except ValueError as e:
        raise RuntimeError(f"REQUEST_RETRIES must be a positive integer (got: {retries_raw})") from e

    cancel_after_sec: float | None = None
    if cancel_after_raw:
        try:
            cancel_after_sec = float(cancel_after_raw)
            if cancel_after_sec <= 0:
                raise ValueError("Must be positive")
        except ValueError as e:
            raise RuntimeError(
                f"CANCEL_AFTER_SECONDS must be a positive number (got: {cancel_after_raw})"
            ) from e

    settings = Settings(
        http_post_endpoint=http_endpoint,
        http_health_endpoint=os.getenv("HEALTH_CHECK_ENDPOINT"),
        payload_file_path=payload_path,
        headers=_parse_headers(os.getenv("REQUEST_HEADERS")),
        timeout_sec=timeout_sec,
        retries=retries,
        cancel_after_sec=cancel_after_sec,
    )

    # Load and validate payload file
    settings.load_payload()

    logger.info(
        f"Request configured: endpoint={settings.http_post_endpoint}, "
        f"headers={len(settings.headers)}, "
        f"timeout={settings.timeout_sec}s, retries={settings.retries}, "
        f"deadline={settings.cancel_after_sec or '<none>'}, "
        f"health_check={settings.http_health_endpoint or '<disabled>'}"
    )

    return settings
