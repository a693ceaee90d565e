"""Pre-flight validator: checks that the configured request could be sent."""

import logging
import re

from netrequest.adapters.driven.config.settings import Settings, load_settings
from netrequest.adapters.driven.logging.logging_config import configure_logs
from netrequest.core.errors import ConfigurationError
from netrequest.core.json_post import validate_address

__all__ = ["check_request", "main"]

logger = logging.getLogger(__name__)

# RFC 9110 token characters
_HEADER_NAME = re.compile(r"^[!#$%&'*+\-.^_`|~0-9A-Za-z]+$")


def check_request(settings: Settings) -> None:
    """Apply the request's own send-time checks to loaded settings.

    Args:
        settings: Loaded settings.

    Raises:
        ConfigurationError: If the endpoint is not an absolute URI or a
            header name is not a valid HTTP token.
    """
    validate_address(settings.http_post_endpoint)
    if settings.http_health_endpoint:
        validate_address(settings.http_health_endpoint)

    bad_names = [name for name in settings.headers if not _HEADER_NAME.match(name)]
    if bad_names:
        raise ConfigurationError(f"Invalid header name(s): {', '.join(map(repr, bad_names))}")


def main() -> int:
    """Validate the request configuration without sending anything.

    Validates:
    - Required environment variables are set.
    - Payload file exists and is valid JSON.
    - Optional headers, timeout, retries and deadline are well-formed.
    - The endpoint passes the same address check the request applies.
    - Header names are valid HTTP tokens.

    Returns:
        0 if valid, 1 otherwise.
    """
    configure_logs()

    try:
        settings = load_settings()
        check_request(settings)
    except (RuntimeError, ValueError) as exc:
        logger.error(f"Configuration check FAILED: {exc}")
        return 1

    logger.info(
        f"Configuration check OK: POST {settings.http_post_endpoint} "
        f"({len(settings.payload or '')} payload chars, {len(settings.headers)} extra headers)"
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
