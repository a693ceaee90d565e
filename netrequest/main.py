"""Application entrypoint: POST a JSON payload and print the decoded response."""

import asyncio
import json
import logging

import aiohttp
from pydantic import JsonValue

from netrequest.adapters.driven.config.settings import Settings, load_settings
from netrequest.adapters.driven.http.client import AiohttpTransport
from netrequest.adapters.driven.logging.logging_config import configure_logs
from netrequest.adapters.driven.metrics.http_metrics import Metrics
from netrequest.adapters.driving.signals import cancel_on_signals
from netrequest.core.cancellation import CancellationHandle
from netrequest.core.errors import DeserializationError, HttpStatusError, RequestCancelledError
from netrequest.core.json_post import JsonPostNetworkRequest

__all__ = ["main", "run"]

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_CANCELLED = 130


async def main() -> int:
    """Send one JSON POST as configured by the environment.

    Startup sequence:
    1. Configure logging.
    2. Load and validate configuration.
    3. Optionally probe endpoint health.
    4. Send the payload, cancelling on SIGTERM/SIGINT or the deadline.
    5. Print the decoded JSON response.

    Returns:
        Process exit code.
    """
    configure_logs()
    logger.info("Starting netrequest...")

    try:
        config = load_settings()
    except (RuntimeError, ValueError) as exc:
        logger.error(
            "Configuration error: %s\n"
            "Hint: check HTTP_POST_ENDPOINT, PAYLOAD_FILE_PATH "
            "and that the payload file exists and is valid JSON.",
            exc,
        )
        return EXIT_FAILED

    metrics = Metrics()
    transport = AiohttpTransport(metrics=metrics, timeout_sec=config.timeout_sec, retries=config.retries)

    async with transport as http:
        if not await optional_endpoint_health_check(config, http):
            return EXIT_FAILED

        cancellation = CancellationHandle()
        cancel_on_signals(cancellation)
        if config.cancel_after_sec:
            cancellation.cancel_after(config.cancel_after_sec)

        request = JsonPostNetworkRequest(
            http,
            config.http_post_endpoint,
            config.payload,
            headers=config.headers,
        )

        try:
            result = await request.execute_dynamic(JsonValue, cancellation)
        except RequestCancelledError:
            logger.warning(f"Request to {config.http_post_endpoint} was cancelled")
            return EXIT_CANCELLED
        except HttpStatusError as e:
            logger.error(f"Endpoint rejected the request: {e}")
            return EXIT_FAILED
        except DeserializationError as e:
            logger.error(f"Unreadable response: {e}")
            return EXIT_FAILED
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.error(f"Transport failure for {config.http_post_endpoint}: {e!r}")
            return EXIT_FAILED
        finally:
            cancellation.disarm()

    print(json.dumps(result, indent=2))
    logger.info("Request completed.")
    return EXIT_OK


async def optional_endpoint_health_check(settings: Settings, http: AiohttpTransport) -> bool:
    """Perform optional health check before sending.

    Only runs if HEALTH_CHECK_ENDPOINT is configured.

    Args:
        settings: Runtime settings.
        http: Transport used for probing.

    Returns:
        True if healthy or check disabled, False if check failed.
    """
    if settings.http_health_endpoint:
        logger.info(f"Performing health check on {settings.http_health_endpoint}...")
        if not await http.probe(url=settings.http_health_endpoint):
            logger.error(
                f"Health check failed for {settings.http_health_endpoint}, aborting request"
            )
            return False

        logger.info("Health check passed, sending request...")
    return True


def run() -> None:
    """Console script wrapper around main()."""
    raise SystemExit(asyncio.run(main()))


if __name__ == "__main__":
    run()
