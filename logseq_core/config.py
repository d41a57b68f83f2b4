# =============================================================================
# logseq_core/config.py  —  Startup Configuration
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Reads the Logseq connection settings from the environment (optionally
#   populated from a .env file) and returns one frozen Settings object.
#
# ENVIRONMENT VARIABLES:
#   LOGSEQ_API_TOKEN      (required) Token from Logseq → Settings → Features
#                         → HTTP APIs server → Authorization tokens
#   LOGSEQ_API_URL        (optional) Default http://localhost:12315
#   LOGSEQ_API_TIMEOUT    (optional) Seconds per API request, default 30
#   LOGSEQ_MCP_LOG_LEVEL  (optional) Default INFO
#
# A missing token is fatal: main.py exits before the MCP server starts.
# =============================================================================

import logging
import math
import os
from typing import Mapping, Optional

from dotenv import load_dotenv

from logseq_core.errors import ConfigError
from logseq_core.models import Settings

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "http://localhost:12315"
DEFAULT_TIMEOUT_SECONDS = 30.0


def load_settings(
    environ: Optional[Mapping[str, str]] = None,
    use_dotenv: bool = True,
) -> Settings:
    """Build Settings from environment variables.

    Args:
        environ: Mapping to read instead of os.environ (used by tests).
        use_dotenv: Load a .env file into os.environ first.  Ignored when
                    an explicit `environ` is given.

    Returns:
        A frozen Settings instance.

    Raises:
        ConfigError: If the token is missing or the timeout is not a
                     positive number.
    """
    if environ is None:
        if use_dotenv:
            load_dotenv()
        environ = os.environ

    token = (environ.get("LOGSEQ_API_TOKEN") or "").strip()
    if not token:
        raise ConfigError(
            "LOGSEQ_API_TOKEN must be set. Enable Logseq's HTTP APIs server, "
            "create an authorization token, and export it (or put it in .env)."
        )

    base_url = (environ.get("LOGSEQ_API_URL") or DEFAULT_API_URL).strip().rstrip("/")

    raw_timeout = (environ.get("LOGSEQ_API_TIMEOUT") or "").strip()
    timeout = DEFAULT_TIMEOUT_SECONDS
    if raw_timeout:
        try:
            timeout = float(raw_timeout)
        except ValueError:
            raise ConfigError(
                f"LOGSEQ_API_TIMEOUT must be a number of seconds, got {raw_timeout!r}"
            ) from None
        if not math.isfinite(timeout) or timeout <= 0:
            raise ConfigError(
                f"LOGSEQ_API_TIMEOUT must be a positive, finite number, got {raw_timeout!r}"
            )

    log_level = (environ.get("LOGSEQ_MCP_LOG_LEVEL") or "INFO").strip().upper()

    settings = Settings(
        token=token,
        base_url=base_url,
        timeout_seconds=timeout,
        log_level=log_level,
    )
    logger.debug(f"Loaded settings: {settings!r}")
    return settings
