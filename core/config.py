# =============================================================================
# core/config.py  —  Environment-driven settings
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Reads every tunable value from environment variables and returns a single
#   frozen Settings object.  The entry points (main.py, tools/mcp_server.py)
#   call load_dotenv() first, so a local .env file works too.
#
# VARIABLES:
#   SAP_HELP_BASE_URL      → origin of the help portal (default https://help.sap.com)
#   MAX_CONTENT_LENGTH     → character budget for one document (default 75,000)
#   SEARCH_SNIPPET_CHARS   → max snippet length in search results (default 400)
#   SAP_HELP_TIMEOUT       → per-request timeout in seconds (default 30)
#   LOG_LEVEL              → logging level for the MCP server (default INFO)
#   AGENT_MODEL            → LiteLlm model string for the assistant
#
# Bad values never crash the server: they are logged and replaced by the
# default.
# =============================================================================

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://help.sap.com"

# ~18,750 tokens at 4 characters per token
DEFAULT_MAX_CONTENT_LENGTH = 75000
DEFAULT_SEARCH_SNIPPET_CHARS = 400
DEFAULT_TIMEOUT_SECONDS = 30.0
DEFAULT_AGENT_MODEL = "openrouter/openai/gpt-4o"


@dataclass(frozen=True)
class Settings:
    """Runtime configuration for the tool server and the assistant."""

    base_url: str = DEFAULT_BASE_URL
    max_content_length: int = DEFAULT_MAX_CONTENT_LENGTH
    search_snippet_chars: int = DEFAULT_SEARCH_SNIPPET_CHARS
    request_timeout: float = DEFAULT_TIMEOUT_SECONDS
    log_level: str = "INFO"
    agent_model: str = DEFAULT_AGENT_MODEL


def _positive_int(environ: Mapping[str, str], name: str, default: int) -> int:
    raw = environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Ignoring %s=%r: not an integer, using %d", name, raw, default)
        return default
    if value <= 0:
        logger.warning("Ignoring %s=%r: must be positive, using %d", name, raw, default)
        return default
    return value


def _positive_float(environ: Mapping[str, str], name: str, default: float) -> float:
    raw = environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning("Ignoring %s=%r: not a number, using %s", name, raw, default)
        return default
    if value <= 0:
        logger.warning("Ignoring %s=%r: must be positive, using %s", name, raw, default)
        return default
    return value


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Build Settings from the environment.

    Args:
        environ: Mapping to read from.  Defaults to os.environ; tests pass a
                 plain dict instead of patching the process environment.

    Returns:
        A frozen Settings instance.
    """
    if environ is None:
        environ = os.environ

    base_url = (environ.get("SAP_HELP_BASE_URL") or DEFAULT_BASE_URL).rstrip("/")

    return Settings(
        base_url=base_url,
        max_content_length=_positive_int(
            environ, "MAX_CONTENT_LENGTH", DEFAULT_MAX_CONTENT_LENGTH
        ),
        search_snippet_chars=_positive_int(
            environ, "SEARCH_SNIPPET_CHARS", DEFAULT_SEARCH_SNIPPET_CHARS
        ),
        request_timeout=_positive_float(
            environ, "SAP_HELP_TIMEOUT", DEFAULT_TIMEOUT_SECONDS
        ),
        log_level=(environ.get("LOG_LEVEL") or "INFO").upper(),
        agent_model=environ.get("AGENT_MODEL") or DEFAULT_AGENT_MODEL,
    )
