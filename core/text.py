# =============================================================================
# core/text.py  —  String cleanup for anything leaving the tool server
# =============================================================================
# Help-portal titles and bodies occasionally carry stray control characters
# and Windows line endings.  Both confuse MCP clients that re-serialize the
# JSON payload, so the tool layer runs every string through clean_text().
# =============================================================================

import re
from typing import Optional

# C0 controls except \t and \n, plus DEL
_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0B\x0C\x0E-\x1F\x7F]")


def clean_text(value: Optional[str]) -> Optional[str]:
    """Strip control characters and normalize line endings to "\\n"."""
    if value is None:
        return None
    value = _CONTROL_CHARS.sub("", value)
    return value.replace("\r\n", "\n").replace("\r", "\n")
