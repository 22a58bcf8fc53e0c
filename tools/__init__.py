# =============================================================================
# tools/__init__.py
# =============================================================================
# This package contains the FastMCP tool wrappers.
#
# ARCHITECTURAL ROLE:
#   tools/ is the translation layer between MCP clients and core/.  It:
#     1. Calls the public entry points of core/sap_help.py
#     2. Wraps them in FastMCP tool decorators
#     3. Converts results to plain dicts and every failure to {"error": ...}
#     4. Cleans strings and shortens snippets before they leave the process
#
# WHAT TOOLS DO NOT DO:
#   - They do NOT talk HTTP or parse markup (that's core/)
#   - They do NOT know about Google ADK
# =============================================================================
