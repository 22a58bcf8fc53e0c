# =============================================================================
# agent/__init__.py
# =============================================================================
# This package contains the Google ADK assistant that answers questions from
# the SAP Help Portal.
#
# ARCHITECTURAL ROLE:
#   The agent decides WHICH tool to call and WHEN:
#     1. Receives a question ("How do I configure currency conversion?")
#     2. Calls sap_help_search to find candidate pages
#     3. Calls sap_help_get on the most relevant ids
#     4. Answers from the retrieved text, citing the page URLs
#
#   It has no HTTP code and no parsing logic; that lives in core/ and is
#   reached only through the MCP tools in tools/.
# =============================================================================
