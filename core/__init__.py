# =============================================================================
# core/__init__.py
# =============================================================================
# This package contains ALL the logic for the SAP Help documentation tools.
#
# ARCHITECTURAL RULE:
#   Nothing in this package imports Google ADK or FastMCP.  The only network
#   dependency is httpx (in core/sap_help.py); everything else is pure Python
#   and can be exercised in a REPL with no internet access.
#
# MODULE MAP (leaf-first):
#   config.py    → environment-driven settings
#   errors.py    → the error kinds raised by the lookup chain
#   models.py    → dataclasses for hits, entries, metadata, documents
#   urls.py      → query-string building and help-portal URL parsing
#   cache.py     → the loio → SearchHit cache owned by the caller
#   markup.py    → page body markup → Markdown-flavored text
#   truncate.py  → keeps oversized documents inside the token budget
#   text.py      → control-character cleanup for tool output
#   sap_help.py  → the three-stage remote lookup chain (search → metadata → page)
# =============================================================================
