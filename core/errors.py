# =============================================================================
# core/errors.py  —  Error kinds raised by the lookup chain
# =============================================================================
#
# Every failure inside core/ is one of these.  They never cross the public
# boundary as-is: search_sap_help() turns them into an error string on the
# SearchResponse, and get_sap_help_content() re-raises them as a single
# SapHelpContentError whose message starts with "Failed to get SAP Help
# content:".  Nothing here is retried.
# =============================================================================

from typing import Optional


class SapHelpError(Exception):
    """Base class for all help-portal lookup failures."""


class RemoteCallFailed(SapHelpError):
    """A remote call returned a non-2xx status, or never produced a usable body.

    status_code is None when the failure happened below HTTP (connection
    refused, timeout) or when the body was not valid JSON.
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        status_text: str = "",
    ):
        self.message = message
        self.status_code = status_code
        self.status_text = status_text
        if status_code is not None:
            detail = f"{message}: {status_code} {status_text}".rstrip()
        else:
            detail = f"{message}: {status_text}" if status_text else message
        super().__init__(detail)


class MalformedIdentifier(SapHelpError):
    """The result id does not carry the "sap-help-" prefix."""


class DocumentNotFound(SapHelpError):
    """The loio is neither cached nor returned by a fresh search."""


class UnparsableDocumentUrl(SapHelpError):
    """A document URL does not follow /docs/{product}/{deliverable}/{file}."""


class IncompleteMetadata(SapHelpError):
    """The metadata call did not return a deliverable id and build number."""


class SapHelpContentError(SapHelpError):
    """Boundary error for document retrieval; the typed cause is chained."""
