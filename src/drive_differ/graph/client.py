"""OneDrive listing calls against Microsoft Graph, authenticated with MSAL."""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any
from urllib import request as urllib_request
from urllib.error import HTTPError
from urllib.parse import quote

import msal

if TYPE_CHECKING:
    from drive_differ.config import AppConfig

logger = logging.getLogger(__name__)

GRAPH_BASE_URL = "https://graph.microsoft.com/v1.0"
GRAPH_SCOPES = ["https://graph.microsoft.com/.default"]
AUTHORITY_BASE_URL = "https://login.microsoftonline.com"
DEFAULT_TIMEOUT_SECONDS = 30.0

# Listings must come back in the order FolderDiffer expects.
CHILDREN_ORDER = "name desc"


class GraphAuthError(Exception):
    """Raised when MSAL token acquisition fails."""


class GraphApiError(Exception):
    """Raised when the Graph API returns a non-2xx response.

    Attributes:
        status_code: HTTP status of the failed request.
        message: Graph's error message, or the HTTP reason when the body
            carries none.
        url: The request URL.
        retry_after: Seconds from the ``Retry-After`` header on throttling
            responses, None when absent.
    """

    def __init__(
        self,
        status_code: int,
        message: str,
        url: str = "",
        retry_after: float | None = None,
    ) -> None:
        super().__init__(f"Graph API error {status_code}: {message}")
        self.status_code = status_code
        self.message = message
        self.url = url
        self.retry_after = retry_after


class GraphClient:
    """Reads the drive items of one OneDrive user.

    Each method performs one blocking request and returns the parsed JSON
    body; paging decisions are left to the caller.
    """

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        tenant_id: str,
        drive_user: str,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        """Initialise the MSAL confidential client application.

        Args:
            client_id: Azure AD application (client) ID.
            client_secret: Azure AD application client secret.
            tenant_id: Azure AD tenant ID.
            drive_user: UPN or object ID of the OneDrive user whose drive is read.
            timeout: Socket timeout in seconds for each Graph request.
        """
        self._app = msal.ConfidentialClientApplication(
            client_id=client_id,
            client_credential=client_secret,
            authority=f"{AUTHORITY_BASE_URL}/{tenant_id}",
        )
        self._drive_url = f"{GRAPH_BASE_URL}/users/{drive_user}/drive"
        self._timeout = timeout

    def get_item(self, item_id: str) -> dict[str, Any]:
        """Fetch the driveItem with the given ID."""
        return self._get(f"{self._drive_url}/items/{item_id}")

    def list_children(self, item_id: str, page_size: int) -> dict[str, Any]:
        """Fetch the first page of a folder's children, ordered by name descending.

        Args:
            item_id: ID of the folder.
            page_size: Value of ``$top``.

        Returns:
            The OData page: ``value`` plus ``@odata.nextLink`` while more
            pages remain.
        """
        return self._get(
            f"{self._drive_url}/items/{item_id}/children"
            f"?$orderby={quote(CHILDREN_ORDER)}&$top={page_size}"
        )

    def get_page(self, next_link: str) -> dict[str, Any]:
        """Follow an ``@odata.nextLink`` returned by a previous page.

        Raises:
            ValueError: If the link does not point at Graph; the bearer token
                is never sent elsewhere.
        """
        if not next_link.startswith(f"{GRAPH_BASE_URL}/"):
            raise ValueError(f"Refusing to follow non-Graph link {next_link!r}")
        return self._get(next_link)

    def _acquire_token(self) -> str:
        """Return a Bearer token from the client credentials flow.

        MSAL serves the token from its in-memory cache until it expires.

        Raises:
            GraphAuthError: If MSAL cannot acquire a token.
        """
        result: dict[str, Any] = self._app.acquire_token_for_client(scopes=GRAPH_SCOPES) or {}
        if "access_token" in result:
            return str(result["access_token"])
        error = result.get("error", "unknown_error")
        description = result.get("error_description", "No description provided")
        logger.error("[_acquire_token] MSAL token acquisition failed; error:%s", error)
        raise GraphAuthError(f"Token acquisition failed: {error}: {description}")

    def _get(self, url: str) -> dict[str, Any]:
        """Perform an authenticated GET of an absolute Graph URL.

        Raises:
            GraphAuthError: If token acquisition fails.
            GraphApiError: If the API returns a non-2xx status code.
            URLError: If the request cannot reach the API at all.
        """
        req = urllib_request.Request(
            url,
            headers={
                "Authorization": f"Bearer {self._acquire_token()}",
                "Accept": "application/json",
            },
            method="GET",
        )
        try:
            with urllib_request.urlopen(req, timeout=self._timeout) as resp:
                return json.loads(resp.read())  # type: ignore[no-any-return]
        except HTTPError as exc:
            error = GraphApiError(
                exc.code, _error_message(exc), url=url, retry_after=_retry_after(exc)
            )
            logger.warning(
                "[_get] Graph request failed; status:%d;url:%s;retry_after:%s",
                exc.code,
                url,
                error.retry_after,
            )
            raise error from exc


def _error_message(exc: HTTPError) -> str:
    try:
        message = json.loads(exc.read())["error"]["message"]
    except (ValueError, KeyError, TypeError):
        return str(exc.reason)
    return str(message)


def _retry_after(exc: HTTPError) -> float | None:
    value = exc.headers.get("Retry-After") if exc.headers is not None else None
    if value is None:
        return None
    try:
        return float(value)
    except ValueError:
        return None


def graph_client_from_config(config: AppConfig) -> GraphClient:
    """Construct a GraphClient for the configured drive user.

    Args:
        config: Application configuration instance.

    Returns:
        Configured GraphClient instance.
    """
    return GraphClient(
        client_id=config.client_id,
        client_secret=config.client_secret,
        tenant_id=config.tenant_id,
        drive_user=config.drive_user,
    )
