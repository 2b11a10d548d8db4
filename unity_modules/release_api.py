"""Unity release API client (GraphQL release query, release notes REST API)."""

from __future__ import annotations

import json
import logging
from collections.abc import Callable
from typing import Any
from urllib.error import HTTPError, URLError
from urllib.parse import urlencode
from urllib.request import Request, urlopen

from unity_modules.config import DEFAULT_GRAPHQL_URL, DEFAULT_RELEASE_API_URL, DEFAULT_TIMEOUT, DEFAULT_USER_AGENT
from unity_modules.exceptions import (
    ApiConnectionError,
    ApiError,
    ApiTimeoutError,
    GraphQLError,
    ReleaseNotFoundError,
    ResponseShapeError,
)
from unity_modules.models import FetchReleaseOptions, ReleaseNotes

logger = logging.getLogger(__name__)

ExchangeCallback = Callable[[dict[str, Any], Any], None]

# Module fields are selected three levels deep; the fourth level only
# carries identity and location fields.
FETCH_RELEASE_QUERY = """
query FetchReleaseQuery(
  $architecture: [UnityReleaseDownloadArchitecture!]
  $platform: [UnityReleaseDownloadPlatform!]
  $stream: [UnityReleaseStream!]
  $version: String
  $entitlements: [UnityReleaseEntitlement!]
) {
  getUnityReleases(
    architecture: $architecture
    platform: $platform
    skip: 0
    limit: 1
    stream: $stream
    version: $version
    entitlements: $entitlements
  ) {
    edges {
      node {
        version
        productName
        releaseDate
        releaseNotes {
          ...ReleaseNotesFields
        }
        stream
        skuFamily
        recommended
        unityHubDeepLink
        shortRevision
        downloads {
          ...UnityReleaseHubDownloadFields
        }
        thirdPartyNotices {
          url
          integrity
          type
          originalFileName
        }
      }
    }
    totalCount
  }
}

fragment ReleaseNotesFields on UnityReleaseNotes {
  url
  integrity
  type
}

fragment UnityReleaseHubDownloadFields on UnityReleaseHubDownload {
  url
  integrity
  type
  platform
  architecture
  modules {
    ...UnityReleaseModuleFields_Level1
  }
  downloadSize(format: BYTE) {
    value
    unit
  }
  installedSize(format: BYTE) {
    value
    unit
  }
}

fragment UnityReleaseModuleFields_Level1 on UnityReleaseModule {
  ...UnityReleaseModuleCommonFields
  subModules {
    ...UnityReleaseModuleFields_Level2
  }
}

fragment UnityReleaseModuleFields_Level2 on UnityReleaseModule {
  ...UnityReleaseModuleCommonFields
  subModules {
    ...UnityReleaseModuleFields_Level3
  }
}

fragment UnityReleaseModuleFields_Level3 on UnityReleaseModule {
  ...UnityReleaseModuleCommonFields
  subModules {
    name
    slug
    id
    description
    url
    destination
  }
}

fragment UnityReleaseModuleCommonFields on UnityReleaseModule {
  __typename
  url
  integrity
  type
  id
  slug
  name
  description
  category
  required
  hidden
  preSelected
  destination
  extractedPathRename {
    from
    to
  }
  downloadSize(format: BYTE) {
    unit
    value
  }
  installedSize(format: BYTE) {
    unit
    value
  }
  eula {
    url
    integrity
    type
    label
    message
  }
}
"""


def _dig(obj: Any, *path: str | int) -> Any:
    """Walk nested dicts/lists; None as soon as a step is missing."""
    for key in path:
        if isinstance(key, int) and isinstance(obj, list) and 0 <= key < len(obj):
            obj = obj[key]
        elif isinstance(key, str) and isinstance(obj, dict):
            obj = obj.get(key)
        else:
            return None
    return obj


class ReleaseQueryClient:
    """Client for the Unity release APIs.

    Args:
        graphql_url: GraphQL endpoint for getUnityReleases
        release_api_url: REST endpoint for editor releases
        timeout: Per-request timeout in seconds
        user_agent: User-Agent header value
        on_exchange: Optional callback(request, response) for verbose output
    """

    def __init__(
        self,
        graphql_url: str = DEFAULT_GRAPHQL_URL,
        release_api_url: str = DEFAULT_RELEASE_API_URL,
        timeout: float = DEFAULT_TIMEOUT,
        user_agent: str = DEFAULT_USER_AGENT,
        on_exchange: ExchangeCallback | None = None,
    ) -> None:
        self.graphql_url = graphql_url
        self.release_api_url = release_api_url
        self.timeout = timeout
        self.user_agent = user_agent
        self._on_exchange = on_exchange

    # -------------------------------------------------------------------------
    # Transport
    # -------------------------------------------------------------------------

    def _request_json(self, req: Request, body: Any = None) -> Any:
        method = req.get_method()
        logger.debug("%s %s", method, req.full_url)
        try:
            with urlopen(req, timeout=self.timeout) as resp:
                raw = resp.read()
        except HTTPError as e:
            raise ApiError(
                f"HTTP error {e.code} from {req.full_url}",
                code=f"HTTP_{e.code}",
                status=e.code,
            ) from e
        except URLError as e:
            if isinstance(e.reason, TimeoutError):
                raise ApiTimeoutError(f"Request to {req.full_url} timed out", code="TIMEOUT") from e
            raise ApiConnectionError(f"Cannot reach {req.full_url}: {e.reason}", code="CONNECTION_FAILED") from e
        except TimeoutError as e:
            raise ApiTimeoutError(f"Request to {req.full_url} timed out", code="TIMEOUT") from e

        try:
            data = json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise ResponseShapeError(f"Response from {req.full_url} is not JSON", code="INVALID_RESPONSE") from e

        if self._on_exchange is not None:
            self._on_exchange({"method": method, "url": req.full_url, "body": body}, data)
        return data

    # -------------------------------------------------------------------------
    # GraphQL release query
    # -------------------------------------------------------------------------

    def fetch_release(self, options: FetchReleaseOptions) -> dict[str, Any]:
        """Run the release query and return the first matching release node.

        Raises:
            GraphQLError: Response carried GraphQL errors
            ReleaseNotFoundError: No release matched the filters
        """
        body = {"query": FETCH_RELEASE_QUERY, "variables": options.to_variables()}
        req = Request(
            self.graphql_url,
            data=json.dumps(body).encode("utf-8"),
            headers={"Content-Type": "application/json", "User-Agent": self.user_agent},
            method="POST",
        )
        data = self._request_json(req, body)
        if not isinstance(data, dict):
            raise ResponseShapeError("GraphQL response is not an object", code="INVALID_RESPONSE")

        errors = data.get("errors")
        if errors:
            raise GraphQLError(f"GraphQL errors: {json.dumps(errors, ensure_ascii=False)}", errors)

        node = _dig(data, "data", "getUnityReleases", "edges", 0, "node")
        if not isinstance(node, dict):
            raise ReleaseNotFoundError(f"No release found for version {options.version}", code="RELEASE_NOT_FOUND")
        return node

    def fetch_modules(self, options: FetchReleaseOptions) -> list[Any]:
        """Return the module forest of the first download of the release.

        Raises:
            ResponseShapeError: Release has no module list
        """
        node = self.fetch_release(options)
        modules = _dig(node, "downloads", 0, "modules")
        if modules is None:
            raise ResponseShapeError("Unexpected response: module list not found", code="INVALID_RESPONSE")
        logger.debug("Release %s returned %d top-level module(s)", options.version, len(modules))
        return modules

    # -------------------------------------------------------------------------
    # Release notes
    # -------------------------------------------------------------------------

    def fetch_release_notes(self, version: str) -> ReleaseNotes:
        """Look up the release notes pointer for an editor version.

        Raises:
            ReleaseNotFoundError: API returned no results
        """
        url = f"{self.release_api_url}?{urlencode({'version': version})}"
        req = Request(url, headers={"Accept": "application/json", "User-Agent": self.user_agent})
        data = self._request_json(req)

        results = _dig(data, "results")
        if not results:
            raise ReleaseNotFoundError(f"No release found for version {version}", code="RELEASE_NOT_FOUND")
        notes = _dig(results, 0, "releaseNotes")
        if not isinstance(notes, dict):
            raise ResponseShapeError("Unexpected response: releaseNotes not found", code="INVALID_RESPONSE")
        return ReleaseNotes(type=str(notes.get("type") or ""), url=str(notes.get("url") or ""))

    def fetch_text(self, url: str) -> str | None:
        """Download a text document; None if it cannot be fetched."""
        req = Request(url, headers={"User-Agent": self.user_agent})
        logger.debug("GET %s", url)
        try:
            with urlopen(req, timeout=self.timeout) as resp:
                text: str = resp.read().decode("utf-8")
                return text
        except (URLError, TimeoutError, UnicodeDecodeError) as e:
            logger.warning("Cannot download %s: %s", url, e)
            return None
