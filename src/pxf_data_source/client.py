"""REST client for the PXF Fragmenter API."""

from urllib.parse import quote

from .errors import PxfConfigurationError
from .logging_config import log
from .uri import normalize_key_name

PXF_SERVICE_PREFIX = "pxf"
PXF_VERSION = "v15"

FRAGMENTS_URL_TEMPLATE = "http://{host}:{port}/{prefix}/{version}/Fragmenter/getFragments?path={path}"

# Header guaranteeing a JSON formatted response.
JSON_RESPONSE_HEADERS = {"Accept": "application/json"}


class FragmentCatalogClient:
    """
    Requests the fragment list of an external object from PXF.

    The client only builds and sends the request. Retries and HA failover are
    left to the ``requests`` session (mount an adapter with a retry policy on
    it if needed); any transport error propagates to the caller.
    """

    def __init__(self, session=None, timeout=30):
        """
        Initialize the client.

        Args:
            session: Optional ``requests.Session``; one is created lazily
            timeout: Request timeout in seconds
        """
        self._session = session
        self._owns_session = session is None
        self.timeout = timeout

    def _get_session(self):
        """Return the HTTP session, creating it on first use."""
        if self._session is None:
            import requests

            self._session = requests.Session()
        return self._session

    def build_fragments_url(self, uri):
        """Build the ``getFragments`` request URL for a parsed URI."""
        return FRAGMENTS_URL_TEMPLATE.format(
            host=uri.host,
            port=uri.port,
            prefix=PXF_SERVICE_PREFIX,
            version=PXF_VERSION,
            path=quote(uri.data, safe="/"),
        )

    def build_headers(self, uri, context=None):
        """
        Build the PXF request headers.

        Every URI option is forwarded as ``X-GP-<KEY>``, together with the
        segment identity and transaction id when a context is given.

        Args:
            uri: Parsed PxfUri
            context: Optional QueryContext of the current segment

        Returns:
            Dict of HTTP headers
        """
        headers = dict(JSON_RESPONSE_HEADERS)

        if context is not None:
            headers["X-GP-SEGMENT-ID"] = str(context.segment_index)
            headers["X-GP-SEGMENT-COUNT"] = str(context.segment_count)
            if context.transaction_id is not None:
                headers["X-GP-XID"] = str(context.transaction_id)

        headers["X-GP-URL-HOST"] = uri.host
        headers["X-GP-URL-PORT"] = str(uri.port)
        headers["X-GP-DATA-DIR"] = uri.data
        headers["X-GP-URI"] = uri.uri
        headers["X-GP-HAS-FILTER"] = "0"

        for option in uri.options:
            headers[normalize_key_name(option.key)] = option.value

        return headers

    def _validate_uri(self, uri):
        """Check that a fragmenter or a profile was given in the URI."""
        if not uri.has_option("fragmenter") and not uri.has_option("profile"):
            raise PxfConfigurationError(f"FRAGMENTER or PROFILE option must exist in {uri.uri}")

    def get_fragments(self, uri, context=None):
        """
        Request the fragment list for ``uri`` from PXF.

        Args:
            uri: Parsed PxfUri
            context: Optional QueryContext of the current segment

        Returns:
            Raw response body

        Raises:
            PxfConfigurationError: If neither fragmenter nor profile is set
            requests.RequestException: On transport or HTTP failure
        """
        self._validate_uri(uri)

        url = self.build_fragments_url(uri)
        headers = self.build_headers(uri, context)

        log.debug("Requesting fragments from %s", url)
        response = self._get_session().get(url, headers=headers, timeout=self.timeout)
        response.raise_for_status()
        return response.text

    def close(self):
        """Close the underlying session if this client created it."""
        if self._owns_session and self._session is not None:
            self._session.close()
            self._session = None
