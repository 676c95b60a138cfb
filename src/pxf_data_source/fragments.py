"""Fragment catalog decoding and replica location handling."""

import json

from .errors import PxfCatalogError
from .logging_config import log

FRAGMENTS_KEY = "PXFFragments"

# Address of the PXF service that serves fragment bytes.
PXF_HOST = "localhost"
PXF_PORT = 51200


class FragmentHost:
    """A replica location for a fragment."""

    def __init__(self, ip, rest_port=None):
        self.ip = ip
        self.rest_port = rest_port

    def __eq__(self, other):
        if not isinstance(other, FragmentHost):
            return False
        return self.ip == other.ip and self.rest_port == other.rest_port

    def __repr__(self):
        return f"FragmentHost(ip={self.ip!r}, rest_port={self.rest_port})"


class DataFragment:
    """
    One fragment of an external data object.

    Carries what the work allocation needs: the per-source index, the source
    name, the replica locations and the opaque fragment metadata, user data
    and profile hint that are passed through to the reading side untouched.
    """

    def __init__(self, index=0, source_name=None, replicas=None, fragment_md=None,
                 user_data=None, profile=None):
        self.index = index
        self.source_name = source_name
        self.replicas = replicas if replicas is not None else []
        self.fragment_md = fragment_md
        self.user_data = user_data
        self.profile = profile

    def release(self):
        """Drop the replica list and the opaque payloads of this fragment."""
        self.replicas.clear()
        self.fragment_md = None
        self.user_data = None
        self.profile = None

    def __eq__(self, other):
        if not isinstance(other, DataFragment):
            return False
        return (
            self.index == other.index
            and self.source_name == other.source_name
            and self.replicas == other.replicas
            and self.fragment_md == other.fragment_md
            and self.user_data == other.user_data
            and self.profile == other.profile
        )

    def __repr__(self):
        return (
            f"DataFragment(index={self.index}, source_name={self.source_name!r}, "
            f"replicas={self.replicas!r})"
        )


def parse_fragments_response(response_text):
    """
    Decode the PXF ``getFragments`` response into data fragments.

    Example response::

        {"PXFFragments": [{"index": 0, "userData": null,
                           "sourceName": "demo/text2.csv",
                           "metadata": "rO0ABXcQ...",
                           "replicas": ["10.207.4.23", "10.207.4.23"]}]}

    Every field of a fragment object is optional. Fragments without any
    replica (for example an empty file) are dropped.

    Args:
        response_text: Body of the PXF response

    Returns:
        List of DataFragment in response order

    Raises:
        PxfCatalogError: If the body is not JSON or lacks the fragment array
    """
    try:
        document = json.loads(response_text)
    except (TypeError, ValueError) as error:
        raise PxfCatalogError("Failed to parse fragments list from PXF") from error

    if not isinstance(document, dict) or not isinstance(document.get(FRAGMENTS_KEY), list):
        raise PxfCatalogError(
            f"Failed to parse fragments list from PXF: missing '{FRAGMENTS_KEY}' array"
        )

    fragments = []
    for position, js_fragment in enumerate(document[FRAGMENTS_KEY]):
        fragment = _parse_fragment(js_fragment, position)

        # Ignore fragments without host locations, e.g. an empty file.
        if fragment.replicas:
            fragments.append(fragment)
        else:
            log.debug("Dropping fragment %s of %s without replicas", fragment.index, fragment.source_name)
            fragment.release()

    return fragments


def _parse_fragment(js_fragment, position):
    """Build a DataFragment from one element of the fragment array."""
    if not isinstance(js_fragment, dict):
        raise PxfCatalogError(
            f"Failed to parse fragments list from PXF: element {position} is not an object"
        )

    js_replicas = js_fragment.get("replicas")
    if js_replicas is None:
        js_replicas = []
    elif not isinstance(js_replicas, list):
        raise PxfCatalogError(
            f"Failed to parse fragments list from PXF: replicas of element {position} is not an array"
        )

    return DataFragment(
        index=_as_int(js_fragment.get("index"), position),
        source_name=_as_string(js_fragment.get("sourceName")),
        replicas=[FragmentHost(_as_string(host)) for host in js_replicas],
        fragment_md=_as_string(js_fragment.get("metadata")),
        user_data=_as_string(js_fragment.get("userData")),
        profile=_as_string(js_fragment.get("profile")),
    )


def _as_string(value):
    """Return a JSON scalar as text, keeping null as None."""
    if value is None or isinstance(value, str):
        return value
    return json.dumps(value)


def _as_int(value, position):
    """Return the fragment index as an int; absent means 0."""
    if value is None:
        return 0
    if isinstance(value, bool) or (isinstance(value, float) and not value.is_integer()):
        raise PxfCatalogError(
            f"Failed to parse fragments list from PXF: invalid index in element {position}"
        )
    try:
        return int(value)
    except (TypeError, ValueError) as error:
        raise PxfCatalogError(
            f"Failed to parse fragments list from PXF: invalid index in element {position}"
        ) from error


def assign_service_location(fragments, host=PXF_HOST, port=PXF_PORT):
    """
    Point every replica of every fragment at the PXF service.

    Fragment bytes are served by the PXF service rather than by the storage
    nodes, so the replica hints returned by the catalog are overwritten in
    place.

    Args:
        fragments: List of DataFragment
        host: Service host to assign
        port: Service REST port to assign

    Returns:
        The same list, for chaining
    """
    for fragment in fragments:
        for replica in fragment.replicas:
            replica.ip = host
            replica.rest_port = port
    return fragments


def format_fragment_list(fragments):
    """Render a fragment list for debug logging."""
    lines = [f"Fragment list: ({len(fragments) if fragments else 0} elements)"]
    for fragment in fragments or []:
        lines.append(f"Fragment index: {fragment.index}")
        for replica in fragment.replicas:
            lines.append(f"replicas: host: {replica.ip}")
        lines.append(f"metadata: {fragment.fragment_md if fragment.fragment_md else 'NULL'}")
        if fragment.user_data:
            lines.append(f"user data: {fragment.user_data}")
        if fragment.profile:
            lines.append(f"profile: {fragment.profile}")
    return "\n".join(lines)
