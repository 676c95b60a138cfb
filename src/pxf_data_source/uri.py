"""Parser for PXF connection strings.

URI format::

    pxf://<host>:<port>/<data>?<key>=<value>&<key>=<value>&...

Each grammar section is parsed by a stage function that takes the remaining
text and returns the parsed component together with the text left over. The
stages run left to right with no backtracking, and any violation raises
:class:`PxfUriSyntaxError` without returning a partial descriptor.
"""

from .errors import PxfUriSyntaxError

PXF_PROTOCOL = "pxf"
PROTOCOL_SEPARATOR = "://"
OPTIONS_SEPARATOR = "?"
OPTION_PAIR_SEPARATOR = "&"
OPTION_VALUE_SEPARATOR = "="
MAX_PORT_NUMBER = 65535

PROFILE_HEADER = "X-GP-PROFILE"


class OptionData:
    """A single ``key=value`` option from the URI options section."""

    def __init__(self, key, value):
        self.key = key
        self.value = value

    def __eq__(self, other):
        if not isinstance(other, OptionData):
            return False
        return self.key == other.key and self.value == other.value

    def __repr__(self):
        return f"OptionData(key={self.key!r}, value={self.value!r})"


class PxfUri:
    """
    Parsed PXF connection string.

    Holds the authority, data path and options of one external table URI,
    plus the fragments assigned to the current segment once partitioning
    has run. The descriptor owns its fragment list until ``release()``.
    """

    def __init__(self, uri, protocol, host, port, data, options=None, profile=None):
        self.uri = uri
        self._protocol = protocol
        self.host = host
        self.port = port
        self.data = data
        self.options = options if options is not None else []
        self.profile = profile
        self.fragments = None

    @property
    def protocol(self):
        """Protocol name, fixed at parse time."""
        return self._protocol

    def get_option(self, name):
        """
        Return the value of the first option matching ``name``.

        Option names are compared case-insensitively.

        Args:
            name: Option key to look up

        Returns:
            The option value, or None when the option is absent
        """
        wanted = name.lower()
        for option in self.options:
            if option.key.lower() == wanted:
                return option.value
        return None

    def has_option(self, name):
        """Check whether an option named ``name`` is present."""
        return self.get_option(name) is not None

    def release(self):
        """Release the assigned fragments and the parsed options."""
        if self.fragments:
            for fragment in self.fragments:
                fragment.release()
        self.fragments = None
        self.options = []

    def __repr__(self):
        return (
            f"PxfUri(host={self.host!r}, port={self.port}, data={self.data!r}, "
            f"options={len(self.options)}, profile={self.profile!r})"
        )


def normalize_key_name(key):
    """Return the PXF header name for an option key (``X-GP-<KEY>``)."""
    if not key:
        raise PxfUriSyntaxError("option key must not be empty", fragment=key)
    return f"X-GP-{key.upper()}"


def parse_uri(uri_text):
    """
    Parse a PXF connection string into a :class:`PxfUri`.

    Args:
        uri_text: The raw connection string

    Returns:
        PxfUri with protocol, authority, data path and options populated

    Raises:
        PxfUriSyntaxError: If any section of the URI is malformed
    """
    if not isinstance(uri_text, str):
        raise PxfUriSyntaxError(f"Invalid URI {uri_text!r}", uri=uri_text)

    protocol, remaining = parse_protocol(uri_text, uri_text)
    (host, port), remaining = parse_authority(remaining, uri_text)
    data, remaining = parse_data(remaining, uri_text)
    (options, profile), remaining = parse_options(remaining, uri_text)

    return PxfUri(
        uri=uri_text,
        protocol=protocol,
        host=host,
        port=port,
        data=data,
        options=options,
        profile=profile,
    )


def parse_protocol(remaining, uri_text):
    """Parse ``<protocol>://`` and return ``(protocol, rest)``."""
    protocol, separator, rest = remaining.partition(PROTOCOL_SEPARATOR)
    if not separator:
        raise PxfUriSyntaxError(f"Invalid URI {uri_text}", uri=uri_text, fragment=remaining)

    if protocol != PXF_PROTOCOL:
        raise PxfUriSyntaxError(
            f"Invalid URI {uri_text} : unsupported protocol '{protocol}'",
            uri=uri_text,
            fragment=protocol,
        )

    return protocol, rest


def parse_authority(remaining, uri_text):
    """
    Parse ``<host>:<port>/`` and return ``((host, port), rest)``.

    The port separator is the last ``:`` outside an IPv6 bracket group, so
    ``[::1]:5888`` yields host ``[::1]`` and port 5888.
    """
    authority, separator, rest = remaining.partition("/")
    if not separator or not authority:
        raise PxfUriSyntaxError(
            f"Invalid URI {uri_text} : missing authority section",
            uri=uri_text,
            fragment=authority,
        )

    port_start = authority.rfind(":")
    if port_start == -1 or port_start < authority.rfind("]"):
        raise PxfUriSyntaxError(
            f"Invalid URI {uri_text} : missing port in authority '{authority}'",
            uri=uri_text,
            fragment=authority,
        )

    host = authority[:port_start]
    port_text = authority[port_start + 1:]
    if not host:
        raise PxfUriSyntaxError(
            f"Invalid URI {uri_text} : missing host in authority '{authority}'",
            uri=uri_text,
            fragment=authority,
        )

    port = _parse_port(port_text)
    if port is None:
        raise PxfUriSyntaxError(
            f"Invalid port: {port_text} for authority host {host}",
            uri=uri_text,
            fragment=port_text,
        )

    return (host, port), rest


def _parse_port(port_text):
    """Return the port as an int, or None when it is not a valid port."""
    if not port_text.isascii() or not port_text.isdigit():
        return None
    port = int(port_text)
    if port <= 0 or port > MAX_PORT_NUMBER:
        return None
    return port


def parse_data(remaining, uri_text):
    """Parse the data path, which runs up to the last ``?`` if there is one."""
    options_start = remaining.rfind(OPTIONS_SEPARATOR)
    if options_start == -1:
        return remaining, ""
    return remaining[:options_start], remaining[options_start:]


def parse_options(remaining, uri_text):
    """
    Parse ``?key=value&key=value`` and return ``((options, profile), rest)``.

    An empty remainder means the URI has no options section. Options whose
    normalized key is ``X-GP-PROFILE`` also set the profile, last one wins.
    """
    if not remaining.startswith(OPTIONS_SEPARATOR):
        return ([], None), remaining

    section = remaining[len(OPTIONS_SEPARATOR):]
    if len(section) < 2:
        raise PxfUriSyntaxError(
            f"Invalid URI {uri_text}: invalid option after '?'",
            uri=uri_text,
            fragment=section,
        )

    options = []
    profile = None
    for pair in section.split(OPTION_PAIR_SEPARATOR):
        # consecutive separators produce empty pairs, which are skipped
        if not pair:
            continue
        option = parse_option(pair, uri_text)
        if normalize_key_name(option.key) == PROFILE_HEADER:
            profile = option.value
        options.append(option)

    return (options, profile), ""


def parse_option(pair, uri_text):
    """Parse a single ``key=value`` pair into :class:`OptionData`."""
    separator_count = pair.count(OPTION_VALUE_SEPARATOR)
    if separator_count == 0:
        raise PxfUriSyntaxError(
            f"Invalid URI {uri_text}: option '{pair}' missing '='",
            uri=uri_text,
            fragment=pair,
        )
    if separator_count > 1:
        raise PxfUriSyntaxError(
            f"Invalid URI {uri_text}: option '{pair}' contains duplicate '='",
            uri=uri_text,
            fragment=pair,
        )

    key, _, value = pair.partition(OPTION_VALUE_SEPARATOR)
    if not key:
        raise PxfUriSyntaxError(
            f"Invalid URI {uri_text}: option '{pair}' missing key before '='",
            uri=uri_text,
            fragment=pair,
        )
    if not value:
        raise PxfUriSyntaxError(
            f"Invalid URI {uri_text}: option '{pair}' missing value after '='",
            uri=uri_text,
            fragment=pair,
        )

    return OptionData(key, value)
