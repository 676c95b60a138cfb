"""Fetches the fragments of a PXF URI and keeps those of the current segment."""

import logging

from .client import FragmentCatalogClient
from .fragments import (
    PXF_HOST,
    PXF_PORT,
    assign_service_location,
    format_fragment_list,
    parse_fragments_response,
)
from .logging_config import log
from .partitioning import filter_fragments_for_segment


def set_fragments(uri, context, client=None, pxf_host=PXF_HOST, pxf_port=PXF_PORT):
    """
    Populate ``uri.fragments`` with the fragments allocated to this segment.

    1. Request the fragment list from the PXF Fragmenter API.
    2. Decode it and point every replica at the PXF service.
    3. Run the work allocation for the segment described by ``context``.

    Args:
        uri: Parsed PxfUri
        context: QueryContext of the current segment
        client: Optional FragmentCatalogClient
        pxf_host: Service host assigned to replicas
        pxf_port: Service port assigned to replicas

    Returns:
        The fragments assigned to this segment (also set on ``uri``)
    """
    client = client or FragmentCatalogClient()

    response_text = client.get_fragments(uri, context)
    data_fragments = parse_fragments_response(response_text)
    assign_service_location(data_fragments, pxf_host, pxf_port)

    if log.isEnabledFor(logging.DEBUG):
        log.debug("%s", format_fragment_list(data_fragments))

    data_fragments = filter_fragments_for_segment(data_fragments, context)
    log.debug(
        "Segment %s of %s assigned %d fragment(s) of %s",
        context.segment_index,
        context.segment_count,
        len(data_fragments),
        uri.data,
    )

    uri.fragments = data_fragments
    return data_fragments
