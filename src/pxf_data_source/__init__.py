"""PXF - Python Data Source for fragments served by a PXF service."""

from .client import FragmentCatalogClient
from .data_source import PxfDataSource
from .errors import (
    PxfCatalogError,
    PxfConfigurationError,
    PxfError,
    PxfInternalError,
    PxfSeedUnavailableError,
    PxfUriSyntaxError,
)
from .fragmenter import set_fragments
from .fragments import DataFragment, FragmentHost, assign_service_location, parse_fragments_response
from .logging_config import configure_logging
from .partitioning import QueryContext, SegmentPartition, filter_fragments_for_segment
from .reader import PxfBatchReader, PxfReader
from .uri import OptionData, PxfUri, parse_uri

__all__ = [
    "PxfDataSource",
    "PxfBatchReader",
    "PxfReader",
    "FragmentCatalogClient",
    "SegmentPartition",
    "QueryContext",
    "filter_fragments_for_segment",
    "set_fragments",
    "DataFragment",
    "FragmentHost",
    "assign_service_location",
    "parse_fragments_response",
    "OptionData",
    "PxfUri",
    "parse_uri",
    "configure_logging",
    "PxfError",
    "PxfUriSyntaxError",
    "PxfConfigurationError",
    "PxfCatalogError",
    "PxfSeedUnavailableError",
    "PxfInternalError",
]
