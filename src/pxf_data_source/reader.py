"""PXF reader implementations."""

import secrets

from pyspark.sql.datasource import DataSourceReader

from .client import FragmentCatalogClient
from .errors import PxfConfigurationError
from .fragmenter import set_fragments
from .fragments import PXF_HOST, PXF_PORT
from .logging_config import log
from .partitioning import SegmentPartition
from .schema import fragment_to_row
from .uri import parse_uri

# Upper bound for generated transaction ids.
MAX_TRANSACTION_ID = 2**31 - 1


class PxfReader:
    """Base reader class for the PXF data source.

    The reader __init__ must NOT contact PXF. PySpark re-instantiates the
    reader in a worker process for partitions() and read(), so anything
    shared by all segments of one query (the transaction id) is carried on
    the partitions instead of being drawn here.
    """

    def __init__(self, options, schema):
        """
        Initialize reader and validate options.

        Args:
            options: Configuration options dict
            schema: Spark StructType schema (resolved by DataSource.schema() or user)
        """
        self.options = options

        # Validate required options
        self._validate_options()

        self.uri_text = options.get("uri") or options.get("path")
        # Fail on a malformed URI before any segment starts
        parse_uri(self.uri_text)

        # Read options
        self.total_segments = self._int_option("total_segments", 1)
        self.transaction_id = self._int_option("transaction_id", None)
        self.pxf_host = options.get("pxf_host", PXF_HOST)
        self.pxf_port = self._int_option("pxf_port", PXF_PORT)
        self.request_timeout = self._int_option("request_timeout", 30)

        if self.total_segments < 1:
            raise PxfConfigurationError("total_segments must be at least 1")
        if self.transaction_id is not None and self.transaction_id < 0:
            raise PxfConfigurationError("transaction_id must not be negative")

        self.schema = schema
        self.columns = [field.name for field in schema.fields] if schema else []

    def _validate_options(self):
        """Validate required options are present."""
        if not self.options.get("uri") and not self.options.get("path"):
            raise PxfConfigurationError("Missing required options: uri")

    def _int_option(self, name, default):
        """Return an integer option, or ``default`` when it is not set."""
        value = self.options.get(name)
        if value is None or value == "":
            return default
        try:
            return int(value)
        except (TypeError, ValueError) as error:
            raise PxfConfigurationError(f"Option {name} must be an integer, got {value!r}") from error

    def partitions(self):
        """
        Return one partition per segment.

        The transaction id is drawn once here so that every segment of the
        query partitions the fragment list with the same seed.

        Returns:
            List of SegmentPartition objects
        """
        transaction_id = self.transaction_id
        if transaction_id is None:
            transaction_id = secrets.randbelow(MAX_TRANSACTION_ID) + 1

        log.info(
            "Reading %s with %d segment(s), transaction id %d",
            self.uri_text,
            self.total_segments,
            transaction_id,
        )
        return [
            SegmentPartition(i, self.total_segments, transaction_id)
            for i in range(self.total_segments)
        ]

    def read(self, partition):
        """
        Read the fragments allocated to one segment.

        Args:
            partition: SegmentPartition to read

        Yields:
            Tuples representing rows in schema column order
        """
        uri = parse_uri(self.uri_text)
        client = FragmentCatalogClient(timeout=self.request_timeout)

        try:
            fragments = set_fragments(
                uri,
                partition.context(),
                client=client,
                pxf_host=self.pxf_host,
                pxf_port=self.pxf_port,
            )
            for fragment in fragments:
                yield fragment_to_row(fragment, partition.segment, self.columns)
        finally:
            uri.release()
            client.close()


class PxfBatchReader(PxfReader, DataSourceReader):
    """Batch reader for PXF."""

    pass
