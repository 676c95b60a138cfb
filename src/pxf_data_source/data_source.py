"""PXF Data Source implementation."""

from pyspark.sql.datasource import DataSource

from .reader import PxfBatchReader
from .schema import FRAGMENT_SCHEMA


class PxfDataSource(DataSource):
    """PySpark Data Source listing the fragments of a PXF external object."""

    @classmethod
    def name(cls):
        """Return the data source format name."""
        return "pxf"

    def __init__(self, options):
        """Initialize data source with options."""
        self.options = options

    def schema(self):
        """Return the fixed fragment schema."""
        return FRAGMENT_SCHEMA

    def reader(self, schema):
        """Return a batch reader instance."""
        return PxfBatchReader(self.options, schema)
