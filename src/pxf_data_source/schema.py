"""Spark schema of the fragment rows produced by the PXF reader."""

from pyspark.sql.types import (
    StructType, StructField, StringType, LongType, IntegerType, ArrayType
)

FRAGMENT_SCHEMA = StructType([
    StructField("source_name", StringType(), True),
    StructField("fragment_index", LongType(), True),
    StructField("metadata", StringType(), True),
    StructField("user_data", StringType(), True),
    StructField("profile", StringType(), True),
    StructField("replicas", ArrayType(StringType()), True),
    StructField("segment", IntegerType(), True),
])


def fragment_to_row(fragment, segment, columns=None):
    """
    Convert a DataFragment into a row tuple.

    Args:
        fragment: DataFragment assigned to ``segment``
        segment: Index of the segment that owns the fragment
        columns: Column names to emit, in order; defaults to FRAGMENT_SCHEMA

    Returns:
        Tuple of values in column order
    """
    values = {
        "source_name": fragment.source_name,
        "fragment_index": fragment.index,
        "metadata": fragment.fragment_md,
        "user_data": fragment.user_data,
        "profile": fragment.profile,
        "replicas": [f"{replica.ip}:{replica.rest_port}" for replica in fragment.replicas],
        "segment": segment,
    }
    if columns is None:
        columns = FRAGMENT_SCHEMA.fieldNames()
    return tuple(values.get(column) for column in columns)
