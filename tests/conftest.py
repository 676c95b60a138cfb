import json

import pytest
from unittest.mock import MagicMock


@pytest.fixture(scope="session")
def spark():
    """Create a Spark session for testing."""
    from pyspark.sql import SparkSession

    spark = SparkSession.builder \
        .appName("pxf-tests") \
        .master("local[2]") \
        .getOrCreate()
    yield spark
    spark.stop()


@pytest.fixture
def basic_options():
    """Basic connection options for testing."""
    return {
        "uri": "pxf://namenode:51200/tmp/demo?PROFILE=HdfsTextSimple",
    }


@pytest.fixture
def fragments_payload():
    """Decoded catalog response with three fragments and one empty file."""
    return {
        "PXFFragments": [
            {
                "index": 0,
                "userData": None,
                "sourceName": "demo/text2.csv",
                "metadata": "rO0ABXcQAAAAAAAAAAAAAAAAAAAABXVy",
                "replicas": ["10.207.4.23", "10.207.4.24", "10.207.4.25"],
            },
            {
                "index": 0,
                "userData": None,
                "sourceName": "demo/empty.csv",
                "metadata": "rO0ABXcQAAAAAAAAAAAAAAAAAAAAAAAA",
                "replicas": [],
            },
            {
                "index": 1,
                "userData": "dXNlcg==",
                "sourceName": "demo/text2.csv",
                "metadata": "rO0ABXcQAAAAAAAAAAAAAAAAAAAABnVy",
                "profile": "HdfsTextSimple",
                "replicas": ["10.207.4.24"],
            },
            {
                "index": 0,
                "sourceName": "demo/text_csv.csv",
                "metadata": "rO0ABXcQAAAAAAAAAAAAAAAAAAAAB3Vy",
                "replicas": ["10.207.4.25"],
            },
        ]
    }


@pytest.fixture
def fragments_response(fragments_payload):
    """Catalog response body as returned by PXF."""
    return json.dumps(fragments_payload)


@pytest.fixture
def mock_session(fragments_response):
    """Mock requests session returning the sample catalog response."""
    session = MagicMock()
    response = MagicMock()
    response.text = fragments_response
    response.raise_for_status.return_value = None
    session.get.return_value = response
    return session
