"""Tests for fetching and allocating fragments of a URI."""

import pytest
from unittest.mock import MagicMock


def _client(response_text):
    client = MagicMock()
    client.get_fragments.return_value = response_text
    return client


def test_set_fragments_assigns_segment_subset(fragments_response):
    """Test the fragments of one segment are attached to the URI."""
    from pxf_data_source.fragmenter import set_fragments
    from pxf_data_source.partitioning import QueryContext
    from pxf_data_source.uri import parse_uri

    uri = parse_uri("pxf://namenode:51200/tmp/demo?PROFILE=HdfsTextSimple")
    context = QueryContext(1, 3, 7)
    client = _client(fragments_response)

    fragments = set_fragments(uri, context, client=client)

    client.get_fragments.assert_called_once_with(uri, context)
    assert uri.fragments is fragments
    # shift = 7 % 3 = 1, so segment 1 owns position 0
    assert [(f.source_name, f.index) for f in fragments] == [("demo/text2.csv", 0)]
    assert all(r.ip == "localhost" and r.rest_port == 51200 for r in fragments[0].replicas)


def test_set_fragments_complete_over_segments(fragments_response):
    """Test every segment fetching independently covers each fragment once."""
    from pxf_data_source.fragmenter import set_fragments
    from pxf_data_source.partitioning import QueryContext
    from pxf_data_source.uri import parse_uri

    claimed = []
    for segment in range(2):
        uri = parse_uri("pxf://namenode:51200/tmp/demo?PROFILE=HdfsTextSimple")
        fragments = set_fragments(uri, QueryContext(segment, 2, 11), client=_client(fragments_response))
        claimed.extend((f.source_name, f.index) for f in fragments)

    assert sorted(claimed) == [
        ("demo/text2.csv", 0),
        ("demo/text2.csv", 1),
        ("demo/text_csv.csv", 0),
    ]


def test_set_fragments_custom_service_address(fragments_response):
    """Test the configured service address is assigned to replicas."""
    from pxf_data_source.fragmenter import set_fragments
    from pxf_data_source.partitioning import QueryContext
    from pxf_data_source.uri import parse_uri

    uri = parse_uri("pxf://namenode:51200/tmp/demo?PROFILE=HdfsTextSimple")

    fragments = set_fragments(uri, QueryContext(0, 1, 0), client=_client(fragments_response),
                              pxf_host="pxf.internal", pxf_port=5888)

    assert {(r.ip, r.rest_port) for f in fragments for r in f.replicas} == {("pxf.internal", 5888)}


def test_set_fragments_empty_catalog():
    """Test an empty catalog gives no fragments."""
    from pxf_data_source.fragmenter import set_fragments
    from pxf_data_source.partitioning import QueryContext
    from pxf_data_source.uri import parse_uri

    uri = parse_uri("pxf://h:80/d?profile=Hive")

    assert set_fragments(uri, QueryContext(0, 2, 3), client=_client('{"PXFFragments":[]}')) == []
    assert uri.fragments == []


def test_set_fragments_bad_catalog_leaves_uri_untouched():
    """Test a decode failure does not attach fragments."""
    from pxf_data_source.errors import PxfCatalogError
    from pxf_data_source.fragmenter import set_fragments
    from pxf_data_source.partitioning import QueryContext
    from pxf_data_source.uri import parse_uri

    uri = parse_uri("pxf://h:80/d?profile=Hive")

    with pytest.raises(PxfCatalogError):
        set_fragments(uri, QueryContext(0, 1, 1), client=_client('{"other": []}'))

    assert uri.fragments is None


def test_set_fragments_without_seed(fragments_response):
    """Test a missing transaction id aborts allocation."""
    from pxf_data_source.errors import PxfSeedUnavailableError
    from pxf_data_source.fragmenter import set_fragments
    from pxf_data_source.partitioning import QueryContext
    from pxf_data_source.uri import parse_uri

    uri = parse_uri("pxf://h:80/d?profile=Hive")

    with pytest.raises(PxfSeedUnavailableError):
        set_fragments(uri, QueryContext(0, 1, None), client=_client(fragments_response))


def test_set_fragments_default_client(mock_session, fragments_response):
    """Test a default client is created over a requests session."""
    from unittest.mock import patch
    from pxf_data_source.fragmenter import set_fragments
    from pxf_data_source.partitioning import QueryContext
    from pxf_data_source.uri import parse_uri

    uri = parse_uri("pxf://h:80/d?profile=Hive")

    with patch("requests.Session", return_value=mock_session):
        fragments = set_fragments(uri, QueryContext(0, 1, 5))

    assert len(fragments) == 3
    mock_session.get.assert_called_once()
