import pytest
import requests
from unittest.mock import Mock

from search.solr_client import SolrClient, SolrClientError


@pytest.fixture
def mock_session():
    """Creates a mock requests session returning an empty Solr response."""
    session = Mock()
    response = Mock()
    response.status_code = 200
    response.raise_for_status = Mock()
    response.json.return_value = {"response": {"numFound": 0, "docs": []}}
    session.get.return_value = response
    session.post.return_value = response
    return session


@pytest.fixture
def client(mock_session):
    return SolrClient("http://solr:8080/solr/collection1/", timeout=5, session=mock_session)


class TestSolrClient:

    def test_get_request(self, client, mock_session):
        result = client.search("cat", 10, 20, {"fq": ["a:1", "b:2"], "facet": "true"})
        assert result == {"response": {"numFound": 0, "docs": []}}
        mock_session.get.assert_called_once_with(
            "http://solr:8080/solr/collection1/select",
            params={"q": "cat", "start": 10, "rows": 20, "wt": "json", "fq": ["a:1", "b:2"], "facet": "true"},
            timeout=5,
        )

    def test_post_request(self, client, mock_session):
        client.search("cat", 0, 10, {"facet": "true"}, method="post")
        mock_session.get.assert_not_called()
        call_kwargs = mock_session.post.call_args[1]
        assert call_kwargs["data"]["q"] == "cat"
        assert call_kwargs["data"]["facet"] == "true"

    def test_none_params_are_skipped(self, client, mock_session):
        client.search("cat", 0, 10, {"defType": None})
        assert "defType" not in mock_session.get.call_args[1]["params"]

    def test_connection_error(self, client, mock_session):
        mock_session.get.side_effect = requests.exceptions.ConnectionError("refused")
        with pytest.raises(SolrClientError):
            client.search("cat")

    def test_http_error(self, client, mock_session):
        mock_session.get.return_value.raise_for_status.side_effect = requests.exceptions.HTTPError("400")
        with pytest.raises(SolrClientError):
            client.search("cat")

    def test_invalid_json(self, client, mock_session):
        mock_session.get.return_value.json.side_effect = ValueError("no json")
        with pytest.raises(SolrClientError):
            client.search("cat")

    def test_ping(self, client, mock_session):
        assert client.ping() is True
        mock_session.get.side_effect = requests.exceptions.Timeout()
        assert client.ping() is False
