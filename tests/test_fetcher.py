"""
Tests for index retrieval (helm_list_charts/fetcher.py).
"""

import http.client
import socket
import urllib.error
from unittest.mock import MagicMock, patch

import pytest

from helm_list_charts.fetcher import (
    FetchError,
    build_index_url,
    fetch_index,
    http_get,
    validate_url,
)


def mock_response(body=b"entries: {}\n", status=200):
    resp = MagicMock()
    resp.status = status
    resp.read.return_value = body
    resp.__enter__.return_value = resp
    resp.__exit__.return_value = False
    return resp


class TestBuildIndexUrl:
    """Tests for index URL construction."""

    @pytest.mark.parametrize("source, expected", [
        ("https://charts.example.com", "https://charts.example.com/index.yaml"),
        ("https://charts.example.com/", "https://charts.example.com/index.yaml"),
        ("https://charts.example.com/stable//", "https://charts.example.com/stable/index.yaml"),
        ("https://charts.example.com/index.yaml", "https://charts.example.com/index.yaml"),
        ("  https://charts.example.com  ", "https://charts.example.com/index.yaml"),
    ])
    def test_build_index_url(self, source, expected):
        """Test index.yaml is appended only when missing."""
        assert build_index_url(source) == expected

    def test_similar_suffix_not_treated_as_index(self):
        """Test a path merely ending in 'index.yaml' text is still completed."""
        assert build_index_url("https://x.io/myindex.yaml") == "https://x.io/myindex.yaml/index.yaml"

    @pytest.mark.parametrize("source, expected", [
        ("https://x.io/charts?x=1", "https://x.io/charts/index.yaml?x=1"),
        ("https://x.io/charts/?x=1#top", "https://x.io/charts/index.yaml?x=1#top"),
        ("https://x.io/charts/index.yaml?token=abc", "https://x.io/charts/index.yaml?token=abc"),
    ])
    def test_query_and_fragment_kept(self, source, expected):
        """Test index.yaml is added to the path, not after the query."""
        assert build_index_url(source) == expected

    def test_file_url(self):
        """Test file URLs keep their empty host."""
        assert build_index_url("file:///srv/charts") == "file:///srv/charts/index.yaml"

    def test_malformed_url(self):
        """Test an unparseable source raises FetchError."""
        with pytest.raises(FetchError, match="malformed"):
            build_index_url("http://[::1/charts")


class TestValidateUrl:
    """Tests for URL validation."""

    @pytest.mark.parametrize("url", [
        "https://charts.example.com/index.yaml",
        "http://localhost:8080/index.yaml",
        "file:///tmp/index.yaml",
    ])
    def test_valid(self, url):
        """Test supported URLs pass validation."""
        validate_url(url)

    @pytest.mark.parametrize("url", [
        "charts.example.com/index.yaml",
        "ftp://charts.example.com/index.yaml",
        "https:///index.yaml",
        "http://[::1/index.yaml",
    ])
    def test_invalid(self, url):
        """Test malformed or unsupported URLs raise FetchError."""
        with pytest.raises(FetchError):
            validate_url(url)


class TestHttpGet:
    """Tests for http_get."""

    def test_success(self):
        """Test the response body is returned."""
        with patch("urllib.request.urlopen", return_value=mock_response(b"data")) as mock_urlopen:
            assert http_get("https://charts.example.com/index.yaml", timeout=5) == b"data"
        req = mock_urlopen.call_args[0][0]
        assert req.full_url == "https://charts.example.com/index.yaml"
        assert req.get_header("User-agent").startswith("helm-list-charts/")
        assert mock_urlopen.call_args[1]["timeout"] == 5

    def test_http_error(self):
        """Test HTTP error statuses raise FetchError naming the URL."""
        url = "https://charts.example.com/index.yaml"
        error = urllib.error.HTTPError(url, 404, "Not Found", {}, None)
        with patch("urllib.request.urlopen", side_effect=error):
            with pytest.raises(FetchError) as exc_info:
                http_get(url)
        assert exc_info.value.url == url
        assert "404" in str(exc_info.value)
        assert url in str(exc_info.value)

    def test_non_success_status(self):
        """Test a non-2xx status that was not raised is still an error."""
        with patch("urllib.request.urlopen", return_value=mock_response(status=304)):
            with pytest.raises(FetchError, match="HTTP 304"):
                http_get("https://charts.example.com/index.yaml")

    def test_connection_error(self):
        """Test connection failures raise FetchError."""
        error = urllib.error.URLError(ConnectionRefusedError("Connection refused"))
        with patch("urllib.request.urlopen", side_effect=error):
            with pytest.raises(FetchError, match="Connection refused"):
                http_get("https://charts.example.com/index.yaml")

    def test_timeout(self):
        """Test timeouts raise FetchError."""
        with patch("urllib.request.urlopen", side_effect=socket.timeout("timed out")):
            with pytest.raises(FetchError, match="timed out"):
                http_get("https://charts.example.com/index.yaml")

    def test_interrupted_transfer(self):
        """Test a truncated body raises FetchError."""
        resp = mock_response()
        resp.read.side_effect = http.client.IncompleteRead(b"partial")
        with patch("urllib.request.urlopen", return_value=resp):
            with pytest.raises(FetchError, match="IncompleteRead"):
                http_get("https://charts.example.com/index.yaml")

    def test_invalid_url_makes_no_request(self):
        """Test no request is made for an invalid URL."""
        with patch("urllib.request.urlopen") as mock_urlopen:
            with pytest.raises(FetchError):
                http_get("not a url")
        mock_urlopen.assert_not_called()


class TestFetchIndex:
    """Tests for fetch_index."""

    def test_appends_index_path(self):
        """Test the repository URL is completed before fetching."""
        with patch("helm_list_charts.fetcher.http_get", return_value=b"x") as mock_get:
            assert fetch_index("https://charts.example.com/", timeout=3) == b"x"
        mock_get.assert_called_once_with("https://charts.example.com/index.yaml", timeout=3)

    def test_file_url(self, tmp_path):
        """Test file:// repositories are read from disk."""
        (tmp_path / "index.yaml").write_bytes(b"entries: {}\n")
        assert fetch_index(tmp_path.as_uri()) == b"entries: {}\n"

    def test_missing_file(self, tmp_path):
        """Test a missing local index raises FetchError."""
        with pytest.raises(FetchError):
            fetch_index(tmp_path.as_uri())
