"""Tests for the npm registry client and shared HTTP helper."""

import json
from unittest.mock import Mock, patch

import pytest
import requests

from common.http_client import safe_get
from errors import PackageNotFoundError, RegistryError
from registry.npm.client import fetch_registry_entry, package_url


def _response(status_code=200, data=None, text=None):
    res = Mock()
    res.status_code = status_code
    res.text = text if text is not None else json.dumps(data or {})
    return res


class TestPackageUrl:

    def test_plain_name(self):
        assert package_url("https://registry.npmjs.org/", "lodash") == "https://registry.npmjs.org/lodash"

    def test_scoped_name_encodes_slash(self):
        assert package_url("https://registry.npmjs.org/", "@babel/core") == "https://registry.npmjs.org/@babel%2Fcore"

    def test_registry_without_trailing_slash(self):
        assert package_url("https://npm.example.com/repo", "lodash") == "https://npm.example.com/repo/lodash"


class TestFetchRegistryEntry:

    @patch('registry.npm.client.safe_get')
    def test_versions_and_latest_tag(self, mock_get):
        mock_get.return_value = _response(200, {
            "name": "lodash",
            "dist-tags": {"latest": "4.17.21", "next": "5.0.0-beta.1"},
            "versions": {"4.17.20": {}, "4.17.21": {}, "5.0.0-beta.1": {}},
        })

        entry = fetch_registry_entry("lodash", "https://registry.npmjs.org/", 10)

        assert entry.name == "lodash"
        assert entry.versions == ("4.17.20", "4.17.21", "5.0.0-beta.1")
        assert entry.latest_tag == "4.17.21"
        args, kwargs = mock_get.call_args
        assert args[0] == "https://registry.npmjs.org/lodash"
        assert kwargs["timeout"] == 10
        assert kwargs["context"] == "lodash"
        assert "application/vnd.npm.install-v1+json" in kwargs["headers"]["Accept"]

    @patch('registry.npm.client.safe_get')
    def test_missing_dist_tags(self, mock_get):
        mock_get.return_value = _response(200, {"versions": {"1.0.0": {}}})
        entry = fetch_registry_entry("pkg")
        assert entry.versions == ("1.0.0",)
        assert entry.latest_tag is None

    @patch('registry.npm.client.safe_get')
    def test_404_raises_not_found(self, mock_get):
        mock_get.return_value = _response(404, {"error": "Not found"})
        with pytest.raises(PackageNotFoundError) as exc_info:
            fetch_registry_entry("missing-pkg")
        assert exc_info.value.name == "missing-pkg"
        assert exc_info.value.status_code == 404

    @patch('registry.npm.client.safe_get')
    def test_server_error_raises_registry_error(self, mock_get):
        mock_get.return_value = _response(500, text="oops")
        with pytest.raises(RegistryError) as exc_info:
            fetch_registry_entry("pkg")
        assert not isinstance(exc_info.value, PackageNotFoundError)
        assert exc_info.value.status_code == 500

    @patch('registry.npm.client.safe_get')
    def test_bad_json_raises_registry_error(self, mock_get):
        mock_get.return_value = _response(200, text="<html>bad</html>")
        with pytest.raises(RegistryError):
            fetch_registry_entry("pkg")

    @patch('registry.npm.client.safe_get')
    def test_non_object_versions_raises_registry_error(self, mock_get):
        mock_get.return_value = _response(200, {"versions": ["1.0.0"]})
        with pytest.raises(RegistryError):
            fetch_registry_entry("pkg")


class TestSafeGet:

    @patch('common.http_client.requests.get')
    def test_returns_response(self, mock_get):
        mock_get.return_value = _response(200, {})
        res = safe_get("https://registry.npmjs.org/lodash", context="lodash", timeout=3)
        assert res.status_code == 200
        mock_get.assert_called_once_with("https://registry.npmjs.org/lodash", timeout=3)

    @patch('common.http_client.requests.get')
    def test_timeout_raises_registry_error(self, mock_get):
        mock_get.side_effect = requests.Timeout("Simulated timeout")
        with pytest.raises(RegistryError, match="timed out"):
            safe_get("https://registry.npmjs.org/lodash", context="lodash")

    @patch('common.http_client.requests.get')
    def test_connection_error_raises_registry_error(self, mock_get):
        mock_get.side_effect = requests.ConnectionError("Simulated connection error")
        with pytest.raises(RegistryError, match="connection error"):
            safe_get("https://registry.npmjs.org/lodash", context="lodash")
