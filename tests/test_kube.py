"""Tests for ns1_webhook.kube."""

import base64
from unittest.mock import MagicMock, patch

import httpx
import pytest

from ns1_webhook.errors import InitializationError, MissingKeyError, SecretNotFoundError
from ns1_webhook.kube import ClusterConfig, SecretStore, load_incluster_config, string_from_secret_data

_SECRET_PATH = "/api/v1/namespaces/ns/secrets/ns1-credentials"


def _response(status_code, json=None):
    return httpx.Response(status_code, json=json, request=httpx.Request("GET", f"https://k8s{_SECRET_PATH}"))


class TestLoadInclusterConfig:
    def test_reads_service_account_mount(self, monkeypatch, tmp_path):
        monkeypatch.setenv("KUBERNETES_SERVICE_HOST", "10.0.0.1")
        monkeypatch.setenv("KUBERNETES_SERVICE_PORT", "443")
        (tmp_path / "token").write_text("sa-token\n")
        (tmp_path / "ca.crt").write_text("ca")

        cfg = load_incluster_config(tmp_path)

        assert cfg.host == "https://10.0.0.1:443"
        assert cfg.token == "sa-token"
        assert cfg.ca_cert == str(tmp_path / "ca.crt")

    def test_brackets_ipv6_host(self, monkeypatch, tmp_path):
        monkeypatch.setenv("KUBERNETES_SERVICE_HOST", "fd00::1")
        monkeypatch.setenv("KUBERNETES_SERVICE_PORT", "443")
        (tmp_path / "token").write_text("sa-token")

        cfg = load_incluster_config(tmp_path)

        assert cfg.host == "https://[fd00::1]:443"
        assert cfg.ca_cert is None

    def test_raises_outside_cluster(self, monkeypatch, tmp_path):
        monkeypatch.delenv("KUBERNETES_SERVICE_HOST", raising=False)
        monkeypatch.delenv("KUBERNETES_SERVICE_PORT", raising=False)

        with pytest.raises(InitializationError, match="KUBERNETES_SERVICE_HOST"):
            load_incluster_config(tmp_path)

    def test_raises_without_token(self, monkeypatch, tmp_path):
        monkeypatch.setenv("KUBERNETES_SERVICE_HOST", "10.0.0.1")
        monkeypatch.setenv("KUBERNETES_SERVICE_PORT", "443")

        with pytest.raises(InitializationError, match="service account token"):
            load_incluster_config(tmp_path)

    def test_token_not_in_repr(self):
        assert "sa-token" not in repr(ClusterConfig(host="https://k8s", token="sa-token"))


class TestSecretStoreInit:
    def test_client_uses_bearer_token(self):
        with patch("ns1_webhook.kube.httpx.Client") as mock_cls:
            SecretStore(ClusterConfig(host="https://k8s", token="sa-token", verify=False))
            kwargs = mock_cls.call_args.kwargs
            assert kwargs["base_url"] == "https://k8s"
            assert kwargs["headers"]["Authorization"] == "Bearer sa-token"
            assert kwargs["verify"] is False
            assert kwargs["timeout"] == 10

    def test_missing_ca_cert_raises_initialization_error(self, tmp_path):
        config = ClusterConfig(host="https://k8s", token="t", ca_cert=str(tmp_path / "missing.crt"))

        with pytest.raises(InitializationError, match="https://k8s"):
            SecretStore(config)


class TestSecretStoreGetSecret:
    def test_returns_decoded_data(self):
        mock_client = MagicMock()
        mock_client.get.return_value = _response(
            200,
            json={"data": {"api-key": base64.b64encode(b"k1").decode()}},
        )
        store = SecretStore(ClusterConfig(host="https://k8s"), _http_client=mock_client)

        data = store.get_secret("ns", "ns1-credentials")

        assert data == {"api-key": b"k1"}
        mock_client.get.assert_called_once_with(_SECRET_PATH)

    def test_secret_without_data_returns_empty_map(self):
        mock_client = MagicMock()
        mock_client.get.return_value = _response(200, json={"metadata": {"name": "ns1-credentials"}})
        store = SecretStore(ClusterConfig(host="https://k8s"), _http_client=mock_client)

        assert store.get_secret("ns", "ns1-credentials") == {}

    def test_missing_secret_raises(self):
        mock_client = MagicMock()
        mock_client.get.return_value = _response(404, json={"reason": "NotFound"})
        store = SecretStore(ClusterConfig(host="https://k8s"), _http_client=mock_client)

        with pytest.raises(SecretNotFoundError, match="ns1-credentials/ns"):
            store.get_secret("ns", "ns1-credentials")

    def test_unreachable_api_server_raises(self):
        mock_client = MagicMock()
        mock_client.get.side_effect = httpx.ConnectError("connection refused")
        store = SecretStore(ClusterConfig(host="https://k8s"), _http_client=mock_client)

        with pytest.raises(SecretNotFoundError, match="connection refused"):
            store.get_secret("ns", "ns1-credentials")

    def test_empty_secret_name_raises_without_request(self):
        mock_client = MagicMock()
        store = SecretStore(ClusterConfig(host="https://k8s"), _http_client=mock_client)

        with pytest.raises(SecretNotFoundError, match="apiKeySecretRef is not set"):
            store.get_secret("ns", "")

        mock_client.get.assert_not_called()

    def test_close_closes_http_client(self):
        mock_client = MagicMock()

        with SecretStore(ClusterConfig(host="https://k8s"), _http_client=mock_client):
            pass

        mock_client.close.assert_called_once()


class TestStringFromSecretData:
    def test_returns_text_value(self):
        assert string_from_secret_data({"api-key": b"k1"}, "api-key") == "k1"

    def test_missing_key_raises(self):
        with pytest.raises(MissingKeyError, match="'api-key' not found"):
            string_from_secret_data({"token": b"x"}, "api-key")


class TestSecretStoreMalformedSecret:
    def test_invalid_base64_raises_secret_not_found(self):
        mock_client = MagicMock()
        mock_client.get.return_value = _response(200, json={"data": {"api-key": "not-base64!"}})
        store = SecretStore(ClusterConfig(host="https://k8s"), _http_client=mock_client)

        with pytest.raises(SecretNotFoundError, match="unable to decode secret `ns1-credentials/ns`"):
            store.get_secret("ns", "ns1-credentials")

    def test_non_json_body_raises_secret_not_found(self):
        mock_client = MagicMock()
        mock_client.get.return_value = httpx.Response(
            200, text="<html>proxy</html>", request=httpx.Request("GET", f"https://k8s{_SECRET_PATH}")
        )
        store = SecretStore(ClusterConfig(host="https://k8s"), _http_client=mock_client)

        with pytest.raises(SecretNotFoundError, match="unable to decode secret"):
            store.get_secret("ns", "ns1-credentials")

    def test_non_object_body_raises_secret_not_found(self):
        mock_client = MagicMock()
        mock_client.get.return_value = _response(200, json=["not", "a", "secret"])
        store = SecretStore(ClusterConfig(host="https://k8s"), _http_client=mock_client)

        with pytest.raises(SecretNotFoundError, match="unable to decode secret"):
            store.get_secret("ns", "ns1-credentials")

    def test_path_segments_are_quoted(self):
        mock_client = MagicMock()
        mock_client.get.return_value = _response(200, json={"data": {}})
        store = SecretStore(ClusterConfig(host="https://k8s"), _http_client=mock_client)

        store.get_secret("ns", "../configmaps/other")

        mock_client.get.assert_called_once_with("/api/v1/namespaces/ns/secrets/..%2Fconfigmaps%2Fother")


def test_non_utf8_value_raises_missing_key():
    with pytest.raises(MissingKeyError, match="not valid UTF-8"):
        string_from_secret_data({"api-key": b"\xffk1"}, "api-key")
