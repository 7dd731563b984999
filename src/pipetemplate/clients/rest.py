"""
REST Cluster Client — Template store, processor and creators over HTTP.

Endpoints:
    GET  /oapi/v1/namespaces/{ns}/templates/{name}
    POST /oapi/v1/namespaces/{ns}/processedtemplates
    POST /api/v1/namespaces/{ns}/{resource}     (base group)
    POST /oapi/v1/namespaces/{ns}/{resource}    (origin group)
"""

import json
import re
from typing import Any

import requests

from pipetemplate.config import ClusterConfig
from pipetemplate.errors import NotFoundError, TransportError
from pipetemplate.observability import get_logger
from pipetemplate.templates import Template
from pipetemplate.clients.base import RawObject


BASE_API_PREFIX = "/api/v1"
ORIGIN_API_PREFIX = "/oapi/v1"

logger = get_logger("clients.rest")

_WHITESPACE = re.compile(r"[ \t\n\r]*")
_decoder = json.JSONDecoder()


class RestClusterClient:
    """
    HTTP client for the cluster API.

    Usage:
        client = RestClusterClient(ClusterConfig.from_env())
        template = client.get("openshift", "jenkins-ephemeral")
    """

    def __init__(
        self,
        config: ClusterConfig | None = None,
        session: requests.Session | None = None,
    ):
        self.config = config or ClusterConfig.from_env()
        if not self.config.server:
            raise ValueError(
                "Cluster server URL not found. "
                "Set PIPETEMPLATE_SERVER environment variable or pass server in config."
            )
        self._session = session or requests.Session()
        self._session.verify = self.config.verify_tls
        if self.config.token:
            self._session.headers["Authorization"] = f"Bearer {self.config.token}"

    def url(self, prefix: str, namespace: str, resource: str, name: str | None = None) -> str:
        path = f"{prefix}/namespaces/{namespace}/{resource}"
        if name:
            path += f"/{name}"
        return self.config.server.rstrip("/") + path

    def request(self, method: str, url: str, **kwargs: Any) -> requests.Response:
        """Issue one request, mapping failures to TransportError/NotFoundError."""
        try:
            response = self._session.request(
                method, url, timeout=self.config.timeout, **kwargs
            )
        except requests.RequestException as e:
            raise TransportError(f"{method} {url} failed: {e}", e) from e

        if response.status_code == 404:
            raise NotFoundError(f"{method} {url}: not found")
        if not response.ok:
            raise TransportError(
                f"{method} {url} returned {response.status_code}: {response.text}"
            )
        logger.debug("%s %s -> %d", method, url, response.status_code)
        return response

    # Template store

    def get(self, namespace: str, name: str) -> Template:
        url = self.url(ORIGIN_API_PREFIX, namespace, "templates", name)
        response = self.request("GET", url)
        try:
            return Template.model_validate(response.json())
        except ValueError as e:
            raise TransportError(f"GET {url}: invalid template: {e}", e) from e

    # Template processor

    def process(self, namespace: str, template: Template) -> list[Any]:
        url = self.url(ORIGIN_API_PREFIX, namespace, "processedtemplates")
        response = self.request("POST", url, json=template.to_api_dict())
        try:
            spans = split_objects(response.content.decode("utf-8"))
        except ValueError as e:
            raise TransportError(f"POST {url}: invalid response: {e}", e) from e
        return [RawObject(span.encode("utf-8")) for span in spans]

    # Resource creators

    def base_creator(self) -> "RestResourceCreator":
        return RestResourceCreator(self, BASE_API_PREFIX)

    def origin_creator(self) -> "RestResourceCreator":
        return RestResourceCreator(self, ORIGIN_API_PREFIX)


class RestResourceCreator:
    """Creates resources under one API prefix."""

    def __init__(self, client: RestClusterClient, prefix: str):
        self.client = client
        self.prefix = prefix

    def create(self, namespace: str, resource: str, body: bytes) -> None:
        url = self.client.url(self.prefix, namespace, resource)
        self.client.request(
            "POST",
            url,
            data=body,
            headers={"Content-Type": "application/json"},
        )


def _skip_whitespace(text: str, pos: int) -> int:
    return _WHITESPACE.match(text, pos).end()


def _expect(text: str, pos: int, char: str) -> int:
    if text[pos:pos + 1] != char:
        raise ValueError(f"expected {char!r} at position {pos}")
    return _skip_whitespace(text, pos + 1)


def split_objects(text: str) -> list[str]:
    """
    Return the source text of each element of a processed template's
    top-level "objects" array, exactly as the server wrote it.

    Raises ValueError on malformed JSON.
    """
    spans: list[str] = []
    pos = _expect(text, _skip_whitespace(text, 0), "{")
    if text[pos:pos + 1] == "}":
        pos += 1
    else:
        while True:
            key, pos = _decoder.raw_decode(text, pos)
            if not isinstance(key, str):
                raise ValueError(f"object key expected at position {pos}")
            pos = _expect(text, _skip_whitespace(text, pos), ":")

            if key == "objects" and text[pos:pos + 1] == "[":
                spans = []
                pos = _expect(text, pos, "[")
                if text[pos:pos + 1] == "]":
                    pos += 1
                else:
                    while True:
                        start = pos
                        _, pos = _decoder.raw_decode(text, pos)
                        spans.append(text[start:pos])
                        pos = _skip_whitespace(text, pos)
                        if text[pos:pos + 1] != ",":
                            break
                        pos = _skip_whitespace(text, pos + 1)
                    if text[pos:pos + 1] != "]":
                        raise ValueError(f"expected ']' at position {pos}")
                    pos += 1
            else:
                value, pos = _decoder.raw_decode(text, pos)
                if key == "objects":
                    if value is not None:
                        raise ValueError("'objects' is not an array")
                    spans = []

            pos = _skip_whitespace(text, pos)
            if text[pos:pos + 1] != ",":
                break
            pos = _skip_whitespace(text, pos + 1)
        if text[pos:pos + 1] != "}":
            raise ValueError(f"expected '}}' at position {pos}")
        pos += 1

    if _skip_whitespace(text, pos) != len(text):
        raise ValueError(f"extra data at position {pos}")
    return spans


def create_rest_client(server: str | None = None, **kwargs: Any) -> RestClusterClient:
    """Factory for the REST client; unset values come from the environment."""
    overrides = dict(kwargs)
    if server is not None:
        overrides["server"] = server
    return RestClusterClient(ClusterConfig.from_env(**overrides))
