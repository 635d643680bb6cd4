"""Registry API v2 client."""

import json
import re
from typing import Any

import httpx

from registry_client.auth.credentials import ANONYMOUS, CredentialResolver, Credentials
from registry_client.auth.tokens import TokenCache
from registry_client.config import resolve_registry_settings
from registry_client.errors.exceptions import NotFoundError, ProtocolViolationError
from registry_client.hooks import LogfCallback, log
from registry_client.models import RepositoryList, TagList
from registry_client.pagination import Paginator
from registry_client.transport.factory import create_transport_stack

MANIFEST_V1 = "application/vnd.docker.distribution.manifest.v1+prettyjws"
MANIFEST_V2 = "application/vnd.docker.distribution.manifest.v2+json"
MANIFEST_LIST_V2 = "application/vnd.docker.distribution.manifest.list.v2+json"
OCI_MANIFEST = "application/vnd.oci.image.manifest.v1+json"
OCI_INDEX = "application/vnd.oci.image.index.v1+json"

DIGEST_HEADER = "Docker-Content-Digest"

# algorithm ":" encoded, as in the OCI image digest grammar
_DIGEST_RE = re.compile(r"^[a-z0-9]+(?:[+._-][a-z0-9]+)*:[a-zA-Z0-9=_-]+$")


class RegistryClient:
    """Synchronous client for a registry's HTTP API v2.

    Every request goes through the authenticated transport stack (see
    ``registry_client.transport``), so challenges are answered transparently
    and failures surface as ``RegistryError`` subclasses.

    Args:
        url: Registry base URL (e.g. ``https://registry.example.com``)
        credentials: Registry credentials (anonymous if None)
        transport: Network transport to wrap (default: ``httpx.HTTPTransport``)
        insecure: Disable TLS certificate verification of the default transport
        logf: Hook invoked before each registry call
        token_cache: Bearer token cache (default: one per client)
        prefer_basic: Prefer Basic over Bearer when both are offered
        timeout: Request timeout in seconds

    Example:
        ```python
        with RegistryClient.connect("https://registry.example.com", "user", "secret") as registry:
            for tag in registry.tags("library/nginx"):
                print(tag, registry.manifest_digest("library/nginx", tag))
        ```
    """

    def __init__(
        self,
        url: str,
        credentials: Credentials | None = None,
        *,
        transport: httpx.BaseTransport | None = None,
        insecure: bool = False,
        logf: LogfCallback = log,
        token_cache: TokenCache | None = None,
        prefer_basic: bool = True,
        timeout: float = 30.0,
    ) -> None:
        self.url = url.rstrip("/")
        self.credentials = credentials or ANONYMOUS
        self.logf = logf
        self.token_cache = token_cache if token_cache is not None else TokenCache()

        stack = create_transport_stack(
            base_url=self.url,
            credentials=self.credentials,
            wrapped_transport=transport,
            verify=not insecure,
            token_cache=self.token_cache,
            prefer_basic=prefer_basic,
        )
        self._client = httpx.Client(transport=stack, timeout=timeout, follow_redirects=True)
        self._paginator = Paginator(self._client, logf=logf)

    @classmethod
    def connect(cls, url: str, username: str = "", password: str = "", **kwargs) -> "RegistryClient":
        """Create a client and ``ping`` the registry before returning it.

        Raises:
            RegistryError: If the registry is unreachable or rejects the credentials
        """
        registry = cls(url, Credentials(username, password), **kwargs)
        try:
            registry.ping()
        except Exception:
            registry.close()
            raise
        return registry

    @classmethod
    def from_env(cls, *, resolver: CredentialResolver | None = None, **kwargs) -> "RegistryClient":
        """Create a client from ``REGISTRY_*`` environment variables (see ``registry_client.config``)."""
        settings = resolve_registry_settings(resolver=resolver)
        kwargs.setdefault("insecure", settings.insecure)
        return cls(settings.url, settings.credentials, **kwargs)

    def __enter__(self) -> "RegistryClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    def _url(self, path_template: str, *args: str) -> str:
        return self.url + (path_template % args)

    def ping(self) -> None:
        """Check that the registry speaks API v2 and accepts the credentials."""
        url = self._url("/v2/")
        self.logf("registry.ping url=%s", url)
        self._client.get(url)

    def tags(self, repository: str, page_size: int | None = None) -> list[str]:
        """List every tag of a repository, following pagination.

        Args:
            repository: Repository name (e.g. ``library/nginx``)
            page_size: Tags per page requested from the registry (``n``)

        Returns:
            Tags in registry order
        """
        url = self._url("/v2/%s/tags/list", repository)
        if page_size is not None:
            url = str(httpx.URL(url, params={"n": page_size}))
        self.logf("registry.tags url=%s repository=%s", url, repository)

        pages = self._paginator.fetch_all(url, TagList.from_json)
        return [tag for page in pages for tag in page.tags]

    def repositories(self, page_size: int | None = None) -> list[str]:
        """List every repository in the registry catalog, following pagination."""
        url = self._url("/v2/_catalog")
        if page_size is not None:
            url = str(httpx.URL(url, params={"n": page_size}))
        self.logf("registry.repositories url=%s", url)

        pages = self._paginator.fetch_all(url, RepositoryList.from_json)
        return [repository for page in pages for repository in page.repositories]

    def manifest(self, repository: str, reference: str, media_type: str = MANIFEST_V2) -> dict[str, Any]:
        """Fetch a manifest by tag or digest.

        Args:
            repository: Repository name
            reference: Tag or digest
            media_type: Manifest media type(s) to accept

        Returns:
            Decoded manifest document

        Raises:
            NotFoundError: If the manifest does not exist
            ProtocolViolationError: If the body is not a JSON object
        """
        url = self._url("/v2/%s/manifests/%s", repository, reference)
        self.logf("registry.manifest.get url=%s repository=%s reference=%s", url, repository, reference)

        response = self._client.get(url, headers={"Accept": media_type})
        try:
            manifest = response.json()
        except ValueError as e:
            raise ProtocolViolationError(
                f"Undecodable manifest from {url}: {e}", status_code=response.status_code, response=response
            ) from e
        if not isinstance(manifest, dict):
            raise ProtocolViolationError(
                f"Manifest from {url} is not a JSON object", status_code=response.status_code, response=response
            )
        return manifest

    def manifest_v1(self, repository: str, reference: str) -> dict[str, Any]:
        """Fetch a schema 1 (signed) manifest."""
        return self.manifest(repository, reference, MANIFEST_V1)

    def manifest_v2(self, repository: str, reference: str) -> dict[str, Any]:
        """Fetch a schema 2 manifest."""
        return self.manifest(repository, reference, MANIFEST_V2)

    def manifest_digest(self, repository: str, reference: str, media_type: str = MANIFEST_V2) -> str:
        """Resolve a reference to its manifest digest with a HEAD request.

        Raises:
            ProtocolViolationError: If the response lacks a valid digest header
        """
        url = self._url("/v2/%s/manifests/%s", repository, reference)
        self.logf("registry.manifest.head url=%s repository=%s reference=%s", url, repository, reference)

        response = self._client.head(url, headers={"Accept": media_type})
        digest = response.headers.get(DIGEST_HEADER)
        if not digest:
            raise ProtocolViolationError(
                f"Missing {DIGEST_HEADER} header for {url}", status_code=response.status_code, response=response
            )
        if not _DIGEST_RE.match(digest):
            raise ProtocolViolationError(
                f"Invalid digest {digest!r} for {url}", status_code=response.status_code, response=response
            )
        return digest

    def put_manifest(
        self,
        repository: str,
        reference: str,
        manifest: dict[str, Any] | bytes,
        media_type: str = MANIFEST_V2,
    ) -> str | None:
        """Upload a manifest under a tag or digest.

        Args:
            repository: Repository name
            reference: Tag or digest
            manifest: Manifest document, or its exact serialized payload
            media_type: ``Content-Type`` of the payload

        Returns:
            Digest reported by the registry, if any
        """
        url = self._url("/v2/%s/manifests/%s", repository, reference)
        self.logf("registry.manifest.put url=%s repository=%s reference=%s", url, repository, reference)

        payload = manifest if isinstance(manifest, bytes) else json.dumps(manifest).encode("utf-8")
        response = self._client.put(url, content=payload, headers={"Content-Type": media_type})
        return response.headers.get(DIGEST_HEADER)

    def delete_manifest(self, repository: str, digest: str) -> None:
        """Delete a manifest by digest.

        Note:
            The registry must have deletes enabled
            (``REGISTRY_STORAGE_DELETE_ENABLED=true`` for distribution).
        """
        url = self._url("/v2/%s/manifests/%s", repository, digest)
        self.logf("registry.manifest.delete url=%s repository=%s reference=%s", url, repository, digest)
        self._client.delete(url)

    def has_blob(self, repository: str, digest: str) -> bool:
        """Check whether a blob exists in a repository."""
        url = self._url("/v2/%s/blobs/%s", repository, digest)
        self.logf("registry.blob.head url=%s repository=%s digest=%s", url, repository, digest)
        try:
            self._client.head(url)
        except NotFoundError:
            return False
        return True
