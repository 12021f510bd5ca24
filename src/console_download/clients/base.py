"""Base Kubernetes client with discovery and access review support."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Generator, NoReturn

from kubernetes import client, config
from kubernetes.client import ApiException
from kubernetes.dynamic import DynamicClient
from kubernetes.dynamic.resource import Resource, ResourceInstance
from urllib3.exceptions import HTTPError

from console_download.config import AuthMode, InstallerConfig, get_config
from console_download.utils.errors import (
    AuthenticationError,
    ForbiddenError,
    InstallerError,
    KubernetesError,
    NotFoundError,
    ResourceExistsError,
)

logger = logging.getLogger(__name__)


class CRDDefinition:
    """Definition of a Custom Resource."""

    def __init__(
        self,
        group: str,
        version: str,
        plural: str,
        kind: str,
    ) -> None:
        self.group = group
        self.version = version
        self.plural = plural
        self.kind = kind

    @property
    def api_version(self) -> str:
        """Get the full API version string."""
        if self.group:
            return f"{self.group}/{self.version}"
        return self.version


def _raise_api_error(
    e: ApiException,
    verb: str,
    kind: str,
    name: str | None = None,
    namespace: str | None = None,
) -> NoReturn:
    """Translate an ApiException into the installer error hierarchy."""
    if e.status == 404:
        raise NotFoundError(kind, name or "", namespace) from e
    if e.status == 403:
        raise ForbiddenError(verb, kind, name) from e
    if e.status == 409 and verb == "create":
        raise ResourceExistsError(kind, name or "unknown", namespace) from e
    target = f"{kind} '{name}'" if name else kind
    raise KubernetesError(f"Failed to {verb} {target}: {e.reason}", status=e.status) from e


def _raise_transport_error(
    e: HTTPError,
    verb: str,
    kind: str,
    name: str | None = None,
) -> NoReturn:
    """Wrap a connection or protocol failure that never reached the API server."""
    target = f"{kind} '{name}'" if name else kind
    raise KubernetesError(f"Failed to {verb} {target}: {e}") from e


class K8sClient:
    """Kubernetes client for the console download installer.

    Supports multiple authentication modes:
    - auto: Try in-cluster first, fall back to kubeconfig
    - kubeconfig: Use kubeconfig file with optional context
    - token: Use explicit API server URL and token
    """

    def __init__(self, config_obj: InstallerConfig | None = None) -> None:
        self._config = config_obj or get_config()
        self._api_client: client.ApiClient | None = None
        self._dynamic_client: DynamicClient | None = None
        self._authorization_v1: client.AuthorizationV1Api | None = None
        self._crd_cache: dict[str, Resource] = {}

    def connect(self) -> None:
        """Establish connection to Kubernetes API."""
        try:
            self._api_client = self._create_api_client()
            self._dynamic_client = DynamicClient(self._api_client)
            self._authorization_v1 = client.AuthorizationV1Api(self._api_client)
            logger.info("Connected to Kubernetes API")
        except Exception as e:
            raise AuthenticationError(f"Failed to connect to Kubernetes API: {e}") from e

    def disconnect(self) -> None:
        """Close connection to Kubernetes API."""
        if self._api_client:
            self._api_client.close()
            self._api_client = None
            self._dynamic_client = None
            self._authorization_v1 = None
            self._crd_cache.clear()
            logger.info("Disconnected from Kubernetes API")

    @property
    def is_connected(self) -> bool:
        """Check if client is connected."""
        return self._api_client is not None

    @property
    def request_timeout(self) -> int:
        return self._config.request_timeout

    def _create_api_client(self) -> client.ApiClient:
        """Create API client based on authentication mode."""
        auth_mode = self._config.auth_mode

        if auth_mode == AuthMode.TOKEN:
            return self._create_token_client()
        elif auth_mode == AuthMode.KUBECONFIG:
            return self._create_kubeconfig_client()
        else:  # AUTO
            return self._create_auto_client()

    def _create_token_client(self) -> client.ApiClient:
        """Create client using explicit token authentication."""
        if not self._config.api_server or not self._config.api_token:
            raise AuthenticationError(
                "api_server and api_token are required for token authentication"
            )

        configuration = client.Configuration()
        configuration.host = self._config.api_server
        configuration.api_key = {"authorization": f"Bearer {self._config.api_token}"}
        configuration.verify_ssl = True

        return client.ApiClient(configuration)

    def _create_kubeconfig_client(self) -> client.ApiClient:
        """Create client using kubeconfig file."""
        kubeconfig_path = self._config.effective_kubeconfig_path
        if not kubeconfig_path.exists():
            raise AuthenticationError(f"Kubeconfig not found: {kubeconfig_path}")

        # new_client_from_config keeps the global default configuration untouched
        return config.new_client_from_config(
            config_file=str(kubeconfig_path),
            context=self._config.kubeconfig_context,
        )

    def _create_auto_client(self) -> client.ApiClient:
        """Auto-detect authentication mode."""
        if Path("/var/run/secrets/kubernetes.io/serviceaccount/token").exists():
            logger.info("Using in-cluster authentication")
            config.load_incluster_config()
            configuration = client.Configuration.get_default_copy()
            return client.ApiClient(configuration)

        kubeconfig_path = self._config.effective_kubeconfig_path
        if kubeconfig_path.exists():
            logger.info(f"Using kubeconfig: {kubeconfig_path}")
            return config.new_client_from_config(
                config_file=str(kubeconfig_path),
                context=self._config.kubeconfig_context,
            )

        raise AuthenticationError(
            "No valid authentication method found. "
            "Not running in-cluster and no kubeconfig available."
        )

    @property
    def api_client(self) -> client.ApiClient:
        """Get the underlying API client."""
        if not self._api_client:
            raise InstallerError("Client not connected. Call connect() first.")
        return self._api_client

    @property
    def dynamic(self) -> DynamicClient:
        """Get the dynamic client."""
        if not self._dynamic_client:
            raise InstallerError("Client not connected. Call connect() first.")
        return self._dynamic_client

    @property
    def authorization_v1(self) -> client.AuthorizationV1Api:
        """Get the AuthorizationV1 API client."""
        if not self._authorization_v1:
            raise InstallerError("Client not connected. Call connect() first.")
        return self._authorization_v1

    def get_resource(self, crd: CRDDefinition) -> Resource:
        """Get a dynamic resource for a CRD.

        Uses caching to avoid repeated API discovery calls.
        """
        cache_key = f"{crd.api_version}/{crd.plural}"
        if cache_key not in self._crd_cache:
            self._crd_cache[cache_key] = self.dynamic.resources.get(
                api_version=crd.api_version,
                kind=crd.kind,
            )
        return self._crd_cache[cache_key]

    def get_api_resource_kinds(self, group_version: str) -> list[str]:
        """List the kinds served by an API group/version.

        Raises NotFoundError when the group/version itself is not served.
        """
        # The core group lives under /api, named groups under /apis
        prefix = "/apis" if "/" in group_version else "/api"
        try:
            result = self.api_client.call_api(
                f"{prefix}/{group_version}",
                "GET",
                header_params={"Accept": "application/json"},
                response_type="V1APIResourceList",
                auth_settings=["BearerToken"],
                _return_http_data_only=True,
                _request_timeout=self.request_timeout,
            )
        except ApiException as e:
            _raise_api_error(e, "discover", "APIGroupVersion", group_version)
        except HTTPError as e:
            _raise_transport_error(e, "discover", "APIGroupVersion", group_version)
        return [resource.kind for resource in result.resources or []]

    def review_self_access(
        self,
        verb: str,
        group: str,
        resource: str,
        name: str | None = None,
        namespace: str | None = None,
    ) -> bool:
        """Ask whether the current identity may perform ``verb`` on a resource."""
        body = client.V1SelfSubjectAccessReview(
            spec=client.V1SelfSubjectAccessReviewSpec(
                resource_attributes=client.V1ResourceAttributes(
                    verb=verb,
                    group=group,
                    resource=resource,
                    name=name,
                    namespace=namespace,
                )
            )
        )
        try:
            review = self.authorization_v1.create_self_subject_access_review(
                body=body, _request_timeout=self.request_timeout
            )
        except ApiException as e:
            _raise_api_error(e, "create", "SelfSubjectAccessReview")
        except HTTPError as e:
            _raise_transport_error(e, "create", "SelfSubjectAccessReview")
        status = review.status
        return bool(status and status.allowed)

    def get(
        self,
        crd: CRDDefinition,
        name: str,
        namespace: str | None = None,
    ) -> ResourceInstance:
        """Get a resource by name."""
        kwargs: dict[str, Any] = {"name": name, "_request_timeout": self.request_timeout}
        if namespace:
            kwargs["namespace"] = namespace
        try:
            resource = self.get_resource(crd)
            return resource.get(**kwargs)
        except ApiException as e:
            _raise_api_error(e, "get", crd.kind, name, namespace)
        except HTTPError as e:
            _raise_transport_error(e, "get", crd.kind, name)

    def create(
        self,
        crd: CRDDefinition,
        body: dict[str, Any],
        namespace: str | None = None,
    ) -> ResourceInstance:
        """Create a resource."""
        kwargs: dict[str, Any] = {"body": body, "_request_timeout": self.request_timeout}
        if namespace:
            kwargs["namespace"] = namespace
        try:
            resource = self.get_resource(crd)
            return resource.create(**kwargs)
        except ApiException as e:
            name = body.get("metadata", {}).get("name", "unknown")
            _raise_api_error(e, "create", crd.kind, name, namespace)
        except HTTPError as e:
            name = body.get("metadata", {}).get("name", "unknown")
            _raise_transport_error(e, "create", crd.kind, name)

    def delete(
        self,
        crd: CRDDefinition,
        name: str,
        namespace: str | None = None,
    ) -> None:
        """Delete a resource."""
        kwargs: dict[str, Any] = {"name": name, "_request_timeout": self.request_timeout}
        if namespace:
            kwargs["namespace"] = namespace
        try:
            resource = self.get_resource(crd)
            resource.delete(**kwargs)
        except ApiException as e:
            _raise_api_error(e, "delete", crd.kind, name, namespace)
        except HTTPError as e:
            _raise_transport_error(e, "delete", crd.kind, name)


@contextmanager
def get_k8s_client(
    config_obj: InstallerConfig | None = None,
) -> Generator[K8sClient, None, None]:
    """Context manager for K8s client with automatic cleanup."""
    k8s_client = K8sClient(config_obj)
    k8s_client.connect()
    try:
        yield k8s_client
    finally:
        k8s_client.disconnect()
