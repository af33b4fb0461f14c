"""
The generic typed client for the K8s REST API.

The client operates on any kind class derived from `bodies.KubeObject`:
the class defines the API coordinates, and the client builds the URLs,
performs the requests, and wraps the responses into the class's instances
(or into the class's list container for the listing calls).

For the endpoints that do not fit the CRUD scheme (e.g. the review-style
kinds, where the response differs from the request), there are the typed
path-level calls: `KubeClient.get_object`, `KubeClient.post_object`, etc.

Every call is a single blocking HTTP round trip: no retries, no caching.
The client is safe to share between threads: all its own state is immutable
after the construction; the connection pooling is done by ``httpx``.
"""
import json
import logging
from typing import Any, Mapping, Optional, Type, TypeVar

import httpx

from kubeclient.clients import auth, errors, login
from kubeclient.engines import loggers
from kubeclient.structs import bodies, configuration, credentials, references

logger = logging.getLogger(__name__)

_O = TypeVar('_O', bound=bodies.KubeObject)
_R = TypeVar('_R')  # anything with `.from_raw()`: a kind or a kind's list.

JSON_CONTENT_TYPE = 'application/json'
PATCH_CONTENT_TYPE = 'application/strategic-merge-patch+json'


class KubeClient:
    """
    A configured connection to the API with generic CRUD operations.

    Cluster-scoped resources are addressed with the ``*_cluster_object(s)``
    methods, namespace-scoped ones with the ``*_namespaced_object(s)`` methods.
    The names and namespaces must be non-empty strings; otherwise, `ValueError`
    is raised before any request is made.
    """

    def __init__(
            self,
            config: credentials.ClientConfig,
            settings: Optional[configuration.ClientSettings] = None,
            *,
            transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        super().__init__()
        settings = settings if settings is not None else configuration.ClientSettings()

        # The in-cluster config is only a shortcut for the explicit one.
        info: credentials.External
        if isinstance(config, credentials.InCluster):
            info = login.login_in_cluster()
        elif isinstance(config, credentials.External):
            info = config
        else:
            raise TypeError(f"Unsupported client config: {config!r}")

        self._api_url = info.api_url.rstrip('/')
        self._auth_info = info.auth_info
        self._default_namespace = info.default_namespace
        self._client = auth.make_http_client(info, settings=settings, transport=transport)

    def __repr__(self) -> str:
        return f'<{self.__class__.__name__}: {self._api_url}>'

    def __enter__(self) -> "KubeClient":
        return self

    def __exit__(self, *_: Any) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    @property
    def api_url(self) -> str:
        return self._api_url

    @property
    def auth_info(self) -> credentials.AuthConfig:
        return self._auth_info

    @property
    def default_namespace(self) -> Optional[str]:
        return self._default_namespace

    #
    # Cluster-scoped objects.
    #

    def create_cluster_object(self, obj: _O) -> _O:
        resource = _resource_of(type(obj))
        path = resource.get_path()
        return self._call(type(obj), 'post', path, payload=obj,
                          ref=loggers.make_ref(obj, resource=resource))

    def replace_cluster_object(self, name: str, obj: _O) -> _O:
        resource = _resource_of(type(obj))
        path = resource.get_path(name=name)
        return self._call(type(obj), 'put', path, payload=obj,
                          ref=loggers.make_ref(obj, resource=resource, name=name))

    def patch_cluster_object(self, cls: Type[_O], name: str, patch: Mapping[str, Any]) -> _O:
        resource = _resource_of(cls)
        path = resource.get_path(name=name)
        return self._call(cls, 'patch', path, payload=patch, content_type=PATCH_CONTENT_TYPE,
                          ref=loggers.make_ref(resource=resource, name=name))

    def get_cluster_object(self, cls: Type[_O], name: str) -> _O:
        resource = _resource_of(cls)
        path = resource.get_path(name=name)
        return self._call(cls, 'get', path, ref=loggers.make_ref(resource=resource, name=name))

    def list_cluster_objects(self, cls: Type[_O]) -> "bodies.ObjectList[_O]":
        path = _resource_of(cls).get_path()
        return self._call(cls.List, 'get', path)

    def delete_cluster_object(self, cls: Type[_O], name: str) -> _O:
        resource = _resource_of(cls)
        path = resource.get_path(name=name)
        return self._call(cls, 'delete', path, ref=loggers.make_ref(resource=resource, name=name))

    #
    # Namespace-scoped objects.
    #

    def create_namespaced_object(self, namespace: str, obj: _O) -> _O:
        resource = _resource_of(type(obj))
        path = resource.get_path(namespace=_namespace(namespace))
        return self._call(type(obj), 'post', path, payload=obj,
                          ref=loggers.make_ref(obj, resource=resource, namespace=namespace))

    def replace_namespaced_object(self, namespace: str, name: str, obj: _O) -> _O:
        resource = _resource_of(type(obj))
        path = resource.get_path(namespace=_namespace(namespace), name=name)
        return self._call(type(obj), 'put', path, payload=obj,
                          ref=loggers.make_ref(obj, resource=resource, namespace=namespace, name=name))

    def patch_namespaced_object(
            self,
            cls: Type[_O],
            namespace: str,
            name: str,
            patch: Mapping[str, Any],
    ) -> _O:
        resource = _resource_of(cls)
        path = resource.get_path(namespace=_namespace(namespace), name=name)
        return self._call(cls, 'patch', path, payload=patch, content_type=PATCH_CONTENT_TYPE,
                          ref=loggers.make_ref(resource=resource, namespace=namespace, name=name))

    def get_namespaced_object(self, cls: Type[_O], namespace: str, name: str) -> _O:
        resource = _resource_of(cls)
        path = resource.get_path(namespace=_namespace(namespace), name=name)
        return self._call(cls, 'get', path,
                          ref=loggers.make_ref(resource=resource, namespace=namespace, name=name))

    def list_namespaced_objects(self, cls: Type[_O], namespace: str) -> "bodies.ObjectList[_O]":
        path = _resource_of(cls).get_path(namespace=_namespace(namespace))
        return self._call(cls.List, 'get', path)

    def delete_namespaced_object(self, cls: Type[_O], namespace: str, name: str) -> _O:
        resource = _resource_of(cls)
        path = resource.get_path(namespace=_namespace(namespace), name=name)
        return self._call(cls, 'delete', path,
                          ref=loggers.make_ref(resource=resource, namespace=namespace, name=name))

    #
    # Typed calls by path: for the endpoints beyond CRUD, e.g. TokenReview.
    # The response class can differ from the request body's class.
    #

    def get_object(self, cls: Type[_R], path: str) -> _R:
        return self._call(cls, 'get', path)

    def post_object(self, cls: Type[_R], path: str, body: object) -> _R:
        return self._call(cls, 'post', path, payload=body)

    def put_object(self, cls: Type[_R], path: str, body: object) -> _R:
        return self._call(cls, 'put', path, payload=body)

    def delete_object(self, cls: Type[_R], path: str) -> _R:
        return self._call(cls, 'delete', path)

    #
    # Low-level requests.
    #

    def request(
            self,
            method: str,
            path: str,  # relative to the server/api root.
            *,
            payload: Optional[object] = None,
            content_type: Optional[str] = None,
            logger: Optional[loggers.Logger] = None,
    ) -> httpx.Response:
        """
        Perform one request and return its successful response unparsed.

        Non-2xx responses are raised as `errors.HttpError` (or its subclasses).
        A request that cannot even be composed (e.g. a token with non-ASCII
        characters, which cannot be put into the headers) is `errors.MiscError`.
        """
        logger = logger if logger is not None else logging.getLogger(__name__)
        url = self._api_url + '/' + path.lstrip('/')
        what = f"{method.upper()} {url}"

        headers = {'Authorization': auth.get_authorization(self._auth_info)}
        content: Optional[bytes] = None
        if payload is not None:
            try:
                content = json.dumps(payload).encode('utf-8')
            except (TypeError, ValueError) as e:
                raise errors.SerdeError(e) from e
            headers['Content-Type'] = JSON_CONTENT_TYPE
        if content_type is not None:
            headers['Content-Type'] = content_type

        try:
            request = self._client.build_request(method.upper(), url, content=content, headers=headers)
        except (httpx.InvalidURL, UnicodeEncodeError) as e:
            logger.debug(f"Request cannot be built: {what} -> {e!r}")
            raise errors.MiscError(e) from e

        logger.debug(f"Request: {what}")
        try:
            response = self._client.send(request)
        except httpx.TransportError as e:
            logger.debug(f"Request failed: {what} -> {e!r}")
            raise errors.TransportError(e) from e

        try:
            errors.check_response(response)  # but do not parse it!
        except errors.HttpError as e:
            logger.debug(f"Request failed: {what} -> {e.status}")
            raise
        return response

    def _call(
            self,
            cls: Type[Any],
            method: str,
            path: str,
            *,
            payload: Optional[object] = None,
            content_type: Optional[str] = None,
            ref: Optional[loggers.ObjectRef] = None,
    ) -> Any:
        object_logger = loggers.ObjectLogger(ref, logger=logger) if ref is not None else logger
        response = self.request(method, path, payload=payload, content_type=content_type,
                                logger=object_logger)
        try:
            return cls.from_raw(response.json())
        except (ValueError, TypeError) as e:  # incl. json.JSONDecodeError
            raise errors.SerdeError(e) from e


def _resource_of(cls: Type[bodies.KubeObject]) -> references.Resource:
    resource = getattr(cls, 'resource', None)
    if not isinstance(resource, references.Resource):
        raise TypeError(f"{cls.__name__} declares no API group/version/plural.")
    return resource


def _namespace(namespace: Optional[str]) -> references.NamespaceName:
    # `None` is valid for the path builder (a cluster-wide path), but not here.
    if not isinstance(namespace, str) or not namespace:
        raise ValueError(f"A namespaced call needs a non-empty namespace, got {namespace!r}.")
    return references.NamespaceName(namespace)
