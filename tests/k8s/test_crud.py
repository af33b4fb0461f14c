import json

import httpx
import pytest

from kubeclient.clients.api import KubeClient
from kubeclient.clients.errors import ClientBuildingError, InvalidCertError
from kubeclient.kinds import ClusterRole, ConfigMap, Pod, TokenReview
from kubeclient.structs.bodies import KubeObject
from kubeclient.structs.configuration import ClientSettings
from kubeclient.structs.credentials import BasicAuth, External, Token

API_URL = 'https://api.example.com:6443'
POD = {'apiVersion': 'v1', 'kind': 'Pod', 'metadata': {'name': 'p1', 'namespace': 'ns1'}}
ROLE = {'apiVersion': 'rbac.authorization.k8s.io/v1', 'kind': 'ClusterRole',
        'metadata': {'name': 'r1'}}


def _request(handler) -> httpx.Request:
    assert handler.call_count == 1
    return handler.call_args[0][0]


def test_create_namespaced_object(client, handler):
    handler.return_value = httpx.Response(201, json=POD)
    result = client.create_namespaced_object('ns1', Pod(POD))
    request = _request(handler)
    assert request.method == 'POST'
    assert str(request.url) == f'{API_URL}/api/v1/namespaces/ns1/pods'
    assert request.headers['Content-Type'] == 'application/json'
    assert json.loads(request.content) == POD
    assert isinstance(result, Pod)
    assert result == POD


def test_replace_namespaced_object(client, handler):
    handler.return_value = httpx.Response(200, json=POD)
    result = client.replace_namespaced_object('ns1', 'p1', Pod(POD))
    request = _request(handler)
    assert request.method == 'PUT'
    assert str(request.url) == f'{API_URL}/api/v1/namespaces/ns1/pods/p1'
    assert request.headers['Content-Type'] == 'application/json'
    assert json.loads(request.content) == POD
    assert isinstance(result, Pod)


def test_patch_namespaced_object(client, handler):
    handler.return_value = httpx.Response(200, json=POD)
    patch = {'metadata': {'labels': {'tier': 'backend'}}}
    result = client.patch_namespaced_object(Pod, 'ns1', 'p1', patch)
    request = _request(handler)
    assert request.method == 'PATCH'
    assert str(request.url) == f'{API_URL}/api/v1/namespaces/ns1/pods/p1'
    assert request.headers['Content-Type'] == 'application/strategic-merge-patch+json'
    assert json.loads(request.content) == patch
    assert isinstance(result, Pod)


def test_get_namespaced_object(client, handler):
    handler.return_value = httpx.Response(200, json=POD)
    result = client.get_namespaced_object(Pod, 'ns1', 'p1')
    request = _request(handler)
    assert request.method == 'GET'
    assert str(request.url) == f'{API_URL}/api/v1/namespaces/ns1/pods/p1'
    assert 'Content-Type' not in request.headers
    assert request.content == b''
    assert isinstance(result, Pod)
    assert result.name == 'p1'


def test_list_namespaced_objects(client, handler):
    handler.return_value = httpx.Response(200, json={
        'apiVersion': 'v1', 'kind': 'PodList', 'metadata': {},
        'items': [{'metadata': {'name': 'p1'}}, {'metadata': {'name': 'p2'}}],
    })
    result = client.list_namespaced_objects(Pod, 'ns1')
    request = _request(handler)
    assert request.method == 'GET'
    assert str(request.url) == f'{API_URL}/api/v1/namespaces/ns1/pods'
    assert isinstance(result, Pod.List)
    assert [obj.name for obj in result] == ['p1', 'p2']
    assert all(isinstance(obj, Pod) and obj['kind'] == 'Pod' for obj in result)


def test_delete_namespaced_object(client, handler):
    handler.return_value = httpx.Response(200, json=POD)
    result = client.delete_namespaced_object(Pod, 'ns1', 'p1')
    request = _request(handler)
    assert request.method == 'DELETE'
    assert str(request.url) == f'{API_URL}/api/v1/namespaces/ns1/pods/p1'
    assert isinstance(result, Pod)


def test_create_cluster_object(client, handler):
    handler.return_value = httpx.Response(201, json=ROLE)
    result = client.create_cluster_object(ClusterRole(ROLE))
    request = _request(handler)
    assert request.method == 'POST'
    assert str(request.url) == f'{API_URL}/apis/rbac.authorization.k8s.io/v1/clusterroles'
    assert json.loads(request.content) == ROLE
    assert isinstance(result, ClusterRole)


def test_replace_cluster_object(client, handler):
    handler.return_value = httpx.Response(200, json=ROLE)
    client.replace_cluster_object('r1', ClusterRole(ROLE))
    request = _request(handler)
    assert request.method == 'PUT'
    assert str(request.url) == f'{API_URL}/apis/rbac.authorization.k8s.io/v1/clusterroles/r1'


def test_patch_cluster_object(client, handler):
    handler.return_value = httpx.Response(200, json=ROLE)
    client.patch_cluster_object(ClusterRole, 'r1', {'rules': []})
    request = _request(handler)
    assert request.method == 'PATCH'
    assert str(request.url) == f'{API_URL}/apis/rbac.authorization.k8s.io/v1/clusterroles/r1'
    assert request.headers['Content-Type'] == 'application/strategic-merge-patch+json'
    assert json.loads(request.content) == {'rules': []}


def test_get_cluster_object(client, handler):
    handler.return_value = httpx.Response(200, json=ROLE)
    result = client.get_cluster_object(ClusterRole, 'r1')
    request = _request(handler)
    assert request.method == 'GET'
    assert str(request.url) == f'{API_URL}/apis/rbac.authorization.k8s.io/v1/clusterroles/r1'
    assert isinstance(result, ClusterRole)


def test_list_cluster_objects(client, handler):
    handler.return_value = httpx.Response(200, json={
        'apiVersion': 'rbac.authorization.k8s.io/v1', 'kind': 'ClusterRoleList', 'items': None,
    })
    result = client.list_cluster_objects(ClusterRole)
    request = _request(handler)
    assert request.method == 'GET'
    assert str(request.url) == f'{API_URL}/apis/rbac.authorization.k8s.io/v1/clusterroles'
    assert isinstance(result, ClusterRole.List)
    assert len(result) == 0


def test_delete_cluster_object(client, handler):
    handler.return_value = httpx.Response(200, json=ROLE)
    client.delete_cluster_object(ClusterRole, 'r1')
    request = _request(handler)
    assert request.method == 'DELETE'
    assert str(request.url) == f'{API_URL}/apis/rbac.authorization.k8s.io/v1/clusterroles/r1'


def test_authorization_and_user_agent_headers(client, handler):
    client.get_cluster_object(ClusterRole, 'r1')
    request = _request(handler)
    assert request.headers['Authorization'] == 'Bearer tkn'
    assert request.headers['User-Agent'].startswith('kubeclient/')


def test_custom_user_agent(transport, handler, config):
    settings = ClientSettings(user_agent='my-app/1.2')
    with KubeClient(config, settings, transport=transport) as client:
        client.get_cluster_object(ClusterRole, 'r1')
    assert _request(handler).headers['User-Agent'] == 'my-app/1.2'


@pytest.mark.parametrize('namespace, name', [('', 'p1'), ('ns1', ''), (None, 'p1')])
def test_empty_names_are_rejected_before_requests(client, handler, namespace, name):
    with pytest.raises(ValueError):
        client.get_namespaced_object(Pod, namespace, name)
    assert not handler.called


@pytest.mark.parametrize('call', [
    lambda client: client.create_namespaced_object(None, Pod(POD)),
    lambda client: client.replace_namespaced_object(None, 'p1', Pod(POD)),
    lambda client: client.patch_namespaced_object(Pod, None, 'p1', {}),
    lambda client: client.list_namespaced_objects(Pod, None),
    lambda client: client.delete_namespaced_object(Pod, None, 'p1'),
])
def test_namespaced_calls_without_namespace_never_go_cluster_wide(client, handler, call):
    with pytest.raises(ValueError):
        call(client)
    assert not handler.called


def test_classes_without_coordinates_are_rejected(client, handler):
    with pytest.raises(TypeError):
        client.get_cluster_object(KubeObject, 'x')
    assert not handler.called


def test_unimplemented_authentication_fails_before_requests(transport, handler):
    config = External(api_url=API_URL, auth_info=BasicAuth())
    with KubeClient(config, transport=transport) as client:
        with pytest.raises(NotImplementedError):
            client.get_cluster_object(ClusterRole, 'r1')
    assert not handler.called


def test_trailing_slash_in_api_url(transport, handler):
    config = External(api_url=API_URL + '/', auth_info=Token('tkn'))
    with KubeClient(config, transport=transport) as client:
        client.get_cluster_object(ClusterRole, 'r1')
    assert str(_request(handler).url) == f'{API_URL}/apis/rbac.authorization.k8s.io/v1/clusterroles/r1'


def test_client_properties(client):
    assert client.api_url == API_URL
    assert client.auth_info == Token('tkn')
    assert client.default_namespace is None
    assert API_URL in repr(client)


def test_unsupported_config():
    with pytest.raises(TypeError):
        KubeClient(object())  # type: ignore


@pytest.mark.parametrize('api_url', ['localhost', 'ftp://localhost', '/relative/path'])
def test_invalid_api_url(api_url):
    with pytest.raises(ClientBuildingError):
        KubeClient(External(api_url=api_url, auth_info=Token('tkn')))


def test_invalid_ca():
    with pytest.raises(InvalidCertError):
        KubeClient(External(api_url=API_URL, auth_info=Token('tkn'), ca='garbage'))  # type: ignore


def test_valid_ca_and_insecure_mode(ca_pem):
    config = External(api_url=API_URL, auth_info=Token('tkn'), ca=ca_pem, insecure=True)
    with KubeClient(config) as client:
        assert client.api_url == API_URL


def test_get_object_by_path(client, handler):
    handler.return_value = httpx.Response(200, json=POD)
    result = client.get_object(Pod, '/api/v1/namespaces/ns1/pods/p1')
    request = _request(handler)
    assert request.method == 'GET'
    assert str(request.url) == f'{API_URL}/api/v1/namespaces/ns1/pods/p1'
    assert isinstance(result, Pod)
    assert result.name == 'p1'


def test_get_object_list_by_path(client, handler):
    handler.return_value = httpx.Response(200, json={
        'kind': 'ConfigMapList', 'items': [{'metadata': {'name': 'cm1'}}],
    })
    result = client.get_object(ConfigMap.List, 'api/v1/configmaps')
    assert str(_request(handler).url) == f'{API_URL}/api/v1/configmaps'
    assert isinstance(result, ConfigMap.List)
    assert [obj.name for obj in result] == ['cm1']


def test_post_object_with_different_response_class(client, handler):
    handler.return_value = httpx.Response(201, json={
        'apiVersion': 'authentication.k8s.io/v1', 'kind': 'TokenReview',
        'status': {'authenticated': True, 'user': {'username': 'system:admin'}},
    })
    result = client.post_object(TokenReview, '/apis/authentication.k8s.io/v1/tokenreviews',
                                {'spec': {'token': 'abc'}})
    request = _request(handler)
    assert request.method == 'POST'
    assert str(request.url) == f'{API_URL}/apis/authentication.k8s.io/v1/tokenreviews'
    assert request.headers['Content-Type'] == 'application/json'
    assert json.loads(request.content) == {'spec': {'token': 'abc'}}
    assert isinstance(result, TokenReview)
    assert result.authenticated
    assert result.user == {'username': 'system:admin'}


def test_post_object_as_generic_object(client, handler):
    handler.return_value = httpx.Response(201, json=POD)
    result = client.post_object(KubeObject, '/api/v1/namespaces/ns1/pods', Pod(POD))
    assert json.loads(_request(handler).content) == POD
    assert type(result) is KubeObject
    assert result == POD


def test_put_object_by_path(client, handler):
    handler.return_value = httpx.Response(200, json=ROLE)
    result = client.put_object(ClusterRole, '/apis/rbac.authorization.k8s.io/v1/clusterroles/r1',
                               ClusterRole(ROLE))
    request = _request(handler)
    assert request.method == 'PUT'
    assert json.loads(request.content) == ROLE
    assert isinstance(result, ClusterRole)


def test_delete_object_by_path(client, handler):
    handler.return_value = httpx.Response(200, json={'kind': 'Status', 'status': 'Success'})
    result = client.delete_object(KubeObject, '/api/v1/namespaces/ns1/pods/p1')
    request = _request(handler)
    assert request.method == 'DELETE'
    assert request.content == b''
    assert result['status'] == 'Success'


def test_object_calls_are_logged_with_references(client, handler, caplog):
    caplog.set_level(0, logger='kubeclient.clients.api')
    handler.return_value = httpx.Response(200, json=POD)
    client.get_namespaced_object(Pod, 'ns1', 'p1')
    record = next(record for record in caplog.records if record.getMessage().startswith('Request:'))
    assert record.name == 'kubeclient.clients.api'
    assert record.k8s_ref == {'apiVersion': 'v1', 'kind': 'Pod', 'name': 'p1',
                              'uid': None, 'namespace': 'ns1'}


def test_created_objects_are_logged_with_references(client, handler, caplog):
    caplog.set_level(0, logger='kubeclient.clients.api')
    handler.return_value = httpx.Response(201, json=ROLE)
    client.create_cluster_object(ClusterRole({'metadata': {'name': 'r1', 'uid': 'uid1'}}))
    record = next(record for record in caplog.records if record.getMessage().startswith('Request:'))
    assert record.k8s_ref['kind'] == 'ClusterRole'
    assert record.k8s_ref['name'] == 'r1'
    assert record.k8s_ref['uid'] == 'uid1'
    assert record.k8s_ref['namespace'] is None


def test_listings_are_logged_without_references(client, handler, caplog):
    caplog.set_level(0, logger='kubeclient.clients.api')
    handler.return_value = httpx.Response(200, json={'items': []})
    client.list_namespaced_objects(Pod, 'ns1')
    record = next(record for record in caplog.records if record.getMessage().startswith('Request:'))
    assert not hasattr(record, 'k8s_ref')
