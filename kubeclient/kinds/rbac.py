"""
Kinds of the ``rbac.authorization.k8s.io/v1`` API group.
"""
from typing import Any, List, Mapping

from kubeclient.structs import bodies

GROUP = 'rbac.authorization.k8s.io'


class ClusterRole(bodies.KubeObject, group=GROUP, version='v1', plural='clusterroles',
                  namespaced=False):

    @property
    def rules(self) -> List[Mapping[str, Any]]:
        return list(self.get('rules') or [])


class ClusterRoleBinding(bodies.KubeObject, group=GROUP, version='v1',
                         plural='clusterrolebindings', namespaced=False):

    @property
    def subjects(self) -> List[Mapping[str, Any]]:
        return list(self.get('subjects') or [])


class Role(bodies.KubeObject, group=GROUP, version='v1', plural='roles', namespaced=True):

    @property
    def rules(self) -> List[Mapping[str, Any]]:
        return list(self.get('rules') or [])


class RoleBinding(bodies.KubeObject, group=GROUP, version='v1', plural='rolebindings',
                  namespaced=True):

    @property
    def subjects(self) -> List[Mapping[str, Any]]:
        return list(self.get('subjects') or [])
