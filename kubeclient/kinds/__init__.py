"""
A catalog of the built-in kinds, as used by the CLI and in the examples.

Custom resources can be declared the same way, outside of this package::

    class Widget(kubeclient.KubeObject, group='example.com', version='v1',
                 plural='widgets', namespaced=True):
        pass
"""
from typing import Collection, Optional, Type

from kubeclient.kinds.apps import DaemonSet, Deployment, ReplicaSet, StatefulSet
from kubeclient.kinds.authentication import TokenReview
from kubeclient.kinds.batch import CronJob, Job
from kubeclient.kinds.core import ConfigMap, Namespace, Node, Pod, Secret, Service, \
                                  ServiceAccount
from kubeclient.kinds.rbac import ClusterRole, ClusterRoleBinding, Role, RoleBinding
from kubeclient.structs import bodies

ALL_KINDS: Collection[Type[bodies.KubeObject]] = (
    Namespace, Node, Pod, Secret, ConfigMap, Service, ServiceAccount,
    Deployment, StatefulSet, ReplicaSet, DaemonSet,
    Job, CronJob,
    ClusterRole, ClusterRoleBinding, Role, RoleBinding,
    TokenReview,
)


def find_kind(
        name: str,
        kinds: Collection[Type[bodies.KubeObject]] = ALL_KINDS,
) -> Optional[Type[bodies.KubeObject]]:
    """
    Find a kind by any of its names, as kubectl does (case-insensitive).

    Supported notations: ``pods``, ``pod``, ``Pod``, ``deployments.apps``.
    """
    name = name.lower()
    for cls in kinds:
        resource = cls.resource
        names = {resource.plural, resource.name, (resource.kind or '').lower()}
        if resource.plural.endswith('s'):
            names.add(resource.plural[:-1])
        if name in names:
            return cls
    return None
