"""
Kinds of the ``apps/v1`` API group.
"""
from typing import Optional

from kubeclient.structs import bodies


class _Workload(bodies.KubeObject):

    @property
    def replicas(self) -> Optional[int]:
        return self.spec.get('replicas')

    @property
    def ready_replicas(self) -> int:
        return int(self.status.get('readyReplicas', 0))


class Deployment(_Workload, group='apps', version='v1', plural='deployments', namespaced=True):

    @property
    def paused(self) -> bool:
        return bool(self.spec.get('paused', False))


class StatefulSet(_Workload, group='apps', version='v1', plural='statefulsets', namespaced=True):
    pass


class ReplicaSet(_Workload, group='apps', version='v1', plural='replicasets', namespaced=True):
    pass


class DaemonSet(bodies.KubeObject, group='apps', version='v1', plural='daemonsets',
                namespaced=True):

    @property
    def desired_number_scheduled(self) -> int:
        return int(self.status.get('desiredNumberScheduled', 0))
