"""
Kinds of the ``batch`` API group.
"""
from typing import Optional

from kubeclient.structs import bodies


class Job(bodies.KubeObject, group='batch', version='v1', plural='jobs', namespaced=True):

    @property
    def succeeded(self) -> int:
        return int(self.status.get('succeeded', 0))

    @property
    def failed(self) -> int:
        return int(self.status.get('failed', 0))


class CronJob(bodies.KubeObject, group='batch', version='v1', plural='cronjobs',
              namespaced=True):

    @property
    def schedule(self) -> Optional[str]:
        return self.spec.get('schedule')

    @property
    def suspended(self) -> bool:
        return bool(self.spec.get('suspend', False))
