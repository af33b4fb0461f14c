"""
Kinds of the legacy core API (``/api/v1``).
"""
import base64
from typing import Any, List, Mapping, Optional

from kubeclient.structs import bodies


class Namespace(bodies.KubeObject, group='core', version='v1', plural='namespaces',
                namespaced=False):

    @property
    def phase(self) -> Optional[str]:
        return self.status.get('phase')


class Node(bodies.KubeObject, group='core', version='v1', plural='nodes', namespaced=False):

    @property
    def unschedulable(self) -> bool:
        return bool(self.spec.get('unschedulable', False))

    @property
    def conditions(self) -> List[Mapping[str, Any]]:
        return list(self.status.get('conditions', []))


class Pod(bodies.KubeObject, group='core', version='v1', plural='pods', namespaced=True):

    @property
    def phase(self) -> Optional[str]:
        return self.status.get('phase')

    @property
    def node_name(self) -> Optional[str]:
        return self.spec.get('nodeName')


class Secret(bodies.KubeObject, group='core', version='v1', plural='secrets', namespaced=True):

    def decoded(self, key: str) -> bytes:
        """ Get a value of the secret's data, base64-decoded. """
        return base64.b64decode(self.get('data', {})[key])


class ConfigMap(bodies.KubeObject, group='core', version='v1', plural='configmaps',
                namespaced=True):
    pass


class Service(bodies.KubeObject, group='core', version='v1', plural='services',
              namespaced=True):
    pass


class ServiceAccount(bodies.KubeObject, group='core', version='v1', plural='serviceaccounts',
                     namespaced=True):
    pass
