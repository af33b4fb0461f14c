"""
Kinds of the ``authentication.k8s.io/v1`` API group.
"""
from typing import Any, Mapping

from kubeclient.structs import bodies


class TokenReview(bodies.KubeObject, group='authentication.k8s.io', version='v1',
                  plural='tokenreviews', namespaced=False):
    """
    A create-only kind: the token is sent in the spec, the verdict comes in the status.
    """

    @classmethod
    def for_token(cls, token: str) -> "TokenReview":
        return cls({
            'apiVersion': cls.resource.api_version,
            'kind': cls.resource.kind,
            'spec': {'token': token},
        })

    @property
    def authenticated(self) -> bool:
        return bool(self.status.get('authenticated', False))

    @property
    def user(self) -> Mapping[str, Any]:
        return self.status.get('user', {})
