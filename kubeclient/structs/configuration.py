"""
All configuration flags, options, settings to fine-tune a client.

All settings are grouped semantically just for convenience
(instead of a flat mega-object with all the values in it).

The settings are used only once, when the client is constructed:
changing them afterwards does not affect the already constructed clients.
"""
import dataclasses
from typing import Optional

from kubeclient.utilities import versions


@dataclasses.dataclass
class NetworkingSettings:

    request_timeout: Optional[float] = 5 * 60
    """
    A timeout (in seconds) for all the requests to the API.
    ``None`` means waiting forever (not recommended).
    """

    connect_timeout: Optional[float] = None
    """
    A timeout (in seconds) for establishing a connection to the API server.
    If ``None``, the overall request timeout applies.
    """


@dataclasses.dataclass
class ClientSettings:
    networking: NetworkingSettings = dataclasses.field(default_factory=NetworkingSettings)

    user_agent: str = f'kubeclient/{versions.version or "unknown"}'
    """
    The client's self-identification in the API server's audit logs.
    """
