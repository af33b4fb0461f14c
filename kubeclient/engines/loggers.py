"""
Logging setup for the CLI, and the object-aware loggers of the client.

Every CRUD call of `KubeClient` logs its requests with a reference to
the object it addresses (``apiVersion``, ``kind``, ``namespace``, ``name``).
The formatters render the reference either as a ``[namespace/name]`` prefix
of the message (text formats), or as a separate field (JSON format).
"""
import enum
import logging
from typing import Any, Dict, Mapping, MutableMapping, Optional, Tuple, Union

import pythonjsonlogger.jsonlogger

from kubeclient.structs import references

DEFAULT_JSON_REFKEY = 'object'
""" A key for object references in JSON logs, as seen by the log parsers. """

QUIET_LOGGERS = ['httpx', 'httpcore']
""" Third-party loggers that only show their infos & debugs in the debug mode. """

SEVERITIES = [
    (logging.DEBUG, 'debug'),
    (logging.INFO, 'info'),
    (logging.WARNING, 'warn'),
    (logging.ERROR, 'error'),
]

ObjectRef = Dict[str, Optional[str]]

Logger = Union[logging.Logger, logging.LoggerAdapter]


class LogFormat(enum.Enum):
    """ Log formats, as specified on CLI. """
    PLAIN = '%(message)s'
    FULL = '[%(asctime)s] %(name)-20.20s [%(levelname)-8.8s] %(message)s'
    JSON = enum.auto()


def make_ref(
        body: Optional[Mapping[str, Any]] = None,
        *,
        resource: Optional[references.Resource] = None,
        namespace: Optional[str] = None,
        name: Optional[str] = None,
) -> ObjectRef:
    """
    Build an object reference from the body, or from the call's arguments.

    The explicit arguments win over the body's fields: the body is often
    incomplete when it is being created (e.g. no namespace in the metadata).
    """
    body = body if body is not None else {}
    meta = body.get('metadata') or {}
    return {
        'apiVersion': resource.api_version if resource is not None else body.get('apiVersion'),
        'kind': resource.kind if resource is not None else body.get('kind'),
        'name': name if name is not None else meta.get('name'),
        'uid': meta.get('uid'),
        'namespace': namespace if namespace is not None else meta.get('namespace'),
    }


class ObjectLogger(logging.LoggerAdapter):
    """
    A logger with an object reference attached to all its records.

    By default, the messages go to the ``kubeclient.objects`` logger;
    the client passes its own module logger instead.
    """

    def __init__(self, ref: ObjectRef, *, logger: Optional[logging.Logger] = None) -> None:
        super().__init__(logger if logger is not None else objects_logger, {'k8s_ref': ref})

    def process(
            self,
            msg: str,
            kwargs: MutableMapping[str, Any],
    ) -> Tuple[str, MutableMapping[str, Any]]:
        # Keep the call's own extras: the stdlib adapter would replace them.
        kwargs['extra'] = {**self.extra, **kwargs.get('extra', {})}
        return msg, kwargs


class ObjectFormatter(logging.Formatter):
    """ A base for the formatters which know about the object references. """

    def __init__(self, *args: Any, prefix: bool = False, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.prefix = prefix

    def format(self, record: logging.LogRecord) -> str:
        ref: Optional[ObjectRef] = getattr(record, 'k8s_ref', None)
        if self.prefix and ref is not None:
            namespace, name = ref.get('namespace'), ref.get('name') or ''
            where = f"{namespace}/{name}" if namespace else name
            record = logging.makeLogRecord(dict(record.__dict__, msg=f"[{where}] {record.msg}"))
        return super().format(record)


class TextFormatter(ObjectFormatter):
    pass


class JsonFormatter(ObjectFormatter, pythonjsonlogger.jsonlogger.JsonFormatter):  # type: ignore
    """ JSON logs with the severity (as used by GCP) and the object reference. """

    def __init__(self, *args: Any, refkey: Optional[str] = None, **kwargs: Any) -> None:
        kwargs.setdefault('timestamp', True)
        super().__init__(*args, **kwargs)
        self.refkey = refkey or DEFAULT_JSON_REFKEY

    def add_fields(
            self,
            log_record: MutableMapping[str, object],
            record: logging.LogRecord,
            message_dict: MutableMapping[str, object],
    ) -> None:
        super().add_fields(log_record, record, message_dict)
        ref = log_record.pop('k8s_ref', None)
        if ref is not None:
            log_record[self.refkey] = ref
        log_record.setdefault('severity', next(
            (severity for level, severity in SEVERITIES if record.levelno <= level), 'fatal'))


def make_formatter(
        log_format: Union[LogFormat, str] = LogFormat.FULL,
        log_prefix: Optional[bool] = False,
        log_refkey: Optional[str] = None,
) -> ObjectFormatter:
    # The JSON logs have the reference as a field, so there is no need to prefix by default.
    prefix = bool(log_format is not LogFormat.JSON) if log_prefix is None else log_prefix
    if log_format is LogFormat.JSON:
        return JsonFormatter(prefix=prefix, refkey=log_refkey)
    elif isinstance(log_format, LogFormat):
        return TextFormatter(log_format.value, prefix=prefix)
    elif isinstance(log_format, str):
        return TextFormatter(log_format, prefix=prefix)
    else:
        raise ValueError(f"Unsupported log format: {log_format!r}")


def configure(
        debug: Optional[bool] = None,
        verbose: Optional[bool] = None,
        quiet: Optional[bool] = None,
        log_format: Union[LogFormat, str] = LogFormat.FULL,
        log_prefix: Optional[bool] = False,
        log_refkey: Optional[str] = None,
) -> logging.Handler:
    """
    Log to stderr at the level & in the format as requested on the CLI.
    """
    handler = logging.StreamHandler()
    handler.setFormatter(make_formatter(log_format, log_prefix=log_prefix, log_refkey=log_refkey))

    root = logging.getLogger()
    root.addHandler(handler)
    root.setLevel(logging.DEBUG if debug or verbose else logging.WARNING if quiet else logging.INFO)

    # The transport's own messages (e.g. "HTTP Request: GET ...") are noise unless debugging.
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.NOTSET if debug else logging.WARNING)

    return handler


objects_logger = logging.getLogger('kubeclient.objects')
