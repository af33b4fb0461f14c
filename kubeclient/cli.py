import contextlib
import dataclasses
import functools
import json
from typing import Any, Callable, Iterator, Optional, Type

import click
import httpx
import yaml

from kubeclient import kinds
from kubeclient.clients import api, errors, login
from kubeclient.engines import loggers
from kubeclient.structs import bodies, configuration, credentials, kubeconfig
from kubeclient.utilities import versions


@dataclasses.dataclass()
class CLIControls:
    """ `KubeClient` controls, which are impossible to pass via CLI. """
    settings: Optional[configuration.ClientSettings] = None
    transport: Optional[httpx.BaseTransport] = None


class LogFormatParamType(click.Choice):

    def __init__(self) -> None:
        super().__init__(choices=[v.name.lower() for v in loggers.LogFormat])

    def convert(self, value: Any, param: Any, ctx: Any) -> loggers.LogFormat:
        name: str = super().convert(value, param, ctx)
        return loggers.LogFormat[name.upper()]


class KindParamType(click.ParamType):
    name = 'kind'

    def convert(self, value: Any, param: Any, ctx: Any) -> Type[bodies.KubeObject]:
        if isinstance(value, type) and issubclass(value, bodies.KubeObject):
            return value
        cls = kinds.find_kind(str(value))
        if cls is None:
            self.fail(f"Unknown kind: {value!r}.", param, ctx)
        return cls


def logging_options(fn: Callable[..., Any]) -> Callable[..., Any]:
    """ A decorator to configure logging in all commands the same way."""
    @click.option('-v', '--verbose', is_flag=True)
    @click.option('-d', '--debug', is_flag=True)
    @click.option('-q', '--quiet', is_flag=True)
    @click.option('--log-format', type=LogFormatParamType(), default='full')
    @click.option('--log-refkey', type=str)
    @click.option('--log-prefix/--no-log-prefix', default=None)
    @functools.wraps(fn)  # to preserve other opts/args
    def wrapper(verbose: bool, quiet: bool, debug: bool,
                log_format: loggers.LogFormat = loggers.LogFormat.FULL,
                log_prefix: Optional[bool] = False,
                log_refkey: Optional[str] = None,
                *args: Any, **kwargs: Any) -> Any:
        loggers.configure(debug=debug, verbose=verbose, quiet=quiet,
                          log_format=log_format, log_refkey=log_refkey, log_prefix=log_prefix)
        return fn(*args, **kwargs)

    return wrapper


def connection_options(fn: Callable[..., Any]) -> Callable[..., Any]:
    """ A decorator to connect to the cluster in all commands the same way. """
    @click.option('--kubeconfig', 'kubeconfig_path', type=click.Path(dir_okay=False))
    @click.option('--context', type=str)
    @click.option('--in-cluster', is_flag=True)
    @click.make_pass_decorator(CLIControls, ensure=True)
    @functools.wraps(fn)  # to preserve other opts/args
    def wrapper(__controls: CLIControls,
                kubeconfig_path: Optional[str],
                context: Optional[str],
                in_cluster: bool,
                *args: Any, **kwargs: Any) -> Any:
        if in_cluster and (kubeconfig_path or context):
            raise click.UsageError("Either --in-cluster or --kubeconfig/--context, not both.")
        with reporting_errors():
            config: credentials.ClientConfig
            if in_cluster:
                config = credentials.InCluster()
            else:
                config = login.detect_config(kubeconfig_path=kubeconfig_path, context=context)
            client = api.KubeClient(config, __controls.settings, transport=__controls.transport)
        with client:
            return fn(client, *args, **kwargs)

    return wrapper


@contextlib.contextmanager
def reporting_errors() -> Iterator[None]:
    """ Render the client's errors as CLI errors, without the tracebacks. """
    try:
        yield
    except errors.HttpNotFoundError as e:
        raise click.ClickException(f"Not found: {e.response.request.url}") from e
    except errors.HttpError as e:
        raise click.ClickException(f"API error: {e.status} {e.response.reason_phrase}") from e
    except errors.RequestError as e:
        raise click.ClickException(f"Request failed: {e}") from e
    except errors.ClientInitError as e:
        raise click.ClickException(f"Cannot connect: {e}") from e
    except errors.KubeconfigParseError as e:
        raise click.ClickException(f"Bad kubeconfig: {e}") from e


def resolve_namespace(
        client: api.KubeClient,
        cls: Type[bodies.KubeObject],
        namespace: Optional[str],
) -> Optional[str]:
    if cls.resource.namespaced is False:
        if namespace:
            raise click.UsageError(f"{cls.resource.kind} is cluster-scoped, --namespace is not used.")
        return None
    return namespace or client.default_namespace or 'default'


def render(data: Any, output: str) -> str:
    if output == 'json':
        return json.dumps(data, indent=2)
    else:
        return yaml.safe_dump(data, default_flow_style=False, sort_keys=False).rstrip('\n')


@click.version_option(version=versions.version, prog_name='kubeclient')
@click.group(name='kubeclient', context_settings=dict(
    auto_envvar_prefix='KUBECLIENT',
))
def main() -> None:
    pass


@main.command()
@logging_options
@connection_options
@click.option('-n', '--namespace', type=str)
@click.option('-o', '--output', type=click.Choice(['yaml', 'json']), default='yaml')
@click.argument('kind', type=KindParamType())
@click.argument('name', type=str)
def get(
        client: api.KubeClient,
        kind: Type[bodies.KubeObject],
        name: str,
        namespace: Optional[str],
        output: str,
) -> None:
    """ Show one object. """
    namespace = resolve_namespace(client, kind, namespace)
    with reporting_errors():
        if namespace is None:
            obj = client.get_cluster_object(kind, name)
        else:
            obj = client.get_namespaced_object(kind, namespace, name)
    click.echo(render(dict(obj), output))


@main.command('list')
@logging_options
@connection_options
@click.option('-n', '--namespace', type=str)
@click.option('-o', '--output', type=click.Choice(['name', 'yaml', 'json']), default='name')
@click.argument('kind', type=KindParamType())
def list_(
        client: api.KubeClient,
        kind: Type[bodies.KubeObject],
        namespace: Optional[str],
        output: str,
) -> None:
    """ List the objects of a kind. """
    namespace = resolve_namespace(client, kind, namespace)
    with reporting_errors():
        if namespace is None:
            objs = client.list_cluster_objects(kind)
        else:
            objs = client.list_namespaced_objects(kind, namespace)

    if output == 'name':
        for obj in objs:
            click.echo(f"{kind.resource.name}/{obj.name}")
    else:
        click.echo(render({
            'apiVersion': objs.api_version,
            'kind': objs.kind,
            'items': [dict(obj) for obj in objs],
        }, output))


@main.command()
@logging_options
@connection_options
@click.option('-n', '--namespace', type=str)
@click.argument('kind', type=KindParamType())
@click.argument('name', type=str)
def delete(
        client: api.KubeClient,
        kind: Type[bodies.KubeObject],
        name: str,
        namespace: Optional[str],
) -> None:
    """ Delete one object. """
    namespace = resolve_namespace(client, kind, namespace)
    with reporting_errors():
        if namespace is None:
            obj = client.delete_cluster_object(kind, name)
        else:
            obj = client.delete_namespaced_object(kind, namespace, name)
    ref = loggers.make_ref(obj, resource=kind.resource, namespace=namespace, name=name)
    loggers.ObjectLogger(ref).info("Deletion requested.")
    click.echo(f"{kind.resource.name}/{name} deleted")


@main.command()
@logging_options
@click.option('--kubeconfig', 'kubeconfig_path', type=click.Path(dir_okay=False))
def contexts(kubeconfig_path: Optional[str]) -> None:
    """ List the contexts of the kubeconfig, marking the current one. """
    with reporting_errors():
        config = kubeconfig.read_kubeconfig(kubeconfig_path)
    for item in config.contexts:
        mark = '*' if item.name == config.current_context else ' '
        namespace = item.context.namespace or ''
        click.echo(f"{mark} {item.name}\t{item.context.cluster}\t{item.context.user}\t{namespace}".rstrip())
