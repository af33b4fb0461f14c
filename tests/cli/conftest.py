import click.testing
import pytest
import yaml

from kubeclient.cli import CLIControls, main

KUBECONFIG = {
    'current-context': 'ctx-a',
    'contexts': [
        {'name': 'ctx-a', 'context': {'cluster': 'cluster-a', 'user': 'user-a', 'namespace': 'ns1'}},
        {'name': 'ctx-b', 'context': {'cluster': 'cluster-a', 'user': 'user-a'}},
    ],
    'clusters': [
        {'name': 'cluster-a', 'cluster': {'server': 'https://api.example.com:6443'}},
    ],
    'users': [
        {'name': 'user-a', 'user': {'token': 'tkn'}},
    ],
}


@pytest.fixture()
def runner():
    runner = click.testing.CliRunner()
    return runner


@pytest.fixture()
def kubeconfig_path(tmp_path):
    path = tmp_path / 'config'
    path.write_text(yaml.safe_dump(KUBECONFIG))
    return str(path)


@pytest.fixture()
def controls(transport):
    return CLIControls(transport=transport)


@pytest.fixture()
def invoke(runner, controls, kubeconfig_path):
    """ Invoke a command against the fake API server, with the test's kubeconfig. """
    def invoke_fn(*args, **kwargs):
        return runner.invoke(main, list(args) + ['--kubeconfig', kubeconfig_path],
                             obj=controls, catch_exceptions=False, **kwargs)

    return invoke_fn
