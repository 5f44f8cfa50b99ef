import json

import click.testing
import pytest
import yaml

from ktables.cli import main
from ktables.engines.loggers import LogFormat
from ktables.listing.errors import ObjectResolutionError
from ktables.listing.paging import PageInfo
from ktables.structs.credentials import ConnectionInfo, LoginError
from ktables.structs.kinds import RawObjectList, default_registry
from ktables.structs.options import NoopListOption, PagingOpt, SortOpt, WithLabelSelector, unpack
from ktables.structs.references import GroupVersionKind


@pytest.fixture()
def runner():
    return click.testing.CliRunner()


@pytest.fixture(autouse=True)
def configure(mocker):
    return mocker.patch('ktables.engines.loggers.configure')


@pytest.fixture(autouse=True)
def login(mocker):
    return mocker.patch('ktables.clients.piggybacking.login',
                        return_value=ConnectionInfo(server='https://fake-host'))


@pytest.fixture()
def gvk():
    return GroupVersionKind('korifi.cloudfoundry.org', 'v1alpha1', 'CFAppList')


@pytest.fixture(autouse=True)
def list_objects(mocker, gvk):
    object_list = default_registry().new_list(gvk)
    object_list.append({'metadata': {'name': 'g1', 'namespace': 'ns1'}})
    object_list.append({'metadata': {'name': 'g2', 'namespace': 'ns1'}})
    object_list.resource_version = '123'
    page_info = PageInfo(total_results=5, total_pages=3, page_number=1, page_size=2)
    return mocker.patch('ktables.listing.running.list_objects',
                        return_value=(object_list, page_info))


def invoke(runner, *args):
    return runner.invoke(main, ['list', 'korifi.cloudfoundry.org/v1alpha1', 'CFAppList', *args])


def test_help(runner):
    result = runner.invoke(main, ['list', '--help'])
    assert result.exit_code == 0
    assert '--order-by' in result.output
    assert '--per-page' in result.output


def test_listing_as_yaml(runner, list_objects, gvk):
    result = invoke(runner)
    assert result.exit_code == 0, result.output

    data = yaml.safe_load(result.output)
    assert data['apiVersion'] == 'korifi.cloudfoundry.org/v1alpha1'
    assert data['kind'] == 'CFAppList'
    assert data['metadata'] == {'resourceVersion': '123'}
    assert [item['metadata']['name'] for item in data['items']] == ['g1', 'g2']
    assert data['pageInfo'] == {'totalResults': 5, 'totalPages': 3, 'page': 1, 'perPage': 2}

    assert list_objects.call_count == 1
    assert list_objects.call_args[0][0] == gvk
    assert list_objects.call_args.kwargs['info'] == ConnectionInfo(server='https://fake-host')
    assert list_objects.call_args.kwargs['root_namespace'] is None


def test_listing_as_json(runner):
    result = invoke(runner, '-o', 'json')
    assert result.exit_code == 0, result.output
    data = json.loads(result.output)
    assert [item['metadata']['name'] for item in data['items']] == ['g1', 'g2']


def test_listing_as_names(runner):
    result = invoke(runner, '-o', 'name')
    assert result.exit_code == 0, result.output
    assert result.output == 'CFApp/g1\nCFApp/g2\n'


def test_no_options(runner, list_objects):
    result = invoke(runner)
    assert result.exit_code == 0, result.output
    list_options = unpack(*list_objects.call_args[0][1:])
    assert list_options.namespace is None
    assert list_options.requirements == []
    assert list_options.sort is None
    assert list_options.paging is None


def test_options(runner, list_objects):
    result = invoke(runner, '-n', 'ns1', '-l', 'a=b', '--order-by=-name',
                    '--column', 'name=Display Name', '--page=2', '--per-page=10')
    assert result.exit_code == 0, result.output

    opts = list_objects.call_args[0][1:]
    assert WithLabelSelector('a=b') in opts
    list_options = unpack(*opts)
    assert list_options.namespace == 'ns1'
    assert [str(r) for r in list_options.requirements] == ['a=b']
    assert list_options.sort == SortOpt(by='Display Name', desc=True)
    assert list_options.paging == PagingOpt(page_size=10, page_number=2)


def test_root_namespace(runner, list_objects):
    result = invoke(runner, '--root-namespace', 'cf')
    assert result.exit_code == 0, result.output
    assert list_objects.call_args.kwargs['root_namespace'] == 'cf'


def test_core_api_version(runner, list_objects):
    result = runner.invoke(main, ['list', 'v1', 'PodList'])
    assert result.exit_code == 0, result.output
    assert list_objects.call_args[0][0] == GroupVersionKind('', 'v1', 'PodList')


def test_invalid_api_version(runner, list_objects):
    result = runner.invoke(main, ['list', 'apps/', 'DeploymentList'])
    assert result.exit_code == 2
    assert not list_objects.called


@pytest.mark.parametrize('column', ['name', 'name=', '=Name'])
def test_invalid_column_mappings(runner, list_objects, column):
    result = invoke(runner, '--column', column)
    assert result.exit_code == 2
    assert not list_objects.called


def test_listing_errors_are_reported(runner, list_objects, gvk):
    list_objects.side_effect = ObjectResolutionError('g1', gvk)
    result = invoke(runner)
    assert result.exit_code == 1
    assert "failed to resolve object with guid 'g1'" in result.output


def test_login_errors_are_reported(runner, login, list_objects):
    login.side_effect = LoginError("no credentials")
    result = invoke(runner)
    assert result.exit_code == 1
    assert "no credentials" in result.output
    assert not list_objects.called


@pytest.mark.parametrize('args, kwargs', [
    ([], dict(debug=False, verbose=False, quiet=False)),
    (['-v'], dict(debug=False, verbose=True, quiet=False)),
    (['-d'], dict(debug=True, verbose=False, quiet=False)),
    (['-q'], dict(debug=False, verbose=False, quiet=True)),
])
def test_logging_is_configured(runner, configure, args, kwargs):
    result = invoke(runner, *args)
    assert result.exit_code == 0, result.output
    assert configure.call_count == 1
    for key, value in kwargs.items():
        assert configure.call_args.kwargs[key] == value


def test_log_format(runner, configure):
    result = invoke(runner, '--log-format', 'json')
    assert result.exit_code == 0, result.output
    assert configure.call_args.kwargs['log_format'] is LogFormat.JSON


def test_raw_lists_as_names(runner, list_objects):
    object_list = RawObjectList(GroupVersionKind('apps', 'v1', 'DeploymentList'))
    object_list.append({'metadata': {'name': 'd1'}})
    list_objects.return_value = (object_list, PageInfo(1, 1, 1, 1))
    result = runner.invoke(main, ['list', 'apps/v1', 'DeploymentList', '-o', 'name'])
    assert result.exit_code == 0, result.output
    assert result.output == 'Deployment/d1\n'


def test_noop_options_are_passed_when_unset(runner, list_objects):
    result = invoke(runner)
    assert result.exit_code == 0, result.output
    opts = list_objects.call_args[0][1:]
    assert all(isinstance(opt, NoopListOption) for opt in opts)
