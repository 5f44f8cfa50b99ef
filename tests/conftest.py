import logging
import re

import aiohttp.web
import pytest

from ktables.clients.auth import APIContext, identity_var
from ktables.structs.configuration import Settings
from ktables.structs.credentials import ConnectionInfo
from ktables.structs.references import GroupVersionKind, Resource


@pytest.fixture()
def settings():
    return Settings()


@pytest.fixture()
def logger():
    return logging.getLogger('ktables.tests')


@pytest.fixture()
def gvk():
    return GroupVersionKind('korifi.cloudfoundry.org', 'v1alpha1', 'CFAppList')


@pytest.fixture()
def resource():
    return Resource('korifi.cloudfoundry.org', 'v1alpha1', 'cfapps', namespaced=True)


@pytest.fixture(autouse=True)
def _clean_identity():
    token = identity_var.set(None)
    try:
        yield
    finally:
        identity_var.reset(token)


#
# Mocks for Kubernetes API clients (any of them). Reasons:
# 1. We do not test the clients, we test the layers on top of them,
#    so everything low-level should be mocked and assumed to be functional.
# 2. No external calls must be made under any circumstances.
#    The unit-tests must be fully isolated from the environment.
#

@pytest.fixture()
def hostname():
    """ A fake hostname to be used in all aiohttp/aresponses tests. """
    return 'fake-host'


@pytest.fixture()
def connection_info(hostname):
    return ConnectionInfo(server=f'https://{hostname}')


@pytest.fixture()
async def api_context(connection_info):
    async with APIContext(connection_info) as context:
        yield context


@pytest.fixture()
def resp_mocker(mocker):
    """
    A factory of server-side callbacks for `aresponses` with mocking/spying.

    The value of the fixture is a function, which return a coroutine mock.
    That coroutine mock should be passed to `aresponses.add` as a response
    callback function. When called, it calls the mock defined by the function's
    arguments (specifically, return_value or side_effects).

    The difference from passing the responses directly to `aresponses.add`
    is that it is possible to assert on whether the response was handled
    by that callback at all (i.e. HTTP URL & method matched), especially
    if there are multiple responses registered.

    Sample usage::

        def test_me(resp_mocker):
            response = aiohttp.web.json_response({'a': 'b'})
            callback = resp_mocker(return_value=response)
            aresponses.add(hostname, '/path/', 'get', callback)
            do_something()
            assert callback.called
            assert callback.call_count == 1
            assert callback.call_args[0][0].query['key'] == 'value'
    """
    def resp_maker(*args, **kwargs):
        actual_response = mocker.MagicMock(*args, **kwargs)

        async def resp_mock_effect(request):
            return actual_response()

        return mocker.AsyncMock(side_effect=resp_mock_effect)
    return resp_maker


@pytest.fixture()
def table_response():
    """ A builder of the server-rendered tables, as K8s API returns them. """
    def make_table(rows, columns=(('Name', 'string'), ('Created At', 'string'))):
        return aiohttp.web.json_response({
            'kind': 'Table',
            'apiVersion': 'meta.k8s.io/v1',
            'metadata': {'resourceVersion': '123'},
            'columnDefinitions': [{'name': name, 'type': type_} for name, type_ in columns],
            'rows': [{'cells': list(cells)} for cells in rows],
        })
    return make_table


@pytest.fixture()
def list_response():
    """ A builder of the lists of the full objects, named by their identifiers. """
    def make_list(*names, kind='CFAppList', resource_version='456'):
        return aiohttp.web.json_response({
            'kind': kind,
            'apiVersion': 'korifi.cloudfoundry.org/v1alpha1',
            'metadata': {'resourceVersion': resource_version},
            'items': [{'metadata': {'name': name, 'namespace': 'ns'}} for name in names],
        })
    return make_list


#
# Helpers for the logging checks.
#

@pytest.fixture()
def assert_logs(caplog):
    """
    A function to assert the logs are present (by pattern).

    The listed message patterns MUST be present, in the order specified.
    Some other log messages can also be present, but they are ignored.
    """
    caplog.set_level(logging.DEBUG)

    def assert_logs_fn(patterns=(), prohibited=(), strict=False):
        __traceback_hide__ = True
        remaining_patterns = list(patterns)
        for message in caplog.messages:
            # The expected pattern is at position 0.
            # Looking-ahead: if one of the following patterns matches, while the
            # 0th does not, then the log message is missing, and we fail the test.
            for idx, pattern in enumerate(remaining_patterns):
                m = re.search(pattern, message)
                if m:
                    if idx == 0:
                        remaining_patterns[:1] = []
                        break  # out of `remaining_patterns` cycle
                    else:
                        skipped_patterns = remaining_patterns[:idx]
                        raise AssertionError(f"Few patterns were skipped: {skipped_patterns!r}")
                elif strict:
                    raise AssertionError(f"Unexpected log message: {message!r}")

            # Check that the prohibited patterns do not appear in any message.
            for pattern in prohibited:
                m = re.search(pattern, message)
                if m:
                    raise AssertionError(f"Prohibited log pattern found: {message!r} ~ {pattern!r}")

        # If all patterns have been matched in order, we are done.
        # if some are left, but the messages are over, then we fail.
        if remaining_patterns:
            raise AssertionError(f"Few patterns were missed: {remaining_patterns!r}")

    return assert_logs_fn
