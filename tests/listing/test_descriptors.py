import aiohttp.web
import pytest

from ktables.clients.errors import APIForbiddenError
from ktables.listing.descriptors import DescriptorClient
from ktables.listing.errors import DescriptorFetchError, FilteringError, KindNotFoundError
from ktables.listing.filtering import PassThroughFilteringOpts, RootNamespaceFilteringOpts
from ktables.listing.pluralizing import CachingPluralizer, NaivePluralizer
from ktables.structs.options import in_namespace, with_label, with_ordering, with_paging
from ktables.structs.references import Resource

GROUP_URL = '/apis/korifi.cloudfoundry.org/v1alpha1'
APPS_URL = '/apis/korifi.cloudfoundry.org/v1alpha1/cfapps'
NS_APPS_URL = '/apis/korifi.cloudfoundry.org/v1alpha1/namespaces/ns1/cfapps'


@pytest.fixture()
def client(api_context, settings):
    return DescriptorClient(
        context=api_context,
        settings=settings,
        filtering_opts=PassThroughFilteringOpts(),
    )


async def test_descriptors_are_listed(
        resp_mocker, aresponses, hostname, table_response, client, gvk, logger):
    table_mock = resp_mocker(return_value=table_response([('g1', 't1'), ('g2', 't2')]))
    aresponses.add(hostname, APPS_URL, 'get', table_mock)

    descriptor = await client.list(gvk, logger=logger)

    assert descriptor.guids() == ['g1', 'g2']
    assert [column.name for column in descriptor.columns] == ['Name', 'Created At']
    assert table_mock.call_count == 1


async def test_tables_are_requested_without_objects(
        resp_mocker, aresponses, hostname, table_response, client, gvk, logger):
    table_mock = resp_mocker(return_value=table_response([]))
    aresponses.add(hostname, APPS_URL, 'get', table_mock)

    await client.list(gvk, logger=logger)

    request = table_mock.call_args[0][0]
    assert request.headers['Accept'] == 'application/json;as=Table;g=meta.k8s.io;v=v1'
    assert request.query['includeObject'] == 'None'


async def test_scope_is_passed_to_the_server(
        resp_mocker, aresponses, hostname, table_response, client, gvk, logger):
    table_mock = resp_mocker(return_value=table_response([]))
    aresponses.add(hostname, NS_APPS_URL, 'get', table_mock)

    await client.list(gvk, in_namespace('ns1'), with_label('a', 'b'), logger=logger)

    request = table_mock.call_args[0][0]
    assert request.query['labelSelector'] == 'a=b'
    assert 'fieldSelector' not in request.query


async def test_non_scope_options_are_not_passed_to_the_server(
        resp_mocker, aresponses, hostname, table_response, client, gvk, logger):
    table_mock = resp_mocker(return_value=table_response([]))
    aresponses.add(hostname, APPS_URL, 'get', table_mock)

    await client.list(gvk, with_ordering('created_at'), with_paging(1, 1), logger=logger)

    request = table_mock.call_args[0][0]
    assert set(request.query) == {'includeObject'}


async def test_visibility_filtering_is_applied(
        resp_mocker, aresponses, hostname, table_response, api_context, settings, gvk, logger):
    table_mock = resp_mocker(return_value=table_response([]))
    aresponses.add(hostname, '/apis/korifi.cloudfoundry.org/v1alpha1/namespaces/root/cfapps',
                   'get', table_mock)

    client = DescriptorClient(
        context=api_context,
        settings=settings,
        filtering_opts=RootNamespaceFilteringOpts('root'),
    )
    await client.list(gvk, in_namespace('ns1'), logger=logger)

    assert table_mock.call_count == 1


async def test_visibility_errors_escalate_as_is(mocker, api_context, settings, gvk, logger):
    filtering_opts = mocker.Mock()
    filtering_opts.apply = mocker.AsyncMock(side_effect=FilteringError("boo!"))
    client = DescriptorClient(context=api_context, settings=settings, filtering_opts=filtering_opts)

    with pytest.raises(FilteringError, match=r"boo!"):
        await client.list(gvk, logger=logger)


async def test_pluralizer_is_used(
        mocker, resp_mocker, aresponses, hostname, table_response, api_context, settings, gvk, logger):
    table_mock = resp_mocker(return_value=table_response([('g1', 't1')]))
    aresponses.add(hostname, '/apis/korifi.cloudfoundry.org/v1alpha1/custom-plurals', 'get', table_mock)

    pluralizer = mocker.Mock()
    pluralizer.resolve = mocker.AsyncMock(
        return_value=Resource('korifi.cloudfoundry.org', 'v1alpha1', 'custom-plurals'))
    client = DescriptorClient(
        context=api_context,
        settings=settings,
        filtering_opts=PassThroughFilteringOpts(),
        pluralizer=pluralizer,
    )
    descriptor = await client.list(gvk, logger=logger)

    assert descriptor.guids() == ['g1']
    assert pluralizer.resolve.call_count == 1
    assert pluralizer.resolve.call_args[0][0] == gvk


async def test_unresolvable_kinds_escalate_as_is(mocker, api_context, settings, gvk, logger):
    pluralizer = mocker.Mock()
    pluralizer.resolve = mocker.AsyncMock(side_effect=KindNotFoundError(gvk))
    client = DescriptorClient(
        context=api_context,
        settings=settings,
        filtering_opts=PassThroughFilteringOpts(),
        pluralizer=pluralizer,
    )
    with pytest.raises(KindNotFoundError):
        await client.list(gvk, logger=logger)


async def test_discovery_errors_are_wrapped(
        resp_mocker, aresponses, hostname, api_context, settings, gvk, logger):
    discovery_mock = resp_mocker(return_value=aresponses.Response(status=403, reason='oops'))
    aresponses.add(hostname, GROUP_URL, 'get', discovery_mock)

    client = DescriptorClient(
        context=api_context,
        settings=settings,
        filtering_opts=PassThroughFilteringOpts(),
        pluralizer=CachingPluralizer(context=api_context, settings=settings),
    )
    with pytest.raises(DescriptorFetchError) as err:
        await client.list(gvk, logger=logger)

    assert err.value.gvk == gvk
    assert isinstance(err.value.__cause__, APIForbiddenError)
    assert discovery_mock.call_count == 1


def test_naive_pluralizer_is_the_default(api_context, settings):
    client = DescriptorClient(
        context=api_context,
        settings=settings,
        filtering_opts=PassThroughFilteringOpts(),
    )
    assert isinstance(client._pluralizer, NaivePluralizer)


@pytest.mark.parametrize('status', [400, 403, 404, 500])
async def test_api_errors_are_wrapped(
        resp_mocker, aresponses, hostname, client, gvk, logger, status):
    table_mock = resp_mocker(return_value=aresponses.Response(status=status, reason='oops'))
    aresponses.add(hostname, APPS_URL, 'get', table_mock)

    with pytest.raises(DescriptorFetchError) as err:
        await client.list(gvk, logger=logger)

    assert err.value.gvk == gvk
    assert str(err.value).startswith(
        "failed to list descriptors for korifi.cloudfoundry.org/v1alpha1, Kind=CFAppList: ")
    assert err.value.__cause__.status == status


async def test_api_errors_keep_the_status_details(
        resp_mocker, aresponses, hostname, client, gvk, logger):
    status = {'kind': 'Status', 'code': 403, 'message': 'cfapps is forbidden'}
    table_mock = resp_mocker(return_value=aiohttp.web.json_response(status, status=403))
    aresponses.add(hostname, APPS_URL, 'get', table_mock)

    with pytest.raises(DescriptorFetchError) as err:
        await client.list(gvk, logger=logger)

    assert isinstance(err.value.__cause__, APIForbiddenError)
    assert str(err.value).endswith(": 403: cfapps is forbidden")


async def test_non_tables_are_rejected(
        resp_mocker, aresponses, hostname, client, gvk, logger):
    table_mock = resp_mocker(return_value=aiohttp.web.json_response({'kind': 'CFAppList', 'items': []}))
    aresponses.add(hostname, APPS_URL, 'get', table_mock)

    with pytest.raises(DescriptorFetchError, match=r"the response is not a table"):
        await client.list(gvk, logger=logger)


async def test_namespaces_of_cluster_scoped_kinds_are_rejected(
        mocker, api_context, settings, gvk, logger):
    pluralizer = mocker.Mock()
    pluralizer.resolve = mocker.AsyncMock(
        return_value=Resource('korifi.cloudfoundry.org', 'v1alpha1', 'cfapps', namespaced=False))
    client = DescriptorClient(
        context=api_context,
        settings=settings,
        filtering_opts=PassThroughFilteringOpts(),
        pluralizer=pluralizer,
    )
    with pytest.raises(DescriptorFetchError, match=r"cluster-scoped"):
        await client.list(gvk, in_namespace('ns1'), logger=logger)
