import asyncio
import functools
import json
from typing import Any, Callable, Dict, Optional, Sequence, Tuple

import click
import yaml

from ktables.clients import errors as api_errors, piggybacking
from ktables.engines import loggers
from ktables.listing import errors, paging, running
from ktables.structs import credentials, kinds, options, references


class LogFormatParamType(click.Choice):

    def __init__(self) -> None:
        super().__init__(choices=[v.name.lower() for v in loggers.LogFormat])

    def convert(self, value: Any, param: Any, ctx: Any) -> loggers.LogFormat:
        name: str = super().convert(value, param, ctx)
        return loggers.LogFormat[name.upper()]


class GroupVersionParamType(click.ParamType):
    name = 'group/version'

    def convert(self, value: Any, param: Any, ctx: Any) -> Tuple[str, str]:
        if isinstance(value, tuple):
            return value
        group, _, version = str(value).rpartition('/')
        if not version:
            self.fail(f"{value!r} is not an API version, e.g. 'apps/v1' or 'v1'.", param, ctx)
        return group, version


def logging_options(fn: Callable[..., Any]) -> Callable[..., Any]:
    """ A decorator to configure logging in all commands the same way."""
    @click.option('-v', '--verbose', is_flag=True)
    @click.option('-d', '--debug', is_flag=True)
    @click.option('-q', '--quiet', is_flag=True)
    @click.option('--log-format', type=LogFormatParamType(), default='full')
    @functools.wraps(fn)  # to preserve other opts/args
    def wrapper(verbose: bool, quiet: bool, debug: bool,
                log_format: loggers.LogFormat = loggers.LogFormat.FULL,
                *args: Any, **kwargs: Any) -> Any:
        loggers.configure(debug=debug, verbose=verbose, quiet=quiet, log_format=log_format)
        return fn(*args, **kwargs)

    return wrapper


def parse_columns(ctx: Any, param: Any, values: Sequence[str]) -> Dict[str, str]:
    mappings: Dict[str, str] = {}
    for value in values:
        field, sep, column = value.partition('=')
        if not sep or not field or not column:
            raise click.BadParameter(f"{value!r} is not a mapping, e.g. 'name=Display Name'.")
        mappings[field] = column
    return mappings


@click.version_option(prog_name='ktables')
@click.group(name='ktables', context_settings=dict(
    auto_envvar_prefix='KTABLES',
))
def main() -> None:
    pass


@main.command(name='list')
@logging_options
@click.option('-n', '--namespace', type=str, default=None)
@click.option('-l', '--selector', type=str, default=None)
@click.option('--order-by', type=str, default='')
@click.option('--column', 'columns', multiple=True, callback=parse_columns)
@click.option('--page', type=int, default=0)
@click.option('--per-page', type=int, default=0)
@click.option('--root-namespace', type=str, default=None, envvar='KTABLES_ROOT_NAMESPACE')
@click.option('-o', '--output', type=click.Choice(['yaml', 'json', 'name']), default='yaml')
@click.argument('api_version', type=GroupVersionParamType())
@click.argument('kind', type=str)
def list_(
        api_version: Tuple[str, str],
        kind: str,
        namespace: Optional[str],
        selector: Optional[str],
        order_by: str,
        columns: Dict[str, str],
        page: int,
        per_page: int,
        root_namespace: Optional[str],
        output: str,
) -> None:
    """ List the objects of a kind, sorted and paged by their table columns. """
    group, version = api_version
    gvk = references.GroupVersionKind(group, version, kind)

    opts = [
        options.in_namespace(namespace) if namespace else options.NoopListOption(),
        options.with_label_selector(selector) if selector else options.NoopListOption(),
        options.with_ordering(order_by, **columns),
        options.with_paging(per_page, page),
    ]

    try:
        info = piggybacking.login()
        object_list, page_info = asyncio.run(running.list_objects(
            gvk, *opts, info=info, root_namespace=root_namespace))
    except (credentials.LoginError,
            options.InvalidListOptionError,
            errors.ListingError,
            api_errors.APIError) as e:
        raise click.ClickException(str(e)) from e

    click.echo(render(object_list, page_info, output=output), nl=False)


def render(object_list: kinds.ObjectList[Any], page_info: paging.PageInfo, *, output: str) -> str:
    raws = [dict(item) for item in object_list]
    if output == 'name':
        names = [f"{object_list.gvk.item_kind}/{raw.get('metadata', {}).get('name')}" for raw in raws]
        return ''.join(f'{name}\n' for name in names)

    data = {
        'apiVersion': object_list.gvk.api_version,
        'kind': object_list.gvk.kind,
        'metadata': {'resourceVersion': object_list.resource_version},
        'items': raws,
        'pageInfo': {
            'totalResults': page_info.total_results,
            'totalPages': page_info.total_pages,
            'page': page_info.page_number,
            'perPage': page_info.page_size,
        },
    }
    if output == 'json':
        return json.dumps(data, indent=2) + '\n'
    else:
        return yaml.safe_dump(data, sort_keys=False)
