import logging
import sys

import click
import requests
from dateutil.parser import isoparse

from blobauth.auth import Authenticator, BlobRequest, Credentials
from blobauth.exceptions import BlobAuthError
from config import load_config


def _parse_headers(ctx, param, values):
    headers = {}
    for raw in values:
        name, sep, value = raw.partition(':')
        if not sep or not name.strip():
            raise click.BadParameter(f"expected NAME:VALUE, got '{raw}'")
        headers[name.strip()] = value.strip()
    return headers


def _parse_time(ctx, param, value):
    if value is None:
        return None
    try:
        return isoparse(value)
    except ValueError as e:
        raise click.BadParameter(str(e))


def request_options(f):
    f = click.argument('resource', required=False, default='')(f)
    f = click.argument('container')(f)
    f = click.argument('method')(f)
    f = click.option('--header', '-H', 'headers', multiple=True, callback=_parse_headers,
                     help='Custom header as NAME:VALUE, may be repeated')(f)
    f = click.option('--time', 'request_time', callback=_parse_time,
                     help='Request timestamp (ISO 8601), defaults to now')(f)
    f = click.option('--data', default=None, help='Request body')(f)
    f = click.option('--data-file', type=click.File('rb'), default=None,
                     help='Read the request body from a file')(f)
    return f


def _build_request(method, container, resource, headers, request_time, data, data_file):
    body = data_file
    if body is None and data is not None:
        body = data.encode('utf-8')
    req = BlobRequest(method=method, container=container, resource=resource,
                      headers=headers, body=body)
    if request_time is not None:
        req.request_time = request_time
    return req


@click.group(context_settings=dict(help_option_names=['--help']))
@click.option('--profile', required=True, help='Profile name from .config.yaml')
@click.option('--config', 'config_path', default='.config.yaml',
              help='Path to configuration file')
@click.option('--verbose', '-v', is_flag=True, help='Log the string to sign')
@click.pass_context
def cli(ctx, profile, config_path, verbose):
    """Sign Azure blob storage requests with a Shared Key."""
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING,
                        format='%(levelname)s %(name)s: %(message)s')
    try:
        conf = load_config(profile, config_path)
    except (OSError, ValueError) as e:
        click.echo(f"Error loading config: {e}", err=True)
        sys.exit(1)

    ctx.obj = {
        'profile': profile,
        'conf': conf,
        'auth': Authenticator(Credentials(account=conf['account'],
                                          access_key=conf['access_key'])),
    }


@cli.command('sign')
@request_options
@click.pass_context
def sign_cmd(ctx, method, container, resource, headers, request_time, data, data_file):
    """Print the URL and signed headers of a request without sending it."""
    auth = ctx.obj['auth']
    try:
        signed, url = auth.headers_for(
            _build_request(method, container, resource, headers, request_time, data, data_file))
    except BlobAuthError as e:
        click.echo(f"Error: {e.message}", err=True)
        sys.exit(1)

    click.echo(f"{method.upper()} {url}")
    for name, value in signed.items():
        click.echo(f"{name}: {value}")


@cli.command('send')
@request_options
@click.pass_context
def send_cmd(ctx, method, container, resource, headers, request_time, data, data_file):
    """Sign a request and send it."""
    auth = ctx.obj['auth']
    try:
        prepared = auth.prepare_request(
            _build_request(method, container, resource, headers, request_time, data, data_file))
    except BlobAuthError as e:
        click.echo(f"Error: {e.message}", err=True)
        sys.exit(1)

    with requests.Session() as session:
        resp = session.send(prepared)
    try:
        resp.raise_for_status()
    except requests.HTTPError as e:
        click.echo(f"Request failed: {e}", err=True)
        sys.exit(1)
    click.echo(f"{resp.status_code} {resp.reason}")


if __name__ == '__main__':
    cli()
