import datetime
import logging
import re
from dataclasses import dataclass, field

import requests

from .canonical import format_request_time
from .constants import API_VERSION, BLOB_HOST, DATE_FORMAT, SHARED_KEY_SCHEME
from .exceptions import InputError, InvalidUrlError
from .utils import SharedKeySigner

logger = logging.getLogger(__name__)

_ACCOUNT_NAME = re.compile(r'^[A-Za-z0-9]+(-[A-Za-z0-9]+)*$')
_CONTAINER_FORBIDDEN = re.compile(r'[/?#\s]')


@dataclass
class Credentials:
    account: str
    access_key: str  # base64


@dataclass
class BlobRequest:
    """One outbound call, owned by the caller and only read while preparing."""

    method: str
    container: str
    resource: str = ''
    request_time: datetime.datetime = field(
        default_factory=lambda: datetime.datetime.now(datetime.timezone.utc)
    )
    headers: dict = field(default_factory=dict)
    body: object = None


class Authenticator:
    def __init__(self, credentials: Credentials, api_version: str = API_VERSION,
                 date_format: str = DATE_FORMAT, host_template: str = BLOB_HOST):
        self.credentials = credentials
        self.api_version = api_version
        self.date_format = date_format
        self.host_template = host_template

    def request_url(self, container: str, resource: str = '') -> str:
        account = self.credentials.account
        if not account or not _ACCOUNT_NAME.match(account):
            logger.warning("Rejecting account name %r", account)
            raise InvalidUrlError(f"Invalid account name: {account!r}")
        if _CONTAINER_FORBIDDEN.search(container):
            raise InvalidUrlError(f"Invalid container name: {container!r}")
        if resource and resource[0] not in '?/':
            raise InvalidUrlError(f"Resource must start with '?' or '/': {resource!r}")
        return self.host_template.format(account=account) + container + resource

    def authorization_header(self, request: requests.PreparedRequest, blob_request: BlobRequest) -> str:
        signature = SharedKeySigner.signature(
            self.credentials, request, blob_request.container, blob_request.resource
        )
        return f"{SHARED_KEY_SCHEME} {self.credentials.account}:{signature}"

    def prepare_request(self, blob_request: BlobRequest) -> requests.PreparedRequest:
        """
        Build the signed request for blob_request.

        Custom headers are merged first, then x-ms-date, x-ms-version and
        Authorization are set so the signature sees the custom headers.
        Nothing is returned if any step fails.
        """
        url = self.request_url(blob_request.container, blob_request.resource)
        method = blob_request.method.upper()
        try:
            request = requests.Request(
                method, url, headers=dict(blob_request.headers), data=blob_request.body
            ).prepare()
        except requests.exceptions.InvalidHeader as e:
            raise InputError(f"Invalid custom header: {e}", 'InvalidHeader') from e
        except (requests.exceptions.InvalidURL, requests.exceptions.MissingSchema,
                requests.exceptions.InvalidSchema) as e:
            raise InvalidUrlError(f"Cannot build request URL {url!r}: {e}") from e

        request.headers['x-ms-date'] = format_request_time(blob_request.request_time, self.date_format)
        request.headers['x-ms-version'] = self.api_version
        request.headers['Authorization'] = self.authorization_header(request, blob_request)
        logger.debug("Prepared %s %s", method, url)
        return request

    def headers_for(self, blob_request: BlobRequest) -> (dict, str):
        request = self.prepare_request(blob_request)
        return dict(request.headers), request.url


def prepare_request(credentials: Credentials, blob_request: BlobRequest) -> requests.PreparedRequest:
    return Authenticator(credentials).prepare_request(blob_request)
