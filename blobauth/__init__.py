from .auth import Authenticator, BlobRequest, Credentials, prepare_request
from .canonical import canonicalized_headers, canonicalized_resource, format_request_time
from .exceptions import (
    BlobAuthError,
    ConfigurationError,
    InputError,
    InvalidResourceError,
    InvalidUrlError,
    MalformedKeyError,
)
from .utils import SharedKeySigner

__all__ = [
    'Authenticator',
    'BlobRequest',
    'Credentials',
    'prepare_request',
    'canonicalized_headers',
    'canonicalized_resource',
    'format_request_time',
    'SharedKeySigner',
    'BlobAuthError',
    'ConfigurationError',
    'InputError',
    'InvalidResourceError',
    'InvalidUrlError',
    'MalformedKeyError',
]
