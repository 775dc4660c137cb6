import base64
import binascii
import hashlib
import hmac
import logging
import re

from requests.utils import super_len

from .canonical import canonicalized_headers, canonicalized_resource
from .exceptions import InputError, MalformedKeyError

logger = logging.getLogger(__name__)

_BASE64_KEY = re.compile(r'^[A-Za-z0-9+/]+={0,2}$')


class SharedKeySigner:
    @staticmethod
    def content_length(method: str, body=None) -> str:
        """Content-Length field of the string to sign, only ever filled for PUT."""
        if method.upper() != 'PUT':
            return ''
        if body is None:
            return '0'
        if isinstance(body, str):
            body = body.encode('utf-8')
        # generators and other iterables are sent chunked with no known length
        if not isinstance(body, (bytes, bytearray)) and not hasattr(body, 'read'):
            raise InputError(
                f"PUT body must be bytes, str or a file-like object, got {type(body).__name__}",
                'UnsizedBody',
            )
        return str(super_len(body))

    @staticmethod
    def string_to_sign(method: str, content_length: str, canonical_headers: str, canonical_resource: str) -> str:
        """
        Fields, in order:
        VERB, Content-Encoding, Content-Language, Content-Length, Content-MD5,
        Content-Type, Date, If-Modified-Since, If-Match, If-None-Match,
        If-Unmodified-Since, Range, CanonicalizedHeaders, CanonicalizedResource

        Only the verb, the length and the two canonical elements are ever set.
        """
        return "\n".join([
            method.upper(),
            '',
            '',
            content_length,
            '', '', '', '', '', '', '', '',
            canonical_headers,
            canonical_resource,
        ])

    @staticmethod
    def decode_key(access_key: str) -> bytes:
        if not access_key or not _BASE64_KEY.match(access_key):
            logger.warning("Access key contains characters outside the base64 alphabet")
            raise MalformedKeyError()
        data = access_key.rstrip('=')
        # a lone trailing character holds 6 bits and never completes a byte
        if len(data) % 4 == 1:
            data = data[:-1]
        data += '=' * (-len(data) % 4)
        try:
            key = base64.b64decode(data, validate=True)
        except binascii.Error as e:
            raise MalformedKeyError(f"Access key is not valid base64: {e}") from e
        if not key:
            raise MalformedKeyError('Access key decodes to an empty secret')
        return key

    @staticmethod
    def sign(string_to_sign: str, access_key: str) -> str:
        key = SharedKeySigner.decode_key(access_key)
        mac = hmac.new(key, string_to_sign.encode('utf-8'), hashlib.sha256).digest()
        return base64.b64encode(mac).decode('utf-8')

    @staticmethod
    def signature(credentials, request, container: str, resource: str = '') -> str:
        """
        Sign a prepared request.

        - credentials: account name and base64 access key
        - request: the request being built, its headers already merged
        - container/resource: used for the canonicalized resource
        """
        # 1) Content-Length (PUT only)
        content_length = SharedKeySigner.content_length(request.method, request.body)

        # 2) Canonical elements, never cached
        canonical_headers = canonicalized_headers(request.headers)
        canonical_resource = canonicalized_resource(credentials.account, container, resource)

        # 3) String to sign
        string_to_sign = SharedKeySigner.string_to_sign(
            request.method, content_length, canonical_headers, canonical_resource
        )
        logger.debug("String to sign for %s %s: %r", request.method, request.url, string_to_sign)

        # 4) HMAC-SHA256 + Base64
        return SharedKeySigner.sign(string_to_sign, credentials.access_key)
