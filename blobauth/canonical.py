"""
Canonicalization of Shared Key requests (2009-09-19 layout).

Both strings are recomputed on every signing pass since headers may change
between two preparations of the same request.
"""
import datetime
import logging
import re
from typing import Mapping
from urllib.parse import parse_qsl, urlsplit

from .constants import DATE_FORMAT, MS_HEADER_PREFIX
from .exceptions import InvalidResourceError

logger = logging.getLogger(__name__)

_BAD_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")
_DAY_NAMES = ('Mon', 'Tue', 'Wed', 'Thu', 'Fri', 'Sat', 'Sun')
_MONTH_NAMES = ('Jan', 'Feb', 'Mar', 'Apr', 'May', 'Jun',
                'Jul', 'Aug', 'Sep', 'Oct', 'Nov', 'Dec')


def _first_value(value) -> str:
    if isinstance(value, (list, tuple)):
        value = value[0] if value else ''
    # requests sends bytes values untouched
    if isinstance(value, bytes):
        return value.decode('latin-1')
    return value


def canonicalized_headers(headers: Mapping) -> str:
    """
    Build the CanonicalizedHeaders element.

    - keep headers whose name starts with x-ms- (any casing)
    - lowercase the name, first value only
    - sort the name:value lines and join them with a newline

    Folded values are not unfolded and whitespace around the colon is kept.
    """
    seen = set()
    lines = []
    for name, value in headers.items():
        lname = name.lower()
        if not lname.startswith(MS_HEADER_PREFIX) or lname in seen:
            continue
        seen.add(lname)
        lines.append(f"{lname}:{_first_value(value)}")
    lines.sort()
    return '\n'.join(lines)


def parse_query(resource: str) -> dict:
    """Map each query key of the resource to its values, in query order."""
    query = urlsplit(resource).query
    params = {}
    if not query:
        return params
    if _BAD_ESCAPE.search(query):
        logger.warning("Invalid percent-escape in resource %r", resource)
        raise InvalidResourceError(f"Invalid percent-escape in query of {resource!r}")
    # keys without "=" map to an empty value, empty fields are skipped
    for key, value in parse_qsl(query, keep_blank_values=True):
        params.setdefault(key, []).append(value)
    return params


def canonicalized_resource(account: str, container: str, resource: str = '') -> str:
    """Build the CanonicalizedResource element: /account/container then key:values lines."""
    canonical = f"/{account}/{container}"
    params = parse_query(resource)
    for key in sorted(params):
        canonical += f"\n{key}:{','.join(sorted(params[key]))}"
    return canonical


def format_request_time(request_time: datetime.datetime, date_format: str = DATE_FORMAT) -> str:
    if request_time.tzinfo is None:
        request_time = request_time.replace(tzinfo=datetime.timezone.utc)
    else:
        request_time = request_time.astimezone(datetime.timezone.utc)
    # %a and %b follow the process locale, the header needs English names
    date_format = date_format.replace('%a', _DAY_NAMES[request_time.weekday()])
    date_format = date_format.replace('%b', _MONTH_NAMES[request_time.month - 1])
    return request_time.strftime(date_format)
