"""Helpers for the on-disk auth timestamp format.

The persisted object is the decimal text of an integer, UTF-8 encoded and
never larger than MAX_AUTH_FILE_BYTES.
"""

from __future__ import annotations

import math
import re
from typing import Optional, Union

from core.errors import AuthTimestampSizeError, ValidationError

MAX_AUTH_FILE_BYTES = 1024
AUTH_TIMESTAMP_FILE_NAME = "authTimestamp"
CONTENT_TYPE = "text/plain; charset=UTF-8"

_INT32_RANGE = 2**32
_INT32_MAX = 2**31 - 1
_INT32_MIN = -(2**31)

# Any int with more bits than this has more than MAX_AUTH_FILE_BYTES digits
_MAX_ENCODABLE_BITS = math.ceil(MAX_AUTH_FILE_BYTES * math.log2(10))

# Leading integer, trailing content ignored ("42\n" and "42abc" both read 42)
_LEADING_INT_RE = re.compile(r"\s*([+-]?[0-9]+)", re.ASCII)


def auth_timestamp_dir(bucket_address: str) -> str:
    return f"{bucket_address}-auth"


def to_int32(value: Union[int, float]) -> int:
    """Coerce a number to a signed 32-bit integer.

    Truncates toward zero and wraps out-of-range values; NaN and infinities
    become 0.
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError(f"Timestamp must be a number, got {type(value).__name__}")

    if isinstance(value, float):
        if not math.isfinite(value):
            return 0
        value = math.trunc(value)

    wrapped = value % _INT32_RANGE
    if wrapped > _INT32_MAX:
        wrapped -= _INT32_RANGE
    return wrapped


def parse_timestamp_text(text: str) -> Optional[int]:
    # None when the text does not start with an integer in the int32 range
    match = _LEADING_INT_RE.match(text or "")
    if match is None:
        return None
    digits = match.group(1)
    if len(digits) > MAX_AUTH_FILE_BYTES:
        return None
    value = int(digits)
    if not _INT32_MIN <= value <= _INT32_MAX:
        return None
    return value


def encode_timestamp(value: int) -> bytes:
    value = int(value)
    # Checked before str() so huge ints never hit the int-to-str digit limit
    if value.bit_length() > _MAX_ENCODABLE_BITS:
        raise AuthTimestampSizeError(
            f"Auth number file content exceeds {MAX_AUTH_FILE_BYTES} bytes "
            f"({value.bit_length()}-bit integer)"
        )
    content = str(value).encode("utf-8")
    if len(content) > MAX_AUTH_FILE_BYTES:
        raise AuthTimestampSizeError(
            f"Auth number file content size is {len(content)}, "
            f"it should never be greater than {MAX_AUTH_FILE_BYTES}"
        )
    return content
