"""Conversions between ``data:`` URIs and named byte buffers."""

from __future__ import annotations

import base64
import binascii
import re
from urllib.parse import unquote_to_bytes

from ..domain.models import BinaryFile
from ..errors import DecodeError

_DATA_URI = re.compile(r"^data:(?P<mime>[^;,]+)?(?P<params>(?:;[^;,]*)*?)(?P<base64>;base64)?,(?P<payload>.*)$", re.DOTALL)


def to_data_uri(data: bytes, mime_type: str) -> str:
    """Return *data* as a base64 ``data:`` URI of *mime_type*."""

    encoded = base64.b64encode(data).decode("ascii")
    return f"data:{mime_type};base64,{encoded}"


def data_uri_to_file(data_uri: str, filename: str) -> BinaryFile:
    """Decode *data_uri* into a :class:`BinaryFile` named *filename*.

    The MIME type embedded in the URI is kept. Raises :class:`DecodeError`
    when the string is not a data URI or its payload is not valid base64.
    """

    match = _DATA_URI.match(data_uri or "")
    if match is None:
        raise DecodeError("not a data URI")
    mime_type = match.group("mime") or "text/plain"
    payload = match.group("payload")
    if match.group("base64"):
        try:
            data = base64.b64decode(payload, validate=True)
        except (binascii.Error, ValueError) as exc:
            raise DecodeError(f"invalid base64 payload: {exc}") from exc
    else:
        data = unquote_to_bytes(payload)
    return BinaryFile(name=filename, mime_type=mime_type, data=data)


__all__ = ["data_uri_to_file", "to_data_uri"]
