"""Request body serialisation for POST and PUT.

Two formats are supported, selected by
:class:`~wwwjson.models.PostBodyFormat`:

- ``serialized`` -- the parameter mapping is handed to the transport as is
  and form-encoded there (``application/x-www-form-urlencoded``).
- ``json-encoded`` -- the mapping is encoded here as a JSON document and
  sent with ``Content-Type: application/json``.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Optional, Union

from wwwjson.models import PostBodyFormat

JSON_CONTENT_TYPE = "application/json"


@dataclass(frozen=True)
class SerializedBody:
    """A wire-ready body plus the headers that describe it.

    Attributes:
        content: A mapping for the transport to form-encode, a JSON string,
            or ``None`` when no body is sent.
        headers: Content headers to add to the request.
    """

    content: Union[Mapping[str, Any], str, None] = None
    headers: dict[str, str] = field(default_factory=dict)


def serialize_body(
    params: Optional[Mapping[str, Any]],
    body_format: Optional[PostBodyFormat] = PostBodyFormat.SERIALIZED,
) -> SerializedBody:
    """Serialise body parameters according to *body_format*.

    Args:
        params: Merged body parameters. ``None`` or empty yields an empty
            :class:`SerializedBody`.
        body_format: The configured format; ``None`` behaves as
            ``serialized``.

    Returns:
        The serialised body and its content headers.
    """
    if not params:
        return SerializedBody()
    if body_format == PostBodyFormat.JSON_ENCODED:
        return SerializedBody(
            content=json.dumps(dict(params), ensure_ascii=False),
            headers={"Content-Type": JSON_CONTENT_TYPE},
        )
    return SerializedBody(content=dict(params))
