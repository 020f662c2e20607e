"""HTTP client layer for wwwjson.

Classes:
    :class:`JSONClient` -- the facade with one method per HTTP verb.
    :class:`Response` -- lazily decoded, success-classified response.
    :class:`DecodeFailure` -- marker for bodies that are not valid JSON.
    :class:`Transport` / :class:`HttpxTransport` -- the network seam.

Example::

    from wwwjson.client import JSONClient

    with JSONClient(base_url="https://api.example.com/v1") as client:
        r = client.get("/items", {"q": "x"})
"""

from wwwjson.client.response import DecodeFailure, Response
from wwwjson.client.sync_client import JSONClient
from wwwjson.client.transport import HttpxTransport, Transport

__all__ = ["DecodeFailure", "HttpxTransport", "JSONClient", "Response", "Transport"]
