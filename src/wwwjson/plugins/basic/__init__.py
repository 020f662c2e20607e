"""HTTP Basic authentication strategy.

Implements the ``Basic`` strategy, which encodes a ``username:password``
pair using Base64 and sends it as an ``Authorization: Basic`` header per
:rfc:`7617`.

See Also:
    :class:`~wwwjson.plugins.basic.plugin.BasicAuth`
"""

from wwwjson.plugins.basic.plugin import BasicAuth

__all__ = ["BasicAuth"]
