"""Numeric process exit codes for the ``wwwjson`` command line.

Each constant maps to an outcome class. Configuration and usage errors map
to the :class:`~wwwjson.exceptions.WWWJSONError` subclasses; the request
outcome codes are chosen by :mod:`wwwjson.app` from the returned
:class:`~wwwjson.client.Response`.

Example::

    $ wwwjson --base-url https://api.example.com get /missing
    $ echo $?
    5   # EXIT_REQUEST_FAILED -- the API answered with an HTTP error
"""

EXIT_SUCCESS = 0
"""The request succeeded (2xx status and a decodable JSON body)."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified or configuration error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments or an unsupported method."""

EXIT_REQUEST_FAILED = 5
"""The API answered, but with an HTTP error status or a body that is not JSON."""

EXIT_TRANSPORT_ERROR = 6
"""A network-level error occurred (timeout, DNS failure, connection refused)."""
