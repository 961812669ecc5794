"""
Error types raised by the request pipeline.

Copyright (c) 2025 DNS Science.io, an After Dark Systems, LLC company.
All rights reserved.
"""


class HTTPCallError(Exception):
    """Base exception for httpcall errors."""
    pass


class InvalidInputError(HTTPCallError):
    """Bad option values or combinations, or an unreadable body file."""
    pass


class InvalidRequestError(HTTPCallError):
    """The request cannot be built (malformed method or URL)."""
    pass


class TransportError(HTTPCallError):
    """A single attempt failed on the wire (connect, timeout, read)."""
    pass


class RenderError(HTTPCallError):
    """The response could not be rendered in the requested format."""
    pass
