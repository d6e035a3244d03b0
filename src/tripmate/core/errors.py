"""Project-wide custom exceptions.

Routers, the socket gateway and services raise / catch these instead of
infrastructure errors (``jose``, ``botocore``, raw SQLAlchemy exceptions).
Each maps onto one failure mode of the chat core:

* ``AuthenticationError``  missing / invalid / expired credential. On the
  socket this closes the connection before it joins any room; on HTTP it is a
  401 envelope.
* ``ValidationError``      a required field (threadId, content, file) is
  missing or malformed. HTTP 400; socket events turn it into an error ack or
  a silent no-op.
* ``PersistenceError``     the durable store is unavailable or returned no
  row. HTTP 500; during presence transitions it is logged and swallowed.
* ``StorageError``         object storage rejected an upload.

Add new errors here rather than scattering small ``class XError(Exception):``
definitions across the codebase.
"""
from __future__ import annotations

class tripmateError(Exception):
    """Base class for all custom project exceptions.

    Subclass this rather than ``Exception`` directly for new domain errors.
    """


class AuthenticationError(tripmateError):
    """Raised when a bearer credential is absent, forged or expired."""


class ValidationError(tripmateError):
    """Raised when a request lacks a required field.

    ``errors`` carries a per-field explanation for the response envelope.
    """
    def __init__(self, message: str, errors: dict[str, str] | None = None):
        super().__init__(message)
        self.errors = errors or {}


class PersistenceError(tripmateError):
    """Raised when the durable store fails or yields no row."""


class StorageError(tripmateError):
    """Raised when an attachment cannot be written to object storage."""


__all__ = [
    "tripmateError",
    "AuthenticationError",
    "ValidationError",
    "PersistenceError",
    "StorageError",
]
