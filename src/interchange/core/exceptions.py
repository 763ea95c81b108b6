"""
Custom exceptions for the Interchange protocol core.
"""


class InterchangeError(Exception):
    """Base exception for all Interchange errors."""
    pass


class ProtocolError(InterchangeError):
    """Base class for errors decoding documents or protocol messages."""
    pass


class DecodeError(ProtocolError):
    """
    Text could not be decoded as JSON.

    Raised when:
    - A message line is not well-formed JSON
    - A stored document is not well-formed JSON
    - Bytes are not valid UTF-8
    """

    def __init__(self, message: str, text: str = None):
        super().__init__(message)
        self.text = text


class MalformedMessageError(ProtocolError):
    """
    The payload is valid JSON but is not a protocol message.

    Raised when:
    - The decoded value is not an object
    - The 'type' field is missing
    - A field required by the message type is missing
    """

    def __init__(self, message: str, payload=None):
        super().__init__(message)
        self.payload = payload


class UnknownMessageTypeError(ProtocolError):
    """The message 'type' is not one of RECORD, SCHEMA or STATE."""

    def __init__(self, message: str, message_type=None):
        super().__init__(message)
        self.message_type = message_type


class StorageError(InterchangeError):
    """Base class for document storage errors."""

    def __init__(self, message: str, location: str = None):
        super().__init__(message)
        self.location = location


class NotFoundError(StorageError):
    """A local document does not exist."""
    pass


class BackendIOError(StorageError):
    """
    A remote storage backend call failed.

    Raised when:
    - The object store is unreachable
    - Credentials are missing or rejected
    - The object store returns an error response
    """
    pass


class UnsupportedSchemeError(StorageError):
    """No storage backend is registered for the location's scheme."""
    pass


class NoImplementationError(InterchangeError):
    """No implementation is registered for the requested extension type."""

    def __init__(self, message: str, operation: str = None, type_tag=None):
        super().__init__(message)
        self.operation = operation
        self.type_tag = type_tag


class ConfigurationError(InterchangeError):
    """
    Error in Interchange configuration.

    Raised when:
    - A settings file is missing or invalid
    - A document location required by an operation is not set
    """
    pass
