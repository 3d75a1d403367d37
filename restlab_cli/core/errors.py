"""Error types shared by the core and the command layer."""

from __future__ import annotations

from enum import Enum


class RestLabError(Exception):
    """Base class for every error the CLI reports as a plain message."""


class CollectionImportError(RestLabError):
    pass


class ParseError(CollectionImportError):
    def __init__(self, message: str = "Invalid JSON file. Please check the file format."):
        super().__init__(message)


class UnknownFormatError(CollectionImportError):
    def __init__(
        self,
        message: str = "Unknown format. Please import a RESTLab, Postman, or Thunder Client collection.",
    ):
        super().__init__(message)


class FormatMismatchError(CollectionImportError):
    def __init__(self, label: str):
        super().__init__(f"The selected file does not appear to be a valid {label} collection.")
        self.label = label


class ExportError(RestLabError):
    pass


class TreeError(RestLabError):
    """Invalid structural operation on the folder forest."""


class NetworkErrorKind(str, Enum):
    DNS = "dns"
    CONNECTION_REFUSED = "connection_refused"
    CONNECTION_RESET = "connection_reset"
    TIMEOUT = "timeout"
    TLS = "tls"
    INVALID_URL = "invalid_url"
    CANCELLED = "cancelled"
    UNKNOWN = "unknown"


NETWORK_ERROR_MESSAGES = {
    NetworkErrorKind.DNS: "Could not resolve host. Check the URL and your network connection.",
    NetworkErrorKind.CONNECTION_REFUSED: "Connection refused. Is the server running and accepting connections?",
    NetworkErrorKind.CONNECTION_RESET: "Connection was reset by the server.",
    NetworkErrorKind.TIMEOUT: "Request timed out.",
    NetworkErrorKind.TLS: "SSL/TLS error. The server certificate could not be verified.",
    NetworkErrorKind.INVALID_URL: "Invalid URL. Make sure it includes the scheme (http:// or https://).",
    NetworkErrorKind.CANCELLED: "Request was cancelled.",
    NetworkErrorKind.UNKNOWN: "Request failed.",
}
