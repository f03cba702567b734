"""gerritclient - Python client for the Gerrit code review REST API."""

from gerritclient.auth import (
    AuthProvider,
    Credentials,
    NetrcCredentialStore,
    StaticCredentialStore,
)
from gerritclient.client import GerritClient
from gerritclient.clients import FanoutItem, FanoutResult
from gerritclient.envelope import RequestSpec, ResponseEnvelope
from gerritclient.exceptions import (
    AuthenticationError,
    AuthError,
    AuthorizationError,
    ConfigurationError,
    ConflictError,
    GerritError,
    HttpStatusError,
    MetadataError,
    NotFoundError,
    ProtocolError,
    ServerError,
    TopicFanoutError,
    TrackingConflict,
    TransportError,
    ValidationError,
    WorkspaceError,
)
from gerritclient.git import GitWorkspace, Workspace, build_upload_refspec
from gerritclient.identifiers import ChangeIdentifier, escape_project
from gerritclient.logging import configure_logging, get_logger
from gerritclient.options import QueryOption
from gerritclient.reconcile import FetchReconciler, ReconcileState
from gerritclient.transport import HTTPTransport

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Main Client
    "GerritClient",
    # Authentication
    "AuthProvider",
    "Credentials",
    "NetrcCredentialStore",
    "StaticCredentialStore",
    # Identifiers and options
    "ChangeIdentifier",
    "escape_project",
    "QueryOption",
    # Topic fan-out
    "FanoutItem",
    "FanoutResult",
    # Workspace
    "Workspace",
    "GitWorkspace",
    "FetchReconciler",
    "ReconcileState",
    "build_upload_refspec",
    # Exceptions
    "GerritError",
    "ConfigurationError",
    "AuthError",
    "TransportError",
    "ProtocolError",
    "HttpStatusError",
    "AuthenticationError",
    "AuthorizationError",
    "NotFoundError",
    "ConflictError",
    "ValidationError",
    "ServerError",
    "MetadataError",
    "TrackingConflict",
    "WorkspaceError",
    "TopicFanoutError",
    # Envelope
    "RequestSpec",
    "ResponseEnvelope",
    # Transport
    "HTTPTransport",
    # Logging
    "configure_logging",
    "get_logger",
]
