"""SchemeHandler: per-scheme policy, and the standard handler table."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .credentials import Credentials


class AuthenticationType(str, Enum):
    """Whether a scheme needs credentials to access its resources."""

    NONE = "none"
    REQUIRED = "required"
    OPTIONAL = "optional"


@dataclass(frozen=True, slots=True)
class SchemeHandler:
    """Policy shared by every FileURL of one scheme.

    Attributes:
        standard_port: Port implied when none is given, ``None`` if the scheme has no port.
        guest_credentials: Credentials to try when the user supplies none.
        authentication_type: Whether credentials are needed at all.
        path_separator: Separator between path segments.
        query_parsed: If False, ``?`` and what follows stay in the path.
    """

    standard_port: int | None = None
    guest_credentials: Credentials | None = None
    authentication_type: AuthenticationType = AuthenticationType.NONE
    path_separator: str = "/"
    query_parsed: bool = False

    def __post_init__(self) -> None:
        if self.standard_port is not None and not 1 <= self.standard_port <= 65535:
            raise ValueError(f"Standard port out of range: {self.standard_port}")
        if self.authentication_type == AuthenticationType.NONE and self.guest_credentials is not None:
            raise ValueError("Guest credentials given for a scheme without authentication")
        if not self.path_separator:
            raise ValueError("Path separator cannot be empty")


# =============================================================================
# Standard handlers
# =============================================================================

DEFAULT_HANDLER = SchemeHandler()

FILE_HANDLER = SchemeHandler()

HTTP_HANDLER = SchemeHandler(
    standard_port=80,
    authentication_type=AuthenticationType.OPTIONAL,
    query_parsed=True,
)

HTTPS_HANDLER = SchemeHandler(
    standard_port=443,
    authentication_type=AuthenticationType.OPTIONAL,
    query_parsed=True,
)

FTP_HANDLER = SchemeHandler(
    standard_port=21,
    guest_credentials=Credentials("anonymous", "anonymous@"),
    authentication_type=AuthenticationType.OPTIONAL,
)

SFTP_HANDLER = SchemeHandler(standard_port=22, authentication_type=AuthenticationType.REQUIRED)

SMB_HANDLER = SchemeHandler(
    standard_port=139,
    guest_credentials=Credentials("GUEST", ""),
    authentication_type=AuthenticationType.OPTIONAL,
)

NFS_HANDLER = SchemeHandler(standard_port=2049)

WEBDAV_HANDLER = SchemeHandler(
    standard_port=80,
    authentication_type=AuthenticationType.OPTIONAL,
    query_parsed=True,
)

WEBDAVS_HANDLER = SchemeHandler(
    standard_port=443,
    authentication_type=AuthenticationType.OPTIONAL,
    query_parsed=True,
)

S3_HANDLER = SchemeHandler(standard_port=443, authentication_type=AuthenticationType.REQUIRED)

HDFS_HANDLER = SchemeHandler(standard_port=8020, authentication_type=AuthenticationType.OPTIONAL)

ARCHIVE_HANDLER = SchemeHandler()

STANDARD_HANDLERS: dict[str, SchemeHandler] = {
    "file": FILE_HANDLER,
    "http": HTTP_HANDLER,
    "https": HTTPS_HANDLER,
    "ftp": FTP_HANDLER,
    "sftp": SFTP_HANDLER,
    "smb": SMB_HANDLER,
    "nfs": NFS_HANDLER,
    "webdav": WEBDAV_HANDLER,
    "webdavs": WEBDAVS_HANDLER,
    "s3": S3_HANDLER,
    "hdfs": HDFS_HANDLER,
    "zip": ARCHIVE_HANDLER,
    "tar": ARCHIVE_HANDLER,
    "iso": ARCHIVE_HANDLER,
}
"""Handlers registered by :meth:`SchemeRegistry.with_defaults`, keyed by lower-case scheme."""
