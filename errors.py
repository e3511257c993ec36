"""Exceptions raised by the document service, the wiki and the migration."""


class MigrationToolError(Exception):
    """Base class for errors the interactive shell reports and survives."""
    pass


class AuthenticationError(MigrationToolError):
    """Raised when credentials or tokens are rejected."""
    pass


class ServiceError(MigrationToolError):
    """Raised when a remote API call fails."""
    pass


class WikiError(ServiceError):
    """Raised when a MediaWiki read or edit fails."""
    pass


class MigrationError(MigrationToolError):
    """Base class for failures specific to the migrate command."""
    pass


class DownloadError(MigrationError):
    """Raised when a document cannot be downloaded to the staging area."""
    pass


class ConversionError(MigrationError):
    """Raised when staged HTML cannot be read or converted to wiki markup."""
    pass
