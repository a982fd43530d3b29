"""Custom exception classes for the vault.

Every error kind carries a stable ``code`` and the HTTP status the request
layer answers with.
"""


class VaultError(Exception):
    """
    Base exception class for all vault errors.
    """
    code = "VAULT_ERROR"
    status_code = 400


class InvalidParameterError(VaultError):
    """
    Raised when a request argument is malformed or out of range.
    """
    code = "INVALID_PARAMETER"
    status_code = 422


class SystemPausedError(VaultError):
    """
    Raised when a mutating operation is attempted while the system is paused.
    """
    code = "SYSTEM_PAUSED"
    status_code = 503


class NotAdminError(VaultError):
    """
    Raised when a non-admin identity calls an admin-only operation.
    """
    code = "NOT_ADMIN"
    status_code = 403


class NameTooShortError(VaultError):
    code = "NAME_TOO_SHORT"
    status_code = 400


class NameTakenError(VaultError):
    code = "NAME_TAKEN"
    status_code = 409


class AlreadyRegisteredError(VaultError):
    code = "ALREADY_REGISTERED"
    status_code = 409


class NotRegisteredError(VaultError):
    code = "NOT_REGISTERED"
    status_code = 403


class UserNotFoundError(VaultError):
    code = "USER_NOT_FOUND"
    status_code = 404


class SuspendedError(VaultError):
    """
    Raised when a suspended identity tries to consume storage.
    """
    code = "SUSPENDED"
    status_code = 403


class AlreadySuspendedError(VaultError):
    code = "ALREADY_SUSPENDED"
    status_code = 409


class NotSuspendedError(VaultError):
    code = "NOT_SUSPENDED"
    status_code = 409


class QuotaExceededError(VaultError):
    """
    Raised when an upload would push storage_used above storage_quota.
    """
    code = "QUOTA_EXCEEDED"
    status_code = 507


class NotEligibleError(VaultError):
    """
    Raised when the uploader is unregistered or suspended.
    """
    code = "NOT_ELIGIBLE"
    status_code = 403


class InsufficientFeeError(VaultError):
    code = "INSUFFICIENT_FEE"
    status_code = 402


class DuplicateHashError(VaultError):
    code = "DUPLICATE_HASH"
    status_code = 409


class FileNotFoundError(VaultError):
    """
    Raised when no record exists for a file hash.
    """
    code = "FILE_NOT_FOUND"
    status_code = 404


class NotAuthorizedError(VaultError):
    """
    Raised when a requester may not download a file.
    """
    code = "NOT_AUTHORIZED"
    status_code = 403


class NotOwnerOrAdminError(VaultError):
    code = "NOT_OWNER_OR_ADMIN"
    status_code = 403


class RootMismatchError(VaultError):
    """
    Raised when a proof does not reproduce the claimed and stored roots.
    """
    code = "ROOT_MISMATCH"
    status_code = 422


class MalformedProofError(VaultError):
    code = "MALFORMED_PROOF"
    status_code = 400


class StorageUnavailableError(VaultError):
    """
    Raised when the database itself fails. Aborts the enclosing transaction.
    """
    code = "STORAGE_UNAVAILABLE"
    status_code = 503


class AccountAlreadyExistsError(VaultError):
    """
    Raised when signing up an identity that already has credentials.
    """
    code = "ACCOUNT_ALREADY_EXISTS"
    status_code = 409


class ReservedIdentityError(VaultError):
    """
    Raised when signing up as the administrator identity, whose credential
    comes from server configuration only.
    """
    code = "RESERVED_IDENTITY"
    status_code = 403


class InvalidCredentialsError(VaultError):
    code = "INVALID_CREDENTIALS"
    status_code = 401


class InvalidAPIKeyError(VaultError):
    """
    Raised when an API Key is missing, malformed or unknown.
    """
    code = "INVALID_API_KEY"
    status_code = 401
