"""Custom exceptions and error codes."""

from enum import StrEnum
from typing import Any


class ErrorCode(StrEnum):
    """Standardized error codes for the API."""

    # Authentication errors (401)
    UNAUTHORIZED = "UNAUTHORIZED"
    INVALID_TOKEN = "INVALID_TOKEN"
    TOKEN_EXPIRED = "TOKEN_EXPIRED"

    # Authorization errors (403)
    FORBIDDEN = "FORBIDDEN"
    NOT_A_MEMBER = "NOT_A_MEMBER"
    INSUFFICIENT_PERMISSIONS = "INSUFFICIENT_PERMISSIONS"

    # Not found errors (404)
    PROFILE_NOT_FOUND = "PROFILE_NOT_FOUND"
    GROUP_NOT_FOUND = "GROUP_NOT_FOUND"
    DEAL_NOT_FOUND = "DEAL_NOT_FOUND"
    DOCUMENT_NOT_FOUND = "DOCUMENT_NOT_FOUND"
    APPLICATION_NOT_FOUND = "APPLICATION_NOT_FOUND"
    COMMENT_NOT_FOUND = "COMMENT_NOT_FOUND"

    # Validation errors (400)
    VALIDATION_ERROR = "VALIDATION_ERROR"
    ACTION_FAILED = "ACTION_FAILED"
    INVALID_ROLE = "INVALID_ROLE"
    LAST_CURATOR = "LAST_CURATOR"

    # Rate limiting (429)
    RATE_LIMIT_EXCEEDED = "RATE_LIMIT_EXCEEDED"

    # Server errors (500)
    INTERNAL_ERROR = "INTERNAL_ERROR"
    DATABASE_ERROR = "DATABASE_ERROR"
    STORAGE_UPLOAD_FAILED = "STORAGE_UPLOAD_FAILED"


class AppException(Exception):
    """Base application exception."""

    def __init__(
        self,
        error_code: ErrorCode,
        message: str,
        status_code: int = 400,
        details: Any | None = None,
    ) -> None:
        self.error_code = error_code
        self.message = message
        self.status_code = status_code
        self.details = details
        super().__init__(self.message)


class AuthenticationError(AppException):
    """Authentication failed."""

    def __init__(
        self,
        message: str = "Authentication required",
        error_code: ErrorCode = ErrorCode.UNAUTHORIZED,
    ) -> None:
        super().__init__(
            error_code=error_code,
            message=message,
            status_code=401,
        )


class AuthorizationError(AppException):
    """Authorization failed."""

    def __init__(self, message: str = "Access denied") -> None:
        super().__init__(
            error_code=ErrorCode.FORBIDDEN,
            message=message,
            status_code=403,
        )


class NotAMemberError(AppException):
    """User is not a member of the group."""

    def __init__(self, group_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.NOT_A_MEMBER,
            message="You are not a member of this group",
            status_code=403,
            details={"group_id": group_id},
        )


class InsufficientPermissionsError(AppException):
    """User does not have sufficient permissions."""

    def __init__(self, required_role: str = "curator") -> None:
        super().__init__(
            error_code=ErrorCode.INSUFFICIENT_PERMISSIONS,
            message=f"Insufficient permissions. Required role: {required_role}",
            status_code=403,
            details={"required_role": required_role},
        )


class ProfileNotFoundError(AppException):
    """No user profile exists for the authenticated identity."""

    def __init__(self, external_ref: str = "") -> None:
        super().__init__(
            error_code=ErrorCode.PROFILE_NOT_FOUND,
            message="User profile not found. Sync your account first.",
            status_code=404,
            details={"external_ref": external_ref} if external_ref else None,
        )


class GroupNotFoundError(AppException):
    """Group not found."""

    def __init__(self, group_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.GROUP_NOT_FOUND,
            message=f"Group not found: {group_id}",
            status_code=404,
            details={"group_id": group_id},
        )


class DealNotFoundError(AppException):
    """Deal not found."""

    def __init__(self, deal_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.DEAL_NOT_FOUND,
            message=f"Deal not found: {deal_id}",
            status_code=404,
            details={"deal_id": deal_id},
        )


class DocumentNotFoundError(AppException):
    """Document not found."""

    def __init__(self, document_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.DOCUMENT_NOT_FOUND,
            message=f"Document not found: {document_id}",
            status_code=404,
            details={"document_id": document_id},
        )


class ApplicationNotFoundError(AppException):
    """Application not found."""

    def __init__(self, application_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.APPLICATION_NOT_FOUND,
            message=f"Application not found: {application_id}",
            status_code=404,
            details={"application_id": application_id},
        )


class CommentNotFoundError(AppException):
    """Comment not found."""

    def __init__(self, comment_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.COMMENT_NOT_FOUND,
            message=f"Comment not found: {comment_id}",
            status_code=404,
            details={"comment_id": comment_id},
        )


class ActionFailedError(AppException):
    """A workflow operation returned no result."""

    def __init__(self, action: str) -> None:
        super().__init__(
            error_code=ErrorCode.ACTION_FAILED,
            message="Action failed, please try again",
            status_code=400,
            details={"action": action},
        )


class InvalidRoleError(AppException):
    """Unknown platform role."""

    def __init__(self, role: str) -> None:
        super().__init__(
            error_code=ErrorCode.INVALID_ROLE,
            message=f"Invalid role: {role}",
            status_code=400,
            details={"role": role},
        )


class LastCuratorError(AppException):
    """Cannot remove the curator membership of a group."""

    def __init__(self) -> None:
        super().__init__(
            error_code=ErrorCode.LAST_CURATOR,
            message="Cannot remove the curator of a group",
            status_code=400,
        )


class StorageUploadError(AppException):
    """Object storage rejected an upload."""

    def __init__(self, path: str) -> None:
        super().__init__(
            error_code=ErrorCode.STORAGE_UPLOAD_FAILED,
            message="Failed to upload document",
            status_code=502,
            details={"path": path},
        )


class StorageError(AppException):
    """The relational store raised while executing a unit of work."""

    def __init__(self, message: str = "Database error") -> None:
        super().__init__(
            error_code=ErrorCode.DATABASE_ERROR,
            message=message,
            status_code=500,
        )
