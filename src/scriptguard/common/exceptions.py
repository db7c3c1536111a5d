"""Scriptguard exception hierarchy for management operations.

Gate denials are not exceptions; see ``scriptguard.gate.decision``.
"""


class ScriptguardError(Exception):
    """Base exception for all Scriptguard errors."""

    status_code = 400

    def __init__(self, message: str = "", code: str = "SCRIPTGUARD_ERROR"):
        self.message = message
        self.code = code
        super().__init__(message)


class UnauthorizedError(ScriptguardError):
    """Raised when the caller is not an admin or lacks a project grant."""

    status_code = 403

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message, code="UNAUTHORIZED")


class ProjectNotFoundError(ScriptguardError):
    status_code = 404

    def __init__(self, message: str = "Project not found"):
        super().__init__(message, code="PROJECT_NOT_FOUND")


class KeyNotFoundError(ScriptguardError):
    status_code = 404

    def __init__(self, message: str = "Key not found"):
        super().__init__(message, code="KEY_NOT_FOUND")


class AdminNotFoundError(ScriptguardError):
    status_code = 404

    def __init__(self, message: str = "Admin not found"):
        super().__init__(message, code="ADMIN_NOT_FOUND")


class DuplicateKeyError(ScriptguardError):
    """Raised when a key token is already in use anywhere in the system."""

    status_code = 409

    def __init__(self, message: str = "Key already exists"):
        super().__init__(message, code="DUPLICATE_KEY")


class MissingFieldsError(ScriptguardError):
    def __init__(self, message: str = "Missing required fields"):
        super().__init__(message, code="MISSING_FIELDS")
