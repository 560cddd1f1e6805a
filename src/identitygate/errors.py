"""IdentityGate errors."""


class IdentityGateError(Exception):
    """Base error for IdentityGate operations."""

    def __init__(self, message: str, code: str = "IDENTITYGATE_ERROR"):
        self.message = message
        self.code = code
        super().__init__(message)


class ClaimRequiredError(IdentityGateError, ValueError):
    """A claim argument was None."""

    def __init__(self, argument: str = "claim"):
        super().__init__(f"Argument '{argument}' must not be None", "CLAIM_REQUIRED")
        self.argument = argument


class InvalidKeyError(IdentityGateError, ValueError):
    """A stored identifier cannot be parsed for its key kind."""

    def __init__(self, key_kind: str, raw: str):
        super().__init__(f"Invalid {key_kind} key: {raw!r}", "INVALID_KEY")
        self.key_kind = key_kind
        self.raw = raw


class MissingKeyError(IdentityGateError):
    """Principal has no identifier and cannot be persisted."""

    def __init__(self, entity: str, key_kind: str):
        super().__init__(
            f"{entity} has no identifier (key kind: {key_kind})",
            "MISSING_KEY",
        )
        self.entity = entity
        self.key_kind = key_kind


class RoleNotFound(IdentityGateError):
    """Role does not exist."""

    def __init__(self, role_id: str):
        super().__init__(f"Role not found: {role_id}", "ROLE_NOT_FOUND")
        self.role_id = role_id


class UserNotFound(IdentityGateError):
    """User does not exist."""

    def __init__(self, user_id: str):
        super().__init__(f"User not found: {user_id}", "USER_NOT_FOUND")
        self.user_id = user_id


class DuplicatePrincipalError(IdentityGateError):
    """A principal with the same identifier or normalized name already exists."""

    def __init__(self, entity: str, identifier: str):
        super().__init__(
            f"{entity} already exists: {identifier}",
            "DUPLICATE_PRINCIPAL",
        )
        self.entity = entity
        self.identifier = identifier
