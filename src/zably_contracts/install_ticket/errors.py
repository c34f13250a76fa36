class InstallTicketError(Exception):
    """Base class for install ticket issuance errors."""

    def __init__(self, message: str, code: str = "INSTALL_TICKET_ERROR") -> None:
        super().__init__(message)
        self.code = code
        self.message = message

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code!r}, message={self.message!r})"


class InvalidClaimsError(InstallTicketError):
    """Raised when a claim set fails local checks before signing."""

    def __init__(self, message: str) -> None:
        super().__init__(message, code="INVALID_CLAIMS")


class SigningError(InstallTicketError):
    """Raised when the signing collaborator cannot produce a token."""

    def __init__(self, message: str) -> None:
        super().__init__(message, code="SIGNING_FAILED")
