"""Base domain exception."""


class DomainException(Exception):
    """
    Base exception for IRRRL domain errors.

    Carries a stable machine-readable `code` alongside the message; the
    API returns both in its error body.
    """

    def __init__(self, message: str, code: str = "DOMAIN_ERROR"):
        self.message = message
        self.code = code
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {"error": self.code, "message": self.message}
