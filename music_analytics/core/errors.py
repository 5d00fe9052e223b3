from typing import Any, Dict


class ReportError(Exception):
    """
    Single error type for every failed report request.
    `kind` is "validation" (HTTP 400) or "execution" (HTTP 500).
    """

    VALIDATION = "validation"
    EXECUTION = "execution"

    def __init__(self, kind: str, message: str, code: int):
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.code = code

    @classmethod
    def validation(cls, message: str) -> "ReportError":
        return cls(cls.VALIDATION, message, 400)

    @classmethod
    def execution(cls, message: str) -> "ReportError":
        return cls(cls.EXECUTION, message, 500)

    def to_envelope(self) -> Dict[str, Any]:
        return {
            "success": False,
            "error": {"code": self.code, "kind": self.kind, "message": self.message},
        }
