from typing import Dict


class ReconError(Exception):
    """Base class for failures reported back to the caller of a data check."""

    kind = "ReconError"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> Dict[str, str]:
        return {"error": self.kind, "message": self.message}


class InvalidInput(ReconError):
    """Missing file/company/period, a malformed period, or too few spreadsheet rows."""

    kind = "InvalidInput"


class MissingRequiredColumn(ReconError):
    """The name column could not be located in the spreadsheet header."""

    kind = "MissingRequiredColumn"


class UnexpectedFailure(ReconError):
    kind = "UnexpectedFailure"
