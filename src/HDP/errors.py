"""
Error kinds raised by the HDP toolkit.

Every failure is reported synchronously to the immediate caller; nothing here
is caught and ignored inside the library.
"""


class HDPError(Exception):
    """Base class for all errors raised by HDP."""


class UnknownDiseaseError(HDPError, LookupError):
    """The disease key is not one of the registered disease models."""

    def __init__(self, disease_key, known=()):
        self.disease_key = disease_key
        self.known = tuple(known)
        message = f"Unknown disease: {disease_key!r}"
        if self.known:
            message += f". Options: {list(self.known)}"
        super().__init__(message)


class InvalidArgumentError(HDPError, ValueError):
    """An input violated its contract (e.g. a non-finite field or steps < 2)."""


class NotFoundError(HDPError, LookupError):
    """No record exists under the requested name."""

    def __init__(self, name, kind: str = "profile"):
        self.name = name
        self.kind = kind
        super().__init__(f"No such {kind}: {name!r}")
