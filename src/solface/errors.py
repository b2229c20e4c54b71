class SolfaceError(Exception):
    """
    Base class for all solface errors.

    This exception serves as the root of the solface error hierarchy.
    """
    pass


class DecodeError(SolfaceError):
    """
    Raised when an ABI document cannot be decoded.

    This covers malformed JSON, a document that is not a JSON array, and
    ABI items whose shape does not match the expected event, function or
    error structure.
    """
    pass


class InvalidParameterError(SolfaceError):
    """
    Raised when a provided parameter is invalid or malformed.

    An example is an interface name that is not a valid Solidity identifier.
    """
    pass


class InputError(SolfaceError):
    """
    Raised when the ABI source cannot be read.

    Attributes:
        source: The path (or "<stdin>") that failed to read.
    """

    def __init__(self, message: str, source: str | None = None):
        """
        Initialize an InputError.

        Args:
            message: Description of the error.
            source: Optional path of the source that could not be read.
        """
        super().__init__(message)
        self.source = source
