"""Errors raised while preparing and signing blob requests."""


class BlobAuthError(Exception):
    """Base exception for request preparation errors."""

    def __init__(self, message: str, error_code: str = 'BlobAuthError'):
        self.message = message
        self.error_code = error_code
        super().__init__(message)


class ConfigurationError(BlobAuthError):
    """Unrecoverable caller configuration mistake."""

    def __init__(self, message: str, error_code: str = 'ConfigurationError'):
        super().__init__(message, error_code)


class MalformedKeyError(ConfigurationError):
    """Raised when the access key is not valid base64."""

    def __init__(self, message: str = 'Access key is not valid base64'):
        super().__init__(message, 'MalformedKey')


class InvalidUrlError(ConfigurationError):
    """Raised when account, container or resource cannot form a URL."""

    def __init__(self, message: str = 'Cannot build request URL'):
        super().__init__(message, 'InvalidUrl')


class InputError(BlobAuthError):
    """Caller-supplied request data that cannot be canonicalized."""

    def __init__(self, message: str, error_code: str = 'InputError'):
        super().__init__(message, error_code)


class InvalidResourceError(InputError):
    """Raised when the resource query string cannot be parsed."""

    def __init__(self, message: str = 'Resource query string is malformed'):
        super().__init__(message, 'InvalidResource')
