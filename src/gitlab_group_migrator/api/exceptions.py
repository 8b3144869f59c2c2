"""GitLab API exceptions."""

from typing import Any, Optional


class GitLabAPIError(Exception):
    """Base exception for GitLab API errors."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        response_data: Optional[Any] = None,
    ):
        """Initialize GitLab API error.

        Args:
            message: Error message
            status_code: HTTP status code
            response_data: Response data from API
        """
        super().__init__(message)
        self.status_code = status_code
        self.response_data = response_data


class GitLabTransportError(GitLabAPIError):
    """Network or connection failure before a response was received."""

    pass


class GitLabDecodeError(GitLabAPIError):
    """Response body could not be decoded into the expected shape."""

    pass


class GitLabHTTPStatusError(GitLabAPIError):
    """Response carried a status code other than the expected one."""

    def __init__(self, message: str, status_code: int, body: str = '', **kwargs):
        """Initialize HTTP status error.

        Args:
            message: Error message
            status_code: HTTP status code of the response
            body: Response body text (credentials already redacted)
            **kwargs: Additional arguments for base class
        """
        super().__init__(message, status_code=status_code, **kwargs)
        self.body = body


class GitLabAuthenticationError(GitLabHTTPStatusError):
    """Authentication error with GitLab API."""

    pass


class GitLabPermissionError(GitLabHTTPStatusError):
    """Permission denied error."""

    pass


class GitLabNotFoundError(GitLabHTTPStatusError):
    """Resource not found error."""

    pass


class GitLabConflictError(GitLabHTTPStatusError):
    """The resource being created already exists."""

    pass
