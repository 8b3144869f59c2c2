"""GitLab REST API access."""

from .client import APIResponse, GitLabClient, GitLabClientFactory
from .exceptions import (
    GitLabAPIError,
    GitLabAuthenticationError,
    GitLabConflictError,
    GitLabDecodeError,
    GitLabHTTPStatusError,
    GitLabNotFoundError,
    GitLabPermissionError,
    GitLabTransportError,
)

__all__ = [
    'APIResponse',
    'GitLabClient',
    'GitLabClientFactory',
    'GitLabAPIError',
    'GitLabAuthenticationError',
    'GitLabConflictError',
    'GitLabDecodeError',
    'GitLabHTTPStatusError',
    'GitLabNotFoundError',
    'GitLabPermissionError',
    'GitLabTransportError',
]
