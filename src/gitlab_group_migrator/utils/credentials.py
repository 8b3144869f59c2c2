"""Credential handling for server-side repository imports.

GitLab pulls an imported repository itself, so the clone URL handed to
the target instance must carry the source token. ``build_import_url`` is
the only place a secret is written into a URL; everything that may echo
such a URL back (log lines, error bodies) goes through ``redact``.
"""

import re
from urllib.parse import quote, urlsplit, urlunsplit

IMPORT_USERNAME = 'oauth2'

_CREDENTIALS_IN_URL = re.compile(r'(https?://)[^/@\s:]+:[^/@\s]+@', re.IGNORECASE)
_GITLAB_TOKEN = re.compile(r'glpat-[A-Za-z0-9_-]+')


def build_import_url(base_url: str, path_with_namespace: str, token: str) -> str:
    """Build a credentialed HTTP clone URL for a project.

    Args:
        base_url: Source GitLab instance URL
        path_with_namespace: Full path of the project on the source
        token: Source access token

    Returns:
        Clone URL of the form ``https://oauth2:<token>@host/<path>.git``
    """
    parts = urlsplit(f'{base_url.rstrip("/")}/{path_with_namespace}.git')
    userinfo = f'{quote(IMPORT_USERNAME, safe="")}:{quote(token, safe="")}'
    host = parts.netloc.rpartition('@')[2]
    netloc = f'{userinfo}@{host}'

    return urlunsplit((parts.scheme, netloc, parts.path, parts.query, parts.fragment))


def redact(text: str) -> str:
    """Remove URL credentials and GitLab tokens from text."""
    if not text:
        return text

    text = _CREDENTIALS_IN_URL.sub(r'\1[REDACTED]@', text)
    return _GITLAB_TOKEN.sub('[REDACTED]', text)
