"""GitLab API client implementation."""

from typing import Any, Dict, List, Optional, Type, TypeVar
from urllib.parse import quote, urljoin

import requests
from loguru import logger
from pydantic import BaseModel, ValidationError

from .. import __version__
from ..config.config import GitLabInstanceConfig
from ..models.group import Group, GroupCreate
from ..models.project import Project, ProjectCreate
from ..utils.credentials import build_import_url, redact
from .exceptions import (
    GitLabAuthenticationError,
    GitLabConflictError,
    GitLabDecodeError,
    GitLabHTTPStatusError,
    GitLabNotFoundError,
    GitLabPermissionError,
    GitLabTransportError,
)

ModelType = TypeVar('ModelType', bound=BaseModel)

_STATUS_ERRORS: Dict[int, Type[GitLabHTTPStatusError]] = {
    401: GitLabAuthenticationError,
    403: GitLabPermissionError,
    404: GitLabNotFoundError,
    409: GitLabConflictError,
}

# GitLab answers 400 instead of 409 when a project path is taken
_CONFLICT_MARKERS = ('has already been taken', 'already exists')


class APIResponse(BaseModel):
    """Standard API response wrapper."""

    status_code: int
    data: Any
    headers: Dict[str, str]


class GitLabClient:
    """Synchronous GitLab API client bound to one instance and token."""

    def __init__(
        self,
        config: GitLabInstanceConfig,
        session: Optional[requests.Session] = None,
    ):
        """Initialize GitLab client.

        Args:
            config: GitLab instance configuration
            session: HTTP session to use; a new one is created if omitted
        """
        self.config = config
        self.base_url = config.url.rstrip('/') + '/api/v4'
        self.session = session if session is not None else requests.Session()

        self.session.headers.update(
            {
                'Private-Token': config.token,
                'Content-Type': 'application/json',
                'User-Agent': f'gitlab-group-migrator/{__version__}',
            }
        )

        logger.debug(f'Initialized GitLab client for {config.url}')

    @property
    def url(self) -> str:
        """Instance URL without the API suffix."""
        return self.config.url

    def _build_url(self, endpoint: str) -> str:
        """Build full API URL from endpoint.

        Args:
            endpoint: API endpoint path

        Returns:
            Full API URL
        """
        return urljoin(self.base_url + '/', endpoint.lstrip('/'))

    def _handle_response(
        self, response: requests.Response, expected_status: int
    ) -> APIResponse:
        """Check the status code and decode the JSON body.

        Args:
            response: Raw HTTP response
            expected_status: The only status code treated as success

        Returns:
            Standardized API response

        Raises:
            GitLabHTTPStatusError: If the status differs from expected_status
            GitLabDecodeError: If the body is not valid JSON
        """
        if response.status_code != expected_status:
            body = redact(response.text or '')
            error_class = _STATUS_ERRORS.get(
                response.status_code, GitLabHTTPStatusError
            )
            if response.status_code == 400 and any(
                marker in body.lower() for marker in _CONFLICT_MARKERS
            ):
                error_class = GitLabConflictError

            raise error_class(
                f'API returned status {response.status_code} '
                f'from {response.url}: {body}',
                status_code=response.status_code,
                body=body,
            )

        try:
            data = response.json()
        except ValueError as e:
            raise GitLabDecodeError(
                f'Cannot decode response from {response.url}: {e}',
                status_code=response.status_code,
            )

        return APIResponse(
            status_code=response.status_code,
            data=data,
            headers=dict(response.headers),
        )

    def _request(
        self,
        method: str,
        endpoint: str,
        expected_status: int,
        params: Optional[Dict[str, Any]] = None,
        data: Optional[Dict[str, Any]] = None,
    ) -> APIResponse:
        url = self._build_url(endpoint)

        try:
            response = self.session.request(
                method, url, params=params, json=data, timeout=self.config.timeout
            )
        except requests.RequestException as e:
            message = redact(str(e))
            logger.error(f'Network error during {method} {url}: {message}')
            raise GitLabTransportError(f'Network error: {message}')

        return self._handle_response(response, expected_status)

    def get(
        self, endpoint: str, params: Optional[Dict[str, Any]] = None
    ) -> APIResponse:
        """Make GET request expecting 200 OK.

        Args:
            endpoint: API endpoint
            params: Query parameters

        Returns:
            API response
        """
        return self._request('GET', endpoint, 200, params=params)

    def post(self, endpoint: str, data: Optional[Dict[str, Any]] = None) -> APIResponse:
        """Make POST request expecting 201 Created.

        Args:
            endpoint: API endpoint
            data: Request body data

        Returns:
            API response
        """
        return self._request('POST', endpoint, 201, data=data)

    def get_paginated(
        self, endpoint: str, params: Optional[Dict[str, Any]] = None
    ) -> List[Any]:
        """Get all pages of a paginated endpoint.

        Requests page 1, 2, 3, ... and stops at the first empty page. Any
        failing page aborts the whole listing.

        Args:
            endpoint: API endpoint
            params: Extra query parameters

        Returns:
            List of all items from all pages, in server order
        """
        all_items: List[Any] = []
        page = 1

        while True:
            page_params = dict(params or {})
            page_params.update({'per_page': self.config.per_page, 'page': page})
            response = self.get(endpoint, params=page_params)

            items = response.data
            if not isinstance(items, list):
                raise GitLabDecodeError(
                    f'Expected a JSON array from {endpoint} page {page}, '
                    f'got {type(items).__name__}',
                    status_code=response.status_code,
                )
            if not items:
                break

            all_items.extend(items)
            page += 1

        logger.debug(f'Retrieved {len(all_items)} items from {endpoint}')
        return all_items

    @staticmethod
    def _parse(model: Type[ModelType], data: Any) -> ModelType:
        try:
            return model.model_validate(data)
        except ValidationError as e:
            raise GitLabDecodeError(f'Unexpected {model.__name__} payload: {e}')

    def fetch_group(self, full_path: str) -> Group:
        """Resolve a group by its full slash-separated path.

        Raises:
            GitLabNotFoundError: If no such group exists
        """
        response = self.get(f'/groups/{quote(full_path, safe="")}')
        return self._parse(Group, response.data)

    def fetch_project(self, full_path: str) -> Project:
        """Resolve a project by its full slash-separated path.

        Raises:
            GitLabNotFoundError: If no such project exists
        """
        response = self.get(f'/projects/{quote(full_path, safe="")}')
        return self._parse(Project, response.data)

    def list_subgroups(self, group_id: int) -> List[Group]:
        """List direct subgroups of a group."""
        items = self.get_paginated(f'/groups/{group_id}/subgroups')
        return [self._parse(Group, item) for item in items]

    def list_projects(self, group_id: int) -> List[Project]:
        """List projects owned directly by a group (not its subgroups)."""
        items = self.get_paginated(
            f'/groups/{group_id}/projects', params={'with_shared': 'false'}
        )
        return [self._parse(Project, item) for item in items]

    def create_subgroup(self, source_group: Group, parent_id: int) -> Group:
        """Create a copy of ``source_group`` under ``parent_id``.

        Args:
            source_group: Group whose name, path and visibility are copied
            parent_id: ID of the parent group on this instance

        Returns:
            The created group
        """
        payload = GroupCreate.from_source(source_group, parent_id)
        response = self.post('/groups', data=payload.model_dump())
        return self._parse(Group, response.data)

    def import_project(
        self,
        source_project: Project,
        source_url: str,
        source_token: str,
        namespace_id: int,
    ) -> None:
        """Ask this instance to import ``source_project`` from the source instance.

        The import itself runs asynchronously on the server; this only
        triggers it.

        Args:
            source_project: Project to import
            source_url: Source GitLab instance URL
            source_token: Token the server uses to clone from the source
            namespace_id: Target namespace ID

        Raises:
            GitLabConflictError: If the project already exists on this instance
        """
        payload = ProjectCreate(
            name=source_project.name,
            path=source_project.path,
            namespace_id=namespace_id,
            import_url=build_import_url(
                source_url, source_project.path_with_namespace, source_token
            ),
            description=source_project.description or '',
            visibility=source_project.visibility,
        )
        self.post('/projects', data=payload.model_dump())

    def close(self):
        """Close the client session."""
        self.session.close()
        logger.debug(f'GitLab client session for {self.config.url} closed')

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()


class GitLabClientFactory:
    """Factory for creating GitLab API clients."""

    @staticmethod
    def create_client(
        config: GitLabInstanceConfig, session: Optional[requests.Session] = None
    ) -> GitLabClient:
        """Create GitLab client from configuration.

        Args:
            config: GitLab instance configuration
            session: Optional pre-built HTTP session

        Returns:
            Configured GitLab client
        """
        return GitLabClient(config, session=session)
