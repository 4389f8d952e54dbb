"""GitHub client for listing repositories and downloading web files."""

import logging
import random
import time
from datetime import datetime, timezone
from pathlib import PurePosixPath
from typing import Any, Optional

import requests

from devdash.config import settings
from devdash.constants import (
    DEFAULT_MAX_FILES_PER_REPO,
    DEFAULT_MAX_RETRIES,
    DEFAULT_REQUEST_TIMEOUT_SECONDS,
    DOWNLOAD_DELAY_SECONDS,
    EXPONENTIAL_BACKOFF_BASE,
    REPOS_PER_PAGE,
    SKIPPED_DIRECTORIES,
    STATIC_SITE_LANGUAGES,
    STATIC_SITE_NAME_HINTS,
    WEB_FILE_EXTENSIONS,
)
from devdash.models import FileType, RepoFile, RepoInfo

logger = logging.getLogger(__name__)


class GitHubError(Exception):
    """Raised when the GitHub API cannot be reached or returns an error."""


def get_file_type(file_name: str) -> FileType:
    """Classify a file by its extension."""
    extension = PurePosixPath(file_name).suffix.lower()
    if extension in (".html", ".htm"):
        return FileType.HTML
    if extension == ".css":
        return FileType.CSS
    if extension in (".js", ".jsx", ".ts", ".tsx"):
        return FileType.JAVASCRIPT
    return FileType.OTHER


def is_web_file(file_name: str) -> bool:
    return PurePosixPath(file_name).suffix.lower() in WEB_FILE_EXTENSIONS


def is_static_website(repo: dict[str, Any]) -> bool:
    """Heuristic: web language, a site-like name, or GitHub Pages enabled."""
    language = (repo.get("language") or "").lower()
    name = repo.get("name", "")
    return (
        language in STATIC_SITE_LANGUAGES
        or any(hint in name for hint in STATIC_SITE_NAME_HINTS)
        or bool(repo.get("has_pages"))
    )


def _parse_github_timestamp(value: Optional[str]) -> datetime:
    if not value:
        return datetime.min.replace(tzinfo=timezone.utc)
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


class GitHubClient:
    """Fetches a user's public repositories and their web files."""

    def __init__(
        self,
        token: Optional[str] = None,
        username: Optional[str] = None,
        api_url: Optional[str] = None,
        timeout: int = DEFAULT_REQUEST_TIMEOUT_SECONDS,
        max_retries: int = DEFAULT_MAX_RETRIES,
        max_files_per_repo: int = DEFAULT_MAX_FILES_PER_REPO,
        download_delay: float = DOWNLOAD_DELAY_SECONDS,
    ):
        """Initialize the client.

        Args:
            token: Personal access token (defaults to settings.GITHUB_TOKEN)
            username: Account to analyze (defaults to settings.GITHUB_USERNAME)
            api_url: API base URL
            timeout: Request timeout in seconds
            max_retries: Attempts per request for transient failures
            max_files_per_repo: Files downloaded per repository
            download_delay: Pause between file downloads in seconds
        """
        self.token = token or settings.GITHUB_TOKEN
        self.username = username or settings.GITHUB_USERNAME
        self.api_url = (api_url or settings.GITHUB_API_URL).rstrip("/")
        self.timeout = timeout
        self.max_retries = max_retries
        self.max_files_per_repo = max_files_per_repo
        self.download_delay = download_delay

        self.session = requests.Session()
        self.session.headers.update({
            "Accept": "application/vnd.github+json",
            "User-Agent": settings.USER_AGENT,
        })
        if self.token:
            self.session.headers["Authorization"] = f"Bearer {self.token}"

    def get_public_repositories(self, username: Optional[str] = None) -> list[RepoInfo]:
        """List a user's public repositories, most recently updated first.

        Returns:
            RepoInfo list; empty if the API cannot be reached
        """
        username = username or self.username
        repositories = []
        page = 1

        try:
            while True:
                batch = self._get_json(
                    f"/users/{username}/repos",
                    params={"per_page": REPOS_PER_PAGE, "page": page, "type": "owner"},
                )
                if not batch:
                    break

                for repo in batch:
                    if repo.get("private"):
                        continue
                    repositories.append(RepoInfo(
                        name=repo["name"],
                        full_name=repo.get("full_name", ""),
                        language=repo.get("language"),
                        description=repo.get("description"),
                        updated_at=_parse_github_timestamp(repo.get("updated_at")),
                        size=repo.get("size", 0),
                        is_static=is_static_website(repo),
                        html_url=repo.get("html_url", ""),
                    ))

                if len(batch) < REPOS_PER_PAGE:
                    break
                page += 1
        except GitHubError as e:
            logger.error(f"Error fetching repositories for {username}: {e}")
            return []

        repositories.sort(key=lambda r: r.updated_at, reverse=True)
        logger.info(f"Found {len(repositories)} public repositories for {username}")
        return repositories

    def get_web_files(self, owner: str, repo_name: str) -> list[RepoFile]:
        """Download up to max_files_per_repo web files from a repository.

        Listing or download failures are logged and skipped.

        Args:
            owner: Repository owner
            repo_name: Repository name

        Returns:
            Downloaded files with their type classified by extension
        """
        entries = [
            entry for entry in self._list_files_recursively(owner, repo_name, "")
            if is_web_file(entry["name"])
        ]
        logger.info(f"Found {len(entries)} web files in {repo_name}")

        files = []
        for entry in entries[:self.max_files_per_repo]:
            try:
                content = self._download(entry["download_url"])
            except GitHubError as e:
                logger.warning(f"Error downloading {entry['path']}: {e}")
                continue

            files.append(RepoFile(
                name=entry["name"],
                path=entry["path"],
                content=content,
                repository=repo_name,
                type=get_file_type(entry["name"]),
                size=entry.get("size", 0),
            ))

            if self.download_delay:
                time.sleep(self.download_delay)

        return files

    def _list_files_recursively(self, owner: str, repo_name: str, path: str) -> list[dict]:
        try:
            contents = self._get_json(f"/repos/{owner}/{repo_name}/contents/{path}".rstrip("/"))
        except GitHubError as e:
            logger.warning(f"Error getting contents from '{path or '/'}' in {repo_name}: {e}")
            return []

        # A file path returns a single object instead of a listing
        if isinstance(contents, dict):
            contents = [contents]

        files = []
        for item in contents:
            if item.get("type") == "file":
                files.append(item)
            elif item.get("type") == "dir" and item["name"].lower() not in SKIPPED_DIRECTORIES:
                files.extend(self._list_files_recursively(owner, repo_name, item["path"]))
        return files

    def _download(self, url: Optional[str]) -> str:
        if not url:
            raise GitHubError("file has no download URL")
        response = self._request(url)
        return response.content.decode("utf-8", errors="replace")

    def _get_json(self, path: str, params: Optional[dict] = None) -> Any:
        return self._request(f"{self.api_url}{path}", params=params).json()

    def _request(self, url: str, params: Optional[dict] = None) -> requests.Response:
        """GET with retries on timeouts, connection errors and 5xx responses.

        Raises:
            GitHubError: When the request fails for good
        """
        last_error = None

        # At least one attempt, whatever max_retries says
        for attempt in range(max(1, self.max_retries)):
            if attempt > 0:
                delay = (EXPONENTIAL_BACKOFF_BASE ** attempt) + random.uniform(0, 1)
                time.sleep(delay)

            try:
                response = self.session.get(url, params=params, timeout=self.timeout)
                response.raise_for_status()
                return response

            except requests.exceptions.HTTPError as e:
                last_error = str(e)
                if e.response is None or e.response.status_code < 500:
                    break

            except requests.exceptions.Timeout:
                last_error = f"Request timeout after {self.timeout}s"

            except requests.exceptions.ConnectionError as e:
                last_error = f"Connection error: {e}"

        raise GitHubError(last_error)
