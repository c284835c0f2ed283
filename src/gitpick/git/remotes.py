"""Remote hosting providers and the web URLs they expose."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
import re
from urllib.parse import quote

_SCP_LIKE = re.compile(r"^(?:[\w.-]+@)?(?P<domain>[\w.-]+):(?P<path>[^/].*)$")
_URL_LIKE = re.compile(r"^(?P<scheme>[\w+]+)://(?:[^@/]+@)?(?P<domain>[^/:]+)(?::\d+)?/(?P<path>.+)$")


class RemoteResourceType(str, Enum):
    BRANCH = "branch"
    BRANCHES = "branches"
    COMMIT = "commit"
    FILE = "file"
    REPO = "repo"
    REVISION = "revision"


@dataclass(frozen=True)
class RemoteResource:
    type: RemoteResourceType
    branch: str | None = None
    sha: str | None = None
    file_name: str | None = None


_PATHS: dict[str, dict[RemoteResourceType, str]] = {
    "github": {
        RemoteResourceType.REPO: "",
        RemoteResourceType.BRANCHES: "/branches",
        RemoteResourceType.BRANCH: "/commits/{branch}",
        RemoteResourceType.COMMIT: "/commit/{sha}",
        RemoteResourceType.FILE: "/blob/{branch}/{file}",
        RemoteResourceType.REVISION: "/blob/{sha}/{file}",
    },
    "gitlab": {
        RemoteResourceType.REPO: "",
        RemoteResourceType.BRANCHES: "/-/branches",
        RemoteResourceType.BRANCH: "/-/commits/{branch}",
        RemoteResourceType.COMMIT: "/-/commit/{sha}",
        RemoteResourceType.FILE: "/-/blob/{branch}/{file}",
        RemoteResourceType.REVISION: "/-/blob/{sha}/{file}",
    },
    "bitbucket": {
        RemoteResourceType.REPO: "",
        RemoteResourceType.BRANCHES: "/branches",
        RemoteResourceType.BRANCH: "/commits/branch/{branch}",
        RemoteResourceType.COMMIT: "/commits/{sha}",
        RemoteResourceType.FILE: "/src/{branch}/{file}",
        RemoteResourceType.REVISION: "/src/{sha}/{file}",
    },
    "gitea": {
        RemoteResourceType.REPO: "",
        RemoteResourceType.BRANCHES: "/branches",
        RemoteResourceType.BRANCH: "/commits/branch/{branch}",
        RemoteResourceType.COMMIT: "/commit/{sha}",
        RemoteResourceType.FILE: "/src/branch/{branch}/{file}",
        RemoteResourceType.REVISION: "/src/commit/{sha}/{file}",
    },
}

_NAMES = {
    "github": "GitHub",
    "gitlab": "GitLab",
    "bitbucket": "Bitbucket",
    "gitea": "Gitea",
}


@dataclass(frozen=True)
class RemoteProvider:
    id: str
    domain: str
    path: str
    protocol: str = "https"

    @property
    def name(self) -> str:
        return _NAMES.get(self.id, self.id)

    @property
    def base_url(self) -> str:
        return f"{self.protocol}://{self.domain}/{self.path}"

    def url(self, resource: RemoteResource) -> str:
        template = _PATHS[self.id][resource.type]
        branch = resource.branch or "HEAD"
        return self.base_url + template.format(
            branch=quote(branch, safe="/"),
            sha=resource.sha or "",
            file=quote(resource.file_name or "", safe="/"),
        )


def parse_remote_url(url: str) -> tuple[str, str, str] | None:
    """Split a remote url into ``(scheme, domain, owner/repo)``."""
    url = url.strip()
    match = _URL_LIKE.match(url)
    if match:
        scheme = match.group("scheme")
        domain = match.group("domain")
        path = match.group("path")
    else:
        match = _SCP_LIKE.match(url)
        if not match:
            return None
        scheme = "ssh"
        domain = match.group("domain")
        path = match.group("path")
    path = path.strip("/")
    if path.endswith(".git"):
        path = path[: -len(".git")]
    if not path:
        return None
    return scheme, domain.lower(), path


def _provider_id(domain: str) -> str | None:
    if "github" in domain:
        return "github"
    if "gitlab" in domain:
        return "gitlab"
    if "bitbucket" in domain:
        return "bitbucket"
    if "gitea" in domain or domain == "codeberg.org":
        return "gitea"
    return None


def get_remote_provider(url: str) -> RemoteProvider | None:
    parsed = parse_remote_url(url)
    if parsed is None:
        return None
    scheme, domain, path = parsed
    provider_id = _provider_id(domain)
    if provider_id is None:
        return None
    protocol = "http" if scheme == "http" else "https"
    return RemoteProvider(id=provider_id, domain=domain, path=path, protocol=protocol)


def resource_name(resource: RemoteResource) -> str:
    return {
        RemoteResourceType.BRANCH: "Branch",
        RemoteResourceType.BRANCHES: "Branches",
        RemoteResourceType.COMMIT: "Commit",
        RemoteResourceType.FILE: "File",
        RemoteResourceType.REPO: "Repository",
        RemoteResourceType.REVISION: "Revision",
    }[resource.type]
