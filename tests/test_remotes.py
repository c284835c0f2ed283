from __future__ import annotations

from gitpick.git.remotes import (
    RemoteResource,
    RemoteResourceType,
    get_remote_provider,
    parse_remote_url,
    resource_name,
)


def test_parse_remote_url_forms() -> None:
    assert parse_remote_url("git@github.com:acme/app.git") == ("ssh", "github.com", "acme/app")
    assert parse_remote_url("https://GitHub.com/acme/app") == ("https", "github.com", "acme/app")
    assert parse_remote_url("ssh://git@gitlab.com:2222/group/sub/app.git") == ("ssh", "gitlab.com", "group/sub/app")
    assert parse_remote_url("not a url") is None


def test_provider_detection() -> None:
    github = get_remote_provider("git@github.com:acme/app.git")
    assert github is not None
    assert (github.id, github.name) == ("github", "GitHub")
    assert github.base_url == "https://github.com/acme/app"

    assert get_remote_provider("https://gitlab.example.com/acme/app.git").id == "gitlab"
    assert get_remote_provider("git@bitbucket.org:acme/app.git").name == "Bitbucket"
    assert get_remote_provider("https://codeberg.org/acme/app").name == "Gitea"
    assert get_remote_provider("https://git.example.com/acme/app") is None


def test_resource_urls() -> None:
    github = get_remote_provider("git@github.com:acme/app.git")
    gitlab = get_remote_provider("https://gitlab.com/acme/app.git")

    commit = RemoteResource(RemoteResourceType.COMMIT, sha="abc123")
    assert github.url(commit) == "https://github.com/acme/app/commit/abc123"
    assert gitlab.url(commit) == "https://gitlab.com/acme/app/-/commit/abc123"

    branch = RemoteResource(RemoteResourceType.BRANCH, branch="feature/one")
    assert github.url(branch) == "https://github.com/acme/app/commits/feature/one"

    revision = RemoteResource(RemoteResourceType.REVISION, sha="abc123", file_name="docs/read me.md")
    assert github.url(revision) == "https://github.com/acme/app/blob/abc123/docs/read%20me.md"
    assert resource_name(revision) == "Revision"


def test_plain_http_is_kept() -> None:
    provider = get_remote_provider("http://gitea.local/acme/app")
    assert provider is not None
    assert provider.url(RemoteResource(RemoteResourceType.REPO)) == "http://gitea.local/acme/app"
