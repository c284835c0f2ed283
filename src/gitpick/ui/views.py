"""Console stand-ins for the side bar and search views."""

from __future__ import annotations

from gitpick.git.models import GitBranch, GitCommit, GitStashCommit, GitTag
from gitpick.ui.render import render_info, render_summary_table


class ConsoleViews:
    async def reveal_repository(self, repo_path: str) -> None:
        render_summary_table({"Path": repo_path}, title="Repository")

    async def reveal_branch(self, branch: GitBranch) -> None:
        rows = {"Branch": branch.name, "Commit": branch.sha[:7]}
        if branch.upstream:
            rows["Upstream"] = branch.upstream
        render_summary_table(rows, title="Branch")

    async def reveal_tag(self, tag: GitTag) -> None:
        render_summary_table({"Tag": tag.name, "Commit": tag.sha[:7], "Message": tag.message}, title="Tag")

    async def reveal_commit(self, commit: GitCommit) -> None:
        render_summary_table(
            {
                "Commit": commit.sha,
                "Author": f"{commit.author} <{commit.email}>",
                "Date": commit.date.isoformat() if commit.date else "",
                "Message": commit.message,
                "Files": str(len(commit.files)),
            },
            title="Commit",
        )

    async def reveal_stash(self, stash: GitStashCommit) -> None:
        render_summary_table(
            {"Stash": stash.stash_name, "Commit": stash.sha, "Message": stash.message},
            title="Stash",
        )

    async def search_commits(self, repo_path: str, pattern: str, label: str) -> None:
        render_info(f"Search commits in {repo_path} for {label or pattern}")

    async def show_message(self, message: str) -> None:
        render_info(message)
