"""Detailed listings of the mods in a profile, fetched from each platform."""

from __future__ import annotations

import json
import os
import sys
from collections.abc import Callable, Iterable
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any, ClassVar

import requests
from termcolor import colored

from ferium.config import FeriumError, ModIdentifier, Profile

MODRINTH_API = "https://api.modrinth.com/v2"
CURSEFORGE_API = "https://api.curseforge.com/v1"
GITHUB_API = "https://api.github.com"

_TIMEOUT = 30
_USER_AGENT = "ferium"


@dataclass
class Metadata:
    """A project's details as returned by its platform."""

    CURSEFORGE: ClassVar[str] = "CF"
    MODRINTH: ClassVar[str] = "MR"
    GITHUB: ClassVar[str] = "GH"

    source: str
    project: dict[str, Any]
    extra: list[Any] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.source not in (self.CURSEFORGE, self.MODRINTH, self.GITHUB):
            raise FeriumError(f"Unknown metadata source {self.source!r}")

    @property
    def name(self) -> str:
        key = "title" if self.source == self.MODRINTH else "name"
        return str(self.project.get(key, ""))

    @property
    def slug(self) -> str:
        key = "name" if self.source == self.GITHUB else "slug"
        return str(self.project.get(key, ""))

    def identifier(self) -> ModIdentifier:
        """The identifier of the mod this metadata describes."""
        if self.source == self.CURSEFORGE:
            return ModIdentifier.curseforge(int(self.project["id"]))
        if self.source == self.MODRINTH:
            return ModIdentifier.modrinth(str(self.project["id"]))
        owner = self.project.get("owner") or {}
        return ModIdentifier.github(str(owner.get("login", "")), str(self.project["name"]))

    def render(self, markdown: bool) -> str:
        if self.source == self.CURSEFORGE:
            return render_curseforge_md(self.project) if markdown else render_curseforge(self.project)
        if self.source == self.MODRINTH:
            if markdown:
                return render_modrinth_md(self.project, self.extra)
            return render_modrinth(self.project, self.extra)
        return render_github_md(self.project) if markdown else render_github(self.project, self.extra)


def _request(method: str, url: str, **kwargs: Any) -> Any:
    headers = {"User-Agent": _USER_AGENT, **kwargs.pop("headers", {})}
    try:
        response = requests.request(method, url, headers=headers, timeout=_TIMEOUT, **kwargs)
        response.raise_for_status()
        return response.json()
    except requests.ConnectionError as err:
        raise FeriumError(f"error sending request for url ({url}): {err}") from err
    except (requests.RequestException, ValueError) as err:
        raise FeriumError(f"Request to {url} failed: {err}") from err


def _modrinth_projects(ids: list[str]) -> list[Metadata]:
    if not ids:
        return []
    projects = _request("GET", f"{MODRINTH_API}/projects", params={"ids": json.dumps(ids)})
    if not projects:
        return []
    teams = _request(
        "GET",
        f"{MODRINTH_API}/teams",
        params={"ids": json.dumps([p["team"] for p in projects])},
    )
    return [
        Metadata(Metadata.MODRINTH, project, list(members))
        for project, members in zip(projects, teams)
    ]


def _curseforge_projects(ids: list[int]) -> list[Metadata]:
    if not ids:
        return []
    headers = {"Accept": "application/json"}
    key = os.environ.get("CURSEFORGE_API_KEY")
    if key:
        headers["x-api-key"] = key
    data = _request("POST", f"{CURSEFORGE_API}/mods", json={"modIds": ids}, headers=headers)
    return [Metadata(Metadata.CURSEFORGE, project) for project in data.get("data", [])]


def _github_repository(owner: str, repo: str) -> Metadata:
    headers = {"Accept": "application/vnd.github+json"}
    token = os.environ.get("GITHUB_TOKEN")
    if token:
        headers["Authorization"] = f"Bearer {token}"
    base = f"{GITHUB_API}/repos/{owner}/{repo}"
    repository = _request("GET", base, headers=headers)
    releases = _request("GET", f"{base}/releases", headers=headers)
    return Metadata(Metadata.GITHUB, repository, list(releases))


def fetch_metadata(profile: Profile) -> list[Metadata]:
    """Fetch the details of every mod in `profile`, sorted by name."""
    mr_ids: list[str] = []
    cf_ids: list[int] = []
    repos: list[tuple[str, str]] = []
    for mod in profile.mods:
        ident = mod.identifier
        if ident.pinned:
            raise FeriumError(f"Cannot list details of the pinned mod {mod.name}")
        if ident.kind == ModIdentifier.CURSEFORGE:
            cf_ids.append(ident.project)
        elif ident.kind == ModIdentifier.MODRINTH:
            mr_ids.append(ident.project)
        else:
            repos.append(ident.project)

    with ThreadPoolExecutor(max_workers=8) as pool:
        github_jobs = [pool.submit(_github_repository, owner, repo) for owner, repo in repos]
        metadata = _modrinth_projects(mr_ids) + _curseforge_projects(cf_ids)
        metadata.extend(job.result() for job in github_jobs)

    metadata.sort(key=lambda m: m.name.lower())
    return metadata


def _link(url: Any) -> str:
    return colored(str(url), "blue", attrs=["underline"])


def _count(value: Any) -> str:
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value)


def _join(items: Iterable[Any]) -> str:
    return ", ".join(str(item) for item in items)


def render_curseforge(project: dict[str, Any]) -> str:
    """Describe a CurseForge mod for the terminal."""
    links = project.get("links") or {}
    source_url = links.get("sourceUrl")
    open_source = (
        colored(f"Yes ({_link(source_url)})", "green") if source_url else colored("No", "red")
    )
    authors = _join(a["name"] for a in project.get("authors", []))
    categories = _join(c["name"] for c in project.get("categories", []))
    return (
        f"\n{colored(project['name'], attrs=['bold'])}\n"
        f"  {colored(str(project.get('summary', '')).strip(), attrs=['italic'])}\n\n"
        f"  Link:         {_link(links.get('websiteUrl', ''))}\n"
        f"  Source:       {colored('CurseForge Mod', attrs=['dark'])}\n"
        f"  Project ID:   {colored(str(project['id']), attrs=['dark'])}\n"
        f"  Open Source:  {open_source}\n"
        f"  Downloads:    {colored(_count(project.get('downloadCount', 0)), 'yellow')}\n"
        f"  Authors:      {colored(authors, 'cyan')}\n"
        f"  Categories:   {colored(categories, 'magenta')}"
    )


def render_modrinth(project: dict[str, Any], team_members: list[dict[str, Any]]) -> str:
    """Describe a Modrinth mod for the terminal."""
    source_url = project.get("source_url")
    open_source = (
        colored(f"Yes ({_link(source_url)})", "green") if source_url else colored("No", "red")
    )
    authors = _join(m["user"]["username"] for m in team_members)
    categories = _join(project.get("categories", []))
    license_ = project.get("license") or {}
    license_name = license_.get("name") or "Custom"
    license_url = f" ({_link(license_['url'])})" if license_.get("url") else ""
    return (
        f"\n{colored(project['title'], attrs=['bold'])}\n"
        f"  {colored(str(project.get('description', '')), attrs=['italic'])}\n\n"
        f"  Link:         {_link('https://modrinth.com/mod/' + str(project.get('slug', '')))}\n"
        f"  Source:       {colored('Modrinth Mod', attrs=['dark'])}\n"
        f"  Project ID:   {colored(str(project['id']), attrs=['dark'])}\n"
        f"  Open Source:  {open_source}\n"
        f"  Downloads:    {colored(_count(project.get('downloads', 0)), 'yellow')}\n"
        f"  Authors:      {colored(authors, 'cyan')}\n"
        f"  Categories:   {colored(categories, 'magenta')}\n"
        f"  License:      {license_name}{license_url}"
    )


def render_github(repo: dict[str, Any], releases: list[dict[str, Any]]) -> str:
    """Describe a GitHub repository for the terminal, counting downloads over all releases."""
    downloads = sum(
        asset.get("download_count", 0)
        for release in releases
        for asset in release.get("assets", [])
    )
    description = repo.get("description")
    shown_description = colored(f"\n  {description}", attrs=["italic"]) if description else ""
    topics = repo.get("topics")
    shown_topics = colored(_join(topics), "magenta") if topics is not None else ""
    license_ = repo.get("license")
    if license_:
        url = license_.get("html_url")
        shown_license = license_["name"] + (f" ({_link(url)})" if url else "")
    else:
        shown_license = "None"
    owner = repo.get("owner") or {}
    return (
        f"\n{colored(repo['name'], attrs=['bold'])}{shown_description}\n\n"
        f"  Link:         {_link(repo.get('html_url', ''))}\n"
        f"  Source:       {colored('GitHub Repository', attrs=['dark'])}\n"
        f"  Identifier:   {colored(str(repo.get('full_name', '')), attrs=['dark'])}\n"
        f"  Open Source:  {colored('Yes', 'green')}\n"
        f"  Downloads:    {colored(str(downloads), 'yellow')}\n"
        f"  Authors:      {colored(str(owner.get('login', '')), 'cyan')}\n"
        f"  Topics:       {shown_topics}\n"
        f"  License:      {shown_license}"
    )


def render_curseforge_md(project: dict[str, Any]) -> str:
    """Describe a CurseForge mod in Markdown."""
    links = project.get("links") or {}
    source_url = links.get("sourceUrl")
    open_source = f"[Yes]({source_url})" if source_url else "No"
    authors = _join(f"[{a['name']}]({a['url']})" for a in project.get("authors", []))
    categories = _join(c["name"] for c in project.get("categories", []))
    return (
        f"\n**[{str(project['name']).strip()}]({links.get('websiteUrl', '')})**  \n"
        f"_{str(project.get('summary', '')).strip()}_\n"
        "\n"
        "|             |                 |\n"
        "|-------------|-----------------|\n"
        f"| Source      | CurseForge `{project['id']}` |\n"
        f"| Open Source | {open_source}              |\n"
        f"| Authors     | {authors}              |\n"
        f"| Categories  | {categories}              |"
    )


def render_modrinth_md(project: dict[str, Any], team_members: list[dict[str, Any]]) -> str:
    """Describe a Modrinth mod in Markdown."""
    source_url = project.get("source_url")
    open_source = f"[Yes]({source_url})" if source_url else "No"
    authors = _join(
        f"[{m['user']['username']}](https://modrinth.com/user/{m['user']['id']})"
        for m in team_members
    )
    return (
        f"\n**[{str(project['title']).strip()}](https://modrinth.com/mod/{project['id']})**  \n"
        f"_{str(project.get('description', '')).strip()}_\n"
        "\n"
        "|             |               |\n"
        "|-------------|---------------|\n"
        f"| Source      | Modrinth `{project['id']}` |\n"
        f"| Open Source | {open_source}            |\n"
        f"| Author      | {authors}            |\n"
        f"| Categories  | {_join(project.get('categories', []))}            |"
    )


def render_github_md(repo: dict[str, Any]) -> str:
    """Describe a GitHub repository in Markdown."""
    description = repo.get("description")
    shown_description = f"  \n_{description.strip()}_" if description else ""
    topics = repo.get("topics")
    shown_topics = f"\n| Topics | {_join(topics)} |" if topics is not None else ""
    owner = repo.get("owner") or {}
    return (
        f"\n**[{repo['name']}]({repo.get('html_url', '')})**{shown_description}\n"
        "\n"
        "|             |             |\n"
        "|-------------|-------------|\n"
        f"| Source      | GitHub `{repo.get('full_name', '')}` |\n"
        "| Open Source | Yes         |\n"
        f"| Owner       | [{owner.get('login', '')}]({owner.get('html_url', '')})    |{shown_topics}"
    )


def verbose(
    profile: Profile,
    markdown: bool = False,
    fetch: Callable[[Profile], list[Metadata]] = fetch_metadata,
) -> list[Metadata]:
    """Print details of every mod in `profile`, refreshing their names and slugs."""
    if not markdown:
        print("Querying metadata... ", end="", file=sys.stderr, flush=True)
    metadata = fetch(profile)
    if not markdown:
        print(colored("✓", "green"))

    for project in metadata:
        identifier = project.identifier()
        mod = next((m for m in profile.mods if m.identifier == identifier), None)
        if mod is None:
            raise FeriumError("Could not find expected mod")
        mod.name = project.name
        mod.slug = project.slug
        print(project.render(markdown))
    return metadata