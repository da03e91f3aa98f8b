from pathlib import Path
from unittest import mock

import pytest
import requests

from ferium.config import FeriumError, Mod, ModIdentifier, Profile
from ferium.listing import (
    Metadata,
    fetch_metadata,
    render_curseforge,
    render_curseforge_md,
    render_github,
    render_github_md,
    render_modrinth,
    render_modrinth_md,
    verbose,
)


@pytest.fixture(autouse=True)
def _plain_output(monkeypatch):
    monkeypatch.setenv("NO_COLOR", "1")
    monkeypatch.delenv("FORCE_COLOR", raising=False)


CF_PROJECT = {
    "id": 591388,
    "name": "Incendium",
    "slug": "incendium",
    "summary": "  Nether overhaul  ",
    "links": {"websiteUrl": "https://cf.example.com/incendium", "sourceUrl": None},
    "downloadCount": 1000.0,
    "authors": [{"name": "Stardust", "url": "https://cf.example.com/u/stardust"}],
    "categories": [{"name": "World Gen"}, {"name": "Biomes"}],
}

MR_PROJECT = {
    "id": "H8CaAYZC",
    "slug": "starlight",
    "title": "Starlight (Fabric)",
    "description": "Rewrites the light engine",
    "source_url": "https://git.example.com/starlight",
    "downloads": 42,
    "categories": ["optimization"],
    "license": {"name": "", "url": None},
    "team": "team1",
}

MR_TEAM = [{"user": {"username": "Spottedleaf", "id": "u1"}}]

GH_REPO = {
    "name": "sodium",
    "full_name": "CaffeineMC/sodium",
    "description": "A rendering engine",
    "html_url": "https://gh.example.com/CaffeineMC/sodium",
    "owner": {"login": "CaffeineMC", "html_url": "https://gh.example.com/CaffeineMC"},
    "topics": ["minecraft", "fabric"],
    "license": {"name": "LGPL", "html_url": None},
}


def test_metadata_identifiers_and_names():
    cf = Metadata(Metadata.CURSEFORGE, CF_PROJECT)
    mr = Metadata(Metadata.MODRINTH, MR_PROJECT, MR_TEAM)
    gh = Metadata(Metadata.GITHUB, GH_REPO, [])
    assert cf.identifier() == ModIdentifier.curseforge(591388)
    assert mr.identifier() == ModIdentifier.modrinth("H8CaAYZC")
    assert gh.identifier() == ModIdentifier.github("CaffeineMC", "sodium")
    assert (cf.name, cf.slug) == ("Incendium", "incendium")
    assert (mr.name, mr.slug) == ("Starlight (Fabric)", "starlight")
    assert (gh.name, gh.slug) == ("sodium", "sodium")


def test_metadata_rejects_unknown_source():
    with pytest.raises(FeriumError):
        Metadata("XX", {})


def test_render_curseforge_without_source():
    out = render_curseforge(CF_PROJECT)
    assert out.startswith("\nIncendium\n  Nether overhaul\n\n")
    assert "  Open Source:  No" in out
    assert "  Downloads:    1000\n" in out
    assert "  Categories:   World Gen, Biomes" in out
    assert "CurseForge Mod" in out


def test_render_modrinth_custom_license():
    out = render_modrinth(MR_PROJECT, MR_TEAM)
    assert "https://modrinth.com/mod/starlight" in out
    assert out.endswith("  License:      Custom")
    assert "  Authors:      Spottedleaf" in out
    assert "Yes (https://git.example.com/starlight)" in out


def test_render_github_sums_downloads():
    releases = [
        {"assets": [{"download_count": 3}]},
        {"assets": [{"download_count": 4}]},
    ]
    out = render_github(GH_REPO, releases)
    assert "  Downloads:    7\n" in out
    assert "  Topics:       minecraft, fabric" in out
    assert out.endswith("  License:      LGPL")
    assert out.startswith("\nsodium\n  A rendering engine\n\n")


def test_render_github_without_license():
    repo = {**GH_REPO, "license": None, "description": None, "topics": None}
    out = render_github(repo, [])
    assert out.endswith("  License:      None")
    assert out.startswith("\nsodium\n\n")


def test_render_curseforge_md():
    out = render_curseforge_md(CF_PROJECT)
    lines = out.split("\n")
    assert lines[1] == "**[Incendium](https://cf.example.com/incendium)**  "
    assert lines[2] == "_Nether overhaul_"
    assert "|-------------|-----------------|" in lines
    assert "| Source      | CurseForge `591388` |" in lines
    assert "| Authors     | [Stardust](https://cf.example.com/u/stardust)              |" in lines


def test_render_modrinth_md():
    out = render_modrinth_md(MR_PROJECT, MR_TEAM)
    lines = out.split("\n")
    assert lines[1] == "**[Starlight (Fabric)](https://modrinth.com/mod/H8CaAYZC)**  "
    assert "| Source      | Modrinth `H8CaAYZC` |" in lines
    assert "| Author      | [Spottedleaf](https://modrinth.com/user/u1)            |" in lines
    assert "| Open Source | [Yes](https://git.example.com/starlight)            |" in lines


def test_render_github_md_with_and_without_topics():
    out = render_github_md(GH_REPO)
    assert out.endswith("\n| Topics | minecraft, fabric |")
    assert "  \n_A rendering engine_" in out
    assert "| Source      | GitHub `CaffeineMC/sodium` |" in out
    bare = render_github_md({**GH_REPO, "topics": None, "description": None})
    assert "Topics" not in bare
    assert bare.endswith("| Owner       | [CaffeineMC](https://gh.example.com/CaffeineMC)    |")


def _profile():
    return Profile(
        "Test",
        Path("/tmp/mods"),
        mods=[
            Mod("old mr", ModIdentifier.modrinth("H8CaAYZC")),
            Mod("old cf", ModIdentifier.curseforge(591388)),
            Mod("old gh", ModIdentifier.github("CaffeineMC", "sodium")),
        ],
    )


def test_verbose_updates_names_and_slugs(capsys):
    profile = _profile()
    metadata = [
        Metadata(Metadata.CURSEFORGE, CF_PROJECT),
        Metadata(Metadata.MODRINTH, MR_PROJECT, MR_TEAM),
        Metadata(Metadata.GITHUB, GH_REPO, []),
    ]
    result = verbose(profile, True, lambda p: metadata)
    assert result == metadata
    names = {m.identifier: (m.name, m.slug) for m in profile.mods}
    assert names[ModIdentifier.modrinth("H8CaAYZC")] == ("Starlight (Fabric)", "starlight")
    assert names[ModIdentifier.curseforge(591388)] == ("Incendium", "incendium")
    assert names[ModIdentifier.github("CaffeineMC", "sodium")] == ("sodium", "sodium")
    out = capsys.readouterr().out
    assert render_curseforge_md(CF_PROJECT) in out
    assert render_github_md(GH_REPO) in out


def test_verbose_missing_mod_raises():
    profile = Profile("Test", Path("/tmp/mods"))
    metadata = [Metadata(Metadata.CURSEFORGE, CF_PROJECT)]
    with pytest.raises(FeriumError, match="Could not find expected mod"):
        verbose(profile, False, lambda p: metadata)


class _Response:
    def __init__(self, data):
        self._data = data

    def raise_for_status(self):
        return None

    def json(self):
        return self._data


def _fake_request(method, url, **kwargs):
    if url.endswith("/v2/projects"):
        return _Response([MR_PROJECT])
    if url.endswith("/v2/teams"):
        return _Response([MR_TEAM])
    if url.endswith("/v1/mods"):
        assert kwargs["json"] == {"modIds": [591388]}
        return _Response({"data": [CF_PROJECT]})
    if url.endswith("/repos/CaffeineMC/sodium"):
        return _Response(GH_REPO)
    if url.endswith("/repos/CaffeineMC/sodium/releases"):
        return _Response([{"assets": [{"download_count": 5}]}])
    raise AssertionError(url)


def test_fetch_metadata_sorted_by_name(monkeypatch):
    monkeypatch.setenv("CURSEFORGE_API_KEY", "placeholder")
    with mock.patch("requests.request", side_effect=_fake_request):
        metadata = fetch_metadata(_profile())
    assert [m.name for m in metadata] == ["Incendium", "sodium", "Starlight (Fabric)"]
    assert [m.source for m in metadata] == [Metadata.CURSEFORGE, Metadata.GITHUB, Metadata.MODRINTH]
    assert metadata[2].extra == MR_TEAM


def test_fetch_metadata_empty_profile_makes_no_requests():
    with mock.patch("requests.request") as request:
        assert fetch_metadata(Profile("Empty", Path("/tmp/mods"))) == []
    assert request.call_count == 0


def test_fetch_metadata_rejects_pinned():
    profile = Profile(
        "Pinned", Path("/tmp/mods"), mods=[Mod("x", ModIdentifier.curseforge(1, 2))]
    )
    with pytest.raises(FeriumError):
        fetch_metadata(profile)


def test_fetch_metadata_connection_error():
    profile = Profile("One", Path("/tmp/mods"), mods=[Mod("x", ModIdentifier.modrinth("abc"))])
    with mock.patch("requests.request", side_effect=requests.ConnectionError("down")):
        with pytest.raises(FeriumError, match="error sending request"):
            fetch_metadata(profile)