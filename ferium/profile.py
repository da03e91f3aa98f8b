"""Managing the profiles in a config."""

from __future__ import annotations

import copy
import os
import shutil
import sys
from collections.abc import Iterable
from pathlib import Path
from typing import Any

import requests
from termcolor import colored

from ferium.config import Config, FeriumError, ModLoader, Profile
from ferium.prompts import (
    PromptCancelled,
    confirm,
    multi_select,
    pick_folder,
    select,
    text,
)

GAME_VERSIONS_URL = "https://api.modrinth.com/v2/tag/game_version"

_LOADER_CHOICES = (
    ModLoader.FABRIC,
    ModLoader.QUILT,
    ModLoader.NEOFORGE,
    ModLoader.FORGE,
)

# Releases first, then snapshots, betas and alphas
_VERSION_TYPE_RANK = {"release": 0, "snapshot": 1, "beta": 2, "alpha": 3}


def _minecraft_dir() -> Path:
    """The default directory of the Minecraft launcher on this system."""
    if sys.platform == "win32":
        appdata = os.environ.get("APPDATA")
        base = Path(appdata) if appdata else Path.home() / "AppData" / "Roaming"
        return base / ".minecraft"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "minecraft"
    return Path.home() / ".minecraft"


def pick_mod_loader(default: ModLoader | None = None) -> ModLoader:
    """Ask which mod loader is used, starting at `default`."""
    start = _LOADER_CHOICES.index(default) if default in _LOADER_CHOICES else 0
    index = select(
        "Which mod loader do you use?",
        [str(loader) for loader in _LOADER_CHOICES],
        start,
    )
    return _LOADER_CHOICES[index]


def fetch_game_versions() -> list[dict[str, Any]]:
    """Fetch Minecraft versions, releases first and newest first within each type."""
    try:
        response = requests.get(
            GAME_VERSIONS_URL, timeout=30, headers={"User-Agent": "ferium"}
        )
        response.raise_for_status()
        data = response.json()
    except (requests.RequestException, ValueError) as err:
        raise FeriumError(f"Could not fetch Minecraft versions: {err}") from err
    if not isinstance(data, list):
        raise FeriumError("Unexpected response when fetching Minecraft versions")
    newest_first = sorted(data, key=lambda v: str(v.get("date", "")), reverse=True)
    return sorted(
        newest_first,
        key=lambda v: _VERSION_TYPE_RANK.get(v.get("version_type"), len(_VERSION_TYPE_RANK)),
    )


def pick_minecraft_versions(default: Iterable[str] = ()) -> list[str]:
    """Ask which Minecraft versions are played, with `default` preselected."""
    versions = fetch_game_versions()
    wanted = set(default)
    defaults = [i for i, v in enumerate(versions) if v["version"] in wanted]
    labels = [
        colored(v["version"], attrs=["bold"]) if v.get("major") else v["version"]
        for v in versions
    ]
    chosen = multi_select("Which version of Minecraft do you play?", labels, defaults)
    return [versions[i]["version"] for i in chosen]


def _has_files(directory: Path) -> bool:
    return directory.exists() and any(
        entry.is_file() and entry.name != ".DS_Store" for entry in directory.iterdir()
    )


def check_output_directory(output_dir: str | Path) -> None:
    """Require an absolute directory and offer to back up files that an upgrade would delete."""
    output_dir = Path(output_dir)
    if not output_dir.is_absolute():
        raise FeriumError(
            "The provided output directory is not absolute, i.e. it is a relative path"
        )
    if output_dir.name != "mods":
        print(
            colored(
                "Warning! The output directory is not called `mods`. "
                "Most mod loaders will load from a directory called `mods`.",
                "light_yellow",
            )
        )
    if not _has_files(output_dir):
        return
    print("There are files in your output directory, these will be deleted when you upgrade.")
    try:
        wants_backup = confirm("Would like to create a backup?")
    except PromptCancelled:
        wants_backup = False
    if not wants_backup:
        return
    backup_dir = pick_folder(
        Path.home(), "Where should the backup be made?", "Output Directory"
    )
    if backup_dir is None:
        raise FeriumError("Please pick a backup directory")
    try:
        backup_dir.mkdir(parents=True, exist_ok=True)
        shutil.copytree(output_dir, backup_dir / output_dir.name)
    except OSError as err:
        raise FeriumError(f"Could not create the backup: {err}") from err


def _configure_interactively(profile: Profile) -> None:
    items = [
        "Mods output directory",
        "Minecraft version",
        "Mod loader",
        "Profile Name",
        "Quit",
    ]
    while True:
        try:
            selection = select("Which setting would you like to change", items)
        except PromptCancelled:
            return
        if selection == 0:
            chosen = pick_folder(
                profile.output_dir, "Pick an output directory", "Output Directory"
            )
            if chosen is not None:
                check_output_directory(chosen)
                profile.output_dir = chosen
        elif selection == 1:
            versions = profile.filters.game_versions
            if versions is None:
                print("Active profile does not filter by game version")
                continue
            try:
                profile.filters.game_versions = pick_minecraft_versions(versions)
            except (PromptCancelled, FeriumError):
                pass
        elif selection == 2:
            loaders = profile.filters.mod_loaders
            if loaders is None:
                print("Active profile does not filter mod loader")
                continue
            try:
                loader = pick_mod_loader(loaders[0] if loaders else None)
            except PromptCancelled:
                pass
            else:
                profile.filters.mod_loaders = (
                    [ModLoader.QUILT, ModLoader.FABRIC]
                    if loader is ModLoader.QUILT
                    else [loader]
                )
        elif selection == 3:
            try:
                profile.name = text("Change the profile's name", profile.name)
            except PromptCancelled:
                continue
        else:
            return
        print()


def configure(
    profile: Profile,
    game_versions: list[str] | None = None,
    mod_loaders: list[ModLoader] | None = None,
    name: str | None = None,
    output_dir: str | Path | None = None,
) -> None:
    """Change the given settings of `profile`, or ask for changes if none are given."""
    interactive = True
    if game_versions:
        if profile.filters.game_versions is None:
            raise FeriumError("Active profile does not filter by game version")
        profile.filters.game_versions = list(game_versions)
        interactive = False
    if mod_loaders:
        if profile.filters.mod_loaders is None:
            raise FeriumError("Active profile does not filter mod loader")
        profile.filters.mod_loaders = list(mod_loaders)
        interactive = False
    if name is not None:
        profile.name = name
        interactive = False
    if output_dir is not None:
        profile.output_dir = Path(output_dir)
        interactive = False
    if interactive:
        _configure_interactively(profile)


def _name_taken(config: Config, name: str) -> bool:
    lowered = name.lower()
    return any(p.name.lower() == lowered for p in config.profiles)


def _create_interactively(config: Config) -> Profile:
    mods_dir = _minecraft_dir() / "mods"
    print(f"The default mods directory is {mods_dir}")
    try:
        custom = confirm("Would you like to specify a custom mods directory?")
    except PromptCancelled:
        custom = False
    if custom:
        chosen = pick_folder(mods_dir, "Pick an output directory", "Output Directory")
        if chosen is not None:
            check_output_directory(chosen)
            mods_dir = chosen
    try:
        name = text(
            "What should this profile be called",
            validator=lambda s: (
                "A profile with that name already exists"
                if _name_taken(config, s)
                else None
            ),
        )
        versions = pick_minecraft_versions([])
        loader = pick_mod_loader(None)
    except PromptCancelled as err:
        raise FeriumError("Profile creation was cancelled") from err
    return Profile.new(name, mods_dir, versions, loader)


def create(
    config: Config,
    import_from: str | bool | None = None,
    game_versions: list[str] | None = None,
    mod_loader: ModLoader | None = None,
    name: str | None = None,
    output_dir: str | Path | None = None,
) -> Profile:
    """Create a profile, make it active and return it.

    `import_from` is None or False to start empty, True to pick a profile to
    copy mods from, or the name of that profile.
    """
    game_versions = game_versions or None
    if game_versions is not None and mod_loader is not None and name is not None:
        if _name_taken(config, name):
            raise FeriumError(f"A profile with name {name} already exists")
        directory = Path(output_dir) if output_dir is not None else _minecraft_dir() / "mods"
        if not directory.is_absolute():
            raise FeriumError(
                "The provided output directory is not absolute, i.e. it is a relative path"
            )
        profile = Profile.new(name, directory, game_versions, mod_loader)
    elif game_versions is None and mod_loader is None and name is None and output_dir is None:
        profile = _create_interactively(config)
    else:
        raise FeriumError(
            "Provide the name, game version, mod loader, and output directory "
            "options to create a profile"
        )

    if import_from is not None and import_from is not False:
        if not config.profiles:
            raise FeriumError("There are no profiles configured to import mods from")
        if isinstance(import_from, str):
            lowered = import_from.lower()
            source = next(
                (p for p in config.profiles if p.name.lower() == lowered), None
            )
            if source is None:
                raise FeriumError("The profile name provided does not exist")
            profile.mods = copy.deepcopy(source.mods)
        else:
            try:
                index = select(
                    "Select which profile to import mods from",
                    [p.name for p in config.profiles],
                    config.active_profile,
                )
            except PromptCancelled:
                pass
            else:
                profile.mods = copy.deepcopy(config.profiles[index].mods)

    print(
        colored(
            "After adding your mods, remember to run `ferium upgrade` to download them!",
            "yellow",
        )
    )
    config.profiles.append(profile)
    config.active_profile = len(config.profiles) - 1
    return profile


def _find(config: Config, name: str) -> int | None:
    lowered = name.lower()
    return next(
        (i for i, p in enumerate(config.profiles) if p.name.lower() == lowered), None
    )


def _profile_label(profile: Profile, all_versions: bool) -> str:
    loader = profile.filters.mod_loader()
    versions = profile.filters.game_versions or []
    if all_versions:
        shown_versions = ", ".join(versions)
        loader_width = 6
    else:
        shown_versions = versions[0] if versions else ""
        loader_width = 8
    return " ".join(
        [
            colored((str(loader) if loader else "").ljust(loader_width), "magenta"),
            colored(shown_versions.ljust(7), "green"),
            colored(profile.name, attrs=["bold"]),
            colored(f"({len(profile.mods)} mods)", "yellow"),
        ]
    )


def switch(config: Config, profile_name: str | None = None) -> None:
    """Make another profile active, by name or interactively."""
    if len(config.profiles) <= 1:
        raise FeriumError("There is only 1 profile in your config")
    if profile_name is not None:
        selection = _find(config, profile_name)
        if selection is None:
            raise FeriumError("The profile provided does not exist")
        config.active_profile = selection
        return
    default = config.active_profile if config.active_profile < len(config.profiles) else 0
    try:
        config.active_profile = select(
            "Select which profile to switch to",
            [_profile_label(p, all_versions=False) for p in config.profiles],
            default,
        )
    except PromptCancelled:
        pass


def delete(
    config: Config, profile_name: str | None = None, switch_to: str | None = None
) -> None:
    """Delete a profile, by name or interactively, and fix up the active profile."""
    if profile_name is not None:
        selection = _find(config, profile_name)
        if selection is None:
            raise FeriumError("The profile name provided does not exist")
    else:
        try:
            selection = select(
                "Select which profile to delete",
                [_profile_label(p, all_versions=True) for p in config.profiles],
                config.active_profile,
            )
        except PromptCancelled:
            return
    del config.profiles[selection]

    if config.active_profile == selection:
        if len(config.profiles) > 1:
            switch(config, switch_to)
        else:
            config.active_profile = 0
    elif config.active_profile > selection:
        config.active_profile -= 1


def format_info(profile: Profile, active: bool) -> str:
    """A short description of `profile`."""
    attrs = ["bold", "italic"] if active else ["bold"]
    lines = [
        f"{colored(profile.name, attrs=attrs)}{' *' if active else ''}",
        f"  Output directory:   {colored(str(profile.output_dir), 'blue', attrs=['underline'])}",
    ]
    if profile.filters.game_versions is not None:
        versions = ", ".join(colored(v, "green") for v in profile.filters.game_versions)
        lines.append(f"  Minecraft Version:  {versions}")
    loader = profile.filters.mod_loader()
    if loader is not None:
        lines.append(f"  Mod Loader:         {colored(str(loader), 'magenta')}")
    lines.append(f"  Mods:               {colored(str(len(profile.mods)), 'yellow')}")
    return "\n".join(lines) + "\n"


def info(profile: Profile, active: bool) -> None:
    """Print a short description of `profile`."""
    print(format_info(profile, active))