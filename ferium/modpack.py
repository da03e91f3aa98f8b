"""Managing the modpacks in a config."""

from __future__ import annotations

import shutil
from pathlib import Path

from termcolor import colored

from ferium.config import Config, FeriumError, Modpack, ModpackIdentifier
from ferium.prompts import PromptCancelled, confirm, pick_folder, select


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
    for check_dir in (output_dir / "mods", output_dir / "resourcepacks"):
        if not _has_files(check_dir):
            continue
        print(
            f"There are files in the {check_dir.name} folder in your output directory, "
            "these will be deleted when you upgrade."
        )
        try:
            wants_backup = confirm("Would like to create a backup?")
        except PromptCancelled:
            wants_backup = False
        if not wants_backup:
            continue
        backup_dir = pick_folder(
            Path.home(), "Where should the backup be made?", "Output Directory"
        )
        if backup_dir is None:
            raise FeriumError("Please pick an output directory")
        try:
            shutil.copytree(check_dir, backup_dir / check_dir.name)
        except OSError as err:
            raise FeriumError(f"Could not create the backup: {err}") from err


def _warn_overrides() -> None:
    print(
        colored(
            "WARNING: Configs in your output directory may be overwritten by modpack overrides",
            "yellow",
            attrs=["bold"],
        )
    )


def configure(
    modpack: Modpack,
    output_dir: str | Path | None = None,
    install_overrides: bool | None = None,
) -> None:
    """Change the output directory and overrides setting, asking for what is not given."""
    if output_dir is not None:
        output_dir = Path(output_dir)
        check_output_directory(output_dir)
        modpack.output_dir = output_dir
    else:
        chosen = pick_folder(
            modpack.output_dir, "Pick an output directory", "Output Directory"
        )
        if chosen is not None:
            check_output_directory(chosen)
            modpack.output_dir = chosen

    if install_overrides is None:
        try:
            install_overrides = confirm(
                "Should overrides be installed?", modpack.install_overrides
            )
        except PromptCancelled:
            install_overrides = modpack.install_overrides
        if install_overrides:
            _warn_overrides()
    modpack.install_overrides = install_overrides


def _modpack_label(modpack: Modpack) -> str:
    ident = modpack.identifier
    if ident.kind == ModpackIdentifier.CURSEFORGE:
        platform = colored("CF", "red")
    else:
        platform = colored("MR", "green")
    project = colored(f"{str(ident.project):<8}", attrs=["dark"])
    return f"{platform} {project} {colored(modpack.name, attrs=['bold'])}"


def _find(config: Config, name: str) -> int | None:
    lowered = name.lower()
    return next(
        (i for i, m in enumerate(config.modpacks) if m.name.lower() == lowered), None
    )


def switch(config: Config, modpack_name: str | None = None) -> None:
    """Make another modpack active, by name or interactively."""
    if len(config.modpacks) <= 1:
        config.active_modpack = 0
        raise FeriumError("There is only 1 modpack in your config")
    if modpack_name is not None:
        selection = _find(config, modpack_name)
        if selection is None:
            raise FeriumError("The modpack provided does not exist")
        config.active_modpack = selection
        return
    default = config.active_modpack if config.active_modpack < len(config.modpacks) else 0
    try:
        config.active_modpack = select(
            "Select which modpack to switch to",
            [_modpack_label(m) for m in config.modpacks],
            default,
        )
    except PromptCancelled:
        pass


def delete(
    config: Config, modpack_name: str | None = None, switch_to: str | None = None
) -> None:
    """Delete a modpack, by name or interactively, and fix up the active modpack."""
    if modpack_name is not None:
        selection = _find(config, modpack_name)
        if selection is None:
            raise FeriumError("The modpack name provided does not exist")
    else:
        try:
            selection = select(
                "Select which modpack to delete",
                [_modpack_label(m) for m in config.modpacks],
                config.active_modpack,
            )
        except PromptCancelled:
            return
    del config.modpacks[selection]

    if config.active_modpack == selection:
        if len(config.modpacks) > 1:
            switch(config, switch_to)
        else:
            config.active_modpack = 0
    elif config.active_modpack > selection:
        config.active_modpack -= 1


def format_info(modpack: Modpack, active: bool) -> str:
    """A short description of `modpack`."""
    ident = modpack.identifier
    if ident.kind == ModpackIdentifier.CURSEFORGE:
        platform = colored("CurseForge".ljust(10), "red")
    else:
        platform = colored("Modrinth".ljust(10), "green")
    identifier = f"{platform} {colored(str(ident.project), attrs=['dark'])}"
    output_dir = colored(str(modpack.output_dir), "blue", attrs=["underline"])
    return (
        f"{colored(modpack.name, attrs=['bold'])}{' *' if active else ''}\n"
        f"  Output directory:  {output_dir}\n"
        f"  Identifier:        {identifier}\n"
        f"  Install Overrides: {str(modpack.install_overrides).lower()}\n"
    )


def info(modpack: Modpack, active: bool) -> None:
    """Print a short description of `modpack`."""
    print(format_info(modpack, active))