"""Command-line interface for managing Minecraft mod profiles and modpacks."""

from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path

import platformdirs
from termcolor import colored

from ferium import listing
from ferium import modpack as modpack_commands
from ferium import profile as profile_commands
from ferium.config import (
    Config,
    FeriumError,
    ModIdentifier,
    ModLoader,
    Modpack,
    Profile,
    read_config,
    write_config,
)
from ferium.prompts import PromptCancelled
from ferium.remove import remove

DEFAULT_PARALLEL_TASKS = 50


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError as err:
        raise argparse.ArgumentTypeError(f"{value!r} is not a number") from err
    if number < 1:
        raise argparse.ArgumentTypeError("the value must be at least 1")
    return number


def _mod_loader(value: str) -> ModLoader:
    for loader in ModLoader:
        if loader.value.lower() == value.lower():
            return loader
    choices = ", ".join(loader.value for loader in ModLoader)
    raise argparse.ArgumentTypeError(f"{value!r} is not a mod loader ({choices})")


def _boolean(value: str) -> bool:
    lowered = value.lower()
    if lowered in ("true", "yes", "1"):
        return True
    if lowered in ("false", "no", "0"):
        return False
    raise argparse.ArgumentTypeError(f"{value!r} is not true or false")


def build_parser() -> argparse.ArgumentParser:
    """The argument parser for the `ferium` command."""
    parser = argparse.ArgumentParser(
        prog="ferium",
        description="Manage Minecraft mods and modpacks from Modrinth, CurseForge and GitHub",
    )
    parser.add_argument("--threads", type=_positive_int, help="Number of worker threads")
    parser.add_argument(
        "--parallel-tasks",
        type=_positive_int,
        default=DEFAULT_PARALLEL_TASKS,
        help="Maximum number of tasks run at the same time",
    )
    parser.add_argument("--github-token", help="A GitHub personal access token")
    parser.add_argument("--curseforge-api-key", help="A CurseForge API key")
    parser.add_argument("--config-file", type=Path, help="The config file to use")
    commands = parser.add_subparsers(dest="command", required=True)

    list_cmd = commands.add_parser("list", help="List the mods in the active profile")
    list_cmd.add_argument("-v", "--verbose", action="store_true")
    list_cmd.add_argument("-m", "--markdown", action="store_true")

    profile = commands.add_parser("profile", help="Manage profiles")
    profile_sub = profile.add_subparsers(dest="subcommand")
    p_configure = profile_sub.add_parser("configure")
    p_configure.add_argument("-v", "--game-versions", nargs="+", action="extend")
    p_configure.add_argument(
        "-l", "--mod-loaders", nargs="+", action="extend", type=_mod_loader
    )
    p_configure.add_argument("-n", "--name")
    p_configure.add_argument("-o", "--output-dir", type=Path)
    p_create = profile_sub.add_parser("create")
    p_create.add_argument("-i", "--import", dest="import_from", nargs="?", const=True)
    p_create.add_argument("-v", "--game-version", nargs="+", action="extend")
    p_create.add_argument("-l", "--mod-loader", type=_mod_loader)
    p_create.add_argument("-n", "--name")
    p_create.add_argument("-o", "--output-dir", type=Path)
    p_delete = profile_sub.add_parser("delete")
    p_delete.add_argument("profile_name", nargs="?")
    p_delete.add_argument("--switch-to")
    profile_sub.add_parser("info")
    profile_sub.add_parser("list")
    p_switch = profile_sub.add_parser("switch")
    p_switch.add_argument("profile_name", nargs="?")

    commands.add_parser("profiles", help="List all profiles")

    modpack = commands.add_parser("modpack", help="Manage modpacks")
    modpack_sub = modpack.add_subparsers(dest="subcommand")
    m_configure = modpack_sub.add_parser("configure")
    m_configure.add_argument("-o", "--output-dir", type=Path)
    m_configure.add_argument("--install-overrides", type=_boolean)
    m_delete = modpack_sub.add_parser("delete")
    m_delete.add_argument("modpack_name", nargs="?")
    m_delete.add_argument("--switch-to")
    modpack_sub.add_parser("info")
    modpack_sub.add_parser("list")
    m_switch = modpack_sub.add_parser("switch")
    m_switch.add_argument("modpack_name", nargs="?")

    commands.add_parser("modpacks", help="List all modpacks")

    remove_cmd = commands.add_parser("remove", help="Remove mods from the active profile")
    remove_cmd.add_argument("mod_names", nargs="*")
    return parser


def get_active_profile(config: Config) -> Profile:
    """The active profile, repairing the active index where needed."""
    count = len(config.profiles)
    if count == 0:
        raise FeriumError(
            "There are no profiles configured, add a profile using `ferium profile create`"
        )
    if count == 1:
        config.active_profile = 0
    elif config.active_profile >= count:
        print(
            colored(
                "Active profile specified incorrectly, please pick a profile to use",
                "red",
                attrs=["bold"],
            )
        )
        profile_commands.switch(config, None)
    return config.profiles[config.active_profile]


def get_active_modpack(config: Config) -> Modpack:
    """The active modpack, repairing the active index where needed."""
    count = len(config.modpacks)
    if count == 0:
        raise FeriumError(
            "There are no modpacks configured, add a modpack using `ferium modpack add`"
        )
    if count == 1:
        config.active_modpack = 0
    elif config.active_modpack >= count:
        print(
            colored(
                "Active modpack specified incorrectly, please pick a modpack to use",
                "red",
                attrs=["bold"],
            )
        )
        modpack_commands.switch(config, None)
    return config.modpacks[config.active_modpack]


def check_empty_profile(profile: Profile) -> None:
    """Raise if `profile` has no mods."""
    if not profile.mods:
        raise FeriumError(
            "Your currently selected profile is empty! Run `ferium help` to see how to add mods"
        )


def list_mods(profile: Profile) -> str:
    """A summary of `profile` with one line per mod."""
    loader = profile.filters.mod_loader()
    versions = ", ".join(profile.filters.game_versions or [])
    lines = [
        f"{colored(profile.name, attrs=['bold'])} "
        f"{colored(f'({len(profile.mods)} mods)', 'yellow')} on "
        f"{colored(str(loader) if loader else '', 'magenta')} "
        f"{colored(versions, 'green')}",
        "",
    ]
    for mod in profile.mods:
        ident = mod.identifier
        if ident.kind == ModIdentifier.GITHUB:
            owner, repo = ident.project
            plain = "GH"
            platform = colored("GH", "magenta")
            name = f"{colored(owner, attrs=['dark'])}/{colored(repo, attrs=['bold'])}"
        else:
            short, colour = ("CF", "red") if ident.kind == ModIdentifier.CURSEFORGE else ("MR", "green")
            project = str(ident.project).ljust(8)
            plain = f"{short} {project}"
            platform = f"{colored(short, colour)} {colored(project, attrs=['dark'])}"
            name = colored(mod.name, attrs=["bold"])
        padding = " " * max(0, 20 - len(plain))
        lines.append(f"{platform}{padding}  {name}")
    return "\n".join(lines)


def _default_config_path(old_path: Path) -> Path:
    if sys.platform == "darwin":
        return old_path
    return platformdirs.user_config_path("ferium") / "config.json"


def _config_path(args: argparse.Namespace) -> Path:
    old_path = Path.home() / ".config" / "ferium" / "config.json"
    if args.config_file is not None:
        path = Path(args.config_file)
    elif os.environ.get("FERIUM_CONFIG_FILE"):
        path = Path(os.environ["FERIUM_CONFIG_FILE"])
    else:
        path = _default_config_path(old_path)
    if not path.exists() and old_path.exists():
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            old_path.rename(path)
        except OSError as err:
            raise FeriumError(
                "Failed to relocate config file to the new path, try doing so manually."
            ) from err
    return path


def _help_hint(command: str) -> None:
    print(
        f"{colored('Use', 'yellow')} ferium {command} --help "
        f"{colored('for more information about this subcommand', 'yellow')}"
    )


def _run_profile(config: Config, args: argparse.Namespace) -> None:
    subcommand = args.subcommand or "info"
    if subcommand == "configure":
        profile_commands.configure(
            get_active_profile(config),
            args.game_versions or [],
            args.mod_loaders or [],
            args.name,
            args.output_dir,
        )
    elif subcommand == "create":
        profile_commands.create(
            config,
            args.import_from,
            args.game_version or None,
            args.mod_loader,
            args.name,
            args.output_dir,
        )
    elif subcommand == "delete":
        profile_commands.delete(config, args.profile_name, args.switch_to)
    elif subcommand == "info":
        profile_commands.info(get_active_profile(config), True)
    elif subcommand == "list":
        for index, profile in enumerate(config.profiles):
            profile_commands.info(profile, index == config.active_profile)
    elif subcommand == "switch":
        profile_commands.switch(config, args.profile_name)
    if args.subcommand is None:
        _help_hint("profile")


def _run_modpack(config: Config, args: argparse.Namespace) -> None:
    subcommand = args.subcommand or "info"
    if subcommand == "configure":
        modpack_commands.configure(
            get_active_modpack(config), args.output_dir, args.install_overrides
        )
    elif subcommand == "delete":
        modpack_commands.delete(config, args.modpack_name, args.switch_to)
    elif subcommand == "info":
        modpack_commands.info(get_active_modpack(config), True)
    elif subcommand == "list":
        for index, modpack in enumerate(config.modpacks):
            modpack_commands.info(modpack, index == config.active_modpack)
    elif subcommand == "switch":
        modpack_commands.switch(config, args.modpack_name)
    if args.subcommand is None:
        _help_hint("modpack")


def run(args: argparse.Namespace) -> None:
    """Carry out the parsed command and save the config if it succeeds."""
    if args.command == "profiles":
        args.command, args.subcommand = "profile", "list"
    elif args.command == "modpacks":
        args.command, args.subcommand = "modpack", "list"

    if args.github_token:
        os.environ["GITHUB_TOKEN"] = args.github_token
    if args.curseforge_api_key:
        os.environ["CURSEFORGE_API_KEY"] = args.curseforge_api_key

    config_path = _config_path(args)
    config = read_config(config_path)

    if args.command == "list":
        profile = get_active_profile(config)
        check_empty_profile(profile)
        if args.verbose:
            listing.verbose(profile, args.markdown)
        else:
            print(list_mods(profile))
    elif args.command == "profile":
        _run_profile(config, args)
    elif args.command == "modpack":
        _run_modpack(config, args)
    elif args.command == "remove":
        profile = get_active_profile(config)
        check_empty_profile(profile)
        remove(profile, args.mod_names)

    for profile in config.profiles:
        profile.mods.sort(key=lambda mod: mod.name.lower())
    write_config(config_path, config)


def main(argv: list[str] | None = None) -> int:
    """Run the command line and return the exit status."""
    args = build_parser().parse_args(argv)
    try:
        run(args)
    except (FeriumError, PromptCancelled, OSError) as err:
        message = str(err)
        if message:
            print(colored(message, "red", attrs=["bold"]), file=sys.stderr)
            lowered = message.lower()
            if "error trying to connect" in lowered or "error sending request" in lowered:
                print(
                    colored(
                        "Verify that you are connected to the internet",
                        "yellow",
                        attrs=["bold"],
                    ),
                    file=sys.stderr,
                )
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())