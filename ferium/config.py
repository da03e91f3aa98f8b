"""Configuration model for profiles and modpacks, and its JSON file storage."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, ClassVar


class FeriumError(Exception):
    """An error that is reported to the user."""


class ModLoader(Enum):
    """A Minecraft mod loader."""

    QUILT = "Quilt"
    FABRIC = "Fabric"
    FORGE = "Forge"
    NEOFORGE = "NeoForge"

    def __str__(self) -> str:
        return self.value


def _is_of(value: Any, kind: type) -> bool:
    if isinstance(value, bool):
        return False
    if kind is tuple:
        return (
            isinstance(value, tuple)
            and len(value) == 2
            and all(isinstance(part, str) for part in value)
        )
    return isinstance(value, kind)


@dataclass(frozen=True)
class ModIdentifier:
    """Where a mod comes from, optionally pinned to one file, version or asset."""

    CURSEFORGE: ClassVar[str] = "CurseForgeProject"
    MODRINTH: ClassVar[str] = "ModrinthProject"
    GITHUB: ClassVar[str] = "GitHubRepository"

    kind: str
    project: int | str | tuple[str, str]
    pin: int | str | None = None

    def __post_init__(self) -> None:
        types = _MOD_TYPES.get(self.kind)
        if types is None:
            raise FeriumError(f"Unknown mod identifier kind {self.kind!r}")
        if self.kind == self.GITHUB and isinstance(self.project, list):
            object.__setattr__(self, "project", tuple(self.project))
        project_type, pin_type = types
        if not _is_of(self.project, project_type):
            raise FeriumError(f"Invalid project for {self.kind}: {self.project!r}")
        if self.pin is not None and not _is_of(self.pin, pin_type):
            raise FeriumError(f"Invalid pin for {self.kind}: {self.pin!r}")

    @classmethod
    def curseforge(cls, project_id: int, pin: int | None = None) -> ModIdentifier:
        return cls(cls.CURSEFORGE, project_id, pin)

    @classmethod
    def modrinth(cls, project_id: str, pin: str | None = None) -> ModIdentifier:
        return cls(cls.MODRINTH, project_id, pin)

    @classmethod
    def github(cls, owner: str, repo: str, pin: int | None = None) -> ModIdentifier:
        return cls(cls.GITHUB, (owner, repo), pin)

    @property
    def pinned(self) -> bool:
        return self.pin is not None

    def to_json(self) -> dict[str, Any]:
        project = list(self.project) if self.kind == self.GITHUB else self.project
        if self.pin is None:
            return {self.kind: project}
        return {"Pinned" + self.kind: [project, self.pin]}

    @classmethod
    def from_json(cls, data: Any) -> ModIdentifier:
        if not isinstance(data, dict) or len(data) != 1:
            raise FeriumError(f"Invalid mod identifier: {data!r}")
        ((key, value),) = data.items()
        kind = key.removeprefix("Pinned")
        if key.startswith("Pinned"):
            if not isinstance(value, list) or len(value) != 2:
                raise FeriumError(f"Invalid pinned mod identifier: {data!r}")
            project, pin = value
        else:
            project, pin = value, None
        if kind == cls.GITHUB:
            if not isinstance(project, list) or len(project) != 2:
                raise FeriumError(f"Invalid GitHub repository: {project!r}")
            project = tuple(project)
        return cls(kind, project, pin)


_MOD_TYPES = {
    ModIdentifier.CURSEFORGE: (int, int),
    ModIdentifier.MODRINTH: (str, str),
    ModIdentifier.GITHUB: (tuple, int),
}


@dataclass(frozen=True)
class ModpackIdentifier:
    """Where a modpack comes from."""

    CURSEFORGE: ClassVar[str] = "CurseForgeModpack"
    MODRINTH: ClassVar[str] = "ModrinthModpack"

    kind: str
    project: int | str

    def __post_init__(self) -> None:
        expected = {self.CURSEFORGE: int, self.MODRINTH: str}.get(self.kind)
        if expected is None:
            raise FeriumError(f"Unknown modpack identifier kind {self.kind!r}")
        if not _is_of(self.project, expected):
            raise FeriumError(f"Invalid project for {self.kind}: {self.project!r}")

    def to_json(self) -> dict[str, Any]:
        return {self.kind: self.project}

    @classmethod
    def from_json(cls, data: Any) -> ModpackIdentifier:
        if not isinstance(data, dict) or len(data) != 1:
            raise FeriumError(f"Invalid modpack identifier: {data!r}")
        ((kind, project),) = data.items()
        return cls(kind, project)


@dataclass
class Filters:
    """The game versions and mod loaders that files are filtered by."""

    game_versions: list[str] | None = None
    mod_loaders: list[ModLoader] | None = None

    def mod_loader(self) -> ModLoader | None:
        """The primary mod loader, if the filters name any."""
        return self.mod_loaders[0] if self.mod_loaders else None


@dataclass
class Mod:
    name: str
    identifier: ModIdentifier
    slug: str | None = None
    filters: Filters = field(default_factory=Filters)
    override_filters: bool = False


@dataclass
class Profile:
    name: str
    output_dir: Path
    filters: Filters = field(default_factory=Filters)
    mods: list[Mod] = field(default_factory=list)

    @classmethod
    def new(
        cls,
        name: str,
        output_dir: Path,
        game_versions: list[str],
        mod_loader: ModLoader,
    ) -> Profile:
        loaders = (
            [ModLoader.QUILT, ModLoader.FABRIC]
            if mod_loader is ModLoader.QUILT
            else [mod_loader]
        )
        return cls(name, Path(output_dir), Filters(list(game_versions), loaders))


@dataclass
class Modpack:
    name: str
    identifier: ModpackIdentifier
    output_dir: Path
    install_overrides: bool


def _filters_to_json(filters: Filters) -> dict[str, Any]:
    data: dict[str, Any] = {}
    if filters.game_versions is not None:
        data["game_versions"] = list(filters.game_versions)
    if filters.mod_loaders is not None:
        data["mod_loaders"] = [loader.value for loader in filters.mod_loaders]
    return data


def _filters_from_json(data: dict[str, Any]) -> Filters:
    versions = data.get("game_versions")
    loaders = data.get("mod_loaders")
    return Filters(
        None if versions is None else [str(v) for v in versions],
        None if loaders is None else [ModLoader(loader) for loader in loaders],
    )


def _mod_to_json(mod: Mod) -> dict[str, Any]:
    data: dict[str, Any] = {"name": mod.name, "identifier": mod.identifier.to_json()}
    if mod.slug is not None:
        data["slug"] = mod.slug
    filters = _filters_to_json(mod.filters)
    if filters:
        data["filters"] = filters
    if mod.override_filters:
        data["override_filters"] = True
    return data


def _mod_from_json(data: dict[str, Any]) -> Mod:
    return Mod(
        name=data["name"],
        identifier=ModIdentifier.from_json(data["identifier"]),
        slug=data.get("slug"),
        filters=_filters_from_json(data.get("filters", {})),
        override_filters=bool(data.get("override_filters", False)),
    )


def _profile_to_json(profile: Profile) -> dict[str, Any]:
    return {
        "name": profile.name,
        "output_dir": str(profile.output_dir),
        "filters": _filters_to_json(profile.filters),
        "mods": [_mod_to_json(mod) for mod in profile.mods],
    }


def _profile_from_json(data: dict[str, Any]) -> Profile:
    return Profile(
        name=data["name"],
        output_dir=Path(data["output_dir"]),
        filters=_filters_from_json(data.get("filters", {})),
        mods=[_mod_from_json(mod) for mod in data.get("mods", [])],
    )


def _modpack_to_json(modpack: Modpack) -> dict[str, Any]:
    return {
        "name": modpack.name,
        "identifier": modpack.identifier.to_json(),
        "output_dir": str(modpack.output_dir),
        "install_overrides": modpack.install_overrides,
    }


def _modpack_from_json(data: dict[str, Any]) -> Modpack:
    return Modpack(
        name=data["name"],
        identifier=ModpackIdentifier.from_json(data["identifier"]),
        output_dir=Path(data["output_dir"]),
        install_overrides=bool(data.get("install_overrides", False)),
    )


@dataclass
class Config:
    active_profile: int = 0
    profiles: list[Profile] = field(default_factory=list)
    active_modpack: int = 0
    modpacks: list[Modpack] = field(default_factory=list)

    def to_json(self) -> dict[str, Any]:
        return {
            "active_profile": self.active_profile,
            "active_modpack": self.active_modpack,
            "profiles": [_profile_to_json(p) for p in self.profiles],
            "modpacks": [_modpack_to_json(m) for m in self.modpacks],
        }

    @classmethod
    def from_json(cls, data: Any) -> Config:
        try:
            return cls(
                active_profile=int(data.get("active_profile", 0)),
                profiles=[_profile_from_json(p) for p in data.get("profiles", [])],
                active_modpack=int(data.get("active_modpack", 0)),
                modpacks=[_modpack_from_json(m) for m in data.get("modpacks", [])],
            )
        except (KeyError, TypeError, ValueError, AttributeError) as err:
            raise FeriumError(f"Invalid config: {err}") from err


def write_config(path: str | Path, config: Config) -> None:
    """Write `config` to `path` as JSON, creating parent directories."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(config.to_json(), indent=4) + "\n", encoding="utf-8")


def read_config(path: str | Path) -> Config:
    """Read the config at `path`, creating an empty one if it does not exist."""
    path = Path(path)
    if not path.exists():
        write_config(path, Config())
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except OSError as err:
        raise FeriumError(f"Could not read config file {path}: {err}") from err
    except json.JSONDecodeError as err:
        raise FeriumError(f"Could not parse config file {path}: {err}") from err
    return Config.from_json(data)