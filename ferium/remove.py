"""Removing mods from a profile."""

from __future__ import annotations

from termcolor import colored

from ferium.config import FeriumError, Mod, ModIdentifier, Profile
from ferium.prompts import PromptCancelled, multi_select


def mod_label(mod: Mod) -> str:
    """A one-line description of `mod` with its platform and ID."""
    ident = mod.identifier
    if ident.kind == ModIdentifier.CURSEFORGE:
        prefix, name = f"CF {str(ident.project):<8}", mod.name
    elif ident.kind == ModIdentifier.MODRINTH:
        prefix, name = f"MR {ident.project:<8}", mod.name
    else:
        owner, repo = ident.project
        prefix, name = "GH", f"{owner}/{repo}"
    return f"{prefix:<11}  {name}"


def _matches(mod: Mod, query: str) -> bool:
    lowered = query.lower()
    if mod.name.lower() == lowered:
        return True
    ident = mod.identifier
    if ident.kind == ModIdentifier.GITHUB:
        owner, repo = ident.project
        if f"{owner}/{repo}".lower() == lowered:
            return True
    elif str(ident.project) == query:
        return True
    return mod.slug is not None and mod.slug.lower() == lowered


def remove(profile: Profile, to_remove: list[str]) -> list[str]:
    """Remove mods matching `to_remove` by name, ID or slug, or pick them interactively.

    Returns the names of the removed mods.
    """
    if not to_remove:
        try:
            indices = multi_select(
                "Select mods to remove", [mod_label(mod) for mod in profile.mods]
            )
        except PromptCancelled:
            indices = []
    else:
        indices = []
        for query in to_remove:
            index = next(
                (i for i, mod in enumerate(profile.mods) if _matches(mod, query)), None
            )
            if index is None:
                raise FeriumError(
                    f"A mod with ID or name {query} is not present in this profile"
                )
            indices.append(index)

    removed = [profile.mods.pop(i).name for i in sorted(set(indices), reverse=True)]
    if removed:
        print("Removed " + ", ".join(colored(n, attrs=["bold"]) for n in removed))
    return removed