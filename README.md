# ferium

A command-line manager for Minecraft mod profiles and modpacks. Mods are
identified by their Modrinth project ID, CurseForge project ID or GitHub
`owner/repo`. Ferium keeps them in *profiles*. Each profile has a name, an
output directory, the game versions to match and the mod loader to use. Ferium
also keeps a list of *modpacks*, each with its own output directory and a
setting for whether overrides are installed.

## Installation

```
pip install .
```

This installs the `ferium` command.

## Profiles

Create a profile. Run it with no options to be asked for each setting. The
Minecraft versions to pick from are fetched from Modrinth.

```
ferium profile create
```

To create one without prompts, give the name, game version and mod loader:

```
ferium profile create --name "My Profile" --game-version 1.21.4 --mod-loader fabric --output-dir /absolute/path/to/mods
```

The mod loader is one of `fabric`, `quilt`, `forge` or `neoforge`, in any case.
Choosing Quilt also lets the profile use Fabric mods. The output directory must
be an absolute path. Without `--output-dir` it defaults to the `mods` folder of
the Minecraft directory on your system. A profile name may not be used twice,
ignoring case. Giving only some of these options is an error.

To copy the mods of an existing profile into the new one, use `--import`. Give
a profile name to import from that profile, or give no name to pick one from a
list.

Other profile commands:

```
ferium profile info        # show the active profile (also what `ferium profile` does)
ferium profiles            # list every profile (same as `ferium profile list`)
ferium profile switch [NAME]
ferium profile configure [--game-versions ...] [--mod-loaders ...] [--name NAME] [--output-dir DIR]
ferium profile delete [NAME] [--switch-to NAME]
```

`configure` with no options opens a menu to change the output directory, the
Minecraft versions, the mod loader or the name. A newly created profile becomes
the active one. If you delete the active profile and more than one profile is
left, ferium switches to `--switch-to` or asks which one to use.

## Mods in a profile

```
ferium list                # short list of mods in the active profile
ferium list --verbose      # fetch and show full project details
ferium list --verbose --markdown
ferium remove sodium "starlight (fabric)" 591388
```

`list --verbose` queries Modrinth, CurseForge and GitHub, prints the details of
each project sorted by name, and stores each mod's current name and slug in the
config. Pinned mods cannot be listed this way.

`remove` matches each argument against a mod's name, its project ID, its slug,
or `owner/repo` for GitHub mods. Name, slug and `owner/repo` matches ignore
case; project IDs must match exactly. If any argument matches nothing, ferium
stops with an error and nothing is removed. Run `ferium remove` with no
arguments to pick mods from a list.

## Modpacks

```
ferium modpack info        # show the active modpack (also what `ferium modpack` does)
ferium modpacks            # same as `ferium modpack list`
ferium modpack switch [NAME]
ferium modpack configure [--output-dir DIR] [--install-overrides true|false]
ferium modpack delete [NAME] [--switch-to NAME]
```

When a modpack's output directory is changed, ferium checks that it is absolute
and offers to back up files already in its `mods` and `resourcepacks` folders.

## Prompts

Lists are answered by typing the number of an entry; several numbers may be
separated by commas. Pressing Enter keeps the marked default.

## Configuration

The configuration is a JSON file in your user configuration directory (on
macOS, `~/.config/ferium/config.json`). It is created empty if it does not
exist, and a config found at `~/.config/ferium/config.json` is moved to the new
location. You can pick another file with `--config-file` or the
`FERIUM_CONFIG_FILE` environment variable. API credentials can be given with
`--github-token` and `--curseforge-api-key`, or with the `GITHUB_TOKEN` and
`CURSEFORGE_API_KEY` environment variables. The options `--threads` and
`--parallel-tasks` are accepted but change nothing.

After every successful command the mods of each profile are sorted by name and
the config is written back. When a command fails, ferium prints the error in
red, leaves the config file as it was and exits with status 1.

## What ferium does not do

This package manages the config only. It has no command to add mods to a
profile, to scan a folder for mod files, to add a modpack, or to download and
upgrade mods or modpacks. Mods and modpacks must already be in the config file
to be listed, removed or configured.

## Running the tests

```
pip install ".[test]"
pytest
```