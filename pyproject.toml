[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "ferium"
version = "5.0.0"
description = "Command-line manager for Minecraft mod profiles and modpacks from Modrinth, CurseForge and GitHub Releases"
requires-python = ">=3.10"
keywords = ["minecraft", "mod-manager", "modrinth", "curseforge", "github", "modpack"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Games/Entertainment",
    "Topic :: Utilities",
]
dependencies = [
    "requests>=2.28",
    "termcolor>=2.0",
    "platformdirs>=3.0",
]

[project.optional-dependencies]
test = [
    "pytest>=7.0",
]

[project.scripts]
ferium = "ferium.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["ferium"]

[tool.hatch.build.targets.sdist]
include = ["ferium", "tests", "README.md", "pyproject.toml"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
