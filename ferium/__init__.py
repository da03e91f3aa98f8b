"""Manage the Minecraft mod profiles and modpacks in a ferium config from the command line."""

__version__ = "5.0.0"