"""Dependency plugins -- typed installers and the anchor-based config patcher."""

from jumpstart.plugins.installer import DependencyInstaller, ManifestInstaller
from jumpstart.plugins.manifest import PatchAction, PatchStep, PluginManifest
from jumpstart.plugins.patcher import ConfigPatcher
from jumpstart.plugins.registry import PluginRegistry

__all__ = [
    "ConfigPatcher",
    "DependencyInstaller",
    "ManifestInstaller",
    "PatchAction",
    "PatchStep",
    "PluginManifest",
    "PluginRegistry",
]
