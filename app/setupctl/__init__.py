"""setupctl - Declarative machine provisioning for macOS."""

__version__ = "0.1.0"
