"""Login screen actions routed through a PureMVC-style notification bus."""

__version__ = "0.1.0"
