"""modrel: release pipeline for versioned game mods."""

__version__ = "0.4.0"
