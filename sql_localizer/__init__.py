"""SQL Translator & Localizer: localized string entries rendered as SQL INSERT statements."""

__version__ = "0.3.0"
