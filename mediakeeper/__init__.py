"""mediakeeper - archive media posted to a Telegram chat into object storage."""

__version__ = "0.1.0"
__logo__ = "📦"
