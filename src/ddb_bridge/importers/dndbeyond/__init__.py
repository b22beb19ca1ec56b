"""D&D Beyond character parsers."""
