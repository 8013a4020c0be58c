"""ContentPress - content pipeline and listing engine for the media site."""

__version__ = "0.1.0"
