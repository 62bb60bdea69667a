"""formsmith - Form-to-document generator for GST notices."""

__version__ = "0.1.0"
