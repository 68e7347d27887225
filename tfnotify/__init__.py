"""Parse Terraform command output and render notification messages from it."""

__version__ = "0.1.0"
__all__ = ["parser", "template"]