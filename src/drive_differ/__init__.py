"""drive-differ — diff paginated remote folder trees into add/delete effects."""

__version__ = "0.1.0"
