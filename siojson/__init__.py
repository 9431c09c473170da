"""JSON value model with binary support, dataclass conversion and JSON-over-HTTP requests."""

__version__ = "0.1.0"
__all__ = ["convert", "structs", "model", "encoding", "request", "library"]