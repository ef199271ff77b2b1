"""Web Authentication relying-party data structures, parsing and checks."""

__version__ = "0.1.0"

__all__ = [
    "errors",
    "cbor",
    "encoding",
    "client",
    "authenticator",
    "options",
    "credential",
    "tpm",
]