"""Exception taxonomy for the search export pipeline.

Every fatal condition raised below the CLI entry point derives from
EstabError, so the top-level handler can flush output and pick an exit code
without knowing where the failure happened.
"""


class EstabError(Exception):
    """Base exception for all export errors."""
    pass


class ConfigurationError(EstabError):
    """Invalid flag combination or malformed run settings. Raised before any request is sent."""
    pass


class TransportError(EstabError):
    """Connection failure, non-2xx status, undecodable body or expired cursor."""
    pass


class UnsupportedFieldTypeError(EstabError):
    """A field value is an object or a nested array and cannot be flattened."""

    def __init__(self, field_name: str, value: object):
        self.field_name = field_name
        self.value = value
        super().__init__(f"unknown field type in response for field '{field_name}': {value!r}")
