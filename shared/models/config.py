from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator, model_validator


class EnvConfig(BaseModel):
    """
    Represents a single configuration parameter required for a env setting.

    Attributes:
        env_key (str): The key/name of the environment variable to read.
        val_type (str): The expected type of the environment variable's value. Supported types are "string", "number", "bool", and "list".
        default (str | int | bool | list | None): An optional default value if the environment variable is not set. If None, the variable is required and an error will be raised if it is not set.
    """

    env_key: str
    val_type: str
    default: str | int | bool | list | None = None


class ExportConfig(BaseModel):
    """
    Immutable settings for one export run, built once by the CLI.

    Attributes:
        host (str | None): Backend host. None falls back to the client's env setting.
        port (str | None): Backend port. None falls back to the client's env setting.
        indices (list[str]): Collections to search, empty means all.
        fields (list[str]): Ordered field names rendered per record.
        timeout (str): Scroll time-to-live, e.g. "10m".
        size (int): Page size requested per scroll.
        null_value (str): Sentinel for absent or null values.
        separator (str): Joins multiple values inside one column.
        delimiter (str): Joins columns.
        limit (int): Maximum number of records to emit, negative means unbounded.
        raw (bool): Emit each hit as one JSON line.
        header (bool): Emit the field names as the first line.
        single_value (bool): Emit one line per value, only with a single field.
        zero_as_null (bool): Render empty strings as the null sentinel.
        precision (int): Digits after the decimal point for numbers.
        query (dict | None): Custom query document, None means match_all.
    """

    model_config = ConfigDict(frozen=True)

    host: str | None = None
    port: str | None = None
    indices: list[str] = []
    fields: list[str] = ["_id", "_index"]
    timeout: str = "10m"
    size: int = 10000
    null_value: str = "NOT_AVAILABLE"
    separator: str = "|"
    delimiter: str = "\t"
    limit: int = -1
    raw: bool = False
    header: bool = False
    single_value: bool = False
    zero_as_null: bool = False
    precision: int = 0
    query: dict[str, Any] | None = None

    @field_validator("port")
    @classmethod
    def _check_port(cls, port: str | None) -> str | None:
        if port is None:
            return port
        if not port.isdigit() or not 1 <= int(port) <= 65535:
            raise ValueError(f"port must be a number between 1 and 65535, got {port!r}")
        return port

    @field_validator("size")
    @classmethod
    def _check_size(cls, size: int) -> int:
        if size <= 0:
            raise ValueError(f"size must be positive, got {size}")
        return size

    @model_validator(mode="after")
    def _check_modes(self) -> "ExportConfig":
        if self.raw and self.single_value:
            raise ValueError("-1 xor -raw")
        if self.single_value and len(self.fields) != 1:
            raise ValueError(
                f"-1 works only with a single column, {len(self.fields)} given: {' '.join(self.fields)}"
            )
        return self

    def is_unbounded(self) -> bool:
        """Returns True when no row limit applies."""
        return self.limit < 0
