"""Lays out resolved field values as output lines and enforces the row limit."""

import json

from services.estab_export.FieldResolver import FieldResolver
from shared.clients.search.models.Hit import Hit
from shared.models.config import ExportConfig


class RowFormatter:
    """Formats hits in raw, single-value or multi-column mode.

    The mode is fixed by the configuration, which was validated when it was
    built, so it is not checked again per hit.
    """

    def __init__(self, config: ExportConfig, resolver: FieldResolver | None = None) -> None:
        self._config = config
        self._resolver = resolver or FieldResolver(config)
        self._rows_emitted = 0

    ##########################################
    ################ GETTER ##################
    ##########################################

    def get_rows_emitted(self) -> int:
        """Returns the number of records formatted so far."""
        return self._rows_emitted

    def limit_reached(self) -> bool:
        """Returns True once the configured number of records has been formatted."""
        if self._config.is_unbounded():
            return False
        return self._rows_emitted >= self._config.limit

    def header(self) -> str | None:
        """Returns the header line, or None when no header is to be written."""
        if not self._config.header or self._config.raw:
            return None
        return self._config.delimiter.join(self._config.fields)

    ##########################################
    ############### FORMATTING ###############
    ##########################################

    def format(self, hit: Hit) -> list[str]:
        """Format one hit and count it as emitted.

        Args:
            hit (Hit): The search result.

        Returns:
            list[str]: Output lines without line terminators. Raw and
            multi-column mode give one line, single-value mode one line per value.

        Raises:
            UnsupportedFieldTypeError: If a requested field cannot be flattened.
        """
        if self._config.raw:
            lines = [self.format_raw(hit)]
        elif self._config.single_value:
            lines = self._resolver.resolve(hit, self._config.fields[0])
        else:
            lines = [self._config.delimiter.join(self.format_columns(hit))]
        self._rows_emitted += 1
        return lines

    def format_columns(self, hit: Hit) -> list[str]:
        """Returns one column per requested field, multiple values joined by the separator."""
        return [
            self._config.separator.join(self._resolver.resolve(hit, field_name))
            for field_name in self._config.fields
        ]

    def format_raw(self, hit: Hit) -> str:
        return json.dumps(hit.to_raw(), ensure_ascii=False, separators=(",", ":"))
