"""Export service.

Streams every hit of one scan/scroll query through the field resolver and
row formatter into a StreamWriter, stopping early at the configured limit.
"""

from contextlib import aclosing

from services.estab_export.QueryBuilder import build_query
from services.estab_export.RowFormatter import RowFormatter
from services.estab_export.ScrollSession import ScrollSession
from services.estab_export.StreamWriter import StreamWriter
from shared.clients.search.SearchClientInterface import SearchClientInterface
from shared.helper.HelperConfig import HelperConfig
from shared.models.config import ExportConfig


class ExportService:
    """Runs one export from a search client to a writer."""

    def __init__(
        self,
        helper_config: HelperConfig,
        config: ExportConfig,
        search_client: SearchClientInterface,
        writer: StreamWriter,
    ) -> None:
        self.logging = helper_config.get_logger()
        self._helper_config = helper_config
        self._config = config
        self._search_client = search_client
        self._writer = writer
        self._formatter = RowFormatter(config)

    ##########################################
    ################ EXPORT ##################
    ##########################################

    async def do_export(self) -> int:
        """Export all hits, or up to the limit.

        Returns:
            int: Number of records emitted.

        Raises:
            TransportError: If a request to the backend fails.
            UnsupportedFieldTypeError: If a field value cannot be flattened.
        """
        header = self._formatter.header()
        if header is not None:
            self._writer.write_line(header)

        if self._formatter.limit_reached():
            self.logging.info("Limit is 0, nothing to fetch.")
            return 0

        session = ScrollSession(
            helper_config=self._helper_config,
            client=self._search_client,
            query=build_query(self._config),
            indices=self._config.indices,
            timeout=self._config.timeout,
            size=self._config.size,
        )
        try:
            async with aclosing(session.iter_hits()) as hits:
                async for hit in hits:
                    self._writer.write_lines(self._formatter.format(hit))
                    if self._formatter.limit_reached():
                        self.logging.info("Reached limit of %d records.", self._config.limit)
                        break
        finally:
            await session.close()

        emitted = self._formatter.get_rows_emitted()
        self.logging.info("Exported %d records (%d lines).", emitted, self._writer.get_lines_written())
        return emitted
