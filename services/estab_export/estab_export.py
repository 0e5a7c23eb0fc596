"""estab entry point.

Exports the hits of a scan/scroll query as delimited text on stdout, one
record per line. Logs go to stderr.

Usage:
    python -m services.estab_export.estab_export -indices "logs-2024" -f "_id title tags" -header

Negative numbers must be attached with "=", e.g. -limit=-1, because -1 is
the single-value flag.
"""

import argparse
import asyncio
import cProfile
import sys
from typing import BinaryIO

import httpx
from pydantic import ValidationError

from services.estab_export.ExportService import ExportService
from services.estab_export.QueryBuilder import parse_query
from services.estab_export.StreamWriter import StreamWriter
from services.estab_export._version import __version__
from shared.clients.search.SearchClientInterface import SearchClientInterface
from shared.clients.search.SearchClientManager import SearchClientManager
from shared.helper.HelperConfig import HelperConfig
from shared.logging.logging_setup import setup_logging
from shared.models.config import ExportConfig
from shared.models.errors import ConfigurationError, EstabError

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_CONFIG = 2


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="estab",
        description="Export search backend fields as tab separated values",
        allow_abbrev=False,
    )
    p.add_argument("-host", "--host", default=None, help="search backend host (default: localhost)")
    p.add_argument("-port", "--port", default=None, help="search backend port (default: 9200)")
    p.add_argument("-indices", "--indices", default=None, help="indices to search, space separated (or all)")
    p.add_argument("-f", "--fields", default="_id _index", help="field or fields space separated")
    p.add_argument("-timeout", "--timeout", default="10m", help="scroll timeout")
    p.add_argument("-size", "--size", type=int, default=10000, help="scroll batch size")
    p.add_argument("-null", "--null", dest="null_value", default="NOT_AVAILABLE", help="value for empty fields")
    p.add_argument("-separator", "--separator", default="|", help="separator to use for multiple field values")
    p.add_argument("-delimiter", "--delimiter", default="\t", help="column delimiter")
    p.add_argument("-limit", "--limit", type=int, default=-1, help="maximum number of docs to return (return all by default)")
    p.add_argument("-v", "--version", action="store_true", help="prints current program version")
    p.add_argument("-cpuprofile", "--cpuprofile", default="", help="write cpu profile to file")
    p.add_argument("-query", "--query", default="", help="custom query to run")
    p.add_argument("-raw", "--raw", action="store_true", help="stream out the raw json records")
    p.add_argument("-header", "--header", action="store_true", help="output header row with field names")
    p.add_argument("-1", "--single-value", dest="single_value", action="store_true",
                   help="one value per line (works only with a single column in -f)")
    p.add_argument("-zero-as-null", "--zero-as-null", dest="zero_as_null", action="store_true",
                   help="treat zero length strings as null values")
    p.add_argument("-precision", "--precision", type=int, default=0, help="precision for numeric output")
    return p


def build_config(args: argparse.Namespace, helper_config: HelperConfig) -> ExportConfig:
    """Turn parsed flags into the run configuration.

    Raises:
        ConfigurationError: If the flags are inconsistent or the query is not a JSON object.
    """
    if args.indices is not None:
        indices = args.indices.split()
    else:
        indices = helper_config.get_list_val("SEARCH_INDICES", default=[])

    try:
        return ExportConfig(
            host=args.host,
            port=args.port,
            indices=indices,
            fields=args.fields.split(),
            timeout=args.timeout,
            size=args.size,
            null_value=args.null_value,
            separator=args.separator,
            delimiter=args.delimiter,
            limit=args.limit,
            raw=args.raw,
            header=args.header,
            single_value=args.single_value,
            zero_as_null=args.zero_as_null,
            precision=args.precision,
            query=parse_query(args.query) if args.query else None,
        )
    except ValidationError as e:
        raise ConfigurationError("; ".join(err["msg"] for err in e.errors())) from e


def build_client(helper_config: HelperConfig, config: ExportConfig) -> SearchClientInterface:
    """Instantiate the search client named by SEARCH_ENGINE.

    Raises:
        ConfigurationError: If the engine is unknown or its env settings are invalid.
    """
    try:
        return SearchClientManager(helper_config=helper_config, host=config.host, port=config.port).get_client()
    except ValueError as e:
        raise ConfigurationError(str(e)) from e


async def do_run(
    helper_config: HelperConfig,
    config: ExportConfig,
    client: SearchClientInterface,
    writer: StreamWriter,
    transport: httpx.AsyncBaseTransport | None = None,
) -> int:
    """Boot the client, run the export and always close the client.

    Returns:
        int: Number of records emitted.
    """
    try:
        await client.boot(transport=transport)
        await client.do_healthcheck()
        export_service = ExportService(
            helper_config=helper_config,
            config=config,
            search_client=client,
            writer=writer,
        )
        return await export_service.do_export()
    finally:
        await client.close()


def main(argv: list[str] | None = None, stdout: BinaryIO | None = None) -> int:
    """Run estab and return the process exit code.

    Every fatal error ends here: it is logged, whatever was already written is
    flushed, and a non-zero code is returned.
    """
    args = build_parser().parse_args(argv)
    if args.version:
        print(__version__)
        return EXIT_OK

    logger = setup_logging()
    helper_config = HelperConfig(logger=logger)

    try:
        config = build_config(args, helper_config)
        client = build_client(helper_config, config)
    except ConfigurationError as e:
        logger.error("Configuration error: %s", e)
        return EXIT_CONFIG

    profiler = cProfile.Profile() if args.cpuprofile else None
    if profiler is not None:
        profiler.enable()
    try:
        with StreamWriter(stdout if stdout is not None else sys.stdout.buffer) as writer:
            asyncio.run(do_run(helper_config, config, client, writer))
    except EstabError as e:
        logger.error("Export aborted: %s", e)
        return EXIT_FAILURE
    finally:
        if profiler is not None:
            profiler.disable()
            profiler.dump_stats(args.cpuprofile)
            logger.debug("Wrote cpu profile to %s", args.cpuprofile)

    logger.info("Export finished.", color="green")
    return EXIT_OK


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()
