# src/mapping_fixtures/__main__.py
import argparse
import json
import logging
import os
import sys

from .backend import MySQLConnectionConfig
from .entities import EntityKind
from .errors import ConnectionError, InvalidMappingError, SeedVerificationError, StoreObjectNotFoundError
from .fixture import (
    MappingQueryFixtureBase,
    MySQLMappingQueryFixture,
    SQLiteMappingQueryFixture,
)

# Configure basic logging
logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        prog='mapping_fixtures',
        description="Provision or verify a Northwind store and count rows through each mapped entity.",
        formatter_class=argparse.RawTextHelpFormatter
    )

    parser.add_argument(
        '--backend',
        choices=['sqlite', 'mysql'],
        default='sqlite',
        help='Store flavor (default: sqlite)'
    )
    parser.add_argument(
        '--schema',
        default=None,
        help='Schema holding the Northwind tables (SQLite only; for MySQL the database is the schema)'
    )
    parser.add_argument(
        '--sqlite-database',
        default=':memory:',
        help='SQLite database file (default: in-memory)'
    )

    # Connection parameters with defaults from environment variables
    parser.add_argument(
        '--host',
        default=os.getenv('MYSQL_HOST', 'localhost'),
        help='Database host (default: MYSQL_HOST environment variable or localhost)'
    )
    parser.add_argument(
        '--port',
        type=int,
        default=int(os.getenv('MYSQL_PORT', 3306)),
        help='Database port (default: MYSQL_PORT environment variable or 3306)'
    )
    parser.add_argument(
        '--database',
        default=os.getenv('MYSQL_DATABASE', 'northwind'),
        help='Database name (default: MYSQL_DATABASE environment variable or northwind)'
    )
    parser.add_argument(
        '--user',
        default=os.getenv('MYSQL_USER', 'root'),
        help='Database user (default: MYSQL_USER environment variable or root)'
    )
    parser.add_argument(
        '--password',
        default=os.getenv('MYSQL_PASSWORD', ''),
        help='Database password (default: MYSQL_PASSWORD environment variable or empty string)'
    )

    parser.add_argument('--log-level', default='INFO', help='Set logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)')

    return parser.parse_args(argv)


def create_fixture(args) -> MappingQueryFixtureBase:
    if args.backend == 'mysql':
        config = MySQLConnectionConfig(
            host=args.host,
            port=args.port,
            database=args.database,
            username=args.user,
            password=args.password,
        )
        return MySQLMappingQueryFixture(config)

    fixture = SQLiteMappingQueryFixture(database=args.sqlite_database)
    if args.schema:
        fixture.database_schema = args.schema
    return fixture


def count_entities(fixture: MappingQueryFixtureBase) -> dict:
    counts = {}
    with fixture.create_context() as context:
        for kind in EntityKind:
            try:
                counts[kind.value] = context.query(kind).count()
            except StoreObjectNotFoundError as e:
                logger.error(f"Cannot query {kind.value}: {e}")
                counts[kind.value] = None
    return counts


def main(argv=None):
    args = parse_args(argv)

    # Set logging level
    numeric_level = getattr(logging, args.log_level.upper(), None)
    if not isinstance(numeric_level, int):
        raise ValueError(f'Invalid log level: {args.log_level}')
    logging.getLogger().setLevel(numeric_level)

    fixture = create_fixture(args)
    try:
        fixture.initialize()
        print(json.dumps(count_entities(fixture), indent=2))
    except ConnectionError as e:
        logger.error(f"Database connection error: {e}")
        sys.exit(1)
    except (InvalidMappingError, SeedVerificationError) as e:
        logger.error(f"Store could not be prepared: {e}")
        sys.exit(1)
    finally:
        fixture.dispose()


if __name__ == "__main__":
    main()
