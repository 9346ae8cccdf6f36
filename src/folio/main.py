"""
Folio - Command Line Entry Point
Serves the site and runs the one-shot database and content scripts.
"""
import argparse
import logging
import os
import sys
from typing import List, Optional

from .model.database import Database
from .utils.config import Config, ConfigurationError


def setup_logging(verbose: bool = False, log_file: Optional[str] = None):
    """Configure logging for the application."""
    level = logging.DEBUG if verbose else logging.INFO

    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        # Use UTF-8 encoding for file handler to support Unicode characters
        handlers.append(logging.FileHandler(log_file, encoding='utf-8'))

    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=handlers
    )


def run_server():
    """Run the web application"""
    from . import create_app

    app = create_app()

    host = os.getenv('FOLIO_HOST', '0.0.0.0')
    port = int(os.getenv('FOLIO_PORT', 5000))
    debug = os.getenv('FOLIO_DEBUG', 'False').lower() == 'true'

    app.run(
        host=host,
        port=port,
        debug=debug,
        use_reloader=debug
    )


def run_migrate(args):
    from .scripts.migrate import run_migrations

    run_migrations(Config.DATABASE_URL)


def run_seed(args):
    from .scripts.seed import seed_database

    Database().connect(Config.DATABASE_URL, pool_size=Config.DB_POOL_SIZE)
    return seed_database()


def run_import(args):
    from .scripts.import_mdx import import_content

    Database().connect(Config.DATABASE_URL, pool_size=Config.DB_POOL_SIZE)
    stats = import_content(args.content_dir, update=args.update)
    if stats['failed']:
        logging.getLogger(__name__).warning(f"{stats['failed']} file(s) could not be imported")
    return stats


def run_setup(args):
    """Migrate the schema, then load the seed articles"""
    run_migrate(args)
    return run_seed(args)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='folio',
        description='Folio - Multilingual portfolio and blog'
    )

    # Shared by every subcommand so it can follow the command name
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        '--verbose',
        action='store_true',
        help='Enable verbose logging (DEBUG level)'
    )

    subparsers = parser.add_subparsers(dest='command', required=True)

    subparsers.add_parser('serve', parents=[common], help='Run the web server')
    subparsers.add_parser('migrate', parents=[common], help='Apply database migrations')
    subparsers.add_parser('seed', parents=[common], help='Insert the starter articles')

    import_parser = subparsers.add_parser(
        'import-mdx',
        parents=[common],
        help='Import markdown/MDX articles from the content directory'
    )
    import_parser.add_argument(
        '--content-dir',
        default=None,
        help='Directory holding articles/<locale>/*.mdx (default: CONTENT_DIR)'
    )
    import_parser.add_argument(
        '--update',
        action='store_true',
        help='Overwrite articles that already exist instead of skipping them'
    )

    subparsers.add_parser('setup', parents=[common], help='Migrate, then seed')
    return parser


COMMANDS = {
    'migrate': run_migrate,
    'seed': run_seed,
    'import-mdx': run_import,
    'setup': run_setup,
}


def main(argv: Optional[List[str]] = None):
    """Main entry point for the folio command."""
    parser = build_parser()
    args = parser.parse_args(argv)

    # Setup logging
    setup_logging(args.verbose, Config.LOG_FILE)
    logger = logging.getLogger(__name__)

    # Validate configuration
    try:
        Config.validate()
        logger.info("Configuration validated successfully")
    except ConfigurationError as e:
        logger.error(f"Configuration error: {e}")
        sys.exit(1)

    if args.command == 'serve':
        run_server()
        return

    try:
        logger.info(f"Running '{args.command}'...")
        COMMANDS[args.command](args)
    except KeyboardInterrupt:
        logger.info("\nShutdown requested by user")
    except ConfigurationError as e:
        logger.error(f"Configuration error: {e}")
        sys.exit(1)
    except Exception as e:
        logger.error(f"'{args.command}' failed: {e}")
        sys.exit(1)
    finally:
        logger.info("Cleaning up...")
        Database.reset()


if __name__ == "__main__":
    main()
