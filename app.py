#!/usr/bin/env python3
"""
Run script for the asset tracker API
"""

from asset_tracker import create_app
from asset_tracker.build import build_database
from asset_tracker.utils.logger import get_logger
import argparse
import sys
import os
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# Note: SECRET_KEY and the bootstrap administrator are configured via environment variables.
# Run 'python generate_env.py' to create a .env file.

app = create_app()
logger = get_logger("asset_tracker.run")


def parse_arguments():
    parser = argparse.ArgumentParser(description='Asset Tracker API')
    parser.add_argument('--build-only', action='store_true',
                        help='Create tables and the bootstrap administrator, then exit')
    parser.add_argument('--no-admin', action='store_false', dest='create_admin',
                        help='Do not create the bootstrap administrator')
    return parser.parse_args()


if __name__ == '__main__':
    args = parse_arguments()

    logger.debug("Starting asset tracker...")
    build_database(app, create_admin=args.create_admin)

    if args.build_only:
        logger.debug("Build completed. Exiting without starting web server.")
        sys.exit(0)

    # FLASK_DEBUG: Enable/disable debug mode (default: False for security)
    debug_mode = os.environ.get('FLASK_DEBUG', 'False').lower() in ('true', '1', 'yes', 'on')

    # USE_RELOADER: Enable/disable auto-reloader (default: False in production)
    use_reloader = os.environ.get('USE_RELOADER', 'False').lower() in ('true', '1', 'yes', 'on')

    host = os.environ.get('FLASK_HOST', '127.0.0.1')
    port = int(os.environ.get('FLASK_PORT', '5000'))

    if debug_mode:
        logger.warning("DEBUG MODE ENABLED - Do not use in production!")

    logger.info(f"Starting server on {host}:{port} (debug={debug_mode}, reloader={use_reloader})")
    app.run(debug=debug_mode, host=host, port=port, use_reloader=use_reloader)
