"""
Entry point for loading one module with the SSR runtime from the command line.
"""

import sys
import asyncio
import argparse
import logging
import os

from .core.context import create_dev_server
from .utils.config import get_server_config
from .utils.logger import configure_logging

logger = logging.getLogger(__name__)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        prog="ssr_runtime", description="Instantiate a project module for SSR"
    )
    parser.add_argument("module", help="Module identifier, e.g. /src/entry.py")
    parser.add_argument("--root", help="Project root (overrides SSR_ROOT)")
    return parser.parse_args(argv)


async def run(module_id: str) -> int:
    config = get_server_config()
    async with create_dev_server(config) as server:
        try:
            module = await server.ssr_load_module(module_id)
        except Exception as e:
            logger.error(f"Failed to load {module_id}: {e}")
            return 1
        for name in module:
            print(name)
    return 0


def main(argv=None) -> int:
    args = parse_args(argv)
    if args.root:
        os.environ["SSR_ROOT"] = os.path.abspath(args.root)
    configure_logging(get_server_config().log_level)
    return asyncio.run(run(args.module))


if __name__ == "__main__":
    sys.exit(main())
