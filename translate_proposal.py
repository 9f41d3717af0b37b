#!/usr/bin/env python3
"""
CLI entrypoint for running the content translator without module install.
"""

import asyncio

from content_translator.cli import main as cli_main


def main() -> None:
    asyncio.run(cli_main())


if __name__ == "__main__":
    main()
