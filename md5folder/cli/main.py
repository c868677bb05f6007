# md5folder/cli/main.py
from __future__ import annotations

import logging
from typing import Optional

from md5folder.core.errors import Md5FolderError
from md5folder.app.config import load_config

from md5folder.cli.args import parse_args
from md5folder.cli.commands import cmd_md5, cmd_stat, configure_logging


def main(argv: Optional[list[str]] = None) -> int:
    try:
        args = parse_args(argv)

        if not (args.md5 or args.stat):
            print("no args provided. use -h for help")
            return 2

        print("calc md5" if args.md5 else "calc stats")

        if args.dir is None:
            print("Requires path as parameter")
            return 2

        cfg = load_config(args.config)
        configure_logging(cfg, log_file=args.log_file, verbose=args.verbose)

        if args.md5:
            return cmd_md5(args.dir, cfg)
        return cmd_stat(args.dir, cfg)
    except Md5FolderError as e:
        logging.getLogger(__name__).info("CLI_ERROR code=%s message=%s details=%s", e.code, e.message, e.details)
        print(f"ERROR: {e.message}")
        if e.hint:
            print(f"Hint: {e.hint}")
        return 1
