# md5folder/cli/args.py
from __future__ import annotations

import argparse
from typing import Optional


USAGE = "md5folder [DIR] [-h] [-m | -s] [--config PATH] [--log-file PATH] [-v]"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="md5folder",
        usage=USAGE,
        description="MD5 every file under DIR and write a sorted .md5list manifest.",
    )
    parser.add_argument("dir", metavar="DIR", nargs="?", default=None, help="dir to process")

    mode = parser.add_mutually_exclusive_group()
    mode.add_argument("-m", "--md5", action="store_true", help="md5: hash DIR and write its manifest")
    mode.add_argument("-s", "--stat", action="store_true", help="stat: report on DIR's existing manifest")

    parser.add_argument("--config", default=None, help="YAML file merged over the packaged defaults.")
    parser.add_argument("--log-file", default=None, help="Append logs to this file.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug-level logging.")
    return parser


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    return build_parser().parse_args(argv)
