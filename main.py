import logging
import os
import sys

from rich.pretty import pprint

from cronos import *


@command("git", descrs="Git - A fast, scalable, distributed revision control system")
class Git:
    version = Parameter("-v", "--version", kind=Kind.BOOLEAN, descr="Print the version information and exit")

    def run(self):
        if self.version:
            print("git cli simulator version 0.1")
            sys.exit(0)


@command("add", descrs="add file contents to the index")
class Add:
    force = Parameter("-f", "--force", kind=Kind.BOOLEAN, descr="Allow adding otherwise ignored files")

    def run(self, params):
        for file in params:
            if self.force or not file.startswith("."):
                print("add", file)


@command("log", descrs="show commit logs", notes=("Commits are listed newest first.",))
class Log:
    patch = Parameter("-p", "-u", "--patch", kind=Kind.BOOLEAN, descr="Generate patch")
    count = Parameter("-n", "--max-count", kind=Kind.INTEGER, default=0, descr="Limit the number of commits to output")

    def run(self, params, parser):
        for index in range(self.count):
            print(f"commit {index}" + (" (with patch)" if self.patch else ""))
        pprint(parser.get(Git))


if __name__ == '__main__':
    logging.basicConfig(level=os.environ.get("CRONOS_LOG_LEVEL", "WARNING"))
    Parser(Git, Add, Log, colorful=True).parse()
