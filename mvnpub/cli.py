#
# Copyright 2024 mvnpub Project Authors. All rights reserved.
# Use of this source code is governed by a MIT-style
# license that can be found at
#
# https://opensource.org/license/MIT
#
# The above copyright notice and this permission
# notice shall be included in all copies or
# substantial portions of the Software.

import os
import sys
import importlib
import argparse

from mvnpub.utils.context.namespace import CliNameSpace
from mvnpub.utils.context.context import CliContext
from mvnpub.utils.context.command import CliCommand

SCRIPT_PATH = os.path.split(os.path.realpath(__file__))[0]
PACKAGE_NAME = os.path.basename(SCRIPT_PATH)


# Root Class for Command Line Interface
class Cli(CliCommand):
    def description(self) -> str:
        return """mvnpub - Maven publisher for Java libraries

Uploads a built library (jar, sources jar, javadoc jar) with its POM,
Gradle module metadata and checksums to a Maven repository over HTTPS.

USAGE:
    mvnpub <command> [options]

COMMANDS:
    check       Validate configuration and artifacts without uploading
    publish     Publish library to the configured repository

EXAMPLES:
    mvnpub check                                  # Validate mvnpub.toml and build/libs
    mvnpub publish -y                             # Publish without confirmation
    mvnpub publish --primary lib.jar --version 1.1
    mvnpub publish --config other.toml --allow-overwrite

For more information on a specific command:
    mvnpub <command> --help
        """

    def get_command_list(self) -> list:
        arr = []
        for command in os.listdir(os.path.join(SCRIPT_PATH, "commands")):
            if not command.startswith("_") and command.endswith(".py"):
                arr.append(os.path.splitext(os.path.basename(command))[0])
        return sorted(arr)

    def _parser(self, add_help=True) -> argparse.ArgumentParser:
        parser = argparse.ArgumentParser(
            prog="mvnpub",
            formatter_class=argparse.RawDescriptionHelpFormatter,
            description=self.description(),
            add_help=add_help,
        )
        parser.add_argument(
            "subcommand",
            metavar=f"{self.get_command_list()}",
            type=str,
            nargs="?",
            choices=self.get_command_list(),
        )
        return parser

    def cli(self, argv=None) -> CliNameSpace:
        argv = sys.argv[1:] if argv is None else argv
        # Only "mvnpub --help" is handled here, "mvnpub publish --help" goes to the subcommand
        if len(argv) == 1 and argv[0] in ["--help", "-h"]:
            self._parser().print_help()
            sys.exit(0)

        args, unknown = self._parser(add_help=False).parse_known_args(argv, namespace=CliNameSpace())
        args.remaining = unknown
        return args

    def exec(self, context: CliContext, args: CliNameSpace):
        if not args.subcommand:
            print("ERROR: No command specified\n")
            self._parser().print_help()
            sys.exit(1)

        module = importlib.import_module(f"{PACKAGE_NAME}.commands.{args.subcommand}")
        klass = getattr(module, args.subcommand.capitalize())
        sub_cmd = klass()
        sub_cmd.exec(context, sub_cmd.cli(args.remaining))


def main(argv=None):
    cmd = Cli()
    cmd.exec(CliContext(), cmd.cli(argv))


if __name__ == "__main__":
    main()
