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

import sys
import argparse

from mvnpub.utils.context.namespace import CliNameSpace
from mvnpub.utils.context.context import CliContext
from mvnpub.utils.context.command import CliCommand
from mvnpub.utils.console import print_error, print_step, print_success, print_warning
from mvnpub.utils.maven.errors import PublishError
from mvnpub.utils.maven.publisher import MavenPublisher
from mvnpub.commands.publish import add_common_arguments, load_config, print_artifacts, resolve_artifacts


class Check(CliCommand):
    def description(self) -> str:
        return """
        This is a subcommand to validate a publication without uploading it.

        Checks the configuration, the artifacts, the toolchain level of the
        primary jar and that credentials can be resolved. With --remote the
        credentials are also tried against the repository.

        Examples:
            mvnpub check
            mvnpub check --remote
            mvnpub check --config other.toml --libs-dir out/
        """

    def cli(self, argv=None) -> CliNameSpace:
        parser = argparse.ArgumentParser(
            prog="mvnpub check",
            formatter_class=argparse.RawDescriptionHelpFormatter,
            description=self.description(),
        )
        add_common_arguments(parser)
        parser.add_argument(
            "--remote",
            action="store_true",
            help="Also contact the repository to verify credentials",
        )
        parser.add_argument(
            "-v", "--verbose",
            action="store_true",
            help="Verbose output",
        )
        args, unknown = parser.parse_known_args(argv, namespace=CliNameSpace())
        if unknown:
            print_warning(f"Ignoring unknown arguments: {' '.join(unknown)}")
        return args

    def exec(self, context: CliContext, args: CliNameSpace):
        print_step("Checking publication")

        try:
            config = load_config(args)
        except PublishError as e:
            print_error(f"[{e.kind}] {e}")
            sys.exit(1)

        print(config.get_config_summary())
        is_valid, error_msg = config.validate()
        if not is_valid:
            print_error(f"Configuration validation failed: {error_msg}")
            sys.exit(1)
        print_success("Configuration is valid")

        artifacts = resolve_artifacts(config, args)
        print("\nArtifacts:")
        print_artifacts(artifacts)

        publisher = MavenPublisher(
            config.get_repository_target(),
            toolchain=config.toolchain,
            pom_info=config.pom_info,
            timeout=config.timeout,
            retries=config.retries,
            verbose=args.verbose,
        )
        try:
            publisher.validate(artifacts, config.coordinates)
            print_success("Artifacts are valid")

            config.get_credential_source().resolve()
            print_success("Credentials resolved")

            if args.remote:
                exists = publisher.probe(config.coordinates)
                print_success(f"Repository {config.repo_name} accepted the credentials")
                if exists and not config.allow_overwrite and not config.coordinates.is_snapshot:
                    print_warning(f"{config.coordinates} is already published; publish would fail")
        except PublishError as e:
            print_error(f"[{e.kind}] {e}")
            sys.exit(1)
