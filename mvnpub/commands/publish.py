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
import argparse

from mvnpub.utils.context.namespace import CliNameSpace
from mvnpub.utils.context.context import CliContext
from mvnpub.utils.context.command import CliCommand
from mvnpub.utils.console import confirm, print_error, print_step, print_success, print_warning
from mvnpub.utils.maven.config import DEFAULT_CONFIG_FILE, MavenConfig, load_maven_config
from mvnpub.utils.maven.errors import PublishError
from mvnpub.utils.maven.models import PublicationArtifacts
from mvnpub.utils.maven.publisher import publish_from_config


def add_common_arguments(parser: argparse.ArgumentParser):
    parser.add_argument(
        "--config",
        type=str,
        default=DEFAULT_CONFIG_FILE,
        help=f"Path to the configuration file (default: {DEFAULT_CONFIG_FILE})",
    )
    parser.add_argument(
        "--libs-dir",
        type=str,
        default=None,
        help="Directory holding the built jars (default: publish.maven.libs_dir)",
    )
    parser.add_argument(
        "--primary",
        type=str,
        default=None,
        help="Primary artifact path (default: <libs-dir>/<artifact>-<version>.jar)",
    )
    parser.add_argument(
        "--sources",
        type=str,
        default=None,
        help="Sources jar path",
    )
    parser.add_argument(
        "--javadoc",
        type=str,
        default=None,
        help="Javadoc jar path",
    )
    parser.add_argument(
        "--version",
        type=str,
        default=None,
        help="Override the version from the configuration",
    )


def resolve_artifacts(config: MavenConfig, args: CliNameSpace) -> PublicationArtifacts:
    """Combine explicit paths with the artifacts found in the libs directory."""
    found = config.find_artifacts(args.libs_dir)
    return PublicationArtifacts(
        primary=args.primary or found.primary,
        sources=args.sources or found.sources,
        javadoc=args.javadoc or found.javadoc,
    )


def load_config(args: CliNameSpace) -> MavenConfig:
    config = load_maven_config(args.config)
    if args.version:
        config.version = args.version
    return config


def print_artifacts(artifacts: PublicationArtifacts):
    for classifier, path in artifacts.entries():
        size = os.path.getsize(path) if os.path.isfile(path) else 0
        print(f"  {classifier or 'primary':<8} {path} ({size} bytes)")


class Publish(CliCommand):
    def description(self) -> str:
        return """
        This is a subcommand to publish the library to a Maven repository.

        Credentials are read from the environment at publish time
        (ORG_GRADLE_PROJECT_<name>Username/Password, <NAME>_USERNAME/PASSWORD,
        MAVEN_USERNAME/PASSWORD or ~/.gradle/gradle.properties).

        Examples:
            mvnpub publish                                # Publish build/libs/<artifact>-<version>*.jar
            mvnpub publish -y                             # Skip confirmation prompt
            mvnpub publish --primary out/lib.jar --sources out/lib-sources.jar
            mvnpub publish --version 1.1 --allow-overwrite
        """

    def cli(self, argv=None) -> CliNameSpace:
        parser = argparse.ArgumentParser(
            prog="mvnpub publish",
            formatter_class=argparse.RawDescriptionHelpFormatter,
            description=self.description(),
        )
        add_common_arguments(parser)
        parser.add_argument(
            "--allow-overwrite",
            action="store_true",
            help="Replace an already published version",
        )
        parser.add_argument(
            "-y", "--yes",
            action="store_true",
            help="Skip confirmation prompts",
        )
        parser.add_argument(
            "-v", "--verbose",
            action="store_true",
            help="Print every uploaded file",
        )
        args, unknown = parser.parse_known_args(argv, namespace=CliNameSpace())
        if unknown:
            print_warning(f"Ignoring unknown arguments: {' '.join(unknown)}")
        return args

    def exec(self, context: CliContext, args: CliNameSpace):
        print_step("Publishing library to Maven repository")

        try:
            config = load_config(args)
        except PublishError as e:
            print_error(f"[{e.kind}] {e}")
            sys.exit(1)
        if args.allow_overwrite:
            config.allow_overwrite = True

        artifacts = resolve_artifacts(config, args)

        print(config.get_config_summary())
        print("\nArtifacts:")
        print_artifacts(artifacts)
        print()

        if not args.yes and not confirm(f"Publish {config.coordinates} to {config.repo_name}?"):
            print("Publish cancelled.")
            sys.exit(1)

        result = publish_from_config(config, artifacts, verbose=args.verbose)
        if result.is_failure():
            error = result.get_error()
            print_error(f"Publish failed [{error.kind}]: {error}")
            sys.exit(1)

        receipt = result.get_value()
        action = "Replaced" if receipt.replaced else "Published"
        print_success(f"{action} {receipt.coordinates} in {receipt.repository}")
        print(f"  {receipt.urls[0]}")
        print(f"  {len(receipt.remote_paths)} files, {receipt.bytes_uploaded} bytes")
