#!/usr/bin/env python3
"""
Tests for configuration loading and credential resolution.

Run with: python3 -m pytest mvnpub/utils/maven
"""

import os
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from mvnpub.utils.maven.auth import CredentialSource, parse_properties
from mvnpub.utils.maven.config import MavenConfig, load_maven_config
from mvnpub.utils.maven.errors import AuthenticationError, ValidationError

CONFIG_TOML = """
[project]
group = "de.dasbabypixel"
name = "util"
version = "1.0"
description = "Graph utilities"

[java]
language_version = 8
vendor = "ADOPTIUM"
encoding = "UTF-8"

[publish.maven]
name = "DasBabyPixel"
url = "https://nexus.darkcube.eu/repository/dasbabypixel/"

[publish.maven.credentials]
username_env = "NEXUS_USER"
password_env = "NEXUS_PASS"
"""


def base_config(**maven):
    publish_maven = {'name': 'DasBabyPixel', 'url': 'https://repo.example.com/releases/'}
    publish_maven.update(maven)
    return {
        'project': {'group': 'de.example', 'name': 'lib', 'version': '1.0'},
        'publish': {'maven': publish_maven},
    }


class TestCredentialSource(unittest.TestCase):

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp.cleanup)
        self.missing = str(Path(self.tmp.name) / 'missing.properties')

    def test_explicit_env_names_win(self):
        environ = {'NEXUS_USER': 'alice', 'NEXUS_PASS': 'pw', 'MAVEN_USERNAME': 'bob', 'MAVEN_PASSWORD': 'x'}
        source = CredentialSource('DasBabyPixel', 'NEXUS_USER', 'NEXUS_PASS',
                                  properties_file=self.missing, environ=environ)

        credentials = source.resolve()

        self.assertEqual(credentials.username, 'alice')
        self.assertEqual(credentials.password, 'pw')

    def test_gradle_project_properties_convention(self):
        environ = {
            'ORG_GRADLE_PROJECT_DasBabyPixelUsername': 'gradle-user',
            'ORG_GRADLE_PROJECT_DasBabyPixelPassword': 'gradle-pass',
        }
        source = CredentialSource('DasBabyPixel', properties_file=self.missing, environ=environ)

        self.assertEqual(source.resolve().username, 'gradle-user')

    def test_repository_name_upper_case_variables(self):
        environ = {'MY_REPO_USERNAME': 'u', 'MY_REPO_PASSWORD': 'p'}
        source = CredentialSource('my-repo', properties_file=self.missing, environ=environ)

        self.assertEqual(source.env_candidates('username'),
                         ['ORG_GRADLE_PROJECT_my-repoUsername', 'MY_REPO_USERNAME', 'MAVEN_USERNAME'])
        self.assertEqual(source.resolve().password, 'p')

    def test_gradle_properties_file(self):
        properties = Path(self.tmp.name) / 'gradle.properties'
        properties.write_text('# secrets\nDasBabyPixelUsername=file-user\nDasBabyPixelPassword = file-pass\n')
        source = CredentialSource('DasBabyPixel', environ={'GRADLE_USER_HOME': self.tmp.name})

        credentials = source.resolve()

        self.assertEqual(credentials.username, 'file-user')
        self.assertEqual(credentials.password, 'file-pass')

    def test_empty_password_raises(self):
        environ = {'MAVEN_USERNAME': 'u', 'MAVEN_PASSWORD': ''}
        source = CredentialSource('Releases', properties_file=self.missing, environ=environ)

        with self.assertRaises(AuthenticationError) as context:
            source.resolve()

        self.assertIn('password', str(context.exception))
        self.assertIn('MAVEN_PASSWORD', str(context.exception))

    def test_password_not_in_repr(self):
        environ = {'MAVEN_USERNAME': 'u', 'MAVEN_PASSWORD': 'hunter2'}
        credentials = CredentialSource('Releases', properties_file=self.missing, environ=environ).resolve()

        self.assertNotIn('hunter2', repr(credentials))
        self.assertTrue(credentials.get_headers()['Authorization'].startswith('Basic '))

    def test_parse_properties(self):
        content = "a=1\n! comment\nb: two\nc  three\n\n# x=y\n"
        self.assertEqual(parse_properties(content), {'a': '1', 'b': 'two', 'c': 'three'})


class TestMavenConfig(unittest.TestCase):

    def test_defaults(self):
        config = MavenConfig(base_config())

        self.assertEqual(str(config.coordinates), 'de.example:lib:1.0')
        self.assertFalse(config.allow_overwrite)
        self.assertEqual(config.toolchain.language_version, 8)
        self.assertEqual(config.toolchain.vendor, 'adoptium')
        self.assertEqual(config.validate(), (True, ""))

    def test_literal_credentials_are_rejected(self):
        config = MavenConfig(base_config(credentials={'username': 'alice', 'password': 'secret'}))

        is_valid, message = config.validate()

        self.assertFalse(is_valid)
        self.assertIn('must not be stored', message)

    def test_http_url_is_rejected(self):
        is_valid, message = MavenConfig(base_config(url='http://repo.example.com/')).validate()

        self.assertFalse(is_valid)
        self.assertIn('https', message)

    def test_unknown_vendor_is_rejected(self):
        raw = base_config()
        raw['java'] = {'vendor': 'nobody'}

        is_valid, message = MavenConfig(raw).validate()

        self.assertFalse(is_valid)
        self.assertIn('vendor', message)

    def test_invalid_retries_and_timeout(self):
        self.assertFalse(MavenConfig(base_config(retries=-1)).validate()[0])
        self.assertFalse(MavenConfig(base_config(timeout=0)).validate()[0])

    def test_env_expansion(self):
        with patch.dict(os.environ, {'REPO_HOST': 'nexus.example.org'}):
            config = MavenConfig(base_config(url='https://${REPO_HOST}/repository/x/'))

        self.assertEqual(config.repo_url, 'https://nexus.example.org/repository/x/')

    def test_summary_never_contains_secrets(self):
        with patch.dict(os.environ, {'MAVEN_PASSWORD': 'hunter2', 'MAVEN_USERNAME': 'u'}):
            summary = MavenConfig(base_config()).get_config_summary()

        self.assertNotIn('hunter2', summary)
        self.assertIn('MAVEN_PASSWORD', summary)

    def test_find_artifacts(self):
        with tempfile.TemporaryDirectory() as tmp:
            libs = Path(tmp) / 'build' / 'libs'
            libs.mkdir(parents=True)
            (libs / 'lib-1.0.jar').write_bytes(b'jar')
            (libs / 'lib-1.0-sources.jar').write_bytes(b'src')

            artifacts = MavenConfig(base_config(), base_dir=tmp).find_artifacts()

        self.assertEqual(artifacts.primary, libs / 'lib-1.0.jar')
        self.assertEqual(artifacts.sources, libs / 'lib-1.0-sources.jar')
        self.assertIsNone(artifacts.javadoc)

    def test_load_from_file(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / 'mvnpub.toml'
            path.write_text(CONFIG_TOML)

            config = load_maven_config(str(path))

        self.assertEqual(config.repo_name, 'DasBabyPixel')
        self.assertEqual(config.group_id, 'de.dasbabypixel')
        self.assertEqual(config.get_credential_source().username_env, 'NEXUS_USER')
        self.assertEqual(config.pom_info.description, 'Graph utilities')
        self.assertTrue(config.validate()[0])

    def test_load_missing_file(self):
        with self.assertRaises(ValidationError):
            load_maven_config('/nonexistent/mvnpub.toml')

    def test_load_invalid_toml(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / 'mvnpub.toml'
            path.write_text('[project\nname = ')

            with self.assertRaises(ValidationError):
                load_maven_config(str(path))


if __name__ == '__main__':
    unittest.main()
