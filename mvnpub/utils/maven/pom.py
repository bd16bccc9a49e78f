"""
Publication descriptors: POM, Gradle module metadata and maven-metadata.xml.
"""

import json
import time
import xml.etree.ElementTree as ET
from dataclasses import dataclass
from typing import Any, Dict, List, Optional
from xml.sax.saxutils import escape

from .errors import ValidationError
from .models import Coordinates
from .toolchain import ToolchainSpec

MODULE_FORMAT_VERSION = '1.1'

# classifier -> [(variant name, org.gradle.usage)]
VARIANTS = {
    None: [('apiElements', 'java-api'), ('runtimeElements', 'java-runtime')],
    'sources': [('sourcesElements', 'java-runtime')],
    'javadoc': [('javadocElements', 'java-runtime')],
}


@dataclass(frozen=True)
class PomInfo:
    """Descriptive POM metadata."""
    name: str = ''
    description: str = ''
    url: str = ''
    license_name: str = ''
    license_url: str = ''
    developer_id: str = ''
    developer_name: str = ''
    developer_email: str = ''
    scm_url: str = ''
    scm_connection: str = ''
    scm_dev_connection: str = ''


@dataclass(frozen=True)
class PublishedFile:
    """A file going into the module metadata."""
    classifier: Optional[str]
    name: str
    size: int
    checksums: Dict[str, str]


def _tag(name: str, value: str, indent: str = '    ') -> str:
    return f"{indent}<{name}>{escape(value)}</{name}>\n" if value else ''


def generate_pom(coordinates: Coordinates,
                 info: Optional[PomInfo] = None,
                 toolchain: Optional[ToolchainSpec] = None,
                 packaging: str = 'jar',
                 with_module_metadata: bool = True) -> str:
    """Generate a POM for the publication."""
    info = info or PomInfo()
    toolchain = toolchain or ToolchainSpec()

    marker = ''
    if with_module_metadata:
        marker = "  <!-- do_not_remove: published-with-gradle-metadata -->\n"

    body = ''
    body += _tag('name', info.name or coordinates.artifact, '  ')
    body += _tag('description', info.description, '  ')
    body += _tag('url', info.url, '  ')
    if packaging != 'jar':
        body += _tag('packaging', packaging, '  ')

    if info.license_name:
        body += "  <licenses>\n    <license>\n"
        body += _tag('name', info.license_name, '      ')
        body += _tag('url', info.license_url, '      ')
        body += "    </license>\n  </licenses>\n"

    if info.developer_id or info.developer_name:
        body += "  <developers>\n    <developer>\n"
        body += _tag('id', info.developer_id, '      ')
        body += _tag('name', info.developer_name, '      ')
        body += _tag('email', info.developer_email, '      ')
        body += "    </developer>\n  </developers>\n"

    if info.scm_url:
        body += "  <scm>\n"
        body += _tag('connection', info.scm_connection, '    ')
        body += _tag('developerConnection', info.scm_dev_connection, '    ')
        body += _tag('url', info.scm_url, '    ')
        body += "  </scm>\n"

    return f"""<?xml version="1.0" encoding="UTF-8"?>
<project xmlns="http://maven.apache.org/POM/4.0.0" xmlns:xsi="http://www.w3.org/2001/XMLSchema-instance" xsi:schemaLocation="http://maven.apache.org/POM/4.0.0 https://maven.apache.org/xsd/maven-4.0.0.xsd">
{marker}  <modelVersion>4.0.0</modelVersion>
  <groupId>{escape(coordinates.group)}</groupId>
  <artifactId>{escape(coordinates.artifact)}</artifactId>
  <version>{escape(coordinates.version)}</version>
{body}  <properties>
    <project.build.sourceEncoding>{escape(toolchain.encoding)}</project.build.sourceEncoding>
    <maven.compiler.source>{toolchain.target_level}</maven.compiler.source>
    <maven.compiler.target>{toolchain.target_level}</maven.compiler.target>
  </properties>
</project>
"""


def _variant(name: str, usage: str, classifier: Optional[str],
             toolchain: ToolchainSpec, files: List[Dict[str, Any]]) -> Dict[str, Any]:
    if classifier:
        attributes = {
            'org.gradle.category': 'documentation',
            'org.gradle.dependency.bundling': 'external',
            'org.gradle.docstype': classifier,
            'org.gradle.usage': usage,
        }
    else:
        attributes = {
            'org.gradle.category': 'library',
            'org.gradle.dependency.bundling': 'external',
            'org.gradle.jvm.version': toolchain.language_version,
            'org.gradle.libraryelements': 'jar',
            'org.gradle.usage': usage,
        }
    return {'name': name, 'attributes': attributes, 'files': files}


def generate_module_metadata(coordinates: Coordinates,
                             files: List[PublishedFile],
                             toolchain: Optional[ToolchainSpec] = None,
                             created_by: str = 'mvnpub',
                             tool_version: str = '') -> str:
    """Generate Gradle module metadata (format 1.1) as JSON."""
    toolchain = toolchain or ToolchainSpec()

    variants = []
    for published in files:
        entry = {
            'name': published.name,
            'url': published.name,
            'size': published.size,
            'sha512': published.checksums.get('sha512', ''),
            'sha256': published.checksums.get('sha256', ''),
            'sha1': published.checksums.get('sha1', ''),
            'md5': published.checksums.get('md5', ''),
        }
        for name, usage in VARIANTS.get(published.classifier, []):
            variants.append(_variant(name, usage, published.classifier, toolchain, [entry]))

    document = {
        'formatVersion': MODULE_FORMAT_VERSION,
        'component': {
            'group': coordinates.group,
            'module': coordinates.artifact,
            'version': coordinates.version,
            'attributes': {
                'org.gradle.status': 'integration' if coordinates.is_snapshot else 'release',
            },
        },
        'createdBy': {
            created_by: {'version': tool_version} if tool_version else {},
        },
        'variants': variants,
    }
    return json.dumps(document, indent=2) + '\n'


def _local_name(tag: str) -> str:
    return tag.rsplit('}', 1)[-1]


def _child(parent: Optional[ET.Element], name: str) -> Optional[ET.Element]:
    """First direct child with the given local name, any namespace."""
    if parent is None:
        return None
    for node in parent:
        if isinstance(node.tag, str) and _local_name(node.tag) == name:
            return node
    return None


def _parse_metadata(existing_xml: Optional[str]) -> Optional[ET.Element]:
    if not existing_xml:
        return None
    try:
        return ET.fromstring(existing_xml)
    except ET.ParseError as e:
        raise ValidationError(f"Existing maven-metadata.xml cannot be parsed: {e}") from e


def merge_maven_metadata(existing_xml: Optional[str],
                         coordinates: Coordinates,
                         timestamp: Optional[float] = None) -> str:
    """
    Merge a version into artifact-level maven-metadata.xml.

    Args:
        existing_xml: Current metadata content, or None if absent
        coordinates: Coordinates being published
        timestamp: Seconds since the epoch (default: now)

    Returns:
        Updated metadata content
    """
    root = _parse_metadata(existing_xml)

    versions = []
    release = ''
    versioning = _child(root, 'versioning')
    listed = _child(versioning, 'versions')
    for node in (listed if listed is not None else []):
        if not isinstance(node.tag, str) or _local_name(node.tag) != 'version':
            continue
        value = (node.text or '').strip()
        if value and value not in versions:
            versions.append(value)
    previous_release = _child(versioning, 'release')
    if previous_release is not None:
        release = (previous_release.text or '').strip()

    if coordinates.version not in versions:
        versions.append(coordinates.version)
    if not coordinates.is_snapshot:
        release = coordinates.version

    last_updated = time.strftime('%Y%m%d%H%M%S', time.gmtime(timestamp if timestamp is not None else time.time()))
    version_lines = ''.join(f"      <version>{escape(v)}</version>\n" for v in versions)
    release_line = f"    <release>{escape(release)}</release>\n" if release else ''

    return f"""<?xml version="1.0" encoding="UTF-8"?>
<metadata>
  <groupId>{escape(coordinates.group)}</groupId>
  <artifactId>{escape(coordinates.artifact)}</artifactId>
  <versioning>
    <latest>{escape(coordinates.version)}</latest>
{release_line}    <versions>
{version_lines}    </versions>
    <lastUpdated>{last_updated}</lastUpdated>
  </versioning>
</metadata>
"""
