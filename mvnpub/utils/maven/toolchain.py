"""
JVM toolchain pin.

Checks that the classes inside a jar were compiled for the pinned language
level. The vendor is validated against the known JVM vendors and recorded
only; it cannot be recovered from class files.
"""

import struct
import zipfile
import zlib
from dataclasses import dataclass
from pathlib import Path
from typing import List, Tuple

from .errors import ValidationError

CLASS_MAGIC = 0xCAFEBABE

# Class file major version = Java language version + 44 (Java 8 -> 52)
MAJOR_VERSION_OFFSET = 44

KNOWN_VENDORS = (
    'adoptium', 'adoptopenjdk', 'amazon', 'azul', 'bellsoft', 'graal_vm',
    'hewlett_packard', 'ibm', 'jetbrains', 'microsoft', 'oracle', 'sap', 'tencent',
)


@dataclass(frozen=True)
class ToolchainSpec:
    language_version: int = 8
    vendor: str = 'adoptium'
    encoding: str = 'UTF-8'

    @property
    def max_class_major(self) -> int:
        return self.language_version + MAJOR_VERSION_OFFSET

    @property
    def target_level(self) -> str:
        """Compiler source/target level, e.g. '1.8' for Java 8."""
        if self.language_version <= 8:
            return f"1.{self.language_version}"
        return str(self.language_version)

    def validate(self) -> Tuple[bool, str]:
        if not isinstance(self.language_version, int) or self.language_version < 1:
            return False, f"Invalid Java language version: {self.language_version!r}"
        if self.vendor and self.vendor.lower() not in KNOWN_VENDORS:
            return False, f"Unknown JVM vendor: {self.vendor}. Must be one of {list(KNOWN_VENDORS)}"
        if not self.encoding:
            return False, "Source encoding must not be empty"
        return True, ""


def read_class_major(header: bytes) -> int:
    """Return the major version from the first 8 bytes of a class file."""
    if len(header) < 8:
        raise ValueError("Truncated class file header")
    magic, _minor, major = struct.unpack('>IHH', header[:8])
    if magic != CLASS_MAGIC:
        raise ValueError(f"Bad class file magic: {magic:#x}")
    return major


def scan_class_versions(jar_path: Path) -> List[Tuple[str, int]]:
    """
    List (entry name, major version) for every class in a jar.

    Multi-release entries under META-INF/versions/ and module-info.class are
    skipped since they may legitimately target newer releases.
    """
    result = []
    with zipfile.ZipFile(jar_path) as jar:
        for info in jar.infolist():
            name = info.filename
            if not name.endswith('.class') or info.is_dir():
                continue
            if name.startswith('META-INF/versions/') or name.endswith('module-info.class'):
                continue
            with jar.open(info) as f:
                result.append((name, read_class_major(f.read(8))))
    return result


def check_toolchain(jar_path: Path, spec: ToolchainSpec, verbose: bool = False) -> int:
    """
    Verify that a jar's classes do not exceed the pinned language level.

    Returns:
        Number of class files inspected (0 if the file is not a zip archive)

    Raises:
        ValidationError: if a class targets a newer release or is malformed
    """
    if not zipfile.is_zipfile(jar_path):
        if verbose:
            print(f"  Skipping toolchain check, not a zip archive: {jar_path}")
        return 0

    try:
        versions = scan_class_versions(jar_path)
    except (ValueError, zipfile.BadZipFile, zlib.error, NotImplementedError, RuntimeError) as e:
        raise ValidationError(f"Cannot read classes from {jar_path}: {e}") from e

    too_new = [(name, major) for name, major in versions if major > spec.max_class_major]
    if too_new:
        name, major = too_new[0]
        raise ValidationError(
            f"{len(too_new)} class(es) in {Path(jar_path).name} target Java "
            f"{major - MAJOR_VERSION_OFFSET}, toolchain is pinned to Java {spec.language_version} "
            f"(first: {name})"
        )

    if verbose:
        print(f"  Toolchain check passed: {len(versions)} classes <= Java {spec.language_version}")
    return len(versions)
