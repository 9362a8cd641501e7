"""Semantic versions, Cargo.lock lookup, and release version selection."""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from functools import total_ordering

_SEMVER = re.compile(
    r"^(?P<major>0|[1-9]\d*)\.(?P<minor>0|[1-9]\d*)\.(?P<patch>0|[1-9]\d*)"
    r"(?:-(?P<pre>[0-9A-Za-z.-]+))?"
    r"(?:\+(?P<build>[0-9A-Za-z.-]+))?$"
)

# A [[package]] entry in Cargo.lock: name line immediately followed by version.
_LOCK_ENTRY = re.compile(r'(?m)^name = "([^"]+)"\n\s*version = "([^"]+)"')


def _pre_key(part: str) -> tuple[int, int | str]:
    # Numeric identifiers sort before alphanumeric ones.
    if part.isdigit():
        return (0, int(part))
    return (1, part)


@total_ordering
@dataclass(frozen=True)
class Version:
    """A ``MAJOR.MINOR.PATCH[-pre][+build]`` version.

    Ordering follows semver precedence: a pre-release sorts before the
    release it precedes and build metadata is ignored.
    """

    major: int
    minor: int
    patch: int
    pre: tuple[str, ...] = ()
    build: str = ""

    @classmethod
    def parse(cls, text: str) -> Version:
        """Parse *text*, raising ``ValueError`` when it is not a semver string."""
        match = _SEMVER.match(text.strip())
        if match is None:
            msg = f"Invalid version: {text!r}"
            raise ValueError(msg)
        pre = match.group("pre")
        return cls(
            major=int(match.group("major")),
            minor=int(match.group("minor")),
            patch=int(match.group("patch")),
            pre=tuple(pre.split(".")) if pre else (),
            build=match.group("build") or "",
        )

    def _key(self) -> tuple:
        core = (self.major, self.minor, self.patch)
        if not self.pre:
            return (core, 1, ())
        return (core, 0, tuple(_pre_key(p) for p in self.pre))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._key() == other._key()

    def __lt__(self, other: Version) -> bool:
        return self._key() < other._key()

    def __hash__(self) -> int:
        return hash(self._key())

    def __str__(self) -> str:
        text = f"{self.major}.{self.minor}.{self.patch}"
        if self.pre:
            text += "-" + ".".join(self.pre)
        if self.build:
            text += f"+{self.build}"
        return text


def parse_version(text: str) -> Version | None:
    """Lenient parse: returns None instead of raising."""
    try:
        return Version.parse(text)
    except ValueError:
        return None


def parse_tag_version(tag: str) -> Version | None:
    """Parse a release tag such as ``v0.1.0`` (the ``v`` is optional)."""
    return parse_version(tag[1:] if tag[:1] in ("v", "V") else tag)


def find_locked_version(package_name: str, cargo_lock: str) -> Version | None:
    """Return the version of *package_name* pinned in a Cargo.lock text.

    The first entry with a matching name wins. An unparseable version
    yields None.
    """
    for name, version in _LOCK_ENTRY.findall(cargo_lock):
        if name != package_name:
            continue
        return parse_version(version)
    return None


def choose_version_by_key[T](
    main_version: Version,
    items: Iterable[T],
    key: Callable[[T], Version | None],
) -> T | None:
    """Pick the item with the greatest version that is ``<=`` *main_version*.

    Items whose key is None are ignored. Returns None when nothing
    qualifies.

    Examples:
        >>> tags = ["0.2.0", "0.3.0"]
        >>> choose_version_by_key(Version.parse("0.3.1"), tags, parse_version)
        '0.3.0'
        >>> choose_version_by_key(Version.parse("0.1.1"), tags, parse_version) is None
        True
    """
    best: tuple[Version, T] | None = None
    for item in items:
        version = key(item)
        if version is None or version > main_version:
            continue
        if best is None or version > best[0]:
            best = (version, item)
    return best[1] if best is not None else None
