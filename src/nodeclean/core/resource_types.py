"""Resource type metadata used to decide whether an exported resource is ensurable.

Two read-only sources are consulted: the catalogue of native resource types and
the registry of user-defined types (defines). A resource is ensurable when its
native type accepts an ``ensure`` attribute or, failing a native match, when a
top-scope definition declares an ``ensure`` argument.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Iterable, Mapping, Optional, Protocol

__all__ = [
    "DEFAULT_NATIVE_TYPES",
    "DefinitionLookup",
    "DefinitionRegistry",
    "ENSURE",
    "NativeTypeCatalog",
    "TypeLookup",
    "TypeDefinition",
    "TypeMetadata",
    "is_ensurable",
]

ENSURE = "ensure"

_COMMON = ("name", "alias", "audit", "before", "loglevel", "noop", "notify", "require", "schedule", "stage", "subscribe", "tag")

# Native types known out of the box, mapped to their type-specific attributes.
DEFAULT_NATIVE_TYPES: Dict[str, tuple[str, ...]] = {
    "augeas": ("context", "changes", "onlyif", "incl", "lens"),
    "cron": ("ensure", "command", "user", "hour", "minute", "month", "monthday", "weekday", "environment", "target"),
    "exec": ("command", "creates", "cwd", "environment", "onlyif", "unless", "path", "refreshonly", "returns", "timeout", "user"),
    "file": ("ensure", "path", "owner", "group", "mode", "content", "source", "target", "recurse", "purge", "backup", "checksum"),
    "filebucket": ("path", "server", "port"),
    "group": ("ensure", "gid", "members", "system"),
    "host": ("ensure", "ip", "host_aliases", "comment", "target"),
    "mailalias": ("ensure", "recipient", "target"),
    "mount": ("ensure", "device", "fstype", "options", "pass", "dump", "atboot", "target"),
    "nagios_command": ("ensure", "command_line", "target"),
    "nagios_contact": ("ensure", "alias", "email", "contactgroups", "target"),
    "nagios_host": ("ensure", "address", "alias", "hostgroups", "parents", "use", "target"),
    "nagios_hostgroup": ("ensure", "alias", "members", "target"),
    "nagios_service": ("ensure", "check_command", "host_name", "service_description", "use", "target"),
    "notify": ("message", "withpath"),
    "package": ("ensure", "provider", "source", "install_options", "responsefile"),
    "resources": ("purge", "unless_system_user"),
    "schedule": ("period", "periodmatch", "range", "repeat"),
    "service": ("ensure", "enable", "hasrestart", "hasstatus", "pattern", "restart", "start", "status", "stop"),
    "ssh_authorized_key": ("ensure", "key", "type", "user", "options", "target"),
    "sshkey": ("ensure", "key", "type", "host_aliases", "target"),
    "stage": (),
    "tidy": ("age", "backup", "matches", "recurse", "rmdirs", "size", "type"),
    "user": ("ensure", "uid", "gid", "groups", "home", "shell", "comment", "managehome", "password"),
    "yumrepo": ("ensure", "baseurl", "descr", "enabled", "gpgcheck", "gpgkey", "mirrorlist"),
    "zone": ("ensure", "path", "ip", "autoboot"),
}


def _normalize(type_name: str) -> str:
    return type_name.strip().lower()


@dataclass(frozen=True)
class TypeMetadata:
    """Description of a native resource type."""

    name: str
    attributes: FrozenSet[str] = field(default_factory=frozenset)

    def is_valid_attribute(self, attribute: str) -> bool:
        if attribute in _COMMON:
            return True
        return attribute in self.attributes


@dataclass(frozen=True)
class TypeDefinition:
    """A user-defined resource type and the arguments it declares."""

    name: str
    arguments: Mapping[str, Optional[str]] = field(default_factory=dict)

    @property
    def argument_names(self) -> FrozenSet[str]:
        return frozenset(self.arguments)


class TypeLookup(Protocol):
    def lookup(self, type_name: str) -> Optional[TypeMetadata]:
        ...


class DefinitionLookup(Protocol):
    def find_definition(self, namespace: str, type_name: str) -> Optional[TypeDefinition]:
        ...


class NativeTypeCatalog:
    """Keeps track of native resource types and their valid attributes."""

    def __init__(self, types: Optional[Mapping[str, Iterable[str]]] = None) -> None:
        self._types: Dict[str, TypeMetadata] = {}
        for name, attributes in (types if types is not None else DEFAULT_NATIVE_TYPES).items():
            self.register(name, attributes)

    def register(self, name: str, attributes: Iterable[str]) -> TypeMetadata:
        key = _normalize(name)
        metadata = TypeMetadata(name=key, attributes=frozenset(attributes))
        self._types[key] = metadata
        return metadata

    def lookup(self, type_name: str) -> Optional[TypeMetadata]:
        return self._types.get(_normalize(type_name))

    def available(self) -> Dict[str, TypeMetadata]:
        return dict(self._types)


class DefinitionRegistry:
    """User-defined resource types, keyed by namespace and name.

    The empty namespace is top scope. Fully qualified names such as
    ``apache::vhost`` are stored as given under the namespace they were
    registered in.
    """

    def __init__(self, definitions: Optional[Mapping[str, Iterable[str]]] = None) -> None:
        self._definitions: Dict[tuple[str, str], TypeDefinition] = {}
        for name, arguments in (definitions or {}).items():
            self.register(name, arguments)

    def register(self, name: str, arguments: Iterable[str], *, namespace: str = "") -> TypeDefinition:
        key = _normalize(name)
        definition = TypeDefinition(name=key, arguments={argument: None for argument in arguments})
        self._definitions[(_normalize(namespace), key)] = definition
        return definition

    def find_definition(self, namespace: str, type_name: str) -> Optional[TypeDefinition]:
        return self._definitions.get((_normalize(namespace), _normalize(type_name)))


def is_ensurable(type_name: str, catalog: TypeLookup, definitions: DefinitionLookup) -> bool:
    """Return whether resources of ``type_name`` can be set to ``absent``.

    A native type match is authoritative; definitions are only consulted when
    no native type of that name exists. Unknown types are not ensurable.
    """
    metadata = catalog.lookup(type_name)
    if metadata is not None:
        return metadata.is_valid_attribute(ENSURE)
    definition = definitions.find_definition("", type_name)
    if definition is not None:
        return ENSURE in definition.argument_names
    return False
