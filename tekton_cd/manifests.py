"""Resource definitions: manifest files and the objects they declare.

Identities are read for display only. A file that cannot be read or parsed
still gets applied; kubectl decides whether it is valid.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Tuple

import yaml

from .output import log_warn


@dataclass(frozen=True)
class ResourceDefinition:
    path: Path
    identities: Tuple[str, ...] = field(default=())
    # Objects with only metadata.generateName; kubectl apply refuses them.
    generated: bool = False

    @property
    def exists(self) -> bool:
        return self.path.is_file()

    def describe(self) -> str:
        if not self.identities:
            return str(self.path)
        return f"{self.path} ({', '.join(self.identities)})"

    def names_of(self, kind: str) -> List[str]:
        """Names of the declared objects of the given kind."""
        names = []
        for identity in self.identities:
            declared_kind, _, name = identity.partition("/")
            if declared_kind.lower() == kind.lower() and name != "unnamed":
                names.append(name)
        return names


def read_objects(path: Path) -> List[Dict]:
    """Return every object declared in a manifest file, expanding List kinds."""
    try:
        with open(path, encoding="utf-8") as f:
            documents = list(yaml.safe_load_all(f))
    except (OSError, UnicodeDecodeError, yaml.YAMLError) as e:
        log_warn(f"Could not parse {path}: {e}")
        return []

    objects = []
    for doc in documents:
        if not isinstance(doc, dict):
            continue
        items = doc.get("items") if doc.get("kind") == "List" else [doc]
        if not isinstance(items, list):
            continue
        objects.extend(item for item in items if isinstance(item, dict))
    return objects


def _metadata(obj) -> Dict:
    metadata = obj.get("metadata")
    return metadata if isinstance(metadata, dict) else {}


def identity_of(obj) -> str:
    kind = obj.get("kind") or "Unknown"
    name = _metadata(obj).get("name") or "unnamed"
    return f"{kind}/{name}"


def read_identities(path: Path) -> Tuple[str, ...]:
    """Return kind/name for every document in a manifest file."""
    return tuple(identity_of(obj) for obj in read_objects(path))


def load_definition(path) -> ResourceDefinition:
    path = Path(path)
    if not path.is_file():
        return ResourceDefinition(path=path)
    objects = read_objects(path)
    generated = any(
        _metadata(obj).get("generateName") and not _metadata(obj).get("name")
        for obj in objects
    )
    return ResourceDefinition(
        path=path,
        identities=tuple(identity_of(obj) for obj in objects),
        generated=generated,
    )


def load_definitions(paths) -> List[ResourceDefinition]:
    """Load definitions in the given order; missing files are kept so they can be reported as skipped."""
    return [load_definition(p) for p in paths]
