"""Stable response shape for a loosely structured C2PA manifest.

Producer tools and library versions disagree on field names, so every
logical value is read through an ordered chain of key paths. A path is a
tuple of dict keys and list indices; the first path that yields a present
value wins. Missing or oddly typed data never raises, it falls through to
the next path and finally to the default.
"""

from __future__ import annotations

from typing import Any, Iterable, Optional, Sequence, Union

PathStep = Union[str, int]
Path = tuple[PathStep, ...]

UNKNOWN = "Unknown"
UNTITLED = "Untitled"
DEFAULT_ALGORITHM = "es256"

ISSUER_PATHS: Sequence[Path] = (
    ("claim_generator",),
    ("issuer",),
    ("signature_info", "issuer"),
    ("claim_generator_info", 0, "name"),
)
ALGORITHM_PATHS: Sequence[Path] = (
    ("signature_info", "alg"),
    ("signature_info", "algorithm"),
)
SIGNED_AT_PATHS: Sequence[Path] = (
    ("signature_info", "time"),
    ("signature_info", "timestamp"),
    ("timestamp",),
)

ACTION_TYPE_PATHS: Sequence[Path] = (("action",),)
ACTION_TOOL_PATHS: Sequence[Path] = (
    ("softwareAgent", "name"),
    ("softwareAgent",),
    ("software_agent", "name"),
    ("software_agent",),
    ("tool",),
)
ACTION_WHEN_PATHS: Sequence[Path] = (("when",), ("timestamp",))

INGREDIENT_TITLE_PATHS: Sequence[Path] = (("title",),)
INGREDIENT_FORMAT_PATHS: Sequence[Path] = (("format",), ("mime_type",))
INGREDIENT_RELATIONSHIP_PATHS: Sequence[Path] = (("relationship",),)
INGREDIENT_ISSUER_PATHS: Sequence[Path] = (("claim_generator",), ("issuer",))

AUTHOR_NAME_PATHS: Sequence[Path] = (("name",), ("creator",))
AUTHOR_ID_PATHS: Sequence[Path] = (("identifier",), ("id",), ("@id",))
NOTE_PATHS: Sequence[Path] = (("summary",), ("text",), ("description",))

ACTIONS_LABELS = ("c2pa.actions",)
AUTHOR_LABELS = ("c2pa.author",)
CREATIVE_WORK_LABELS = ("stds.schema-org.CreativeWork",)
NOTE_LABELS = ("c2pa.note",)


def _present(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, (str, list, tuple, dict)) and not value:
        return False
    return True


def dig(source: Any, path: Path) -> Any:
    """Follow ``path`` through nested dicts/lists, ``None`` on any miss."""
    current = source
    for step in path:
        if isinstance(step, int):
            if not isinstance(current, (list, tuple)) or not -len(current) <= step < len(current):
                return None
            current = current[step]
        else:
            if not isinstance(current, dict):
                return None
            current = current.get(step)
    return current


def first_present(source: Any, paths: Iterable[Path], default: Any = None, *, scalars_only: bool = True) -> Any:
    """Value of the first path that resolves to something present.

    With ``scalars_only`` a path that lands on a dict or list does not count,
    so a nested object where a string was expected falls through.
    """
    for path in paths:
        value = dig(source, path)
        if not _present(value):
            continue
        if scalars_only and isinstance(value, (dict, list, tuple)):
            continue
        return value
    return default


# --- Assertions ---


def _label_matches(label: Any, wanted: Sequence[str]) -> bool:
    # Versioned labels ("c2pa.actions.v2") and instance suffixes ("__1")
    # belong to the same assertion family.
    if not isinstance(label, str):
        return False
    base = label.split("__", 1)[0]
    return any(base == w or base.startswith(w + ".v") for w in wanted)


def find_assertion(manifest: dict, labels: Sequence[str]) -> Any:
    """Data of the first assertion whose label is in ``labels``.

    Handles both the list-of-``{label, data}`` form and a plain mapping.
    """
    assertions = manifest.get("assertions") if isinstance(manifest, dict) else None
    if isinstance(assertions, dict):
        for label, data in assertions.items():
            if _label_matches(label, labels):
                return data
    elif isinstance(assertions, list):
        for entry in assertions:
            if isinstance(entry, dict) and _label_matches(entry.get("label"), labels):
                return entry.get("data")
    return None


# --- Field extractors ---


def extract_issuer(manifest: dict) -> str:
    return first_present(manifest, ISSUER_PATHS, UNKNOWN)


def extract_actions(manifest: dict) -> list[dict]:
    data = find_assertion(manifest, ACTIONS_LABELS)
    raw = data.get("actions") if isinstance(data, dict) else data
    if not isinstance(raw, list):
        return []

    actions = []
    for action in raw:
        if not isinstance(action, dict):
            continue
        actions.append(
            {
                "type": first_present(action, ACTION_TYPE_PATHS, None),
                "tool": first_present(action, ACTION_TOOL_PATHS, None),
                "timestamp": first_present(action, ACTION_WHEN_PATHS, None),
            }
        )
    return actions


def extract_ingredients(manifest: dict) -> list[dict]:
    raw = manifest.get("ingredients")
    if not isinstance(raw, list):
        return []
    return [
        {
            "title": first_present(ing, INGREDIENT_TITLE_PATHS, UNTITLED),
            "format": first_present(ing, INGREDIENT_FORMAT_PATHS, None),
            "relationship": first_present(ing, INGREDIENT_RELATIONSHIP_PATHS, None),
            "issuer": first_present(ing, INGREDIENT_ISSUER_PATHS, UNKNOWN),
        }
        for ing in raw
        if isinstance(ing, dict)
    ]


def extract_author(manifest: dict) -> Optional[dict]:
    author = find_assertion(manifest, AUTHOR_LABELS)
    if not isinstance(author, dict):
        author = dig(find_assertion(manifest, CREATIVE_WORK_LABELS), ("author", 0))
    if not isinstance(author, dict):
        return None
    return {
        "name": first_present(author, AUTHOR_NAME_PATHS, None),
        "identifier": first_present(author, AUTHOR_ID_PATHS, None),
    }


def extract_note(manifest: dict) -> Optional[str]:
    note = find_assertion(manifest, NOTE_LABELS)
    if isinstance(note, str):
        return note or None
    return first_present(note, NOTE_PATHS, None)


def extract_credential(manifest: dict, issuer: str) -> dict:
    return {
        "issuedBy": issuer,
        "algorithm": first_present(manifest, ALGORITHM_PATHS, DEFAULT_ALGORITHM),
        "timestamp": first_present(manifest, SIGNED_AT_PATHS, None),
    }


def shape_manifest(manifest: dict, store: Optional[dict], filename: Optional[str], mime_type: Optional[str]) -> dict:
    """Build the verification payload for a found manifest."""
    issuer = extract_issuer(manifest)
    actions = extract_actions(manifest)
    first_tool = actions[0]["tool"] if actions else None

    return {
        "signed": True,
        "verified": True,
        "content": {
            "filename": filename,
            "title": first_present(manifest, (("title",),), filename),
            "issuer": issuer,
            "format": mime_type,
        },
        "process": {
            "appOrDeviceUsed": first_tool or issuer,
            "actions": actions,
        },
        "ingredients": extract_ingredients(manifest),
        "credential": extract_credential(manifest, issuer),
        "author": extract_author(manifest),
        "note": extract_note(manifest),
        "rawManifest": manifest,
        "manifestStore": store,
    }


def not_signed(message: str) -> dict:
    return {"signed": False, "verified": False, "message": message}
