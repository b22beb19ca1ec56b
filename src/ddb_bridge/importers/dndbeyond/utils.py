"""
Helpers shared by the D&D Beyond parsers.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence

from .schema import HOMEBREW_SOURCE, source_book
from ...models import ClassDefinition, DDBCharacter, ItemDefinition, Modifier

# Restrictions that mark a modifier as unconditional
UNRESTRICTED = ("", None)


@dataclass(frozen=True)
class SourceData:
    """Book name(s) and page a definition was published in."""
    name: str | None = None
    page: str | None = None


def _book_name(source_id: int | None, full_source: bool) -> str:
    book = source_book(source_id)
    if book is None:
        return HOMEBREW_SOURCE
    return book.description if full_source else book.name


def get_source_data(
    definition: ClassDefinition | ItemDefinition,
    full_source: bool = False,
) -> SourceData:
    """Resolve the source book name and page of a class or item definition.

    Newer payloads carry a ``sources`` list; older ones a single
    ``sourceId``/``sourcePageNumber`` pair.

    Args:
        definition: Class, subclass or item definition.
        full_source: Use the book's full title instead of its abbreviation.

    Returns:
        SourceData with ``name`` and ``page`` (either may be None).
    """
    if definition.sources:
        name = ", ".join(_book_name(s.source_id, full_source) for s in definition.sources)
        pages = [str(s.page_number) for s in definition.sources if s.page_number]
        return SourceData(name=name, page=", ".join(pages) or None)

    name = _book_name(definition.source_id, full_source) if definition.source_id else None
    page = str(definition.source_page_number) if definition.source_page_number else None
    return SourceData(name=name, page=page)


def parse_source(definition: ItemDefinition, full_source: bool = False) -> str:
    """Format an item citation as ``"<book> pg. <page>"``."""
    source = get_source_data(definition, full_source)
    result = source.name or ""
    if source.page:
        result += f" pg. {source.page}"
    return result


def version_compare(v1: str, v2: str) -> int:
    """Compare dotted version strings numerically.

    Returns:
        A negative number when v1 < v2, zero when equal, positive when v1 > v2.
        Missing components count as 0, so "1.4" == "1.4.0".
    """
    def parts(version: str) -> list[int]:
        result = []
        for piece in version.split("."):
            digits = "".join(ch for ch in piece if ch.isdigit())
            result.append(int(digits) if digits else 0)
        return result

    left, right = parts(v1), parts(v2)
    width = max(len(left), len(right))
    left += [0] * (width - len(left))
    right += [0] * (width - len(right))
    for a, b in zip(left, right):
        if a != b:
            return a - b
    return 0


def filter_modifiers(
    modifiers: Iterable[Modifier],
    type: str,
    sub_type: str | None = None,
    restriction: Sequence[str | None] | None = UNRESTRICTED,
) -> list[Modifier]:
    """Select modifiers by type, optional subtype and restriction text.

    Args:
        modifiers: Modifiers to search.
        type: Required modifier type, e.g. ``"proficiency"``.
        sub_type: Required subtype; None matches any.
        restriction: Allowed restriction values; None disables the check.
            The default keeps only unconditional modifiers.
    """
    return [
        mod for mod in modifiers
        if mod.type == type
        and (sub_type is None or mod.sub_type == sub_type)
        and (restriction is None or mod.restriction in restriction)
    ]


def get_chosen_class_modifiers(character: DDBCharacter) -> list[Modifier]:
    """Class modifiers granted by features the character has actually reached.

    A class modifier belongs to a feature through its ``componentId``; features
    above the class's current level are ignored.
    """
    feature_ids: set[int] = set()
    for character_class in character.character_classes():
        for feature in character_class.class_features:
            if feature.definition.required_level <= character_class.level:
                feature_ids.add(feature.definition.id)

    return [mod for mod in character.modifiers.class_ if mod.component_id in feature_ids]


def get_record_name(entry: object, default: str) -> str:
    """Definition name of a raw class or inventory entry, for warnings."""
    if isinstance(entry, dict):
        definition = entry.get("definition")
        if isinstance(definition, dict) and definition.get("name"):
            return str(definition["name"])
    return default
