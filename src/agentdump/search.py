"""Read-only query engine over the classes recovered from a dump.

The index is built once from the parser output and never changes afterward,
so a single instance can be shared by any number of readers. The only
state filled in later is a cache of BM25 models keyed by their parameters;
an entry is never replaced once stored. Every multi-result query returns
matches in parse order; truncation is left to the caller.
"""

import logging
from collections.abc import Callable, Sequence

from agentdump.bm25_searcher import BM25Searcher
from agentdump.config import SearchConfig
from agentdump.models import (
    CLASS_KINDS,
    ClassInfo,
    DumpStats,
    FieldInfo,
    MethodInfo,
)

logger = logging.getLogger(__name__)

FieldMatch = tuple[ClassInfo, FieldInfo]
MethodMatch = tuple[ClassInfo, MethodInfo]


def _contains(text: str | None, query: str) -> bool:
    """Case-insensitive substring test; None never matches."""
    return text is not None and query.casefold() in text.casefold()


def _equals(text: str | None, query: str) -> bool:
    """Case-insensitive equality test; None never matches."""
    return text is not None and text.casefold() == query.casefold()


class SearchIndex:
    """Indexed lookups over a sequence of ClassInfo objects.

    Attributes:
        classes: The parsed classes, in file order.
    """

    def __init__(self, classes: Sequence[ClassInfo]):
        self.classes: tuple[ClassInfo, ...] = tuple(classes)

        by_full_name: dict[str, list[ClassInfo]] = {}
        by_type_def_index: dict[int, ClassInfo] = {}
        by_namespace: dict[str, list[ClassInfo]] = {}

        for cls in self.classes:
            by_full_name.setdefault(cls.full_name, []).append(cls)
            # Later declarations replace earlier ones with the same index
            by_type_def_index[cls.type_def_index] = cls
            by_namespace.setdefault(cls.namespace, []).append(cls)

        self._by_full_name = by_full_name
        self._by_type_def_index = by_type_def_index
        self._by_namespace = by_namespace
        # BM25 models built on first use, one per (k1, b) pair
        self._rankers: dict[tuple[float, float], BM25Searcher] = {}

        logger.debug(
            f"Indexed {len(self.classes)} classes across {len(by_namespace)} namespaces"
        )

    def _filter(self, predicate: Callable[[ClassInfo], bool]) -> list[ClassInfo]:
        return [cls for cls in self.classes if predicate(cls)]

    def _fields(self, predicate: Callable[[FieldInfo], bool]) -> list[FieldMatch]:
        return [(cls, f) for cls in self.classes for f in cls.fields if predicate(f)]

    def _methods(self, predicate: Callable[[MethodInfo], bool]) -> list[MethodMatch]:
        return [(cls, m) for cls in self.classes for m in cls.methods if predicate(m)]

    # Class queries

    def by_class_name(
        self, query: str, exact: bool = False, case_sensitive: bool = False
    ) -> list[ClassInfo]:
        """Find classes by bare name (substring, or equality when exact)."""
        if case_sensitive:
            if exact:
                return self._filter(lambda c: c.name == query)
            return self._filter(lambda c: query in c.name)
        if exact:
            return self._filter(lambda c: _equals(c.name, query))
        return self._filter(lambda c: _contains(c.name, query))

    def by_full_name(self, query: str, exact: bool = False) -> list[ClassInfo]:
        """Find classes by namespace-qualified name."""
        if exact:
            if query in self._by_full_name:
                return list(self._by_full_name[query])
            return self._filter(lambda c: _equals(c.full_name, query))
        return self._filter(lambda c: _contains(c.full_name, query))

    def by_namespace(self, query: str, exact: bool = False) -> list[ClassInfo]:
        """Find classes by namespace. The global namespace is the empty string."""
        if exact:
            if query in self._by_namespace:
                return list(self._by_namespace[query])
            return self._filter(lambda c: _equals(c.namespace, query))
        return self._filter(lambda c: _contains(c.namespace, query))

    def by_type_def_index(self, index: int) -> ClassInfo | None:
        """Look up the class declared with a TypeDefIndex, or None."""
        return self._by_type_def_index.get(index)

    def by_base_class(self, query: str) -> list[ClassInfo]:
        return self._filter(lambda c: _contains(c.base_class, query))

    def by_interface(self, query: str) -> list[ClassInfo]:
        return self._filter(lambda c: any(_contains(i, query) for i in c.interfaces))

    def by_kind(self, kind: str) -> list[ClassInfo]:
        """Find classes of a kind: class, struct, enum or interface."""
        return self._filter(lambda c: _equals(c.kind, kind))

    def mono_behaviours(self) -> list[ClassInfo]:
        return self._filter(lambda c: c.is_mono_behaviour)

    def scriptable_objects(self) -> list[ClassInfo]:
        return self._filter(lambda c: c.is_scriptable_object)

    def find_class(self, name: str) -> ClassInfo | None:
        """Resolve a single class for detail views.

        Prefers the first exact bare-name match, then the first substring match.
        """
        for matches in (self.by_class_name(name, exact=True), self.by_class_name(name)):
            if matches:
                return matches[0]
        return None

    # Field queries

    def field_search(self, query: str, exact: bool = False) -> list[FieldMatch]:
        if exact:
            return self._fields(lambda f: _equals(f.name, query))
        return self._fields(lambda f: _contains(f.name, query))

    def fields_by_type(self, field_type: str) -> list[FieldMatch]:
        return self._fields(lambda f: _contains(f.type, field_type))

    def fields_by_offset(self, offset: str) -> list[FieldMatch]:
        """Find fields at an offset. Compared as text, so "0x10" does not match "0x010"."""
        return self._fields(lambda f: _equals(f.offset, offset))

    # Method queries

    def method_search(self, query: str, exact: bool = False) -> list[MethodMatch]:
        if exact:
            return self._methods(lambda m: _equals(m.name, query))
        return self._methods(lambda m: _contains(m.name, query))

    def methods_by_return_type(self, return_type: str) -> list[MethodMatch]:
        return self._methods(lambda m: _contains(m.return_type, return_type))

    def methods_by_parameter_type(self, param_type: str) -> list[MethodMatch]:
        return self._methods(
            lambda m: any(_contains(p.type, param_type) for p in m.parameters)
        )

    def methods_by_rva(self, rva: str) -> list[MethodMatch]:
        return self._methods(lambda m: _equals(m.rva, rva))

    def methods_by_offset(self, offset: str) -> list[MethodMatch]:
        return self._methods(lambda m: _equals(m.offset, offset))

    # Member filters

    def classes_with_method(
        self,
        name: str,
        return_type: str | None = None,
        param_count: int | None = None,
    ) -> list[ClassInfo]:
        """Find classes declaring a matching method.

        Args:
            name: Substring of the method name.
            return_type: Substring of the return type, or None for any.
            param_count: Exact number of parameters, or None for any.
        """
        def matches(method: MethodInfo) -> bool:
            return (
                _contains(method.name, name)
                and (return_type is None or _contains(method.return_type, return_type))
                and (param_count is None or method.parameter_count == param_count)
            )

        return self._filter(lambda c: any(matches(m) for m in c.methods))

    def classes_with_field(self, name: str, field_type: str | None = None) -> list[ClassInfo]:
        def matches(f: FieldInfo) -> bool:
            return _contains(f.name, name) and (
                field_type is None or _contains(f.type, field_type)
            )

        return self._filter(lambda c: any(matches(f) for f in c.fields))

    # Hierarchy

    def derived_classes(self, base_name: str) -> list[ClassInfo]:
        """Find classes whose base-class string contains base_name.

        Matching is by substring, so "Entity" also finds subclasses of
        "EntityBase".
        """
        return self.by_base_class(base_name)

    def _resolve_base(self, base_class: str) -> ClassInfo | None:
        for cls in self.classes:
            if _equals(cls.name, base_class) or _equals(cls.full_name, base_class):
                return cls
        return None

    def inheritance_chain(self, name: str) -> list[str]:
        """Walk base classes upward from the class named name.

        Returns:
            Full names, most-derived first. Empty if no class has that name.
            The walk stops at the first base that is absent from the dump
            (e.g. a framework type) or that was already visited.
        """
        chain: list[str] = []
        visited: set[int] = set()
        current = next((c for c in self.classes if _equals(c.name, name)), None)

        while current is not None and id(current) not in visited:
            visited.add(id(current))
            chain.append(current.full_name)
            if not current.base_class:
                break
            current = self._resolve_base(current.base_class)

        return chain

    # Aggregates

    def all_namespaces(self) -> list[str]:
        return sorted(self._by_namespace)

    def stats(self) -> DumpStats:
        kinds = {kind: 0 for kind in CLASS_KINDS}
        for cls in self.classes:
            kinds[cls.kind] = kinds.get(cls.kind, 0) + 1

        return DumpStats(
            total_classes=len(self.classes),
            total_methods=sum(c.method_count for c in self.classes),
            total_fields=sum(c.field_count for c in self.classes),
            total_properties=sum(c.property_count for c in self.classes),
            total_namespaces=len(self._by_namespace),
            total_interfaces=kinds["interface"],
            total_enums=kinds["enum"],
            total_structs=kinds["struct"],
            mono_behaviours=sum(1 for c in self.classes if c.is_mono_behaviour),
            scriptable_objects=sum(1 for c in self.classes if c.is_scriptable_object),
            kinds=kinds,
        )

    # Combined searches

    def smart_search(
        self, query: str
    ) -> tuple[list[ClassInfo], list[MethodMatch], list[FieldMatch]]:
        """Substring search over class, method and field names at once."""
        return self.by_class_name(query), self.method_search(query), self.field_search(query)

    def ranked_search(self, query: str, config: SearchConfig | None = None) -> list[ClassInfo]:
        """Rank classes against a free-text query using BM25.

        Each class is scored as a document made of its names, base types
        and member names, so "player health" finds ``PlayerHealthController``
        as well as classes with a ``health`` field.

        Args:
            query: Free-text or identifier query.
            config: BM25 parameters and result count. Defaults to SearchConfig().

        Returns:
            Up to config.max_results classes, best match first.
        """
        if not query:
            return []
        if config is None:
            config = SearchConfig()

        key = (config.k1, config.b)
        ranker = self._rankers.get(key)
        if ranker is None:
            documents = [_class_document(cls) for cls in self.classes]
            # setdefault keeps the first model built when two readers race
            ranker = self._rankers.setdefault(
                key, BM25Searcher(documents, k1=config.k1, b=config.b)
            )

        results = ranker.search(query, k=config.k)
        return [self.classes[idx] for idx, _score in results]


def _class_document(cls: ClassInfo) -> str:
    parts = [cls.name, cls.namespace, cls.base_class or "", *cls.interfaces]
    parts.extend(f.name for f in cls.fields)
    parts.extend(m.name for m in cls.methods)
    parts.extend(p.name for p in cls.properties)
    return " ".join(part for part in parts if part)
