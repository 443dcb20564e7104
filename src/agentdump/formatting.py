"""Rendering of query results as text, JSON or TypeScript literals.

The structured wrappers produce plain dicts with camelCase keys. Empty
collections and missing values are omitted to keep agent-facing output
short. Truncation to ``limit`` happens here, never in the search index.
"""

import json
import re
from collections.abc import Sequence
from dataclasses import asdict
from typing import Any

from agentdump.models import ClassInfo, DumpStats, FieldInfo, MethodInfo, PropertyInfo
from agentdump.parsers.dump_parser import MODIFIER_WORDS

_IDENTIFIER_RE = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")


def modifier_text(modifiers: frozenset[str]) -> str:
    """Render a modifier set in conventional C# order."""
    ordered = [word for word in MODIFIER_WORDS if word in modifiers]
    ordered.extend(sorted(modifiers.difference(MODIFIER_WORDS)))
    return " ".join(ordered)


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


def filter_empty(value: Any) -> Any:
    """Recursively drop None values and empty strings/lists from dicts."""
    if isinstance(value, dict):
        return {
            k: filter_empty(v) for k, v in value.items()
            if v is not None and v != "" and v != []
        }
    if isinstance(value, list):
        return [filter_empty(item) for item in value]
    return value


# Structured conversion

def parameter_list(method: MethodInfo) -> str:
    return ", ".join(f"{p.type} {p.name}" for p in method.parameters)


def field_to_dict(f: FieldInfo) -> dict[str, Any]:
    return filter_empty({
        "name": f.name,
        "type": f.type,
        "modifiers": modifier_text(f.modifiers),
        "offset": f.offset,
        "defaultValue": f.default_value,
    })


def method_to_dict(m: MethodInfo) -> dict[str, Any]:
    return filter_empty({
        "name": m.name,
        "returnType": m.return_type,
        "modifiers": modifier_text(m.modifiers),
        "parameters": [{"name": p.name, "type": p.type} for p in m.parameters],
        "rva": m.rva,
        "offset": m.offset,
        "slot": m.slot,
    })


def property_to_dict(p: PropertyInfo) -> dict[str, Any]:
    accessors = [name for name, present in (("get", p.has_getter), ("set", p.has_setter)) if present]
    return filter_empty({
        "name": p.name,
        "type": p.type,
        "modifiers": modifier_text(p.modifiers),
        "accessors": accessors,
    })


def class_to_dict(cls: ClassInfo) -> dict[str, Any]:
    return filter_empty({
        "fullName": cls.full_name,
        "typeDefIndex": cls.type_def_index,
        "kind": cls.kind,
        "modifiers": modifier_text(cls.modifiers),
        "baseClass": cls.base_class,
        "interfaces": list(cls.interfaces),
        "fields": [field_to_dict(f) for f in cls.fields],
        "properties": [property_to_dict(p) for p in cls.properties],
        "methods": [method_to_dict(m) for m in cls.methods],
    })


def stats_to_dict(stats: DumpStats) -> dict[str, Any]:
    return {_camel(key): value for key, value in asdict(stats).items()}


def wrap_class_results(
    query: str, search_type: str, results: Sequence[ClassInfo], limit: int = 50
) -> dict[str, Any]:
    return {
        "query": query,
        "searchType": search_type,
        "totalFound": len(results),
        "returned": min(len(results), limit),
        "classes": [class_to_dict(c) for c in results[:limit]],
    }


def wrap_field_results(
    query: str, results: Sequence[tuple[ClassInfo, FieldInfo]], limit: int = 50
) -> dict[str, Any]:
    return {
        "query": query,
        "totalFound": len(results),
        "returned": min(len(results), limit),
        "matches": [
            {"className": cls.full_name, "field": field_to_dict(f)}
            for cls, f in results[:limit]
        ],
    }


def wrap_method_results(
    query: str, results: Sequence[tuple[ClassInfo, MethodInfo]], limit: int = 50
) -> dict[str, Any]:
    return {
        "query": query,
        "totalFound": len(results),
        "returned": min(len(results), limit),
        "matches": [
            {"className": cls.full_name, "method": method_to_dict(m)}
            for cls, m in results[:limit]
        ],
    }


def wrap_class_detail(query: str, cls: ClassInfo) -> dict[str, Any]:
    return {"query": query, "type": "class_detail", "class": class_to_dict(cls)}


def wrap_smart_search(
    query: str,
    classes: Sequence[ClassInfo],
    methods: Sequence[tuple[ClassInfo, MethodInfo]],
    fields: Sequence[tuple[ClassInfo, FieldInfo]],
    limit: int = 50,
) -> dict[str, Any]:
    return {
        "query": query,
        "type": "smart_search",
        "classes": {
            "count": len(classes),
            "items": [class_to_dict(c) for c in classes[:limit]],
        },
        "methods": {
            "count": len(methods),
            "items": [
                {"className": cls.full_name, "method": method_to_dict(m)}
                for cls, m in methods[:limit]
            ],
        },
        "fields": {
            "count": len(fields),
            "items": [
                {"className": cls.full_name, "field": field_to_dict(f)}
                for cls, f in fields[:limit]
            ],
        },
    }


def wrap_chain(query: str, chain: Sequence[str]) -> dict[str, Any]:
    return {"query": query, "type": "inheritance_chain", "chain": list(chain)}


def wrap_namespaces(namespaces: Sequence[str], limit: int = 50) -> dict[str, Any]:
    return {"total": len(namespaces), "namespaces": list(namespaces[:limit])}


# Text rendering

def format_class(cls: ClassInfo, detailed: bool = False) -> str:
    """Render a class as an indented block; detailed adds every member."""
    lines = [
        f"[{cls.kind.upper()}] {cls.full_name}  // TypeDefIndex: {cls.type_def_index}",
        f"  Modifiers: {modifier_text(cls.modifiers)}",
    ]
    if cls.base_class:
        lines.append(f"  Inherits: {cls.base_class}")
    if cls.interfaces:
        lines.append(f"  Implements: {', '.join(cls.interfaces)}")
    lines.append(
        f"  Fields: {cls.field_count} | Properties: {cls.property_count} | Methods: {cls.method_count}"
    )

    if detailed:
        if cls.fields:
            lines.append("")
            lines.append("  === FIELDS ===")
            for f in cls.fields:
                lines.append(f"    {_bracketed(f.modifiers)}{f.type} {f.name}{_field_suffix(f)}")
        if cls.properties:
            lines.append("")
            lines.append("  === PROPERTIES ===")
            for p in cls.properties:
                accessors = " ".join(a for a, on in (("get;", p.has_getter), ("set;", p.has_setter)) if on)
                lines.append(f"    {_bracketed(p.modifiers)}{p.type} {p.name} {{ {accessors} }}")
        if cls.methods:
            lines.append("")
            lines.append("  === METHODS ===")
            for m in cls.methods:
                address = f"  // RVA: {m.rva}" if m.rva else ""
                lines.append(
                    f"    {_bracketed(m.modifiers)}{m.return_type} {m.name}({parameter_list(m)}){address}"
                )

    return "\n".join(lines)


def _bracketed(modifiers: frozenset[str]) -> str:
    text = modifier_text(modifiers)
    return f"[{text}] " if text else ""


def _field_suffix(f: FieldInfo) -> str:
    if f.default_value is not None:
        return f" = {f.default_value}"
    if f.offset:
        return f"  // {f.offset}"
    return ""


def format_class_compact(cls: ClassInfo) -> str:
    return f"[{cls.kind}] {cls.full_name} (fields:{cls.field_count}, methods:{cls.method_count})"


def format_field(cls: ClassInfo, f: FieldInfo) -> str:
    return f"{cls.full_name}.{f.name}: {_bracketed(f.modifiers)}{f.type}{_field_suffix(f)}"


def format_method(cls: ClassInfo, m: MethodInfo) -> str:
    return f"{cls.full_name}.{m.name}({parameter_list(m)}): {_bracketed(m.modifiers)}{m.return_type}"


def format_chain(query: str, chain: Sequence[str]) -> str:
    if not chain:
        return f"Class '{query}' not found"
    lines = [f"Inheritance chain for '{query}':"]
    lines.extend(f"  {'  ' * depth}{name}" for depth, name in enumerate(chain))
    return "\n".join(lines)


# Serialization

def to_json(obj: Any) -> str:
    return json.dumps(obj, indent=2)


def to_typescript(obj: Any, type_name: str) -> str:
    """Render a structured result as a typed TypeScript constant.

    Examples:
        >>> print(to_typescript({"total": 1}, "NamespacesResult"))
        const result: NamespacesResult = {
          total: 1
        };
    """
    return f"const result: {type_name} = {_ts_value(obj, 0)};"


def _ts_value(value: Any, indent: int) -> str:
    pad = "  " * indent
    inner = "  " * (indent + 1)

    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, str):
        return json.dumps(value)
    if isinstance(value, (list, tuple)):
        if not value:
            return "[]"
        items = [f"{inner}{_ts_value(item, indent + 1)}" for item in value]
        return "[\n" + ",\n".join(items) + f"\n{pad}]"
    if isinstance(value, dict):
        if not value:
            return "{}"
        items = [
            f"{inner}{_ts_key(key)}: {_ts_value(item, indent + 1)}"
            for key, item in value.items()
        ]
        return "{\n" + ",\n".join(items) + f"\n{pad}}}"
    return json.dumps(str(value))


def _ts_key(key: str) -> str:
    return key if _IDENTIFIER_RE.match(key) else json.dumps(key)
