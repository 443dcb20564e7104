"""Line-oriented parser for IL2CPP ``dump.cs`` files.

The dump looks like C# but is not meant to be compiled, and real-world files
are frequently truncated or carry noise. The parser therefore never tries to
understand the grammar as a whole. It walks the file once, recognizing a
handful of line shapes, and keeps only three pieces of state between lines:
the current namespace, the type being filled in (with its brace depth), and
at most one buffered method signature waiting for its ``// RVA:`` comment.
"""

import logging
import re
from collections.abc import Iterable
from dataclasses import dataclass, field

from agentdump.models import ClassInfo, FieldInfo, MethodInfo, Parameter, PropertyInfo
from agentdump.parsers.base import BaseParser

logger = logging.getLogger(__name__)

MODIFIER_WORDS = (
    "public", "private", "protected", "internal", "static", "sealed",
    "abstract", "readonly", "const", "virtual", "override", "extern",
    "unsafe", "volatile", "new", "partial",
)

_MODIFIERS = r"((?:(?:" + "|".join(MODIFIER_WORDS) + r")\s+)*)"
_HEX_OR_MISSING = r"(0x[0-9A-Fa-f]+|-1)"

NAMESPACE_RE = re.compile(r"^// Namespace:\s*(.*)$")
CLASS_RE = re.compile(
    r"^" + _MODIFIERS
    + r"(class|struct|enum|interface)\s+([^:]+?)(?:\s*:\s*(.+?))?\s*//\s*TypeDefIndex:\s*(\d+)"
)
FIELD_RE = re.compile(r"^" + _MODIFIERS + r"(.+?)\s+(\S+);\s*//\s*(0x[0-9A-Fa-f]+)")
ENUM_VALUE_RE = re.compile(r"^public const \S+ (\S+)\s*=\s*(.+);")
PROPERTY_RE = re.compile(
    r"^(?!\[)" + _MODIFIERS + r"(.+?)\s+(this\[[^\]]*\]|[^\s{]+)\s*\{([^}]*)\}"
)
SIGNATURE_RE = re.compile(
    r"^(?!\[)" + _MODIFIERS + r"(?:(.+?)\s+)?([^\s(<]+(?:<[^>]*>)?)\s*\(([^)]*)\)"
)
METADATA_RE = re.compile(
    r"^//\s*RVA:\s*" + _HEX_OR_MISSING
    + r"\s+Offset:\s*" + _HEX_OR_MISSING
    + r"(?:\s+VA:\s*" + _HEX_OR_MISSING + r")?"
    + r"(?:\s+Slot:\s*(\d+))?"
)

_OPENERS = {"<": ">", "(": ")", "[": "]"}
_CLOSERS = set(_OPENERS.values())


def split_top_level(text: str, separator: str = ",") -> list[str]:
    """Split text on a separator, ignoring separators nested in brackets.

    Generic arguments keep their commas, so ``"IEquatable<Dictionary<K, V>>, IDisposable"``
    splits into two tokens rather than three.

    Args:
        text: Text to split.
        separator: Single-character separator.

    Returns:
        Stripped, non-empty tokens in order.
    """
    tokens = []
    depth = 0
    current = []
    for char in text:
        if char in _OPENERS:
            depth += 1
        elif char in _CLOSERS and depth > 0:
            depth -= 1
        if char == separator and depth == 0:
            tokens.append("".join(current).strip())
            current = []
        else:
            current.append(char)
    tokens.append("".join(current).strip())
    return [token for token in tokens if token]


def _modifier_set(text: str) -> frozenset[str]:
    return frozenset(text.split())


def parse_parameters(text: str) -> tuple[Parameter, ...]:
    """Recover parameters from the text between a signature's parentheses.

    The last whitespace-delimited word of each parameter is its name and the
    words before it form the type. Default values are dropped and tokens with
    a single word are skipped.
    """
    parameters = []
    for token in split_top_level(text):
        declaration = token.split("=", 1)[0]
        parts = declaration.split()
        if len(parts) < 2:
            continue
        parameters.append(Parameter(name=parts[-1], type=" ".join(parts[:-1])))
    return tuple(parameters)


@dataclass
class _ClassBuilder:
    """Mutable accumulator for the type currently being parsed."""
    name: str
    type_def_index: int
    namespace: str
    kind: str
    modifiers: frozenset[str]
    start_line: int
    base_class: str | None = None
    interfaces: list[str] = field(default_factory=list)
    fields: list[FieldInfo] = field(default_factory=list)
    methods: list[MethodInfo] = field(default_factory=list)
    properties: list[PropertyInfo] = field(default_factory=list)
    end_line: int | None = None

    def build(self) -> ClassInfo:
        return ClassInfo(
            name=self.name,
            type_def_index=self.type_def_index,
            namespace=self.namespace,
            kind=self.kind,
            base_class=self.base_class,
            interfaces=tuple(self.interfaces),
            fields=tuple(self.fields),
            methods=tuple(self.methods),
            properties=tuple(self.properties),
            modifiers=self.modifiers,
            start_line=self.start_line,
            end_line=self.end_line,
        )


@dataclass
class _ParseState:
    """Carried state of a single parse_lines call."""
    namespace: str = ""
    current: _ClassBuilder | None = None
    in_class: bool = False
    depth: int = 0
    pending_signature: str | None = None
    classes: list[ClassInfo] = field(default_factory=list)

    def finalize(self) -> None:
        if self.current is not None:
            self.classes.append(self.current.build())
        self.current = None
        self.in_class = False
        self.pending_signature = None


class DumpParser(BaseParser):
    """Parser that recovers types, fields, properties and methods from a dump."""

    def parse_lines(self, lines: Iterable[str]) -> list[ClassInfo]:
        """Parse dump lines into classes, skipping anything unrecognized.

        Args:
            lines: Lines of the dump in file order.

        Returns:
            One ClassInfo per recognized type declaration, in file order.
        """
        state = _ParseState()

        for line_number, raw_line in enumerate(lines, start=1):
            line = raw_line.strip()

            namespace_match = NAMESPACE_RE.match(line)
            if namespace_match:
                state.namespace = namespace_match.group(1).strip()
                continue

            class_match = CLASS_RE.match(line)
            if class_match:
                state.finalize()
                state.current = self._start_class(class_match, state.namespace, line_number)
                state.in_class = True
                state.depth = 0
                continue

            if state.in_class and state.current is not None:
                self._parse_body_line(state, line, line_number)

        state.finalize()
        logger.debug(f"Parsed {len(state.classes)} classes")
        return state.classes

    def _start_class(self, match: re.Match, namespace: str, line_number: int) -> _ClassBuilder:
        modifiers, kind, name, inheritance, type_def_index = match.groups()
        builder = _ClassBuilder(
            name=name.strip(),
            type_def_index=int(type_def_index),
            namespace=namespace,
            kind=kind,
            modifiers=_modifier_set(modifiers),
            start_line=line_number,
        )
        if inheritance:
            parents = split_top_level(inheritance)
            if parents:
                builder.base_class = parents[0]
                builder.interfaces = parents[1:]
        return builder

    def _parse_body_line(self, state: _ParseState, line: str, line_number: int) -> None:
        current = state.current

        if line == "{":
            state.depth += 1
            return
        if line == "}":
            state.depth -= 1
            if state.depth == 0:
                current.end_line = line_number
                state.in_class = False
                state.pending_signature = None
            return

        field_match = FIELD_RE.match(line)
        if field_match and "(" not in line:
            modifiers, field_type, name, offset = field_match.groups()
            current.fields.append(FieldInfo(
                name=name,
                type=field_type.strip(),
                modifiers=_modifier_set(modifiers),
                offset=offset,
            ))
            return

        if current.kind == "enum":
            enum_match = ENUM_VALUE_RE.match(line)
            if enum_match:
                current.fields.append(FieldInfo(
                    name=enum_match.group(1),
                    type="enum",
                    modifiers=frozenset({"public", "const"}),
                    default_value=enum_match.group(2).strip(),
                ))
                return

        if "(" not in line and "//" not in line:
            property_match = PROPERTY_RE.match(line)
            if property_match:
                modifiers, property_type, name, accessors = property_match.groups()
                if "get" in accessors or "set" in accessors:
                    current.properties.append(PropertyInfo(
                        name=name,
                        type=property_type.strip(),
                        modifiers=_modifier_set(modifiers),
                        has_getter="get" in accessors,
                        has_setter="set" in accessors,
                    ))
                    return

        if "//" not in line and SIGNATURE_RE.match(line):
            # Only the most recent unmatched signature is kept
            state.pending_signature = line
            return

        metadata_match = METADATA_RE.match(line)
        if metadata_match and state.pending_signature is not None:
            method = self._build_method(state.pending_signature, metadata_match)
            if method is not None:
                current.methods.append(method)
            state.pending_signature = None

    def _build_method(self, signature: str, metadata: re.Match) -> MethodInfo | None:
        signature_match = SIGNATURE_RE.match(signature)
        if not signature_match:
            return None

        modifiers, return_type, name, params = signature_match.groups()
        rva, offset, va, slot = metadata.groups()

        if return_type is None:
            # Constructors are written without a return type
            return_type = "void" if name.startswith(".") else ""

        return MethodInfo(
            name=name,
            return_type=return_type.strip(),
            modifiers=_modifier_set(modifiers),
            parameters=parse_parameters(params),
            rva=rva,
            offset=offset,
            va=va,
            slot=int(slot) if slot is not None else None,
        )
