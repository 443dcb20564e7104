from dataclasses import dataclass, field

MONO_BEHAVIOUR_MARKER = "MonoBehaviour"
SCRIPTABLE_OBJECT_MARKER = "ScriptableObject"

CLASS_KINDS = ("class", "struct", "enum", "interface")


@dataclass(frozen=True)
class Parameter:
    """Represents a method parameter."""
    name: str
    type: str


@dataclass(frozen=True)
class FieldInfo:
    """A field declared in a type body, or an enum constant."""
    name: str
    type: str
    modifiers: frozenset[str] = frozenset()
    offset: str | None = None  # Hex string as written in the dump, e.g. "0x10"
    default_value: str | None = None  # Only set for enum constants

    @property
    def is_static(self) -> bool:
        return "static" in self.modifiers

    @property
    def is_public(self) -> bool:
        return "public" in self.modifiers

    @property
    def is_private(self) -> bool:
        return "private" in self.modifiers

    @property
    def is_readonly(self) -> bool:
        return "readonly" in self.modifiers

    @property
    def is_const(self) -> bool:
        return "const" in self.modifiers


@dataclass(frozen=True)
class PropertyInfo:
    """An auto-property declaration (``int Health { get; set; }``)."""
    name: str
    type: str
    modifiers: frozenset[str] = frozenset()
    has_getter: bool = False
    has_setter: bool = False


@dataclass(frozen=True)
class MethodInfo:
    """A method signature combined with its address metadata."""
    name: str
    return_type: str
    modifiers: frozenset[str] = frozenset()
    parameters: tuple[Parameter, ...] = ()
    rva: str | None = None
    offset: str | None = None
    va: str | None = None
    slot: int | None = None  # Virtual dispatch slot, None for non-virtual methods

    @property
    def is_static(self) -> bool:
        return "static" in self.modifiers

    @property
    def is_virtual(self) -> bool:
        return "virtual" in self.modifiers

    @property
    def is_abstract(self) -> bool:
        return "abstract" in self.modifiers

    @property
    def is_override(self) -> bool:
        return "override" in self.modifiers

    @property
    def is_public(self) -> bool:
        return "public" in self.modifiers

    @property
    def is_private(self) -> bool:
        return "private" in self.modifiers

    @property
    def parameter_count(self) -> int:
        return len(self.parameters)

    @property
    def signature(self) -> str:
        params = ", ".join(f"{p.type} {p.name}" for p in self.parameters)
        return f"{self.return_type} {self.name}({params})"


@dataclass(frozen=True)
class ClassInfo:
    """A type declaration recovered from the dump.

    Line numbers are 1-based. ``end_line`` stays None when the closing
    brace of the body was never seen (truncated or unbalanced input).
    """
    name: str
    type_def_index: int
    namespace: str = ""
    kind: str = "class"
    base_class: str | None = None
    interfaces: tuple[str, ...] = ()
    fields: tuple[FieldInfo, ...] = ()
    methods: tuple[MethodInfo, ...] = ()
    properties: tuple[PropertyInfo, ...] = ()
    modifiers: frozenset[str] = frozenset()
    start_line: int = 0
    end_line: int | None = None

    @property
    def full_name(self) -> str:
        return f"{self.namespace}.{self.name}" if self.namespace else self.name

    @property
    def is_static(self) -> bool:
        return "static" in self.modifiers

    @property
    def is_abstract(self) -> bool:
        return "abstract" in self.modifiers

    @property
    def is_sealed(self) -> bool:
        return "sealed" in self.modifiers

    @property
    def is_public(self) -> bool:
        return "public" in self.modifiers

    @property
    def is_mono_behaviour(self) -> bool:
        return self.base_class is not None and MONO_BEHAVIOUR_MARKER in self.base_class

    @property
    def is_scriptable_object(self) -> bool:
        return self.base_class is not None and SCRIPTABLE_OBJECT_MARKER in self.base_class

    @property
    def field_count(self) -> int:
        return len(self.fields)

    @property
    def method_count(self) -> int:
        return len(self.methods)

    @property
    def property_count(self) -> int:
        return len(self.properties)


@dataclass
class DumpStats:
    """Aggregate counts over a loaded dump."""
    total_classes: int = 0
    total_methods: int = 0
    total_fields: int = 0
    total_properties: int = 0
    total_namespaces: int = 0
    total_interfaces: int = 0
    total_enums: int = 0
    total_structs: int = 0
    mono_behaviours: int = 0
    scriptable_objects: int = 0
    kinds: dict[str, int] = field(default_factory=dict)
