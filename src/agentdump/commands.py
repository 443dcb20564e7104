"""Text command interpreter shared by the CLI, the REPL and the MCP server.

A command line is a command word followed by a free-text argument, e.g.
``class Player`` or ``method.param Vector3``. Each command maps onto one
SearchIndex query and one formatter call.
"""

import logging
from collections.abc import Callable, Sequence

from agentdump import formatting
from agentdump.config import SearchConfig
from agentdump.models import ClassInfo, FieldInfo, MethodInfo
from agentdump.search import SearchIndex

logger = logging.getLogger(__name__)

HELP_TEXT = """COMMANDS:

CLASS: class <name>, class.exact <name>, ns <namespace>, fullname <name>
       base <class>, impl <interface>, type <class|struct|enum|interface>
       mono, scriptable

FIELD: field <name>, field.type <type>, field.offset <0x10>

METHOD: method <name>, method.ret <type>, method.param <type>
        rva <0x123>, method.offset <0x123>

ADVANCED: find <query>, rank <query>, hierarchy <class>, derived <class>
          hasmeth <name>, hasfield <name>

DETAILS: detail <class>, idx <index>

INFO: stats, namespaces, help, exit"""


class CommandShell:
    """Executes command lines against a SearchIndex and renders the results.

    Attributes:
        index: The index queried by every command.
        output: "text", "json" or "ts".
        limit: Maximum number of results rendered per list.
        search_config: Parameters for the ranked ``rank`` command.
    """

    def __init__(
        self,
        index: SearchIndex,
        output: str = "text",
        limit: int = 50,
        search_config: SearchConfig | None = None,
    ):
        self.index = index
        self.output = output
        self.limit = limit
        self.search_config = search_config or SearchConfig()

        self._commands: dict[str, Callable[[str], str]] = {}
        self._register(("class",), lambda a: self._classes(a, "class_name", index.by_class_name(a)))
        self._register(
            ("class.exact",),
            lambda a: self._classes(a, "class_name_exact", index.by_class_name(a, exact=True)),
        )
        self._register(("ns", "namespace"), lambda a: self._classes(a, "namespace", index.by_namespace(a)))
        self._register(("fullname", "full"), lambda a: self._classes(a, "full_name", index.by_full_name(a)))
        self._register(("base",), lambda a: self._classes(a, "base_class", index.by_base_class(a)))
        self._register(("impl", "interface"), lambda a: self._classes(a, "interface", index.by_interface(a)))
        self._register(("type",), lambda a: self._classes(a, "class_type", index.by_kind(a)))
        self._register(
            ("mono", "monobehaviour"),
            lambda a: self._classes("MonoBehaviour", "monobehaviour", index.mono_behaviours()),
        )
        self._register(
            ("scriptable", "scriptableobject"),
            lambda a: self._classes("ScriptableObject", "scriptableobject", index.scriptable_objects()),
        )
        self._register(("field",), lambda a: self._fields(a, index.field_search(a)))
        self._register(("field.type",), lambda a: self._fields(f"type:{a}", index.fields_by_type(a)))
        self._register(("field.offset",), lambda a: self._fields(f"offset:{a}", index.fields_by_offset(a)))
        self._register(("method",), lambda a: self._methods(a, index.method_search(a)))
        self._register(
            ("method.ret", "method.return"),
            lambda a: self._methods(f"return:{a}", index.methods_by_return_type(a)),
        )
        self._register(
            ("method.param",), lambda a: self._methods(f"param:{a}", index.methods_by_parameter_type(a))
        )
        self._register(("rva",), lambda a: self._methods(f"rva:{a}", index.methods_by_rva(a)))
        self._register(
            ("method.offset",), lambda a: self._methods(f"offset:{a}", index.methods_by_offset(a))
        )
        self._register(("find", "search"), self._smart_search)
        self._register(
            ("rank",),
            lambda a: self._classes(a, "ranked", index.ranked_search(a, self.search_config)),
        )
        self._register(("hierarchy",), self._hierarchy)
        self._register(("derived",), lambda a: self._classes(a, "derived_classes", index.derived_classes(a)))
        self._register(
            ("hasmeth", "hasmethod"),
            lambda a: self._classes(f"has_method:{a}", "classes_with_method", index.classes_with_method(a)),
        )
        self._register(
            ("hasfield",),
            lambda a: self._classes(f"has_field:{a}", "classes_with_field", index.classes_with_field(a)),
        )
        self._register(("detail", "details", "info"), self._detail)
        self._register(("idx", "index"), self._type_def_index)
        self._register(("stats",), lambda a: self._stats())
        self._register(("namespaces",), lambda a: self._namespaces())
        self._register(("help",), lambda a: HELP_TEXT)

    def _register(self, names: Sequence[str], handler: Callable[[str], str]) -> None:
        for name in names:
            self._commands[name] = handler

    @property
    def command_names(self) -> list[str]:
        return sorted(self._commands)

    def execute(self, line: str) -> str:
        """Run one command line and return its rendered output.

        Args:
            line: Command word and argument, e.g. "derived Enemy"

        Returns:
            Rendered result, or a short message for empty or unknown commands
        """
        parts = line.strip().split(None, 1)
        if not parts:
            return ""

        command = parts[0].lower()
        argument = parts[1].strip() if len(parts) > 1 else ""

        handler = self._commands.get(command)
        if handler is None:
            return f"Unknown command: {command}. Type 'help' for commands."

        logger.debug(f"Executing '{command}' with argument '{argument}'")
        return handler(argument)

    # Rendering helpers

    @property
    def _structured(self) -> bool:
        return self.output in ("json", "ts")

    def _render(self, data: dict, type_name: str) -> str:
        if self.output == "ts":
            return formatting.to_typescript(data, type_name)
        return formatting.to_json(data)

    def _classes(self, query: str, search_type: str, results: list[ClassInfo]) -> str:
        if self._structured:
            data = formatting.wrap_class_results(query, search_type, results, self.limit)
            return self._render(data, "ClassSearchResult")

        lines = [f"Found {len(results)} results:"]
        lines.extend(formatting.format_class_compact(c) for c in results[:self.limit])
        if len(results) > self.limit:
            lines.append(f"... and {len(results) - self.limit} more")
        return "\n".join(lines)

    def _fields(self, query: str, results: list[tuple[ClassInfo, FieldInfo]]) -> str:
        if self._structured:
            data = formatting.wrap_field_results(query, results, self.limit)
            return self._render(data, "FieldSearchResult")

        lines = [f"Found {len(results)} fields:"]
        lines.extend(formatting.format_field(c, f) for c, f in results[:self.limit])
        if len(results) > self.limit:
            lines.append(f"... and {len(results) - self.limit} more")
        return "\n".join(lines)

    def _methods(self, query: str, results: list[tuple[ClassInfo, MethodInfo]]) -> str:
        if self._structured:
            data = formatting.wrap_method_results(query, results, self.limit)
            return self._render(data, "MethodSearchResult")

        lines = [f"Found {len(results)} methods:"]
        lines.extend(formatting.format_method(c, m) for c, m in results[:self.limit])
        if len(results) > self.limit:
            lines.append(f"... and {len(results) - self.limit} more")
        return "\n".join(lines)

    # Commands with their own output shape

    def _smart_search(self, query: str) -> str:
        classes, methods, fields = self.index.smart_search(query)
        if self._structured:
            data = formatting.wrap_smart_search(query, classes, methods, fields, self.limit)
            return self._render(data, "SmartSearchResult")

        lines = []
        if classes:
            lines.append(f"CLASSES ({len(classes)}):")
            lines.extend(f"  {formatting.format_class_compact(c)}" for c in classes[:self.limit])
        if methods:
            lines.append(f"METHODS ({len(methods)}):")
            lines.extend(f"  {formatting.format_method(c, m)}" for c, m in methods[:self.limit])
        if fields:
            lines.append(f"FIELDS ({len(fields)}):")
            lines.extend(f"  {formatting.format_field(c, f)}" for c, f in fields[:self.limit])
        return "\n".join(lines) if lines else "No results found."

    def _hierarchy(self, name: str) -> str:
        chain = self.index.inheritance_chain(name)
        if self._structured:
            return self._render(formatting.wrap_chain(name, chain), "InheritanceChainResult")
        return formatting.format_chain(name, chain)

    def _detail(self, name: str) -> str:
        cls = self.index.find_class(name)
        if cls is None:
            return f"Class '{name}' not found"
        if self._structured:
            return self._render(formatting.wrap_class_detail(name, cls), "ClassDetailResult")
        return formatting.format_class(cls, detailed=True)

    def _type_def_index(self, argument: str) -> str:
        try:
            index = int(argument)
        except ValueError:
            return f"Invalid TypeDefIndex: '{argument}'"

        cls = self.index.by_type_def_index(index)
        if cls is None:
            return f"TypeDefIndex {index} not found"
        if self._structured:
            return self._render(formatting.wrap_class_detail(argument, cls), "ClassDetailResult")
        return formatting.format_class(cls, detailed=True)

    def _stats(self) -> str:
        stats = self.index.stats()
        if self._structured:
            return self._render(formatting.stats_to_dict(stats), "DumpStats")

        return "\n".join([
            f"Classes: {stats.total_classes} | Methods: {stats.total_methods} | "
            f"Fields: {stats.total_fields} | Properties: {stats.total_properties}",
            f"Namespaces: {stats.total_namespaces} | Interfaces: {stats.total_interfaces}",
            f"Enums: {stats.total_enums} | Structs: {stats.total_structs}",
            f"MonoBehaviours: {stats.mono_behaviours} | ScriptableObjects: {stats.scriptable_objects}",
        ])

    def _namespaces(self) -> str:
        namespaces = self.index.all_namespaces()
        if self._structured:
            return self._render(formatting.wrap_namespaces(namespaces, self.limit), "NamespacesResult")

        lines = [f"Found {len(namespaces)} namespaces:"]
        lines.extend(f"  {ns or '(global)'}" for ns in namespaces[:self.limit])
        if len(namespaces) > self.limit:
            lines.append(f"  ... and {len(namespaces) - self.limit} more")
        return "\n".join(lines)
