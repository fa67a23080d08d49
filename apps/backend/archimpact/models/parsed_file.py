"""
Parsed File Records
===================

Per-file records produced by the external source parser: classes with
their methods, functions, imports, exports and line counts. The engine
only reads these records.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class ImportInfo:
    """A single import statement."""

    from_module: str = ""
    default: str = ""
    named: list[str] = field(default_factory=list)
    import_type: str = "import"  # import, require, dynamic
    line: int = 0

    def to_dict(self) -> dict:
        return {
            "from": self.from_module,
            "default": self.default,
            "named": self.named,
            "type": self.import_type,
            "line": self.line,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ImportInfo":
        return cls(
            from_module=data.get("from", data.get("from_module", "")),
            default=data.get("default") or "",
            named=list(data.get("named") or []),
            import_type=data.get("type", data.get("import_type", "import")),
            line=data.get("line", 0),
        )


@dataclass
class ExportInfo:
    """A single exported symbol."""

    name: str = ""
    export_type: str = "named"  # default, named
    line: int = 0

    def to_dict(self) -> dict:
        return {"name": self.name, "type": self.export_type, "line": self.line}

    @classmethod
    def from_dict(cls, data: dict) -> "ExportInfo":
        return cls(
            name=data.get("name", ""),
            export_type=data.get("type", data.get("export_type", "named")),
            line=data.get("line", 0),
        )


@dataclass
class FunctionDefinition:
    """A top-level function."""

    name: str = ""
    line: int = 0
    params: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {"name": self.name, "line": self.line, "params": self.params}

    @classmethod
    def from_dict(cls, data: dict) -> "FunctionDefinition":
        return cls(
            name=data.get("name", ""),
            line=data.get("line", 0),
            params=list(data.get("params") or []),
        )


@dataclass
class ClassDefinition:
    """A class and the names of its methods."""

    name: str = ""
    line: int = 0
    methods: list[str] = field(default_factory=list)
    extends: str = ""
    implements: list[str] = field(default_factory=list)

    @property
    def method_count(self) -> int:
        return len(self.methods)

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "line": self.line,
            "methods": self.methods,
            "extends": self.extends,
            "implements": self.implements,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ClassDefinition":
        return cls(
            name=data.get("name", ""),
            line=data.get("line", 0),
            methods=list(data.get("methods") or []),
            extends=data.get("extends") or "",
            implements=list(data.get("implements") or []),
        )


@dataclass
class ParsedFile:
    """Structured record of one source file."""

    path: str = ""
    language: str = ""
    imports: list[ImportInfo] = field(default_factory=list)
    exports: list[ExportInfo] = field(default_factory=list)
    functions: list[FunctionDefinition] = field(default_factory=list)
    classes: list[ClassDefinition] = field(default_factory=list)
    lines_of_code: int = 0
    complexity: float = 0.0

    def to_dict(self) -> dict:
        """Convert to JSON-serializable dict."""
        return {
            "path": self.path,
            "language": self.language,
            "imports": [imp.to_dict() for imp in self.imports],
            "exports": [exp.to_dict() for exp in self.exports],
            "functions": [fn.to_dict() for fn in self.functions],
            "classes": [cls.to_dict() for cls in self.classes],
            "lines_of_code": self.lines_of_code,
            "complexity": self.complexity,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ParsedFile":
        """Load from dict. Accepts the parser's ``linesOfCode`` key as well."""
        return cls(
            path=data.get("path", ""),
            language=data.get("language", ""),
            imports=[ImportInfo.from_dict(i) for i in data.get("imports") or []],
            exports=[ExportInfo.from_dict(e) for e in data.get("exports") or []],
            functions=[FunctionDefinition.from_dict(f) for f in data.get("functions") or []],
            classes=[ClassDefinition.from_dict(c) for c in data.get("classes") or []],
            lines_of_code=data.get("lines_of_code", data.get("linesOfCode", 0)),
            complexity=data.get("complexity") or 0.0,
        )
