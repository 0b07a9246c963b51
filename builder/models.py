"""
Data models - plain dataclasses, nothing clever.
"""

from dataclasses import dataclass, field, asdict, fields
from pathlib import Path
from typing import Dict, List
import json
import re

from default_config import DEFAULT_CONFIG


DELETE_PATTERN = "delete_pattern"
REPLACE = "replace"
INSERT_BEFORE = "insert_before"


@dataclass
class RewriteRule:
    """
    One text rewrite applied to the HTML.

    kind:
      delete_pattern - regex, first match replaced by `replacement` (usually "")
      replace        - literal, first occurrence replaced
      insert_before  - literal anchor, `replacement` inserted right before it
    Case-sensitive, first match only.
    """
    name: str
    kind: str
    target: str
    replacement: str = ""

    def matches(self, text: str) -> bool:
        if self.kind == DELETE_PATTERN:
            return re.search(self.target, text) is not None
        return self.target in text

    def apply(self, text: str) -> str:
        if self.kind == DELETE_PATTERN:
            # Function replacement so backslashes in the text are taken literally
            return re.sub(self.target, lambda m: self.replacement, text, count=1)
        if self.kind == REPLACE:
            return text.replace(self.target, self.replacement, 1)
        if self.kind == INSERT_BEFORE:
            return text.replace(self.target, self.replacement + self.target, 1)
        raise ValueError(f"Unknown rewrite kind: {self.kind}")


@dataclass
class TransformResult:
    """Output of one pass over the source document"""
    payload: str     # extracted inline script, trimmed
    document: str    # production HTML
    missing_anchors: List[str] = field(default_factory=list)


@dataclass
class Artifact:
    path: str  # relative to the output dir, posix separators
    size: int


@dataclass
class BuildReport:
    output_dir: str
    artifacts: List[Artifact] = field(default_factory=list)
    missing_anchors: List[str] = field(default_factory=list)
    unresolved_references: List[str] = field(default_factory=list)
    duration: float = 0.0

    @property
    def total_size(self) -> int:
        return sum(a.size for a in self.artifacts)

    def to_dict(self) -> dict:
        data = asdict(self)
        data["total_size"] = self.total_size
        return data

    def save(self, path: str):
        """Dump the report as JSON"""
        with open(path, "w", encoding="utf-8") as f:
            json.dump(self.to_dict(), f, indent=2)


@dataclass
class BuildConfig:
    """
    Build configuration.
    Every path is resolved against `root`, never against the cwd.
    """
    root: str = DEFAULT_CONFIG["root"]
    output_dir: str = DEFAULT_CONFIG["output_dir"]
    source_document: str = DEFAULT_CONFIG["source_document"]
    script_entry: str = DEFAULT_CONFIG["script_entry"]
    script_output: str = DEFAULT_CONFIG["script_output"]
    # source -> minified name. Dict order is the order of the href rewrites
    # and of the esbuild runs; reset.css goes first by default
    style_entries: Dict[str, str] = field(default_factory=lambda: dict(DEFAULT_CONFIG["style_entries"]))
    primary_style_output: str = DEFAULT_CONFIG["primary_style_output"]
    font_file: str = DEFAULT_CONFIG["font_file"]
    copy_dirs: List[str] = field(default_factory=lambda: list(DEFAULT_CONFIG["copy_dirs"]))

    # Production framework served from CDN
    framework_version: str = DEFAULT_CONFIG["framework_version"]
    cdn_base: str = DEFAULT_CONFIG["cdn_base"]

    # Bundler settings
    esbuild_binary: str = DEFAULT_CONFIG["esbuild_binary"]
    jsx_factory: str = DEFAULT_CONFIG["jsx_factory"]
    jsx_fragment: str = DEFAULT_CONFIG["jsx_fragment"]
    node_env: str = DEFAULT_CONFIG["node_env"]

    suggestions: List[str] = field(default_factory=lambda: list(DEFAULT_CONFIG["suggestions"]))

    @property
    def root_path(self) -> Path:
        return Path(self.root)

    @property
    def output_path(self) -> Path:
        """Output dir; relative values hang off root"""
        out = Path(self.output_dir)
        return out if out.is_absolute() else self.root_path / out

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> 'BuildConfig':
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown config keys: {', '.join(unknown)}")
        return cls(**data)

    def save(self, path: str):
        """Save config to JSON file"""
        with open(path, 'w', encoding='utf-8') as f:
            json.dump(self.to_dict(), f, indent=2)

    @classmethod
    def load(cls, path: str) -> 'BuildConfig':
        """Load config from JSON file, defaults if the file is missing"""
        try:
            with open(path, encoding='utf-8') as f:
                return cls.from_dict(json.load(f))
        except FileNotFoundError:
            return cls()
