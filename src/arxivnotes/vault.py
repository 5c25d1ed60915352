"""Markdown note storage with YAML front matter."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol

import yaml

from .exceptions import CapabilityUnavailable, InvalidInputError

NOTE_SUFFIX = ".md"
FRONT_MATTER_DELIMITER = "---"


class DocumentStore(Protocol):
    """Operations the note materializer needs from a note store."""

    root: Path
    supports_structured_fields: bool

    def note_path(self, name: str, folder: Path | None = None) -> Path: ...

    def exists(self, name: str, folder: Path | None = None) -> bool: ...

    def read(self, document: Path) -> str: ...

    def write(self, document: Path, text: str) -> None: ...

    def append(self, document: Path, text: str) -> None: ...

    def read_structured_fields(self, document: Path) -> dict[str, object]: ...

    def set_structured_fields(self, document: Path, fields: dict[str, object]) -> None: ...

    def create_document(self, name: str, text: str, folder: Path | None = None) -> Path: ...

    def rename_document(self, document: Path, new_name: str) -> Path: ...


def split_front_matter(text: str, source: str = "note") -> tuple[dict[str, object], str]:
    """Split a note into its front-matter mapping and body.

    Malformed YAML raises `InvalidInputError` naming `source`.
    """

    lines = text.split("\n")
    if not lines or lines[0].strip() != FRONT_MATTER_DELIMITER:
        return {}, text

    for index in range(1, len(lines)):
        if lines[index].strip() == FRONT_MATTER_DELIMITER:
            raw = "\n".join(lines[1:index])
            body = "\n".join(lines[index + 1 :])
            try:
                loaded = yaml.safe_load(raw) if raw.strip() else {}
            except yaml.YAMLError as exc:
                raise InvalidInputError(f"Invalid front matter in {source}: {exc}") from exc
            return (loaded if isinstance(loaded, dict) else {}), body
    return {}, text


def join_front_matter(fields: dict[str, object], body: str) -> str:
    if not fields:
        return body
    dumped = yaml.safe_dump(fields, sort_keys=False, allow_unicode=True)
    body = body.lstrip("\n")
    return f"{FRONT_MATTER_DELIMITER}\n{dumped}{FRONT_MATTER_DELIMITER}\n{body}"


class FileSystemVault:
    """A directory of Markdown notes."""

    def __init__(self, root: Path, structured_fields: bool = True) -> None:
        self.root = root
        self.supports_structured_fields = structured_fields

    def note_path(self, name: str, folder: Path | None = None) -> Path:
        base = folder if folder is not None else self.root
        return base / f"{name}{NOTE_SUFFIX}"

    def exists(self, name: str, folder: Path | None = None) -> bool:
        return self.note_path(name, folder).exists()

    def read(self, document: Path) -> str:
        return document.read_text(encoding="utf-8")

    def write(self, document: Path, text: str) -> None:
        document.parent.mkdir(parents=True, exist_ok=True)
        document.write_text(text, encoding="utf-8")

    def append(self, document: Path, text: str) -> None:
        content = self.read(document) if document.exists() else ""
        self.write(document, content + text)

    def read_structured_fields(self, document: Path) -> dict[str, object]:
        if not document.exists():
            return {}
        fields, _ = split_front_matter(self.read(document), document.name)
        return fields

    def set_structured_fields(self, document: Path, fields: dict[str, object]) -> None:
        if not self.supports_structured_fields:
            raise CapabilityUnavailable("Front matter editing is not available in this vault")
        existing, body = split_front_matter(
            self.read(document) if document.exists() else "", document.name
        )
        merged = {**existing, **fields}
        self.write(document, join_front_matter(merged, body))

    def create_document(self, name: str, text: str, folder: Path | None = None) -> Path:
        path = self.note_path(name, folder)
        if path.exists():
            raise FileExistsError(f"Note already exists: {path}")
        self.write(path, text)
        return path

    def rename_document(self, document: Path, new_name: str) -> Path:
        target = self.note_path(new_name, document.parent)
        if target == document:
            return document
        if target.exists():
            raise FileExistsError(f"Note already exists: {target}")
        document.rename(target)
        return target
