"""Persona context loading."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from loguru import logger

NO_CONTEXT_MARKER = "(No CV context available)"
MAX_DOCUMENT_CHARS = 12_000


@dataclass(frozen=True)
class PersonaDocument:
    """One named text document describing the candidate."""

    title: str
    filename: str


DEFAULT_DOCUMENTS: tuple[PersonaDocument, ...] = (
    PersonaDocument("CV Summary", "summary.txt"),
    PersonaDocument("LinkedIn Profile", "linkedin.txt"),
)


def read_document(path: Path) -> str:
    """Read one persona document, truncating the middle when it is too long."""

    if not path.is_file():
        return ""
    try:
        content = path.read_text(encoding="utf-8").strip()
    except OSError:
        logger.warning("persona.read_failed path={}", path)
        return ""

    if len(content) <= MAX_DOCUMENT_CHARS:
        return content

    marker = f"\n\n[{path.name} truncated: middle content removed]\n\n"
    head_len = (MAX_DOCUMENT_CHARS - len(marker)) // 2
    tail_len = MAX_DOCUMENT_CHARS - len(marker) - head_len
    if head_len <= 0 or tail_len <= 0:
        return content[:MAX_DOCUMENT_CHARS]
    return f"{content[:head_len]}{marker}{content[-tail_len:]}"


def load_persona_context(directory: Path, documents: tuple[PersonaDocument, ...] = DEFAULT_DOCUMENTS) -> str:
    """Join every present document under a titled header."""

    parts: list[str] = []
    for document in documents:
        content = read_document(directory / document.filename)
        if content:
            parts.append(f"=== {document.title} ===\n{content}")

    if not parts:
        logger.warning("persona.missing dir={} running without context", directory)
        return NO_CONTEXT_MARKER
    return "\n\n".join(parts)
