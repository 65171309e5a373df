from pathlib import Path

from careerdesk.app import build_policy_source, render_policy
from careerdesk.config import Settings
from careerdesk.persona import MAX_DOCUMENT_CHARS, NO_CONTEXT_MARKER, load_persona_context, read_document


def test_missing_documents_yield_marker(tmp_path: Path) -> None:
    assert load_persona_context(tmp_path / "absent") == NO_CONTEXT_MARKER


def test_documents_are_joined_under_titles(tmp_path: Path) -> None:
    (tmp_path / "summary.txt").write_text("  Backend engineer, 6 years.  \n", encoding="utf-8")
    (tmp_path / "linkedin.txt").write_text("Python, Go, Kubernetes", encoding="utf-8")

    context = load_persona_context(tmp_path)

    assert context == (
        "=== CV Summary ===\nBackend engineer, 6 years.\n\n=== LinkedIn Profile ===\nPython, Go, Kubernetes"
    )


def test_partial_documents_are_used(tmp_path: Path) -> None:
    (tmp_path / "linkedin.txt").write_text("Python", encoding="utf-8")

    assert load_persona_context(tmp_path) == "=== LinkedIn Profile ===\nPython"


def test_long_document_is_truncated_in_the_middle(tmp_path: Path) -> None:
    path = tmp_path / "summary.txt"
    path.write_text("a" * MAX_DOCUMENT_CHARS + "b" * 500, encoding="utf-8")

    content = read_document(path)

    assert len(content) == MAX_DOCUMENT_CHARS
    assert "[summary.txt truncated: middle content removed]" in content
    assert content.startswith("a")
    assert content.endswith("b")


def test_policy_source_renders_template(tmp_path: Path) -> None:
    (tmp_path / "summary.txt").write_text("Data engineer", encoding="utf-8")
    settings = Settings(context_dir=tmp_path, system_prompt="Speak for:\n{context}\n")

    assert build_policy_source(settings)() == "Speak for:\n=== CV Summary ===\nData engineer"
    assert render_policy("{context} only", NO_CONTEXT_MARKER) == f"{NO_CONTEXT_MARKER} only"
