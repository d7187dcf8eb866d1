"""
Summary: Architecture checks keeping the protocol engine free of network bindings.
Why: Codec, parser and session must stay testable without sockets or HTTP.
"""

from __future__ import annotations

import re
from pathlib import Path

FORBIDDEN_IMPORTS: tuple[str, ...] = (
    "cddbp.platform.transport.http",
    "cddbp.platform.transport.line_stream",
    "requests",
    "socket",
)


def _imported_modules(path: Path) -> set[str]:
    pattern = re.compile(r"^\s*(?:from\s+([\w.]+)\s+import|import\s+([\w.]+))", re.MULTILINE)
    return {
        (match.group(1) or match.group(2))
        for match in pattern.finditer(path.read_text(encoding="utf-8"))
    }


def test_protocol_feature_does_not_import_transport_bindings() -> None:
    """Only the transport port may be referenced from the protocol feature."""

    repo_root = Path(__file__).resolve().parents[2]
    feature_dir = repo_root / "src" / "cddbp" / "features" / "protocol"
    offending: list[str] = []
    for path in feature_dir.rglob("*.py"):
        for module in _imported_modules(path):
            if any(module == name or module.startswith(f"{name}.") for name in FORBIDDEN_IMPORTS):
                offending.append(f"{path.relative_to(repo_root)}: {module}")
    assert offending == [], (
        "Protocol modules must depend on the Transport port only; found: "
        f"{', '.join(offending)}"
    )


def test_domain_does_not_import_platform() -> None:
    """Domain values stay free of logging and configuration."""

    repo_root = Path(__file__).resolve().parents[2]
    domain_dir = repo_root / "src" / "cddbp" / "features" / "protocol" / "domain"
    offending = [
        str(path.relative_to(repo_root))
        for path in domain_dir.rglob("*.py")
        if any(module.startswith(("cddbp.platform", "cddbp.config")) for module in _imported_modules(path))
    ]
    assert offending == []
