from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import Callable, Dict, Iterable, Iterator, Optional

import pytest

import gomkeeper.utils.logger as logger_module
from gomkeeper.utils.console import reset_console

GO_ENV_VARS = ("GOOS", "GOARCH", "GOPATH", "GOM_VENDOR_NAME", "GOMKEEPER_GROUPS", "GOMKEEPER_CONFIG")


def go_source(imports: Iterable[str] = (), package: str = "main") -> str:
    """Render a small Go file importing ``imports``."""
    lines = [f"package {package}", ""]
    imports = list(imports)
    if imports:
        lines.append("import (")
        lines.extend(f'\t"{imp}"' for imp in imports)
        lines.append(")")
    lines.extend(["", "func init() {}", ""])
    return "\n".join(lines)


@pytest.fixture(autouse=True)
def clean_go_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the host's Go and gomkeeper settings out of every test."""
    for var in GO_ENV_VARS:
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def write_package() -> Callable[..., Path]:
    """Return a helper that writes a Go package directory.

    Usage: ``write_package(dir, ["fmt", "ext.example/lib"])``.
    """

    def _write(
        directory: Path,
        imports: Iterable[str] = (),
        *,
        filename: str = "main.go",
        package: str = "main",
    ) -> Path:
        directory.mkdir(parents=True, exist_ok=True)
        (directory / filename).write_text(go_source(imports, package), encoding="utf-8")
        return directory

    return _write


@pytest.fixture
def make_repo() -> Callable[..., Path]:
    """Return a helper that creates a fake working copy under a vendor ``src``.

    The repository gets its VCS metadata directory plus one source file.
    """

    def _make(vendor_src: Path, name: str, metadata_dir: str = ".git") -> Path:
        root = vendor_src / name
        (root / metadata_dir).mkdir(parents=True, exist_ok=True)
        (root / metadata_dir / "HEAD").write_text("ref: refs/heads/master\n")
        (root / "lib.go").write_text(go_source(package="lib"))
        return root

    return _make


def fake_vcs_run(revisions: Dict[str, Optional[str]]) -> Callable[..., subprocess.CompletedProcess]:
    """Build a ``subprocess.run`` stand-in answering by repository directory name.

    A ``None`` revision makes the command fail like a broken working copy.
    """

    def _run(cmd, cwd=None, **kwargs):
        revision = revisions.get(Path(cwd).name)
        if revision is None:
            raise subprocess.CalledProcessError(128, cmd, output="", stderr="fatal: not a repository")
        return subprocess.CompletedProcess(cmd, 0, stdout=f"{revision}\n", stderr="")

    return _run


@pytest.fixture
def fake_vcs() -> Callable[..., Callable[..., subprocess.CompletedProcess]]:
    """Factory for ``subprocess.run`` replacements, see :func:`fake_vcs_run`."""
    return fake_vcs_run


@pytest.fixture(autouse=True)
def reset_gomkeeper_logging() -> Iterator[None]:
    """Drop handlers installed by ``setup_logging`` so streams captured in
    one test are not written to by the next."""
    yield
    root = logging.getLogger("gomkeeper")
    root.handlers.clear()
    root.setLevel(logging.NOTSET)
    root.propagate = True
    logger_module._logging_configured = False
    reset_console()
