"""
Shared test fixtures and configuration.

Tests run a real subprocess: a small POSIX shell script standing in for
brew, keeping its installed packages in plain text files.
"""

import json
import stat
from dataclasses import dataclass
from pathlib import Path

import httpx
import pytest

from brewdeck.catalog.fetcher import CatalogFetcher
from brewdeck.catalog.state import CatalogState
from brewdeck.dependencies import reset_dependencies


FORMULA_URL = "https://catalog.test/api/formula.json"
CASK_URL = "https://catalog.test/api/cask.json"

FAKE_BREW = """#!/bin/sh
STATE="@STATE@"
for arg; do last="$arg"; done
case "$1" in
  --version)
    echo "Homebrew 4.2.0"
    echo "Homebrew/homebrew-core (git revision 1a2b3c)"
    ;;
  list)
    if [ "$2" = "--cask" ]; then cat "$STATE/casks"; else cat "$STATE/formulae"; fi
    ;;
  install)
    if grep -q "^$last\\$" "$STATE/broken"; then
      echo "Error: No available formula with the name \\"$last\\"." >&2
      exit 1
    fi
    if [ "$2" = "--cask" ]; then
      echo "==> Downloading https://example.com/$last.dmg"
      echo "==> Installing Cask $last"
      echo "$last 1.0" >> "$STATE/casks"
    else
      echo "==> Fetching dependencies for $last: libfoo"
      echo "==> Downloading https://example.com/$last.tar.gz"
      echo "==> Installing dependencies for $last: libfoo"
      echo "==> Installing $last"
      echo "$last 1.0" >> "$STATE/formulae"
      echo "==> Summary"
    fi
    ;;
  uninstall)
    for f in formulae casks; do
      grep -v "^$last " "$STATE/$f" > "$STATE/$f.tmp" || true
      mv "$STATE/$f.tmp" "$STATE/$f"
    done
    echo "Uninstalling $last... (1 file)"
    ;;
  upgrade)
    echo "Warning: $last 1.0 already installed" >&2
    exit 1
    ;;
  *)
    echo "Error: Unknown command: $1" >&2
    exit 1
    ;;
esac
"""


def write_executable(path: Path, body: str) -> Path:
    """Write a script and mark it executable."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(body)
    path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return path


@dataclass
class FakeBrew:
    """A fake brew installation and its state files."""
    path: Path
    state: Path

    def seed(self, formulae: str = "", casks: str = "") -> None:
        (self.state / "formulae").write_text(formulae)
        (self.state / "casks").write_text(casks)

    def break_package(self, name: str) -> None:
        with (self.state / "broken").open("a") as f:
            f.write(f"{name}\n")

    def installed(self, kind: str = "formulae") -> str:
        return (self.state / kind).read_text()


@pytest.fixture
def fake_brew(tmp_path: Path) -> FakeBrew:
    """A stateful fake brew with no packages installed."""
    state = tmp_path / "brew-state"
    state.mkdir()
    for name in ("formulae", "casks", "broken"):
        (state / name).write_text("")
    path = write_executable(
        tmp_path / "bin" / "brew",
        FAKE_BREW.replace("@STATE@", str(state)),
    )
    return FakeBrew(path=path, state=state)


@pytest.fixture
def script_factory(tmp_path: Path):
    """Create one-off brew scripts with a custom body."""
    counter = {"n": 0}

    def make(body: str) -> Path:
        counter["n"] += 1
        return write_executable(tmp_path / f"script-{counter['n']}" / "brew", "#!/bin/sh\n" + body)

    return make


FORMULAE_PAYLOAD = [
    {
        "name": "wget",
        "full_name": "wget",
        "desc": "Internet file retriever",
        "homepage": "https://www.gnu.org/software/wget/",
        "versions": {"stable": "1.21.4", "head": "HEAD", "bottle": True},
        "dependencies": ["libidn2", "openssl@3"],
        "license": "GPL-3.0-or-later",
    },
    {
        "name": "jq",
        "full_name": "jq",
        "desc": "Lightweight and flexible command-line JSON processor",
        "homepage": "https://jqlang.github.io/jq/",
        "versions": {"stable": "1.7.1", "head": "HEAD", "bottle": True},
        "dependencies": ["oniguruma"],
    },
    {
        "name": "libidn2",
        "full_name": "libidn2",
        "desc": None,
        "homepage": "https://www.gnu.org/software/libidn/#libidn2",
        "versions": {"stable": "2.3.4", "head": None, "bottle": True},
        "dependencies": [],
    },
]

CASKS_PAYLOAD = [
    {
        "token": "visual-studio-code",
        "name": ["Microsoft Visual Studio Code", "VS Code"],
        "desc": "Open-source code editor",
        "homepage": "https://code.visualstudio.com/",
        "version": "1.85.1",
        "url": "https://update.code.visualstudio.com/1.85.1/darwin/stable",
        "auto_updates": True,
    },
    {
        "token": "wget-gui",
        "name": ["Wget GUI"],
        "desc": None,
        "homepage": "https://example.com/wget-gui",
        "version": "2.0",
        "url": "https://example.com/wget-gui.dmg",
    },
]


def catalog_handler(formulae=None, casks=None, status: int = 200):
    """A request handler serving both catalog endpoints."""
    formulae = FORMULAE_PAYLOAD if formulae is None else formulae
    casks = CASKS_PAYLOAD if casks is None else casks

    def handler(request: httpx.Request) -> httpx.Response:
        if str(request.url) == FORMULA_URL:
            body = formulae
        elif str(request.url) == CASK_URL:
            body = casks
        else:
            return httpx.Response(404)
        content = body if isinstance(body, bytes) else json.dumps(body).encode()
        return httpx.Response(status, content=content)

    return handler


def catalog_transport(formulae=None, casks=None, status: int = 200) -> httpx.MockTransport:
    """A MockTransport serving both catalog endpoints."""
    return httpx.MockTransport(catalog_handler(formulae, casks, status))


@pytest.fixture
def catalog_state() -> CatalogState:
    """A CatalogState backed by the mock catalog endpoints."""
    return CatalogState(
        CatalogFetcher(
            formula_url=FORMULA_URL,
            cask_url=CASK_URL,
            transport=catalog_transport(),
        )
    )


@pytest.fixture
def app_env(monkeypatch, tmp_path: Path, fake_brew: FakeBrew):
    """Point settings at the fake brew and a temporary inventory."""
    monkeypatch.setenv("BREWDECK_INVENTORY_DIR", str(tmp_path / "inventory"))
    monkeypatch.setenv("BREWDECK_BREW_PATHS", json.dumps([str(fake_brew.path)]))
    reset_dependencies()
    yield fake_brew
    reset_dependencies()
