"""Pytest configuration and fixtures.

FakeSystem stands in for the host: every command run through
mango_installer.lib.command goes to FakeSystem.run, and PATH lookups go to
FakeSystem.which.
"""

import logging
import re
import subprocess
from pathlib import Path

import pytest

from mango_installer.lib import command
from mango_installer.lib.env import Paths, Settings
from mango_installer.lib.manifests import FirstOf, LatestVersioned, load_dependency_spec
from mango_installer.lib.pkg import PackageManagerKind, backend_for
from mango_installer.lib.probe import Host
from mango_installer.lib.resolver import PackageResolver
from mango_installer.pipeline import InstallCtx

REFRESH = [
    ["apt-get", "update"],
    ["dnf", "makecache"],
    ["pacman", "-Sy", "--noconfirm"],
    ["zypper", "--non-interactive", "refresh"],
]
EXISTS = [["apt-cache", "show"], ["dnf", "info"], ["pacman", "-Si"], ["zypper", "--non-interactive", "info"]]
INSTALLED = [["dpkg", "-s"], ["rpm", "-q"], ["pacman", "-Q"]]
INSTALL = [
    ["apt-get", "install", "-y"],
    ["dnf", "install", "-y"],
    ["pacman", "-S", "--needed", "--noconfirm"],
    ["zypper", "--non-interactive", "install"],
]

# Binaries a package puts on PATH.
PROVIDES = {
    "mangowc": {"mango"},
    "mangowc-git": {"mango"},
    "noctalia-shell": {"noctalia-shell", "qs"},
    "noctalia-shell-git": {"noctalia-shell", "qs"},
}


class FakeSystem:
    def __init__(self, root: Path):
        self.root = root
        self.binaries = set()
        self.available = set()
        self.installed = set()
        self.aur = set()
        self.broken_packages = set()
        self.broken_urls = set()
        self.refresh_fails = False
        self.calls = []
        self.raw_calls = []

    # -- helpers -------------------------------------------------------------

    def which(self, name):
        return f"/usr/bin/{name}" if name in self.binaries else None

    def calls_to(self, *prefix):
        return [c for c in self.calls if c[: len(prefix)] == list(prefix)]

    def install_calls(self):
        return [c for c in self.calls if any(c[: len(p)] == p for p in INSTALL)]

    def refresh_count(self):
        return sum(1 for c in self.calls if c in REFRESH)

    def _install(self, packages):
        self.installed.update(packages)
        for p in packages:
            self.binaries.update(PROVIDES.get(p, set()))

    # -- command dispatch ----------------------------------------------------

    def run(self, argv, **kwargs):
        self.raw_calls.append(list(argv))
        cmd = list(argv)
        if cmd[:1] == ["sudo"]:
            cmd = cmd[1:]
        self.calls.append(cmd)
        rc, out = self._dispatch(cmd, kwargs.get("cwd"))
        return subprocess.CompletedProcess(list(argv), rc, out, "" if rc == 0 else "simulated failure")

    def _dispatch(self, cmd, cwd):
        if cmd in REFRESH:
            return (1 if self.refresh_fails else 0), ""

        for p in EXISTS:
            if cmd[: len(p)] == p:
                return (0 if cmd[-1] in self.available else 100), ""

        for p in INSTALLED:
            if cmd[: len(p)] == p:
                return (0 if cmd[-1] in self.installed else 1), ""

        if cmd[:2] == ["pacman", "-Ssq"]:
            rx = re.compile(cmd[2])
            return 0, "\n".join(sorted(n for n in self.available if rx.search(n))) + "\n"

        if cmd[:2] == ["apt-cache", "pkgnames"]:
            return 0, "\n".join(sorted(n for n in self.available if n.startswith(cmd[2]))) + "\n"

        for p in INSTALL:
            if cmd[: len(p)] == p:
                packages = cmd[len(p):]
                if packages[:2] == ["-t", "pattern"]:
                    return 0, ""
                bad = [x for x in packages if x not in self.available or x in self.broken_packages]
                if bad:
                    return 100, ""
                self._install(packages)
                return 0, ""

        if cmd[0] in ("yay", "paru") and cmd[1] == "-S":
            pkg = cmd[-1]
            if pkg in self.aur:
                self._install([pkg])
                return 0, ""
            return 1, ""

        if cmd[:2] == ["git", "clone"]:
            if cmd[-2] in self.broken_urls:
                return 128, ""
            dest = Path(cmd[-1])
            dest.mkdir(parents=True)
            (dest / "README.md").write_text("cloned\n")
            return 0, ""

        if cmd[0] == "meson":
            return 0, ""

        if cmd[0] == "ninja":
            if cmd[-1] == "install":
                self.binaries.update({"mango", "mangowc"})
            return 0, ""

        if cmd[0] == "curl":
            if cmd[-1] in self.broken_urls:
                return 22, ""
            Path(cmd[cmd.index("-o") + 1]).write_bytes(b"archive")
            return 0, ""

        if cmd[0] == "tar":
            dest = Path(cmd[cmd.index("-C") + 1])
            (dest / "shell.qml").write_text("ShellRoot {}\n")
            return 0, ""

        return 127, ""


def available_for(kind):
    """Every package the manifest asks for, as the repositories would list them."""

    spec = load_dependency_spec(kind)
    names = set(spec.optional)
    for ref in spec.required:
        if isinstance(ref, str):
            names.add(ref)
        elif isinstance(ref, FirstOf):
            names.add(ref.candidates[-1])
        elif isinstance(ref, LatestVersioned):
            names.update({f"{ref.base}0.17", f"{ref.base}0.18"})
    return names


@pytest.fixture(autouse=True)
def _clean_logging():
    """Detach the handlers main() installs so every test configures logging afresh."""

    yield
    root = logging.getLogger()
    for h in list(root.handlers):
        # exact types only: pytest's own capture handlers subclass these
        if type(h) in (logging.StreamHandler, logging.FileHandler):
            root.removeHandler(h)
            h.close()
    for attr in ("_mango_configured", "_mango_log_path"):
        if hasattr(root, attr):
            delattr(root, attr)


@pytest.fixture
def system(tmp_path, monkeypatch):
    fake = FakeSystem(tmp_path)
    monkeypatch.setattr(command.subprocess, "run", fake.run)
    monkeypatch.setattr(command.shutil, "which", fake.which)
    return fake


@pytest.fixture
def home(tmp_path, monkeypatch):
    h = tmp_path / "home"
    h.mkdir()
    monkeypatch.setenv("HOME", str(h))
    return h


@pytest.fixture
def make_ctx(system, home):
    def _make(kind=PackageManagerKind.APT, **settings):
        host = Host(kind=kind, backend=backend_for(kind), elevate=("sudo",))
        return InstallCtx(
            host=host,
            resolver=PackageResolver(host, dry_run=settings.get("dry_run", False)),
            paths=Paths.for_home(home),
            settings=Settings(**settings),
        )

    return _make


@pytest.fixture
def manifest_packages():
    return available_for
