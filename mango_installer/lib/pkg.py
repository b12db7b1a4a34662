from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import List, Sequence


class PackageManagerKind(str, enum.Enum):
    APT = "apt"
    DNF = "dnf"
    PACMAN = "pacman"
    ZYPPER = "zypper"


@dataclass(frozen=True)
class Backend:
    """Command templates for one package manager.

    Query argv never carry the elevation prefix; refresh/install argv are
    elevated by the caller.
    """

    kind: PackageManagerKind
    probe: str
    supports_aur: bool = False

    def refresh_argv(self) -> List[str]:
        raise NotImplementedError

    def exists_argv(self, package: str) -> List[str]:
        raise NotImplementedError

    def installed_argv(self, package: str) -> List[str]:
        raise NotImplementedError

    def install_argv(self, packages: Sequence[str]) -> List[str]:
        raise NotImplementedError

    def search_argv(self, base: str) -> List[str]:
        raise NotImplementedError

    def parse_search(self, stdout: str) -> List[str]:
        return [line.strip() for line in stdout.splitlines() if line.strip()]

    def install_patterns_argv(self, patterns: Sequence[str]) -> List[str]:
        raise NotImplementedError(f"{self.kind.value} has no install patterns")


class AptBackend(Backend):
    def refresh_argv(self) -> List[str]:
        return ["apt-get", "update"]

    def exists_argv(self, package: str) -> List[str]:
        return ["apt-cache", "show", package]

    def installed_argv(self, package: str) -> List[str]:
        return ["dpkg", "-s", package]

    def install_argv(self, packages: Sequence[str]) -> List[str]:
        return ["apt-get", "install", "-y", *packages]

    def search_argv(self, base: str) -> List[str]:
        return ["apt-cache", "pkgnames", base]


class DnfBackend(Backend):
    def refresh_argv(self) -> List[str]:
        return ["dnf", "makecache"]

    def exists_argv(self, package: str) -> List[str]:
        return ["dnf", "info", package]

    def installed_argv(self, package: str) -> List[str]:
        return ["rpm", "-q", package]

    def install_argv(self, packages: Sequence[str]) -> List[str]:
        return ["dnf", "install", "-y", *packages]

    def search_argv(self, base: str) -> List[str]:
        return ["dnf", "repoquery", "-q", "--qf", "%{name}\n", f"{base}*"]


class PacmanBackend(Backend):
    def refresh_argv(self) -> List[str]:
        return ["pacman", "-Sy", "--noconfirm"]

    def exists_argv(self, package: str) -> List[str]:
        return ["pacman", "-Si", package]

    def installed_argv(self, package: str) -> List[str]:
        return ["pacman", "-Q", package]

    def install_argv(self, packages: Sequence[str]) -> List[str]:
        return ["pacman", "-S", "--needed", "--noconfirm", *packages]

    def search_argv(self, base: str) -> List[str]:
        return ["pacman", "-Ssq", f"^{base}[0-9]+\\.[0-9]+$"]


class ZypperBackend(Backend):
    def refresh_argv(self) -> List[str]:
        return ["zypper", "--non-interactive", "refresh"]

    def exists_argv(self, package: str) -> List[str]:
        return ["zypper", "--non-interactive", "info", package]

    def installed_argv(self, package: str) -> List[str]:
        return ["rpm", "-q", package]

    def install_argv(self, packages: Sequence[str]) -> List[str]:
        return ["zypper", "--non-interactive", "install", *packages]

    def search_argv(self, base: str) -> List[str]:
        return ["zypper", "--non-interactive", "--quiet", "search", "--type", "package", base]

    def parse_search(self, stdout: str) -> List[str]:
        # Table rows: "S | Name | Summary | Type"
        names: List[str] = []
        for line in stdout.splitlines():
            cols = [c.strip() for c in line.split("|")]
            if len(cols) < 2 or not cols[1] or cols[1] == "Name" or set(cols[1]) <= {"-", "+"}:
                continue
            names.append(cols[1])
        return names

    def install_patterns_argv(self, patterns: Sequence[str]) -> List[str]:
        return ["zypper", "--non-interactive", "install", "-t", "pattern", *patterns]


# Probe order is significant: the first manager found on PATH wins.
BACKENDS: tuple[Backend, ...] = (
    AptBackend(PackageManagerKind.APT, probe="apt-get"),
    DnfBackend(PackageManagerKind.DNF, probe="dnf"),
    PacmanBackend(PackageManagerKind.PACMAN, probe="pacman", supports_aur=True),
    ZypperBackend(PackageManagerKind.ZYPPER, probe="zypper"),
)


def backend_for(kind: PackageManagerKind) -> Backend:
    for b in BACKENDS:
        if b.kind == kind:
            return b
    raise KeyError(kind)
