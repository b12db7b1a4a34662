"""MangoWC installer.

Installs the MangoWC Wayland compositor and its build dependencies with the
host's package manager (apt, dnf, pacman or zypper), deploys the bundled
config.conf and sets up the Noctalia desktop shell.

Each target is installed through an ordered fallback chain:
- already installed
- distribution package
- AUR (pacman hosts only)
- source build / source clone (MANGOWC_REPO, NOCTALIA_REPO)
- release archive (Noctalia only)
"""

__all__ = []
