"""Names of the things the installer puts on the system."""

MANGOWC_BINARIES = ("mangowc", "mango")
MANGOWC_PACKAGE = "mangowc"
MANGOWC_AUR_PACKAGE = "mangowc-git"

NOCTALIA_BINARY = "noctalia-shell"
NOCTALIA_PACKAGE = "noctalia-shell"
NOCTALIA_AUR_PACKAGES = ("noctalia-shell", "noctalia-shell-git")
NOCTALIA_LAUNCHER = "qs"
