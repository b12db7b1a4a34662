import pytest

from mango_installer.errors import CommandError, InstallError, PackageNotFound
from mango_installer.lib.pkg import PackageManagerKind
from mango_installer.steps import InstallConfigStep, InstallDependenciesStep, InstallMangoWCStep, SetupNoctaliaStep


# -- dependencies --------------------------------------------------------------


def test_dependencies_pacman_resolves_names(system, make_ctx, manifest_packages):
    system.available = manifest_packages(PackageManagerKind.PACMAN) - {"scenefx", "scenefx-git"}
    ctx = make_ctx(PackageManagerKind.PACMAN)

    state = InstallDependenciesStep().run(ctx, {})

    required, optional = system.install_calls()
    assert "wlroots0.18" in required and "seatd" in required
    assert optional[4:] == ["libdisplay-info", "libliftoff", "hwdata", "pcre2"]
    assert state["dependencies"]["optional_missing"] == ["scenefx", "scenefx-git"]
    assert system.refresh_count() == 1


def test_dependencies_zypper_installs_pattern_first(system, make_ctx, manifest_packages):
    system.available = manifest_packages(PackageManagerKind.ZYPPER)
    InstallDependenciesStep().run(make_ctx(PackageManagerKind.ZYPPER), {})

    calls = system.install_calls()
    assert calls[0] == ["zypper", "--non-interactive", "install", "-t", "pattern", "devel_basis"]
    assert len(calls) == 3


def test_dependencies_missing_required_is_fatal(system, make_ctx, manifest_packages):
    system.available = manifest_packages(PackageManagerKind.APT) - {"libseat-dev"}
    with pytest.raises(CommandError):
        InstallDependenciesStep().run(make_ctx(PackageManagerKind.APT), {})
    # the optional batch is never reached
    assert len(system.install_calls()) == 1


def test_dependencies_unresolvable_rule_is_fatal(system, make_ctx, manifest_packages):
    system.available = manifest_packages(PackageManagerKind.PACMAN) - {"wlroots0.17", "wlroots0.18"}
    with pytest.raises(PackageNotFound):
        InstallDependenciesStep().run(make_ctx(PackageManagerKind.PACMAN), {})
    assert system.install_calls() == []


# -- MangoWC -------------------------------------------------------------------


def test_mangowc_already_present_skips_everything(system, make_ctx):
    system.binaries = {"mango"}
    state = InstallMangoWCStep().run(make_ctx(PackageManagerKind.PACMAN, mangowc_repo="https://x/m.git"), {})
    assert state["outcomes"]["mangowc"] == "already_present"
    assert system.install_calls() == []
    assert system.calls_to("git") == []
    assert system.refresh_count() == 0


def test_mangowc_installed_package_counts_as_present(system, make_ctx):
    system.installed = {"mangowc"}
    state = InstallMangoWCStep().run(make_ctx(PackageManagerKind.APT), {})
    assert state["outcomes"]["mangowc"] == "already_present"
    assert system.install_calls() == []


def test_mangowc_from_repo(system, make_ctx):
    system.available = {"mangowc"}
    state = InstallMangoWCStep().run(make_ctx(PackageManagerKind.DNF), {})
    assert state["outcomes"]["mangowc"] == "installed_from_repo"
    assert system.install_calls() == [["dnf", "install", "-y", "mangowc"]]


def test_mangowc_from_aur_prefers_yay(system, make_ctx):
    system.binaries = {"yay", "paru"}
    system.aur = {"mangowc-git"}
    state = InstallMangoWCStep().run(make_ctx(PackageManagerKind.PACMAN), {})
    assert state["outcomes"]["mangowc"] == "installed_from_aur"
    assert system.calls_to("yay", "-S") == [["yay", "-S", "--needed", "--noconfirm", "mangowc-git"]]
    assert system.calls_to("paru") == []


def test_mangowc_aur_not_tried_outside_pacman(system, make_ctx):
    system.binaries = {"yay"}
    system.aur = {"mangowc-git"}
    with pytest.raises(InstallError):
        InstallMangoWCStep().run(make_ctx(PackageManagerKind.APT), {})
    assert system.calls_to("yay") == []


def test_mangowc_source_build_fallback(system, make_ctx):
    state = InstallMangoWCStep().run(make_ctx(PackageManagerKind.APT, mangowc_repo="https://x/mangowc.git"), {})
    assert state["outcomes"]["mangowc"] == "built_from_source"
    assert system.calls_to("ninja", "-C", "build", "install")


def test_mangowc_no_repo_is_fatal(system, make_ctx):
    with pytest.raises(InstallError, match="Set MANGOWC_REPO"):
        InstallMangoWCStep().run(make_ctx(PackageManagerKind.PACMAN), {})


def test_mangowc_failed_source_build_is_fatal(system, make_ctx):
    system.broken_urls = {"https://x/mangowc.git"}
    with pytest.raises(InstallError, match="source build"):
        InstallMangoWCStep().run(make_ctx(PackageManagerKind.APT, mangowc_repo="https://x/mangowc.git"), {})


# -- config --------------------------------------------------------------------


def test_config_deployed(system, make_ctx, home):
    ctx = make_ctx()
    InstallConfigStep().run(ctx, {})
    dest = home / ".config" / "mango" / "config.conf"
    assert dest.read_bytes() == ctx.paths.config_source.read_bytes()


# -- Noctalia ------------------------------------------------------------------


def test_noctalia_from_repo(system, make_ctx):
    system.available = {"noctalia-shell"}
    state = SetupNoctaliaStep().run(make_ctx(PackageManagerKind.APT), {})
    assert state["outcomes"]["noctalia"] == "installed_from_repo"


def test_noctalia_already_on_path_skips_everything(system, make_ctx):
    system.binaries = {"noctalia-shell", "paru", "curl", "tar"}
    system.aur = {"noctalia-shell"}
    state = SetupNoctaliaStep().run(make_ctx(PackageManagerKind.PACMAN, noctalia_repo="https://x/noctalia.git"), {})
    assert state["outcomes"]["noctalia"] == "already_present"
    assert system.install_calls() == []
    assert system.calls_to("paru") == []
    assert system.calls_to("git") == []
    assert system.calls_to("curl") == []
    assert system.refresh_count() == 0


def test_noctalia_installed_package_counts_as_present(system, make_ctx):
    system.binaries = {"curl", "tar"}
    system.installed = {"noctalia-shell"}
    system.available = {"noctalia-shell"}
    state = SetupNoctaliaStep().run(make_ctx(PackageManagerKind.APT), {})
    assert state["outcomes"]["noctalia"] == "already_present"
    assert system.calls_to("dpkg", "-s", "noctalia-shell")
    assert system.install_calls() == []
    assert system.calls_to("curl") == []


def test_noctalia_aur_tries_git_variant(system, make_ctx):
    system.binaries = {"paru"}
    system.aur = {"noctalia-shell-git"}
    state = SetupNoctaliaStep().run(make_ctx(PackageManagerKind.PACMAN), {})
    assert state["outcomes"]["noctalia"] == "installed_from_aur"
    assert [c[-1] for c in system.calls_to("paru", "-S")] == ["noctalia-shell", "noctalia-shell-git"]


def test_noctalia_source_repo_replaces_release(system, make_ctx, home):
    system.binaries = {"curl", "tar"}
    state = SetupNoctaliaStep().run(make_ctx(PackageManagerKind.APT, noctalia_repo="https://x/noctalia.git"), {})
    assert state["outcomes"]["noctalia"] == "built_from_source"
    assert (home / ".config" / "quickshell" / "noctalia-shell" / "README.md").exists()
    assert system.calls_to("curl") == []


def test_noctalia_broken_source_repo_does_not_fall_back_to_release(system, make_ctx):
    system.binaries = {"curl", "tar"}
    system.broken_urls = {"https://x/noctalia.git"}
    with pytest.raises(InstallError):
        SetupNoctaliaStep().run(make_ctx(PackageManagerKind.APT, noctalia_repo="https://x/noctalia.git"), {})
    assert system.calls_to("curl") == []


def test_noctalia_manual_release(system, make_ctx, home):
    system.binaries = {"curl", "tar"}
    ctx = make_ctx(PackageManagerKind.APT)
    state = SetupNoctaliaStep().run(ctx, {})

    assert state["outcomes"]["noctalia"] == "installed_manually"
    assert system.calls_to("curl")[0][-1] == ctx.settings.noctalia_release_url
    assert (home / ".config" / "quickshell" / "noctalia-shell" / "shell.qml").exists()


def test_noctalia_manual_release_without_curl_is_fatal(system, make_ctx):
    system.binaries = {"tar"}
    with pytest.raises(InstallError, match="curl is required"):
        SetupNoctaliaStep().run(make_ctx(PackageManagerKind.APT), {})
