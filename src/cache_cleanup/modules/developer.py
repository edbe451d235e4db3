"""Developer tool cache registry.

Entries with a ``check`` executable are skipped when that tool is not
installed. Commands delegate to the tool's own cache cleanup so that its
internal indexes stay consistent.
"""

from __future__ import annotations

from .base import RegistryEntry

PIPELINE = "developer"

_XCODE = "~/Library/Developer/Xcode"
_SIMULATORS = "~/Library/Developer/CoreSimulator"
_CODE = "~/Library/Application Support/Code"

ENTRIES: tuple[RegistryEntry, ...] = (
    RegistryEntry(
        id="xcode",
        name="Xcode Data",
        check="xcode-select",
        processes=("Xcode",),
        patterns=(
            f"{_XCODE}/DerivedData/*",
            f"{_XCODE}/Archives/*",
            f"{_XCODE}/iOS DeviceSupport/*",
            f"{_XCODE}/Logs/*",
            "~/Library/Caches/com.apple.dt.Xcode",
            "com.apple.DeveloperTools",
        ),
    ),
    RegistryEntry(
        id="simulators",
        name="iOS Simulators",
        processes=("Simulator",),
        patterns=(
            f"{_SIMULATORS}/Caches",
            f"{_SIMULATORS}/Devices/*/data/Library/Caches",
        ),
    ),
    RegistryEntry(
        id="brew",
        name="Homebrew",
        check="brew",
        commands=("brew cleanup -s",),
        patterns=("~/Library/Caches/Homebrew",),
    ),
    RegistryEntry(
        id="pods",
        name="CocoaPods",
        check="pod",
        commands=("pod cache clean --all",),
        patterns=("~/Library/Caches/CocoaPods",),
    ),
    RegistryEntry(
        id="node",
        name="npm",
        check="npm",
        patterns=("~/.npm/_cacache",),
    ),
    RegistryEntry(
        id="yarn",
        name="Yarn",
        check="yarn",
        commands=("yarn cache clean",),
    ),
    RegistryEntry(
        id="pnpm",
        name="pnpm",
        check="pnpm",
        commands=("pnpm store prune",),
    ),
    RegistryEntry(
        id="bun",
        name="Bun",
        check="bun",
        commands=("bun pm cache rm",),
        patterns=("~/.bun/install/cache/*",),
    ),
    RegistryEntry(
        id="go",
        name="Go",
        check="go",
        commands=("go clean -cache -modcache",),
    ),
    RegistryEntry(
        id="flutter",
        name="Flutter",
        check="flutter",
        commands=("flutter pub cache clean --force",),
    ),
    RegistryEntry(
        id="dart",
        name="Dart",
        check="dart",
        commands=("dart pub cache clean --force",),
    ),
    RegistryEntry(
        id="swift",
        name="Swift PM",
        patterns=(
            "~/Library/Caches/org.swift.swiftpm",
            f"{_XCODE}/DerivedData/*/SourcePackages",
        ),
    ),
    RegistryEntry(
        id="vscode",
        name="VS Code",
        processes=("Code",),
        patterns=(
            f"{_CODE}/Cache/*",
            f"{_CODE}/CachedData/*",
            f"{_CODE}/logs/*",
        ),
    ),
    RegistryEntry(
        id="docker",
        name="Docker",
        check="docker",
        commands=("docker system prune -f -a",),
    ),
    RegistryEntry(
        id="android",
        name="Android & Gradle",
        processes=("studio",),
        patterns=(
            "~/.gradle/caches",
            "~/.android/build-cache",
            "~/Library/Caches/Google/AndroidStudio*",
        ),
    ),
    RegistryEntry(
        id="python",
        name="Python",
        patterns=(
            "**/__pycache__",
            "**/.pytest_cache",
            "~/Library/Caches/pip",
        ),
    ),
    # Keep last: its globs overlap every other entry under ~/Library/Caches
    RegistryEntry(
        id="system",
        name="System Caches",
        patterns=(
            "~/Library/Caches/*",
            "~/Library/Logs/*",
            "~/.Trash/*",
        ),
    ),
)
