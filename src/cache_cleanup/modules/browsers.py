"""Browser cache registry.

Only cache directories are listed; bookmarks, passwords and history live
under ``~/Library/Application Support`` and are never touched. Bare bundle
identifiers resolve against the per-user Darwin cache root, where WebKit and
Chromium keep a second copy of their caches.
"""

from __future__ import annotations

from .base import RegistryEntry

PIPELINE = "browser"

ENTRIES: tuple[RegistryEntry, ...] = (
    RegistryEntry(
        id="safari",
        name="Safari",
        processes=("Safari",),
        patterns=(
            "~/Library/Caches/com.apple.Safari",
            "~/Library/Caches/com.apple.Safari.SafeBrowsing",
            "com.apple.Safari",
        ),
    ),
    RegistryEntry(
        id="chrome",
        name="Google Chrome",
        processes=("Google Chrome",),
        patterns=("~/Library/Caches/Google/Chrome",),
    ),
    RegistryEntry(
        id="canary",
        name="Chrome Canary",
        processes=("Google Chrome Canary",),
        patterns=("~/Library/Caches/Google/Chrome Canary",),
    ),
    RegistryEntry(
        id="firefox",
        name="Firefox",
        processes=("firefox",),
        patterns=("~/Library/Caches/Firefox",),
    ),
    RegistryEntry(
        id="brave",
        name="Brave",
        processes=("Brave Browser",),
        patterns=("~/Library/Caches/BraveSoftware/Brave-Browser",),
    ),
    RegistryEntry(
        id="edge",
        name="Microsoft Edge",
        processes=("Microsoft Edge",),
        patterns=("~/Library/Caches/Microsoft Edge",),
    ),
    RegistryEntry(
        id="opera",
        name="Opera",
        processes=("Opera",),
        patterns=(
            "~/Library/Caches/com.operasoftware.Opera",
            "com.operasoftware.Opera",
        ),
    ),
    RegistryEntry(
        id="arc",
        name="Arc",
        processes=("Arc",),
        patterns=(
            "~/Library/Caches/company.thebrowser.Browser",
            "company.thebrowser.Browser",
        ),
    ),
    RegistryEntry(
        id="vivaldi",
        name="Vivaldi",
        processes=("Vivaldi",),
        patterns=("~/Library/Caches/Vivaldi",),
    ),
    RegistryEntry(
        id="orion",
        name="Orion",
        processes=("Orion",),
        patterns=(
            "~/Library/Caches/ext.kagi.Orion",
            "ext.kagi.Orion",
        ),
    ),
)
