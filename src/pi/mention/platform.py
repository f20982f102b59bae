"""Platform classification for keystroke handling.

Only three behaviours differ between platforms, so the host's user-agent
and platform strings collapse into a small enum:

* ``DESKTOP`` - Mac OS, Windows, Linux and anything unrecognized.
* ``ANDROID`` - the caret is reported one past the logical edit position,
  so every span computation is shifted back by one character.
* ``TOUCH`` - iOS family; no caret compensation, blur does not close the
  session.
"""

from __future__ import annotations

import enum
import re

MACOS_PLATFORMS = frozenset({"Macintosh", "MacIntel", "MacPPC", "Mac68K"})
WINDOWS_PLATFORMS = frozenset({"Win32", "Win64", "Windows", "WinCE"})
IOS_PLATFORMS = frozenset({"iPhone", "iPad", "iPod"})

_ANDROID_RE = re.compile(r"Android")
_LINUX_RE = re.compile(r"Linux")


class PlatformKind(enum.Enum):
    DESKTOP = "desktop"
    ANDROID = "android"
    TOUCH = "touch"

    @property
    def caret_compensation(self) -> int:
        return 1 if self is PlatformKind.ANDROID else 0

    @property
    def closes_on_blur(self) -> bool:
        return self is not PlatformKind.TOUCH


def detect_platform(user_agent: str = "", platform: str = "") -> PlatformKind:
    """Map user-agent/platform strings onto a :class:`PlatformKind`."""
    if platform in MACOS_PLATFORMS:
        return PlatformKind.DESKTOP
    if platform in IOS_PLATFORMS:
        return PlatformKind.TOUCH
    if platform in WINDOWS_PLATFORMS:
        return PlatformKind.DESKTOP
    if _ANDROID_RE.search(user_agent or ""):
        return PlatformKind.ANDROID
    if _LINUX_RE.search(platform or ""):
        return PlatformKind.DESKTOP
    return PlatformKind.DESKTOP
