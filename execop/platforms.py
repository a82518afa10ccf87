"""Operating system classification"""

import platform
from enum import Enum
from typing import Optional


class Platform(str, Enum):
    """Coarse platform family derived from an OS name"""

    LINUX = "linux"
    MACOS = "macos"
    WINDOWS = "windows"
    AIX = "aix"
    CYGWIN = "cygwin"
    FREEBSD = "freebsd"
    MINGW = "mingw"
    OPENVMS = "openvms"
    SOLARIS = "solaris"
    UNKNOWN = "unknown"

    @property
    def is_unix(self) -> bool:
        return self in UNIX_FAMILY


UNIX_FAMILY = frozenset({
    Platform.LINUX,
    Platform.MACOS,
    Platform.AIX,
    Platform.FREEBSD,
    Platform.SOLARIS,
    Platform.CYGWIN,
})


# Checked in order: first match wins.
# "darwin" contains "win" and "cygwin" contains "win", so both go before Windows.
_MARKERS = (
    (("darwin", "mac"), Platform.MACOS),
    (("cygwin",), Platform.CYGWIN),
    (("mingw", "msys"), Platform.MINGW),
    (("win",), Platform.WINDOWS),
    (("linux",), Platform.LINUX),
    (("freebsd",), Platform.FREEBSD),
    (("aix",), Platform.AIX),
    (("sunos", "solaris"), Platform.SOLARIS),
    (("openvms",), Platform.OPENVMS),
)


def classify(os_name: Optional[str]) -> Platform:
    """
    Map a raw OS name to its platform family

    Matching is case-insensitive and substring based. Empty, missing or
    unrecognized names classify as Platform.UNKNOWN.
    """
    if not os_name:
        return Platform.UNKNOWN

    name = os_name.strip().lower()
    for markers, family in _MARKERS:
        if any(marker in name for marker in markers):
            return family
    return Platform.UNKNOWN


def is_linux(os_name: Optional[str]) -> bool:
    return classify(os_name) is Platform.LINUX


def is_macos(os_name: Optional[str]) -> bool:
    return classify(os_name) is Platform.MACOS


def is_windows(os_name: Optional[str]) -> bool:
    return classify(os_name) is Platform.WINDOWS


def is_aix(os_name: Optional[str]) -> bool:
    return classify(os_name) is Platform.AIX


def is_cygwin(os_name: Optional[str]) -> bool:
    return classify(os_name) is Platform.CYGWIN


def is_freebsd(os_name: Optional[str]) -> bool:
    return classify(os_name) is Platform.FREEBSD


def is_mingw(os_name: Optional[str]) -> bool:
    return classify(os_name) is Platform.MINGW


def is_openvms(os_name: Optional[str]) -> bool:
    return classify(os_name) is Platform.OPENVMS


def is_solaris(os_name: Optional[str]) -> bool:
    return classify(os_name) is Platform.SOLARIS


def is_unix(os_name: Optional[str]) -> bool:
    """True for any family in the Unix group (Linux, macOS, AIX, FreeBSD, Solaris, Cygwin)"""
    return classify(os_name).is_unix


FAMILY_PREDICATES = {
    "is_linux": is_linux,
    "is_macos": is_macos,
    "is_windows": is_windows,
    "is_aix": is_aix,
    "is_cygwin": is_cygwin,
    "is_freebsd": is_freebsd,
    "is_mingw": is_mingw,
    "is_openvms": is_openvms,
    "is_solaris": is_solaris,
}


def current_os_name() -> str:
    """Live OS name of the running interpreter"""
    return platform.system()


def current_platform() -> Platform:
    return classify(current_os_name())
