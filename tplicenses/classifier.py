"""Signature-based separation of standard license bodies inside a section."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable, List, Sequence, Tuple

from .errors import ConfigError


@dataclass(frozen=True)
class LicensePattern:
    """A named signature recognising one canonical license body."""

    name: str
    regex: re.Pattern[str]


@dataclass(frozen=True)
class ExtractedLicense:
    """A license body cut out of a raw section."""

    name: str
    content: str
    fallback: bool = False


def _pattern(name: str, regex: str) -> LicensePattern:
    return LicensePattern(name=name, regex=re.compile(regex, re.DOTALL))


# Evaluated in order; names may repeat so several wordings of one license are
# all tried.
DEFAULT_PATTERNS: Tuple[LicensePattern, ...] = (
    _pattern("GNU LGPL", r"GNU LESSER GENERAL PUBLIC LICENSE.*That's all there is to it!"),
    _pattern(
        "GNU GPL",
        r"GNU GENERAL PUBLIC LICENSE.*Public License instead of this License\.",
    ),
    _pattern(
        "Apache-2.0",
        r"Apache License\s+Version 2\.0.*See the License for the specific language "
        r"governing permissions and\s+limitations under the License\.",
    ),
    _pattern(
        "MIT",
        r"The MIT License.*OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR "
        r"OTHER DEALINGS IN\s+THE SOFTWARE\.",
    ),
    _pattern(
        "MIT",
        r"Permission is hereby granted, free of charge, to any person obtaining a copy"
        r".*OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN"
        r"\s+THE SOFTWARE\.",
    ),
    _pattern(
        "BSD-2",
        r"Copyright \(c\) 2005-\d+, The Android Open Source Project"
        r".*END OF TERMS AND CONDITIONS",
    ),
    _pattern(
        "BSD-3-2",
        r"Redistribution and use in source and binary forms"
        r".*Redistributions of source code must retain the above copyright notice"
        r".*Redistributions in binary form must reproduce the above copyright notice"
        r".*may be used to endorse or promote products"
        r".*without specific prior written permission"
        r".*EVEN IF ADVISED OF THE\s+POSSIBILITY OF SUCH DAMAGE\.",
    ),
    _pattern(
        "Netscape",
        r"AMENDMENTS.*The Netscape Public License Version 1\.1.*Modifications\.\]",
    ),
    _pattern("Boost", r"Boost Software License - Version 1\.0.*DEALINGS IN THE SOFTWARE\."),
    _pattern(
        "Eclipse",
        r"Eclipse Public License, Version 1\.0.*jury trial in any resulting litigation\.",
    ),
    _pattern(
        "BSD-3-1",
        r"Copyright.*Redistributions of source code must retain the above copyright"
        r".*Redistributions in binary form must reproduce the above copyright"
        r".*may be used to endorse or promote products"
        r".*without specific prior written permission"
        r".*EVEN IF ADVISED OF.+POSSIBILITY OF SUCH DAMAGE\.",
    ),
)


def compile_patterns(
    extra: Iterable[Tuple[str, str]] = (),
    *,
    base: Sequence[LicensePattern] = DEFAULT_PATTERNS,
) -> Tuple[LicensePattern, ...]:
    """Return ``base`` followed by user supplied ``(name, regex)`` signatures."""
    patterns = list(base)
    for name, regex in extra:
        try:
            patterns.append(_pattern(name, regex))
        except re.error as exc:
            raise ConfigError(f"Invalid regex for license pattern {name!r}: {exc}") from exc
    return tuple(patterns)


def reduce_section(
    text: str, patterns: Sequence[LicensePattern]
) -> Tuple[List[ExtractedLicense], str]:
    """Cut known license bodies out of ``text``.

    Each pattern is searched once, in order, against what earlier patterns left
    behind. The first match is extracted and removed before the next pattern
    runs. Returns the extracted bodies and the remaining text.
    """
    extracted: List[ExtractedLicense] = []
    remaining = text
    for pattern in patterns:
        match = pattern.regex.search(remaining)
        if match is None:
            continue
        extracted.append(ExtractedLicense(name=pattern.name, content=match.group(0)))
        remaining = remaining[: match.start()] + remaining[match.end() :]
    return extracted, remaining


def fallback_license_name(library_name: str) -> str:
    return f"{library_name} license"


def classify_section(
    library_name: str,
    raw_section: str,
    patterns: Sequence[LicensePattern] = DEFAULT_PATTERNS,
) -> List[ExtractedLicense]:
    """Split a raw section into recognised licenses plus a catch-all remainder.

    The remainder is always returned last as ``"<library name> license"``, even
    when it is empty.
    """
    extracted, remaining = reduce_section(raw_section.strip(), patterns)
    extracted.append(
        ExtractedLicense(
            name=fallback_license_name(library_name),
            content=remaining.strip(),
            fallback=True,
        )
    )
    return extracted


__all__ = [
    "DEFAULT_PATTERNS",
    "ExtractedLicense",
    "LicensePattern",
    "classify_section",
    "compile_patterns",
    "fallback_license_name",
    "reduce_section",
]
