"""Dialogue transcript segmentation into speaker-attributed segments.

Responsibilities:
- Recognize speaker-label prefixes through a closed set of label conventions.
- Turn a cleaned two-host transcript into ordered `Segment` records.

Two equivalent conventions are recognized: numbered labels (`HOST 1:` /
`HOST 2:`) and the conventional host names (`ALEX:` / `SAM:`). Matching is
case-insensitive and tolerates surrounding whitespace.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
import re
from typing import Protocol, Sequence

from ..models.datatypes import Host, Segment, SpeakerRole


class LabelKind(str, Enum):
    """Tagged result of matching one transcript line."""

    HOST_1 = "host-1"
    HOST_2 = "host-2"
    UNLABELED = "unlabeled"

    @property
    def speaker(self) -> SpeakerRole:
        """Return the speaker a line of this kind is attributed to.

        Unlabeled lines are narration and default to the first host.
        """

        if self is LabelKind.HOST_2:
            return SpeakerRole.HOST_2
        return SpeakerRole.HOST_1


@dataclass(frozen=True, slots=True)
class LabelMatch:
    """Matched label kind and the line text with any label removed."""

    kind: LabelKind
    text: str


class LabelConvention(Protocol):
    """Protocol for one speaker-label convention."""

    def match(self, line: str) -> LabelMatch | None:
        """Return a labeled match, or `None` when the convention does not apply."""


class NumberedHostLabels:
    """Match `HOST 1:` / `HOST 2:` prefixes."""

    _PATTERN = re.compile(r"^\s*HOST\s*([12])\s*:\s*(.*)$", re.IGNORECASE | re.DOTALL)

    def match(self, line: str) -> LabelMatch | None:
        """Match a numbered host label prefix."""

        found = self._PATTERN.match(line)
        if found is None:
            return None
        kind = LabelKind.HOST_1 if found.group(1) == "1" else LabelKind.HOST_2
        return LabelMatch(kind=kind, text=found.group(2).strip())


class NamedHostLabels:
    """Match host-name prefixes such as `ALEX:` / `SAM:`."""

    def __init__(self, first_name: str = "Alex", second_name: str = "Sam") -> None:
        """Compile the prefix pattern for the two conventional host names."""

        self._names = {
            first_name.lower(): LabelKind.HOST_1,
            second_name.lower(): LabelKind.HOST_2,
        }
        alternatives = "|".join(re.escape(name) for name in (first_name, second_name))
        self._pattern = re.compile(
            rf"^\s*({alternatives})\s*:\s*(.*)$",
            re.IGNORECASE | re.DOTALL,
        )

    def match(self, line: str) -> LabelMatch | None:
        """Match a host-name label prefix."""

        found = self._pattern.match(line)
        if found is None:
            return None
        return LabelMatch(kind=self._names[found.group(1).lower()], text=found.group(2).strip())


class SpeakerLabelMatcher:
    """Dispatch a line over the configured conventions, first match wins."""

    def __init__(self, conventions: Sequence[LabelConvention] | None = None) -> None:
        """Initialize with custom conventions or numbered-then-named defaults."""

        self.conventions = list(conventions or (NumberedHostLabels(), NamedHostLabels()))

    def match(self, line: str) -> LabelMatch:
        """Return the tagged match for one transcript line."""

        for convention in self.conventions:
            matched = convention.match(line)
            if matched is not None:
                return matched
        return LabelMatch(kind=LabelKind.UNLABELED, text=line.strip())


class DialogueSegmenter:
    """Parse a cleaned transcript into ordered speaker segments."""

    def __init__(self, matcher: SpeakerLabelMatcher | None = None) -> None:
        """Initialize with an optional custom label matcher."""

        self.matcher = matcher or SpeakerLabelMatcher()

    def segment(self, transcript: str, hosts: Sequence[Host]) -> list[Segment]:
        """Return segments in transcript order.

        Blank lines are dropped, as are labeled lines with nothing after the
        label. Every other line becomes exactly one segment carrying the voice of
        the host it is attributed to.
        """

        voices = {host.speaker: host.voice for host in hosts}
        segments: list[Segment] = []
        for line in transcript.splitlines():
            if not line.strip():
                continue
            matched = self.matcher.match(line)
            if not matched.text:
                continue
            speaker = matched.kind.speaker
            segments.append(
                Segment(
                    index=len(segments),
                    speaker=speaker,
                    text=matched.text,
                    voice=voices.get(speaker),
                )
            )
        return segments
