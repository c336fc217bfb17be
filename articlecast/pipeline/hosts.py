"""Host identities and script titles for podcast modes."""

from __future__ import annotations

from ..models.datatypes import Host, PodcastMode, SpeakerRole


FIRST_HOST_NAME = "Alex"
SECOND_HOST_NAME = "Sam"


def resolve_hosts(
    mode: PodcastMode,
    primary_voice: str | None,
    secondary_voice: str | None = None,
) -> tuple[Host, ...]:
    """Return the fixed host identities for a mode with their assigned voices."""

    if not mode.is_two_host:
        return (Host(FIRST_HOST_NAME, "Host", SpeakerRole.HOST_1, primary_voice),)
    return (
        Host(FIRST_HOST_NAME, "Host 1", SpeakerRole.HOST_1, primary_voice),
        Host(SECOND_HOST_NAME, "Host 2", SpeakerRole.HOST_2, secondary_voice),
    )


def podcast_title(mode: PodcastMode) -> str:
    """Return the display title, e.g. `AI Generated Podcast - Normal two Mode`."""

    return f"AI Generated Podcast - {mode.label} Mode"
