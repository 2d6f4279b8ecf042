"""Presentation-safe member names.

Anonymity settings belong to the profile layer; this module only applies
them when a member is shown to other users.
"""

from typing import Optional

from civictrust.models.member import Member

UNKNOWN_NAME = "Unknown User"
FALLBACK_NAME = "User"


def get_display_name(member: Optional[Member]) -> str:
    if member is None:
        return UNKNOWN_NAME

    if member.is_anonymous and member.anonymous_display_name:
        return member.anonymous_display_name

    if member.full_name:
        return member.full_name
    if member.email:
        return member.email.split("@")[0]
    return FALLBACK_NAME
