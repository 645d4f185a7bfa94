"""
Pilot Profile Definitions
==========================
Built-in operator profiles a monitoring session can be started for.
"""

from typing import Optional

from orbita.schemas import Profile


PROFILES = [
    Profile(
        id="p-01",
        name="COMMANDER VANCE",
        role="SQUADRON LEAD",
        avatar="https://images.unsplash.com/photo-1507003211169-0a1dd7228f2d?q=80&w=1974&auto=format&fit=crop",
        clearance="Alpha",
        status="Online",
    ),
    Profile(
        id="p-02",
        name="PILOT JAX",
        role="RECONNAISSANCE",
        avatar="https://images.unsplash.com/photo-1624561172888-ac93c696e10c?q=80&w=1978&auto=format&fit=crop",
        clearance="Beta",
        status="Online",
    ),
    Profile(
        id="p-03",
        name="ENG. NOA",
        role="SYSTEMS ARCHITECT",
        avatar="https://images.unsplash.com/photo-1573496359142-b8d87734a5a2?q=80&w=1976&auto=format&fit=crop",
        clearance="Gamma",
        status="Deploying",
    ),
]


def get_profile(profile_id: str) -> Optional[Profile]:
    """Look up a built-in profile by id."""
    for profile in PROFILES:
        if profile.id == profile_id:
            return profile
    return None
