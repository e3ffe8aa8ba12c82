"""
Guidance Module

Runtime-selectable guidance laws for the interceptor.

Components:
    - GuidanceLaw: Base class (compute_command)
    - ProportionalNavigation, PurePursuit, LeadPursuit: Law variants
    - get_guidance_law: Name -> law lookup with safe fallback

Example:
    >>> from intercept_sim.guidance import get_guidance_law
    >>> law = get_guidance_law("ProNav")
    >>> accel = law.compute_command(missile, target, dt=0.016)
"""

from .laws import (
    GUIDANCE_LAWS,
    GuidanceLaw,
    LeadPursuit,
    ProportionalNavigation,
    PurePursuit,
    available_guidance_modes,
    get_guidance_law,
    register_guidance_law,
    resolve_guidance_mode,
)

__all__ = [
    "GuidanceLaw",
    "ProportionalNavigation",
    "PurePursuit",
    "LeadPursuit",
    "GUIDANCE_LAWS",
    "get_guidance_law",
    "register_guidance_law",
    "resolve_guidance_mode",
    "available_guidance_modes",
]
