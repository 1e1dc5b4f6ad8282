from .profile_record import ProfileRecord
from .scored_profile import ScoredProfile
from .relay import RelayRequestSpec, RelayResponse

__all__ = [
    "ProfileRecord",
    "ScoredProfile",
    "RelayRequestSpec",
    "RelayResponse",
]
