# Namespace for pipeline steps
from .build_profiles import BuildProfiles  # noqa: F401
from .validate_profiles import ValidateProfiles  # noqa: F401
from .score_profiles import ScoreProfiles  # noqa: F401
