"""
Package install — parse, detect, resolve and plan native installs.

    raw "postgres:15"
        → parse_target_spec      (spec_parser.py)
        → detect_package_manager (detection.py)
        → resolve_install        (resolver.py)
        → plan_install           (planner.py)
        → CommandPlan, ready for src.core.engine.executor
"""

from src.core.services.package_install.detection import (  # noqa: F401
    candidate_order,
    detect_package_manager,
)
from src.core.services.package_install.managers import (  # noqa: F401
    MANAGER_PROFILES,
    ManagerProfile,
    PinStyle,
    get_profile,
)
from src.core.services.package_install.planner import (  # noqa: F401
    plan_install,
    plan_script_step,
)
from src.core.services.package_install.resolver import resolve_install  # noqa: F401
from src.core.services.package_install.spec_parser import (  # noqa: F401
    MAX_SPEC_LENGTH,
    parse_target_spec,
)
