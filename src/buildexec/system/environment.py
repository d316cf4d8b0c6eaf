"""
Environment table construction for child processes.
"""

import logging
import os
import sys
from typing import Dict, Mapping, Optional

logger = logging.getLogger(__name__)


def merge_environment(
    overrides: Mapping[str, str],
    base: Optional[Mapping[str, str]] = None,
    case_insensitive: Optional[bool] = None,
) -> Dict[str, str]:
    """Merge overrides on top of an inherited environment.

    A fresh dictionary is always returned so that one invocation never
    mutates the parent's environment or another invocation's table.

    Args:
        overrides: Variables to set in the child. Overrides win on collision.
        base: Inherited environment. Defaults to os.environ.
        case_insensitive: Compare names ignoring case. Defaults to True on
            Windows, where environment names are case-insensitive.

    Returns:
        The merged environment.
    """
    if base is None:
        base = os.environ
    if case_insensitive is None:
        case_insensitive = sys.platform == "win32"

    merged = dict(base)
    if not overrides:
        return merged

    if case_insensitive:
        existing = {name.upper(): name for name in merged}
        for name, value in overrides.items():
            previous = existing.get(name.upper())
            if previous is not None and previous != name:
                del merged[previous]
            merged[name] = value
            existing[name.upper()] = name
    else:
        merged.update(overrides)

    logger.debug(f"Applied {len(overrides)} environment override(s): {sorted(overrides)}")
    return merged
