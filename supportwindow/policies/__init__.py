"""Policy rules — one named check per dependency variant."""

from supportwindow.policies.base import PolicyRule
from supportwindow.policies.runtime_lts import RuntimeLtsPolicy
from supportwindow.policies.semver_policy import SemVerPolicy

__all__ = ["PolicyRule", "RuntimeLtsPolicy", "SemVerPolicy"]
