"""Text policy checks — contact-information leakage and off-platform solicitation.

This package provides:
- A shared, immutable rule table consumed by every enforcement call site
- ``check_policy`` for classification, severity and redaction
- ``mask_sensitive_content`` for display-time obfuscation
"""

from edutrust.policy.engine import (
    EnforcementPolicy,
    check_policy,
    get_block_message,
    mask_sensitive_content,
)
from edutrust.policy.models import PolicyCheckResult, PolicyViolation, Severity, ViolationType

__all__ = [
    "EnforcementPolicy",
    "PolicyCheckResult",
    "PolicyViolation",
    "Severity",
    "ViolationType",
    "check_policy",
    "get_block_message",
    "mask_sensitive_content",
]
