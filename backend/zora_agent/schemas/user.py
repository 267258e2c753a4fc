"""User Schemas — dev-tool request bodies.

Invariants:
    - Omitted flags stay None and leave the stored value unchanged
"""

from zora_agent.core.entities import CamelModel


class UserFlagsUpdate(CamelModel):
    pro: bool | None = None
    token_gate_passed: bool | None = None
