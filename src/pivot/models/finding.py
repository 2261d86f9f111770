"""Rule finding model for Pivot."""

from pydantic import BaseModel, Field


class Finding(BaseModel):
    """Emitted when a rule's predicate is true over an event set."""

    rule_id: str = Field(..., description="Id of the rule that fired")
    rule_name: str = Field(..., description="Rule display name")
    description: str = Field(..., description="What the rule detects")

    model_config = {"frozen": True}

    @property
    def text(self) -> str:
        """Human-readable finding string."""
        return f"Rule Triggered: {self.rule_name} - {self.description}"
