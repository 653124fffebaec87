"""Result contract for finished clamp runs."""

from pydantic import BaseModel, ConfigDict, Field


class ClampReport(BaseModel):
    """Outcome of one clamp run, as seen after its last step."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    applied_lines: int = Field(ge=0, description="Lines the container occupies (or is clamped to)")
    applied_height_px: float | None = Field(
        default=None, description="Rendered height after the run; None when unmeasured"
    )
    truncated: bool = Field(default=False, description="Whether any content was removed")
    exhausted: bool = Field(
        default=False, description="All content was consumed without reaching the target"
    )
    native: bool = Field(default=False, description="Native line clamp styling was applied")
    cancelled: bool = Field(default=False)
    steps: int = Field(default=0, ge=0, description="State machine steps executed")
