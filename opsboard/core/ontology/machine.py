"""Machine references and the baseline throughput rules modify."""

from pydantic import BaseModel, ConfigDict, Field


class MachineBaseline(BaseModel):
    """Unmodified throughput and staffing for a machine."""

    model_config = ConfigDict(frozen=True)

    speed_hr: float = Field(..., ge=0, description="Base pieces per hour")
    default_people_required: float = Field(
        1.0, ge=0, description="Staffing used when no rule matches"
    )


class MachineRef(BaseModel):
    """The subset of a machine record the rule engine needs."""

    model_config = ConfigDict(frozen=True)

    id: int
    line: str | None = None
    machine_group_id: int | None = None
    process_type_key: str | None = Field(None, description="e.g. 'insert', 'fold', 'laser'")
    speed_hr: float = Field(0.0, ge=0)
    people_per_process: float | None = Field(None, ge=0)

    def baseline(self, default_people_required: float = 1.0) -> MachineBaseline:
        """Baseline for this machine; its own staffing wins over the default."""
        people = (
            self.people_per_process
            if self.people_per_process is not None
            else default_people_required
        )
        return MachineBaseline(speed_hr=self.speed_hr, default_people_required=people)
