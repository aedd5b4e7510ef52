"""Organization renewal settings schemas."""

import calendar
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

# Leap year, so Feb 29 is an accepted cutoff; it is clamped in shorter years
_REFERENCE_YEAR = 2024


class RenewalSettingsUpdate(BaseModel):
    renewal_start_month: int = Field(..., ge=1, le=12)
    renewal_start_day: int = Field(..., ge=1, le=31)
    activity_hours_threshold: int = Field(..., ge=0)

    @model_validator(mode="after")
    def check_day_fits_month(self):
        last_day = calendar.monthrange(_REFERENCE_YEAR, self.renewal_start_month)[1]
        if self.renewal_start_day > last_day:
            raise ValueError(
                f"renewal_start_day {self.renewal_start_day} is not valid "
                f"for month {self.renewal_start_month}"
            )
        return self


class RenewalSettingsResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    renewal_start_month: int
    renewal_start_day: int
    activity_hours_threshold: int
    updated_by: Optional[str] = None
    updated_at: Optional[datetime] = None
