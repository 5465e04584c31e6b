# napnap/core/models/output_models.py

from datetime import date, datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field

from napnap.core.models.data_models import NapIndex, SleepEvent
from napnap.utils.date_utils import add_minutes


class CalibrationReason(str, Enum):
    INSUFFICIENT_DATA = "insufficient_data"
    HIGH_VARIABILITY = "high_variability"
    FIRST_NAP_OF_DAY = "first_nap_of_day"
    NONE = "none"


class NapPrediction(BaseModel):
    """Predicted start of the next nap with calibration metadata"""
    predicted_time: Optional[datetime] = None
    confidence_score: float = Field(..., ge=0.0, le=1.0)
    is_calibrating: bool
    calibration_reason: CalibrationReason
    nap_index_type: NapIndex
    wake_window_minutes: float = Field(..., ge=0.0)
    default_wake_window_minutes: int
    empirical_wake_window_minutes: Optional[float] = None
    sample_count: int = 0
    is_overdue: bool = False


class ProjectedWindow(BaseModel):
    """One remaining nap slot of the day"""
    is_catnap: bool
    expected_duration_minutes: int = Field(..., gt=0)
    nap_index: int = Field(..., ge=0)


class PredictedNap(BaseModel):
    """Nap shown on the today timeline"""
    time: datetime
    raw_predicted_time: datetime
    is_catnap: bool
    expected_duration_minutes: int
    is_due_now: bool = False
    nap_index: int
    prediction: NapPrediction

    @property
    def expected_end(self) -> datetime:
        return add_minutes(self.time, self.expected_duration_minutes)


class NextEvent(BaseModel):
    type: str  # "nap" or "bedtime"
    is_now: bool
    minutes_until: int = Field(..., ge=0)


class TodaySchedule(BaseModel):
    """Complete remaining-day schedule for one baby"""
    generated_at: datetime
    morning_wake_up: Optional[datetime] = None
    completed_naps: List[SleepEvent] = []
    active_sleep: Optional[SleepEvent] = None
    active_nap_expected_end: Optional[datetime] = None
    predicted_naps: List[PredictedNap] = []
    expected_bedtime: Optional[datetime] = None
    total_daytime_sleep_minutes: int = 0
    next_event: Optional[NextEvent] = None
    algorithm_status: str = "learning"


# Sleep Report Models
class ReportAverages(BaseModel):
    """Daily averages over completed days that have any sleep logged"""
    avg_total_minutes: int = 0
    avg_night_minutes: int = 0
    avg_nap_duration_minutes: int = 0
    avg_nap_count: float = 0.0


class TimeOfDaySpread(BaseModel):
    """Earliest and latest time of day, as minutes since midnight"""
    min_minutes: int = Field(..., ge=0, lt=1440)
    max_minutes: int = Field(..., ge=0, lt=1440)

    @property
    def spread_minutes(self) -> int:
        return self.max_minutes - self.min_minutes


class NapCountRange(BaseModel):
    min_count: int = Field(..., ge=1)
    max_count: int = Field(..., ge=1)


class ReportFlags(BaseModel):
    has_enough_data: bool = False
    bedtime_very_variable: bool = False
    bedtime_stable: bool = False
    wake_up_often_missing: bool = False
    sleep_increased_this_week: bool = False
    sleep_decreased_this_week: bool = False
    overtiredness_risk: bool = False
    nap_count_inconsistent: bool = False


class SleepReport(BaseModel):
    """Sleep analytics for a date range, feeding the report screen"""
    start_date: date
    end_date: date
    age_label: str = ''
    age_months: int = 0
    averages: ReportAverages
    bedtime_spread: Optional[TimeOfDaySpread] = None
    wake_up_spread: Optional[TimeOfDaySpread] = None
    avg_wake_window_minutes: Optional[int] = None
    this_week_total_minutes: int = 0
    last_week_total_minutes: int = 0
    nap_count_range: Optional[NapCountRange] = None
    flags: ReportFlags
