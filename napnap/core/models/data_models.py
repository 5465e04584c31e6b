# napnap/core/models/data_models.py

from datetime import datetime, time
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from napnap.utils.date_utils import minutes_between, resolve_now


# Enum types for better validation
class SleepKind(str, Enum):
    NAP = "nap"
    NIGHT = "night"


class NapIndex(str, Enum):
    FIRST = "first"
    SECOND = "second"
    THIRD_PLUS = "third_plus"

    @classmethod
    def from_position(cls, position: int) -> "NapIndex":
        """Map a 0-based nap position of the day to its index type."""
        if position <= 0:
            return cls.FIRST
        if position == 1:
            return cls.SECOND
        return cls.THIRD_PLUS


# Sleep Event Models
class SleepEvent(BaseModel):
    """A logged sleep period. `end_time` is None while the baby is still asleep."""
    start_time: datetime
    end_time: Optional[datetime] = None
    kind: SleepKind
    id: Optional[str] = None
    notes: Optional[str] = None

    @model_validator(mode='after')
    def validate_end_after_start(self):
        if self.end_time is not None and self.end_time <= self.start_time:
            raise ValueError('end_time must be after start_time')
        return self

    @property
    def is_active(self) -> bool:
        return self.end_time is None

    @property
    def is_nap(self) -> bool:
        return self.kind == SleepKind.NAP

    def duration_minutes(self, now: Optional[datetime] = None) -> float:
        end = self.end_time if self.end_time is not None else resolve_now(now, self.start_time)
        return minutes_between(self.start_time, end)

    def in_timezone(self, tzinfo) -> "SleepEvent":
        """Copy with both timestamps expressed in `tzinfo`; naive events are returned as is."""
        if tzinfo is None or self.start_time.tzinfo is None:
            return self
        end_time = self.end_time.astimezone(tzinfo) if self.end_time is not None else None
        return self.model_copy(update={'start_time': self.start_time.astimezone(tzinfo), 'end_time': end_time})


def to_sleep_events(events) -> List[SleepEvent]:
    """Accept SleepEvent instances or plain dicts as stored by the app"""
    return [e if isinstance(e, SleepEvent) else SleepEvent.model_validate(e) for e in events or []]


# Schedule Models
class BedtimeWindow(BaseModel):
    model_config = ConfigDict(frozen=True)

    earliest: time
    latest: time

    @model_validator(mode='after')
    def validate_order(self):
        if self.earliest > self.latest:
            raise ValueError('Bedtime window earliest must not be after latest')
        return self


class ScheduleRow(BaseModel):
    """Age-band defaults driving every prediction"""
    model_config = ConfigDict(frozen=True)

    label: str
    number_of_naps: int = Field(..., ge=1)
    # Wake window before the first, second and third-or-later nap
    wake_window_minutes_by_nap_index: List[int] = Field(..., min_length=3, max_length=3)
    min_wake_window_minutes: int = Field(..., gt=0)
    max_wake_window_minutes: int = Field(..., gt=0)
    bedtime_window: BedtimeWindow
    wake_time: time
    average_nap_minutes: int = Field(..., gt=0)
    catnap_minutes: Optional[int] = Field(None, gt=0)
    final_wake_window_minutes: int = Field(..., gt=0)
    typical_daytime_sleep_minutes: int = Field(..., ge=0)

    @model_validator(mode='after')
    def validate_wake_windows(self):
        if self.min_wake_window_minutes > self.max_wake_window_minutes:
            raise ValueError('min_wake_window_minutes must not exceed max_wake_window_minutes')
        for minutes in self.wake_window_minutes_by_nap_index:
            if not self.min_wake_window_minutes <= minutes <= self.max_wake_window_minutes:
                raise ValueError(
                    f'Wake window {minutes} outside range '
                    f'{self.min_wake_window_minutes}-{self.max_wake_window_minutes}'
                )
        return self

    def wake_window_for(self, nap_index_type: NapIndex) -> int:
        position = NAP_INDEX_POSITIONS[NapIndex(nap_index_type)]
        return self.wake_window_minutes_by_nap_index[position]


NAP_INDEX_POSITIONS = {
    NapIndex.FIRST: 0,
    NapIndex.SECOND: 1,
    NapIndex.THIRD_PLUS: 2,
}


class AgeBand(BaseModel):
    """One row of the age table; `max_age_days` is exclusive, None for the open last band"""
    model_config = ConfigDict(frozen=True)

    max_age_days: Optional[int] = Field(None, gt=0)
    schedule: ScheduleRow


# Wake Window History Models
class WakeWindowSample(BaseModel):
    minutes: float = Field(..., gt=0)
    nap_index: Optional[int] = Field(None, ge=0)  # None when the window preceded night sleep
    days_ago: int = Field(0, ge=0)
    ended_at: Optional[datetime] = None

    def matches(self, nap_index_type: NapIndex) -> bool:
        if self.nap_index is None:
            return False
        return NapIndex.from_position(self.nap_index) == NapIndex(nap_index_type)


class WakeWindowHistory(BaseModel):
    samples: List[WakeWindowSample] = []
    todays_count: int = Field(0, ge=0)
    total_entries: int = Field(0, ge=0)

    @field_validator('samples')
    @classmethod
    def validate_chronological(cls, v):
        stamps = [s.ended_at for s in v if s.ended_at is not None]
        if any(later < earlier for earlier, later in zip(stamps, stamps[1:])):
            raise ValueError('Wake window samples must be chronological')
        return v

    @property
    def wake_windows(self) -> List[float]:
        return [sample.minutes for sample in self.samples]

    def samples_for(self, nap_index_type: NapIndex) -> List[WakeWindowSample]:
        return [sample for sample in self.samples if sample.matches(nap_index_type)]
