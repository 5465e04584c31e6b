"""
Services module: orchestration consumed by the app's today view.
"""

from napnap.core.services.today_service import TodayScheduleService, build_today_schedule

__all__ = ['TodayScheduleService', 'build_today_schedule']
