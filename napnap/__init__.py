"""
Nap and bedtime prediction engine for the NapNap baby sleep tracker.

This package contains:
- The age-based schedule table
- Wake-window extraction from logged sleep
- Nap and bedtime prediction
- The today schedule service consumed by the app
"""
