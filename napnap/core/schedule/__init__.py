"""
Age schedule module.

`age_bands` holds the default table; `age_schedule` looks rows up by age.
"""
