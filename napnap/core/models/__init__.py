"""
Data models for sleep events, schedule rows and prediction outputs.
"""
