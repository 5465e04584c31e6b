"""
Core modules for the nap prediction engine.

This package contains the core functionality for:
- Schedule lookup by age
- Wake-window history analysis
- Nap window simulation and nap time prediction
- Dynamic bedtime calculation
- Today schedule orchestration
"""
