"""
Intake Context

Responsibilities:
- Normalizes and parses markdown campaign plans into campaign definitions
- Validates plans before a job is created
- Summarizes budgets and tier groupings for preview

Owns: Campaign plan parsing logic
Never: Persists jobs or talks to the ad platform
"""
