"""
Jobs Context

Responsibilities:
- Defines job and campaign records and their wire format
- Persists jobs with atomic partial updates and a time-to-live
- Entry points: submit a plan, query status, dispatch job events

Owns: Job records and their storage
Never: Calls the ad platform directly
"""
