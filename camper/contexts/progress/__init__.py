"""
Progress Context

Responsibilities:
- Talks to the backend API (submit plan, fetch job status)
- Polls a job until it reaches a terminal status
- Computes progress and builds downloadable job reports

Owns: Client-side view of a job
Never: Writes to the job store
"""
