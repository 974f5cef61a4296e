"""
Creation Context

Responsibilities:
- Retrieves ad platform credentials
- Creates a job's campaigns on the ad platform, one at a time, rate-limited
- Tracks per-campaign status and reconciles the overall job status

Owns: The remote creation sequence and the job/campaign state machine
Never: Parses campaign plans or serves client requests
"""
