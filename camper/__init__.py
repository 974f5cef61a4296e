"""
CAMPER - Campaign Automation from Markdown Plans with Error Reporting

Turns a loosely formatted markdown campaign plan into a tracked job and creates
the described campaigns on Google Ads, one at a time.

Architecture:
- Intake Context: Markdown plan parsing, validation and budget summaries
- Jobs Context: Job records, persistence and the submit/status/event entry points
- Creation Context: Rate-limited remote campaign creation and status reconciliation
- Progress Context: Client-side API access and job status polling
"""

__version__ = "0.1.0"
