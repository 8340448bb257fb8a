"""
Applications Module

Study-abroad application lifecycle:
1. Status catalogue (labels, progress, badges)
2. Status changes validated against the lifecycle transition table
3. Reviewer assignment when an application is submitted
4. Categorization tags and risk band for staff triage

API Endpoints:
- GET /applications/statuses - Status catalogue
- GET /applications/statuses/{value} - Describe a status value
- GET /applications - List applications
- GET /applications/{id} - Application details
- POST /applications/{id}/status - Change status
- GET /applications/{id}/categorization - Triage tags
"""
