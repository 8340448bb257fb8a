"""
Reviews Module

Weighted rubric scoring and the review workflow:
1. Reviews scored against the university's rubric (blocked when it has none)
2. Automatic reviewer assignment on submission (expertise, then capacity)
3. Hourly reminders for reviews past their 24 hour SLA

API Endpoints:
- GET /applications/{id}/review - Latest review and rubric
- POST /applications/{id}/review - Submit review
- POST /applications/{id}/review/preview-score - Preview weighted total
"""
