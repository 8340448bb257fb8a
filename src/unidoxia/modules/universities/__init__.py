"""
Universities Module

Universities, their programmes and the per-university review rubric.

API Endpoints:
- GET /universities/{id}/scoring-config - Current rubric
- PUT /universities/{id}/scoring-config - Replace rubric
"""
