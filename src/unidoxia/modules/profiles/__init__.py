"""
Profiles Module

Profile completion scoring for students and agents.

API Endpoints:
- POST /profiles/completion - Completion percentage and missing fields
"""
