"""
Application Layer for the FitCoach API.

This package contains:
- ports/: Abstract repository and gateway interfaces (what the domain needs)
- use_cases/: Orchestration of billing and workout-history flows
- user_context: The explicit per-user session/stats context
- exceptions: Errors shared by the application, backend and API layers
"""
