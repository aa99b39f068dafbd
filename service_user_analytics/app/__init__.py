"""
User Analytics Service package.

Simulates user activity, registrations, logins and sessions and exposes the
resulting metrics at `/metrics` and `/actuator/prometheus`.
"""
