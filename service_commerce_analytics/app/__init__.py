"""
Commerce Analytics Service package.

Simulates order, payment, product, cart and database traffic and exposes
the resulting metrics at `/metrics` and `/actuator/prometheus`.
"""
