"""Personnel administration package.

Organized by feature modules (employees, projects, clients, reports, users)
with a thin Flask controller layer over gateway and service layers. Every
gateway persists to a remote document store when one is configured and
mirrors into a local JSON cache that also serves as the fallback.
"""
