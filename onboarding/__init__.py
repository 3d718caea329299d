"""Partner Onboarding Storage — durable records for partners and questionnaire submissions.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)

Design Decisions:
    - Empty __init__.py: explicit imports only, no star exports
"""
