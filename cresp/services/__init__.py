"""Services Layer — use cases that combine core rules with the database and side channels.

Invariants:
    - One service per concern (auth, posts, feed, moderation, referrals, ...)
    - Services own their transactions; side channels (activity log, referral
      milestones, email) run after the primary commit

Design Decisions:
    - Services take their collaborators in __init__: routes build them through
      FastAPI dependencies, tests build them directly
"""
