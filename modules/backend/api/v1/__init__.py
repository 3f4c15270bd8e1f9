"""
API Version 1 Router.

Aggregates all v1 endpoint routers.
"""

from fastapi import APIRouter

from modules.backend.api.v1.endpoints import (
    achievements,
    activities,
    admin,
    ai,
    auth,
    billing,
    design_assets,
    export_templates,
    festival_packets,
    festival_submissions,
    forum,
    friends,
    gift_codes,
    messages,
    notifications,
    projects,
    referrals,
    reports,
    scripts,
    tutorial,
    users,
)

router = APIRouter()

# Accounts and community
router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(users.router, prefix="/users", tags=["users"])
router.include_router(friends.router, prefix="/friends", tags=["friends"])
router.include_router(activities.router, prefix="/activities", tags=["activities"])
router.include_router(messages.router, prefix="/messages", tags=["messages"])
router.include_router(notifications.router, prefix="/notifications", tags=["notifications"])
router.include_router(tutorial.router, prefix="/tutorial", tags=["tutorial"])

# Content
router.include_router(scripts.router, prefix="/scripts", tags=["scripts"])
router.include_router(projects.router, prefix="/projects", tags=["projects"])
router.include_router(forum.router, prefix="/forum", tags=["forum"])
router.include_router(reports.router, prefix="/reports", tags=["reports"])
router.include_router(
    festival_submissions.router, prefix="/festival-submissions", tags=["festival-submissions"],
)
router.include_router(festival_packets.router, prefix="/festival-packets", tags=["festival-packets"])
router.include_router(export_templates.router, prefix="/export-templates", tags=["export-templates"])
router.include_router(design_assets.router, prefix="/design-assets", tags=["design-assets"])

# Credits and billing
router.include_router(ai.router, prefix="/ai", tags=["ai"])
router.include_router(billing.router, prefix="/billing", tags=["billing"])
router.include_router(gift_codes.router, prefix="/gift-codes", tags=["gift-codes"])
router.include_router(referrals.router, prefix="/referrals", tags=["referrals"])
router.include_router(achievements.router, tags=["achievements"])

# Administration
router.include_router(admin.router, prefix="/admin", tags=["admin"])
