"""
Enumerated column values.

Stored as plain strings; StrEnum members compare equal to their values.
"""

from enum import StrEnum


class UserRole(StrEnum):
    PUBLIC = "public"
    PENDING = "pending"
    VERIFIED = "verified"


class RelationshipType(StrEnum):
    VETERAN = "veteran"
    ACTIVE_DUTY = "active_duty"
    FAMILY_MEMBER = "family_member"
    FRIEND = "friend"
    SUPPORTER = "supporter"


class MilitaryBranch(StrEnum):
    ARMY = "army"
    NAVY = "navy"
    AIR_FORCE = "air_force"
    MARINES = "marines"
    COAST_GUARD = "coast_guard"
    SPACE_FORCE = "space_force"
    CIVILIAN = "civilian"
    NOT_APPLICABLE = "not_applicable"


# Branches that do not earn the military discount
NON_MILITARY_BRANCHES = frozenset({MilitaryBranch.CIVILIAN, MilitaryBranch.NOT_APPLICABLE})


class SubscriptionStatus(StrEnum):
    NONE = "none"
    ACTIVE = "active"
    PAST_DUE = "past_due"
    CANCELED = "canceled"
    UNPAID = "unpaid"


class FriendRequestStatus(StrEnum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


class ProjectType(StrEnum):
    SHORT_FILM = "short_film"
    FEATURE = "feature"
    DOCUMENTARY = "documentary"
    SERIES = "series"


class ProjectStatus(StrEnum):
    PRE_PRODUCTION = "pre_production"
    PRODUCTION = "production"
    POST_PRODUCTION = "post_production"
    COMPLETED = "completed"


class CollaboratorPermission(StrEnum):
    READ = "read"
    WRITE = "write"
    ADMIN = "admin"


class ActivityType(StrEnum):
    SCRIPT_CREATED = "script_created"
    PROJECT_CREATED = "project_created"
    MEMBER_JOINED = "member_joined"
    FORUM_POST = "forum_post"
    FRIEND_ADDED = "friend_added"
    FESTIVAL_SUBMISSION = "festival_submission"


class ReportStatus(StrEnum):
    PENDING = "pending"
    REVIEWED = "reviewed"
    RESOLVED = "resolved"
    DISMISSED = "dismissed"


class SubmissionStatus(StrEnum):
    DRAFT = "draft"
    SUBMITTED = "submitted"
    UNDER_REVIEW = "under_review"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    WITHDRAWN = "withdrawn"


class PlanInterval(StrEnum):
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"


class TransactionType(StrEnum):
    PURCHASE = "purchase"
    USAGE = "usage"
    BONUS = "bonus"
    REFUND = "refund"
    SUBSCRIPTION_GRANT = "subscription_grant"
    REFERRAL_BONUS = "referral_bonus"
    ADMIN_AWARD = "admin_award"
    MONTHLY_VETERAN_GIFT = "monthly_veteran_gift"


class NotificationType(StrEnum):
    AI_TASK_COMPLETE = "ai_task_complete"
    MESSAGE_RECEIVED = "message_received"
    FRIEND_REQUEST = "friend_request"
    PROJECT_INVITE = "project_invite"
    SCRIPT_SHARED = "script_shared"
    FORUM_REPLY = "forum_reply"
    SYSTEM_ALERT = "system_alert"
    CREDIT_AWARDED = "credit_awarded"


class AchievementCategory(StrEnum):
    SPENDING = "spending"
    CONTENT = "content"
    SOCIAL = "social"
    SPECIAL = "special"
    VETERAN = "veteran"
    SUPPORTER = "supporter"


class RequirementType(StrEnum):
    CREDITS_SPENT = "credits_spent"
    SCRIPTS_CREATED = "scripts_created"
    PROJECTS_CREATED = "projects_created"
    FORUM_POSTS = "forum_posts"
    FRIENDS = "friends"
    VERIFIED_VETERAN = "verified_veteran"


class ReferralStatus(StrEnum):
    PENDING = "pending"
    QUALIFIED = "qualified"
    CREDITED = "credited"
    EXPIRED = "expired"


class PacketStatus(StrEnum):
    DRAFT = "draft"
    READY = "ready"
    SUBMITTED = "submitted"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


class ExportTemplateType(StrEnum):
    FESTIVAL_SUBMISSION = "festival_submission"
    PRESS_KIT = "press_kit"
    PRODUCTION_PACKAGE = "production_package"
    DISTRIBUTION_PACKAGE = "distribution_package"
    CUSTOM = "custom"


class PacketFileRole(StrEnum):
    MAIN_FILM = "main_film"
    TRAILER = "trailer"
    POSTER = "poster"
    PRESS_KIT = "press_kit"
    DIRECTOR_STATEMENT = "director_statement"
    SCREENPLAY = "screenplay"
    STILLS = "stills"
    OTHER = "other"
