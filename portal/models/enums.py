import enum


class Role(str, enum.Enum):
    # declaration order is the privilege order
    APPLICANT = "APPLICANT"
    MEMBER = "MEMBER"
    SYSTEM_LEADER = "SYSTEM_LEADER"
    TEAM_MANAGEMENT = "TEAM_MANAGEMENT"
    ADMIN = "ADMIN"


class Stage(str, enum.Enum):
    # declaration order is the cycle order
    PREPARATION = "PREPARATION"
    APPLICATION = "APPLICATION"
    INTERVIEW = "INTERVIEW"
    TRAIL = "TRAIL"
    FINAL = "FINAL"


class ApplicationStatus(str, enum.Enum):
    DRAFT = "DRAFT"
    SUBMITTED = "SUBMITTED"
    REVIEWED = "REVIEWED"
    ACCEPTED = "ACCEPTED"
    REJECTED = "REJECTED"
    NEEDS_REVIEW = "NEEDS_REVIEW"
    WAITLISTED = "WAITLISTED"


class InterviewStatus(str, enum.Enum):
    SCHEDULED = "SCHEDULED"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"
    NO_SHOW = "NO_SHOW"
