# schemas/enums.py
from enum import Enum


# --------------------
# submission workflow
# --------------------
class ApprovalStatus(str, Enum):
    pending = "pending"
    approved = "approved"
    rejected = "rejected"


# PATCH /submissions/{id} only moves into a decided state
class ReviewDecision(str, Enum):
    approved = "approved"
    rejected = "rejected"


# --------------------
# profiles
# --------------------
class ProfileRole(str, Enum):
    user = "user"
    admin = "admin"


# --------------------
# leaderboard
# --------------------
class LeaderboardPeriod(str, Enum):
    month = "month"
    all = "all"


# --------------------
# submission context
# --------------------
class Marketplace(str, Enum):
    amazon_us = "amazon_us"
    amazon_ca = "amazon_ca"
    amazon_uk = "amazon_uk"
    amazon_de = "amazon_de"
    amazon_fr = "amazon_fr"
    amazon_it = "amazon_it"
    amazon_es = "amazon_es"
    amazon_jp = "amazon_jp"
    amazon_au = "amazon_au"


class ReportingPeriod(str, Enum):
    daily = "daily"
    weekly = "weekly"
    monthly = "monthly"
    quarterly = "quarterly"
    yearly = "yearly"


class Currency(str, Enum):
    USD = "USD"
    CAD = "CAD"
    GBP = "GBP"
    EUR = "EUR"
    JPY = "JPY"
    AUD = "AUD"
