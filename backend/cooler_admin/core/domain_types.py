"""Domain Types — enums for every closed set of values the admin backend handles.

Invariants:
    - All valid states encoded as Enums — no raw string matching in routes
    - Enum values match the upstream Cooler API spelling exactly

Design Decisions:
    - str Enums: serialize to JSON and compare against upstream payloads without converters
"""

from enum import Enum


class AnomalyType(str, Enum):
    """Anomaly flag categories assigned by the upstream detector."""
    DATA_QUALITY = "DATA_QUALITY"
    CALCULATION = "CALCULATION"
    PROCESS = "PROCESS"
    BUSINESS_LOGIC = "BUSINESS_LOGIC"


class AnomalySeverity(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"


class ResolutionAction(str, Enum):
    """How an admin resolves an anomaly flag."""
    UPDATE_SUBMISSION = "UPDATE_SUBMISSION"
    UPDATE_NAICS_CODE = "UPDATE_NAICS_CODE"
    UPDATE_PRICE = "UPDATE_PRICE"
    MARK_RESOLVED = "MARK_RESOLVED"


class ResolvedFilter(str, Enum):
    ALL = "all"
    RESOLVED = "resolved"
    UNRESOLVED = "unresolved"


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


class CustomerSortField(str, Enum):
    DATE_CREATED = "dateCreated"
    LAST_ACTIVITY = "lastActivity"
    ORGANIZATION_NAME = "organizationName"


class ApiStatusFilter(str, Enum):
    """Customer API adoption buckets."""
    ALL = "all"
    ACTIVE = "active"
    NO_USAGE = "noUsage"
    NO_KEYS = "noKeys"


class DatePeriod(str, Enum):
    THIS_YEAR = "thisYear"
    LAST_YEAR = "lastYear"
    CUSTOM = "custom"
    ALL = "all"


class RequestStatusFilter(str, Enum):
    ALL = "all"
    SUCCESS = "success"
    ERROR = "error"


class UsagePeriod(str, Enum):
    """Usage window shorthand; maps to a day count upstream."""
    WEEK = "7d"
    MONTH = "30d"
    QUARTER = "90d"

    @property
    def days(self) -> int:
        return {"7d": 7, "30d": 30}.get(self.value, 90)


class ClearableTable(str, Enum):
    """Tables the maintenance routes may empty. Nothing outside this set is deletable."""
    ANOMALY_FLAGS = "anomaly_flags"
    SUBMISSIONS = "submissions"
    TRANSACTIONS = "transactions"
    TRANSACTION_ITEMS = "transaction_items"
    INTEGRATIONS = "integrations"


class ClearTarget(str, Enum):
    """Targets of the clear-database sweep, in execution order."""
    VECTORDB = "vectordb"
    TRANSACTIONS = "transactions"
    TRANSACTION_ITEMS = "transactionItems"
    SUBMISSIONS = "submissions"
    ANOMALIES = "anomalies"
    INTEGRATIONS = "integrations"
