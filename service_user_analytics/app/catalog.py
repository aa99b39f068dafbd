"""
User domain: active and online users, registrations, logins and sessions.
"""

from shared.activities import AdjustGauge, Increment, Observe, RecordDuration, SetGauge
from shared.catalog import (
    Activity,
    CounterDef,
    DomainCatalog,
    GaugeDef,
    SummaryDef,
    TimerDef,
)
from shared.jobs import BurstJob, PeriodicJob, SweepJob

SERVICE_NAME = "user-analytics"

REGISTRATION_SOURCES = ("web", "mobile_app", "social_login", "referral", "api", "admin")
USER_TYPES = ("free", "premium", "enterprise", "trial")
AUTH_METHODS = ("password", "oauth", "sso", "2fa", "biometric")
DEVICE_TYPES = ("desktop", "mobile", "tablet", "api")
OUTCOMES = ("true", "false")

REGIONS = ("us-east-1", "us-west-2", "eu-west-1", "ap-southeast-1", "ap-northeast-1")
ENDPOINTS = ("/api/users", "/api/users/profile", "/api/users/auth", "/api/users/sessions")

INSTRUMENTS = (
    # Counters
    CounterDef("user.registrations.total", "Total number of user registrations", tags={
        "source": REGISTRATION_SOURCES,
        "user_type": USER_TYPES,
        "device": DEVICE_TYPES,
    }),
    CounterDef("user.logins.total", "Total number of user logins", tags={
        "auth_method": AUTH_METHODS,
        "device": DEVICE_TYPES,
        "success": OUTCOMES,
    }),
    CounterDef("user.sessions.total", "Total number of user sessions"),
    CounterDef("user.engagement.total", "Total user engagement events"),

    # Gauges
    GaugeDef("user.active.count", "Number of currently active users", maximum=150),
    GaugeDef("user.online.count", "Number of currently online users", maximum=200),
    GaugeDef("user.session.duration.total", "Total session duration in seconds"),
    GaugeDef("user.cache.size", "Number of users in cache", maximum=500),

    # Timers
    TimerDef("user.request.duration", "User request processing time"),
    TimerDef("user.auth.duration", "User authentication processing time"),
    TimerDef("user.profile.load.duration", "User profile loading time"),

    # Distributions
    SummaryDef("user.session.duration", "Distribution of user session durations", unit="seconds"),
    SummaryDef("user.activity.score", "Distribution of user activity scores"),

    # Traffic
    CounterDef("user.requests.by.region", "User requests by region", tags={"region": REGIONS}),
    TimerDef("user.endpoint.duration", "User endpoint processing time", tags={"endpoint": ENDPOINTS}),
)

ACTIVITIES = (
    Activity("users", "User activity", (
        AdjustGauge("user.active.count", -3, 7),
        # Online users never drop below the active count just written
        AdjustGauge("user.online.count", -2, 9, floor="user.active.count"),
        SetGauge("user.cache.size", 50, 499),
        Increment("user.engagement.total"),
        Observe("user.activity.score", 1.0, 10.0),
    )),
    Activity("registrations", "User registration", (
        Increment("user.registrations.total"),
    )),
    Activity("logins", "User login", (
        Increment("user.logins.total"),
        RecordDuration("user.auth.duration", 100, 1499),
    )),
    Activity("sessions", "User session", (
        Increment("user.sessions.total"),
        Observe("user.session.duration", 60, 3599, integral=True, accumulate="user.session.duration.total"),
    )),
    Activity("regions", "Regional user activity", (
        Increment("user.requests.by.region"),
    )),
    Activity("endpoints", "User endpoint activity", (
        RecordDuration("user.endpoint.duration", 25, 799),
    )),
)

JOBS = (
    PeriodicJob("user-activity", "users", 4, 2, 5),
    PeriodicJob("user-registrations", "registrations", 25, 0, 4),
    PeriodicJob("user-logins", "logins", 15, 1, 5),
    PeriodicJob("user-sessions", "sessions", 20, 1, 3),
    PeriodicJob("regional-traffic", "regions", 8, 2, 7),
    PeriodicJob("endpoint-performance", "endpoints", 6, 1, 4),
    SweepJob("comprehensive-sweep", 60),
    BurstJob("user-burst", 150, 15, 34, 10, 49, split=(
        (0.3, "users"),
        (0.5, "logins"),
        (0.7, "sessions"),
        (0.85, "regions"),
        (1.0, "endpoints"),
    )),
)


def build_catalog() -> DomainCatalog:
    return DomainCatalog(
        service=SERVICE_NAME,
        namespace="user",
        instruments=INSTRUMENTS,
        activities=ACTIVITIES,
        jobs=JOBS,
        endpoint_timer="user.endpoint.duration",
        region_counter="user.requests.by.region",
        request_timer="user.request.duration",
    )
