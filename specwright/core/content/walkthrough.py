"""
Tech walkthrough catalogue.

Architecture driver questions, decision areas and the agentic profile
vocabulary used by the walkthrough stages.

Dependencies: None
System role: Static content for the architecture walkthrough
"""

import enum
from dataclasses import dataclass


@dataclass(frozen=True)
class DriverQuestion:
    key: str
    label: str
    prompt: str
    examples: str


DRIVER_QUESTIONS: tuple[DriverQuestion, ...] = (
    DriverQuestion(
        "unit_of_work",
        "Unit of Work",
        "What is the atomic unit of work in this system?",
        "Examples: single API request, document upload cycle, user session, batch job, transaction",
    ),
    DriverQuestion(
        "scale_shape",
        "Scale Shape",
        "How will load grow? (linear, bursty, steady)",
        "Examples: linear with users, bursty during events, steady 24/7, seasonal peaks",
    ),
    DriverQuestion(
        "latency_contract",
        "Latency Contract",
        "What are the latency requirements?",
        "Examples: p50 < 100ms, p99 < 1s, batch jobs can take hours, real-time < 50ms",
    ),
    DriverQuestion(
        "data_volatility",
        "Data Volatility",
        "How often does data change? Read/write ratio?",
        "Examples: 95% reads, updates hourly, write-heavy, append-only, rarely changes",
    ),
    DriverQuestion(
        "correctness_risk",
        "Correctness & Risk",
        "What's the cost of errors?",
        "Examples: financial requires ACID, analytics tolerates eventual consistency, idempotent operations",
    ),
    DriverQuestion(
        "cost_envelope",
        "Cost Envelope",
        "What are the budget constraints?",
        "Examples: $500/month budget, cost per API call < $0.001, serverless to minimize idle costs",
    ),
    DriverQuestion(
        "privacy_compliance",
        "Privacy & Compliance",
        "What regulations apply?",
        "Examples: GDPR for EU, HIPAA for health, SOC2, data residency requirements",
    ),
    DriverQuestion(
        "observability",
        "Day-One Observability",
        "What metrics are needed from day one?",
        "Examples: error rates, latency percentiles, queue depths, business KPIs, alerting thresholds",
    ),
)

DRIVER_ORDER: tuple[str, ...] = tuple(q.key for q in DRIVER_QUESTIONS)

_DRIVERS_BY_KEY = {q.key: q for q in DRIVER_QUESTIONS}


def get_driver(key: str) -> DriverQuestion | None:
    return _DRIVERS_BY_KEY.get(key)


def order_drivers(drivers: dict[str, str]) -> list[tuple[str, str]]:
    """Known driver keys in catalogue order, then unknown keys as given."""
    known = [(key, drivers[key]) for key in DRIVER_ORDER if key in drivers]
    extra = [(key, value) for key, value in drivers.items() if key not in _DRIVERS_BY_KEY]
    return known + extra


DECISION_AREAS: dict[str, str] = {
    "data_storage": "Database choices, caching strategies, data models",
    "compute_strategy": "Serverless vs containers, async processing, scaling approach",
    "ux_contract": "Loading states, error handling, offline support",
    "state_sync": "Real-time updates, optimistic UI, conflict resolution",
    "interfaces": "API design, event schemas, integration patterns",
    "risk_controls": "Rate limiting, circuit breakers, validation",
    "operations": "Monitoring, deployment, incident response",
    "orchestration": "Agent architecture, tool calling, memory, human-in-the-loop",
}


class AgenticMode(str, enum.Enum):
    NONE = "none"
    ASSISTIVE = "assistive"
    SEMI_AUTONOMOUS = "semi_autonomous"
    AUTONOMOUS = "autonomous"


AGENTIC_MODE_DESCRIPTIONS: dict[str, str] = {
    AgenticMode.NONE.value: "traditional app",
    AgenticMode.ASSISTIVE.value: "suggestions only, user drives",
    AgenticMode.SEMI_AUTONOMOUS.value: "agent proposes, user approves",
    AgenticMode.AUTONOMOUS.value: "agent executes within guardrails",
}


class OrchestrationShape(str, enum.Enum):
    SINGLE_AGENT = "single_agent"
    MULTI_AGENT_COLLABORATIVE = "multi_agent_collaborative"
    MULTI_AGENT_SPECIALIST = "multi_agent_specialist"


class ToolCapability(str, enum.Enum):
    TEXT_ONLY = "text_only"
    TOOL_CALLS = "tool_calls"
    EXTERNAL_ACTIONS = "external_actions"


class MemoryRequirement(str, enum.Enum):
    NONE = "none"
    SESSION_ONLY = "session_only"
    LONG_TERM = "long_term"


class ApprovalTarget(str, enum.Enum):
    TOOL_CALLS = "tool_calls"
    EXTERNAL_ACTIONS = "external_actions"
    DATA_ACCESS = "data_access"
