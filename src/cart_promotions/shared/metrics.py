"""Prometheus metrics for cart promotion validation."""
from prometheus_client import REGISTRY, Counter


def _get_or_create_metric(metric_class, name: str, doc: str, labelnames=None, **kwargs):
    """Return the registered collector called ``name`` or register a new one."""
    for collector in list(REGISTRY._collector_to_names.keys()):
        if getattr(collector, "_name", None) == name:
            return collector
    if labelnames is not None:
        kwargs["labelnames"] = labelnames
    return metric_class(name, doc, registry=REGISTRY, **kwargs)


validations_total = _get_or_create_metric(
    Counter,
    "promotion_validations",
    "Total number of cart validations performed",
)

checkout_blocked_total = _get_or_create_metric(
    Counter,
    "promotion_checkout_blocked",
    "Total number of cart validations that blocked checkout",
)

rule_evaluations_total = _get_or_create_metric(
    Counter,
    "promotion_rule_evaluations",
    "Promotion group evaluations by rule type and outcome",
    ["rule_type", "outcome"],
)


def record_rule_evaluation(rule_type: str, qualified: bool, can_proceed: bool):
    """Count one promotion group evaluation."""
    if qualified:
        outcome = "qualified"
    elif can_proceed:
        outcome = "discount_withheld"
    else:
        outcome = "checkout_blocked"
    rule_evaluations_total.labels(rule_type=rule_type, outcome=outcome).inc()


def record_validation(can_proceed: bool):
    """Count one aggregated cart validation."""
    validations_total.inc()
    if not can_proceed:
        checkout_blocked_total.inc()
