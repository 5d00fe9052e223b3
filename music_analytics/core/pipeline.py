# core/pipeline.py
"""
Declarative aggregation plans.

A plan is the collection it starts from plus an ordered tuple of tagged
stages. Plans are immutable; `to_pipeline()` renders the Mongo syntax that
the executor sends to the store.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

STAGE_KINDS = (
    "match",
    "lookup",
    "unwind",
    "group",
    "project",
    "add_fields",
    "sort",
    "limit",
    "bucket",
)


@dataclass(frozen=True)
class Stage:
    kind: str
    body: Any

    def __post_init__(self):
        if self.kind not in STAGE_KINDS:
            raise ValueError(f"Unknown stage kind: {self.kind}")

    def to_mongo(self) -> Dict[str, Any]:
        operator = "$addFields" if self.kind == "add_fields" else f"${self.kind}"
        return {operator: self.body}


@dataclass(frozen=True)
class AggregationPlan:
    collection: str
    stages: Tuple[Stage, ...] = field(default_factory=tuple)

    def to_pipeline(self) -> List[Dict[str, Any]]:
        return [stage.to_mongo() for stage in self.stages]

    def kinds(self) -> List[str]:
        return [stage.kind for stage in self.stages]

    def find(self, kind: str) -> List[Stage]:
        return [stage for stage in self.stages if stage.kind == kind]


# Stage constructors

def match(query: Dict[str, Any]) -> Stage:
    return Stage("match", query)


def lookup(from_: str, local_field: str, foreign_field: str, as_: str) -> Stage:
    return Stage("lookup", {
        "from": from_,
        "localField": local_field,
        "foreignField": foreign_field,
        "as": as_,
    })


def correlated_lookup(from_: str, let: Dict[str, Any], pipeline: List[Dict[str, Any]], as_: str) -> Stage:
    return Stage("lookup", {"from": from_, "let": let, "pipeline": pipeline, "as": as_})


def unwind(path: str) -> Stage:
    return Stage("unwind", f"${path}")


def group(key: Any, **accumulators: Any) -> Stage:
    body = {"_id": key}
    body.update(accumulators)
    return Stage("group", body)


def project(fields: Dict[str, Any]) -> Stage:
    return Stage("project", fields)


def add_fields(fields: Dict[str, Any]) -> Stage:
    return Stage("add_fields", fields)


def sort(*keys: Tuple[str, int]) -> Stage:
    # Order of keys matters for tie-breaking, dicts keep insertion order
    return Stage("sort", {name: direction for name, direction in keys})


def limit(n: int) -> Stage:
    return Stage("limit", n)


def bucket(group_by: str, boundaries: List[int], default: Optional[str], output: Dict[str, Any]) -> Stage:
    body: Dict[str, Any] = {"groupBy": group_by, "boundaries": list(boundaries), "output": output}
    if default is not None:
        body["default"] = default
    return Stage("bucket", body)
