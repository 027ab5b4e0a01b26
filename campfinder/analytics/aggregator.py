from __future__ import annotations

from collections import Counter
from typing import Any

_FUNNEL_QUESTIONS = (1, 2, 3, 4, 5)


def compute_funnel_metrics(events: list[dict[str, Any]]) -> dict[str, int]:
    metrics = {
        "started": 0,
        **{f"q{n}_completed": 0 for n in _FUNNEL_QUESTIONS},
        "quiz_completed": 0,
        "email_captured": 0,
        "camp_clicked": 0,
    }

    for e in events:
        name = e["event"]
        if name == "quiz_started":
            metrics["started"] += 1
        elif name == "question_answered":
            number = e["metadata"].get("question_number")
            if number in _FUNNEL_QUESTIONS:
                metrics[f"q{number}_completed"] += 1
        elif name in ("quiz_completed", "email_captured", "camp_clicked"):
            metrics[name] += 1

    return metrics


def compute_match_summary(events: list[dict[str, Any]]) -> dict[str, Any]:
    runs = [e["metadata"] for e in events if e["event"] == "recommendations_generated"]
    total = len(runs)

    counts = [r.get("results_count", 0) for r in runs]
    avg_results = round(sum(counts) / total, 1) if total else 0.0
    empty_runs = sum(1 for c in counts if c == 0)

    # Label distribution across every returned camp
    label_counter: Counter[str] = Counter()
    for r in runs:
        for label in r.get("labels", []) or []:
            label_counter[label] += 1

    # Drop-off by question for abandoned sessions
    drop_offs: Counter[str] = Counter(
        e["metadata"].get("drop_off_label", "unknown")
        for e in events
        if e["event"] == "quiz_abandoned"
    )

    return {
        "total_runs": total,
        "avg_results": avg_results,
        "empty_result_rate": round(empty_runs / total * 100, 1) if total else 0.0,
        "label_distribution": dict(label_counter),
        "drop_offs": [{"question": q, "count": c} for q, c in drop_offs.most_common()],
    }
