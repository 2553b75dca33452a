import jsonpickle
from datetime import datetime, timezone
from typing import Iterable, List


def now() -> str:
    return datetime.now(timezone.utc).isoformat()


def sort_dict_keys(d):
    """Recursively sort dictionary keys and handle nested structures.

    Args:
        d: Data structure (dict, list, or primitive type)

    Returns:
        Sorted version of the data structure
    """
    if isinstance(d, dict):
        return {key: sort_dict_keys(value) for key, value in sorted(d.items())}
    elif isinstance(d, (list, tuple)):
        return [sort_dict_keys(item) for item in d]
    else:
        return d


def canonicalize_dict(data) -> str:
    """
    Returns a canonical JSON representation of a dictionary.

    Keys are sorted at every depth, so two dictionaries holding the same
    content serialize identically regardless of insertion order. List order
    is preserved because it is meaningful (racks, seeds).
    """
    return jsonpickle.dumps(sort_dict_keys(data), unpicklable=False)


def upsert_condition(conds, newc):
    """In-memory merge by .type. Only bump lastTransitionTime when status flips."""
    conds = list(conds or [])
    for i, c in enumerate(conds):
        if c.get("type") == newc["type"]:
            ltt = c.get("lastTransitionTime") or now()
            if c.get("status") != newc["status"]:
                ltt = now()
            conds[i] = {**c, **newc, "lastTransitionTime": ltt}
            break
    else:
        conds.append({**newc, "lastTransitionTime": now()})
    return conds


def get_condition_status(conditions: Iterable[dict], type: str) -> str:
    """Return the status of the condition of the given type, or None."""
    for cond in conditions or []:
        if cond.get("type") == type:
            return cond.get("status")
    return None


def merge_unique(existing: Iterable[str], additions: Iterable[str]) -> List[str]:
    """Append additions to existing, skipping values already present."""
    merged = list(existing or [])
    seen = set(merged)
    for value in additions:
        if value not in seen:
            merged.append(value)
            seen.add(value)
    return merged


def label_selector(labels: dict) -> str:
    """Convert a label dict into a comma separated selector string."""
    if not labels:
        return None
    return ",".join(f"{k}={v}" for k, v in labels.items())
