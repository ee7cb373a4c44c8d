# io_save_load.py
# report serialisation helpers

from __future__ import annotations
import dataclasses
import enum
import json
import os
import pathlib as _p
import numpy as np


def to_jsonable(obj):
    """Dataclasses, enums, numpy values and tuples -> plain JSON types."""
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return {f.name: to_jsonable(getattr(obj, f.name)) for f in dataclasses.fields(obj)}
    if isinstance(obj, enum.Enum):
        return obj.value
    if isinstance(obj, np.ndarray):
        return obj.tolist()
    if isinstance(obj, np.generic):
        return obj.item()
    if isinstance(obj, dict):
        return {str(k): to_jsonable(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple, set, frozenset)):
        return [to_jsonable(v) for v in obj]
    return obj

def save_json(path: str, obj) -> str:
    _p.Path(os.path.dirname(path) or ".").mkdir(parents=True, exist_ok=True)
    with open(path, 'w') as f: json.dump(to_jsonable(obj), f, ensure_ascii=False, indent=2)
    return path
