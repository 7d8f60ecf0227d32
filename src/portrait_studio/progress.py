"""Busy tracking for in-flight edit requests."""

import time
from dataclasses import dataclass


@dataclass
class EditProgress:
    """Track whether an edit request is in flight."""
    active: bool = False
    started_at: float = 0.0

    def start(self):
        self.active = True
        self.started_at = time.time()

    def finish(self):
        self.active = False
        self.started_at = 0.0

    def to_dict(self):
        if not self.active:
            return {"active": False}
        return {
            "active": True,
            "elapsed": round(time.time() - self.started_at, 1),
        }
