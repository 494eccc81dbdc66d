# Rev 0.1.0
from __future__ import annotations
from dataclasses import dataclass
from typing import Optional


@dataclass
class InteractionGuard:
    """
    Open forms and pending operations on a page.
    While any of them is set, background refreshes and realtime events are skipped.
    """
    create_open: bool = False
    edit_target: Optional[str] = None
    delete_pending: Optional[str] = None
    mutation_in_flight: bool = False

    def is_user_interacting(self) -> bool:
        return (
            self.create_open
            or self.edit_target is not None
            or self.delete_pending is not None
            or self.mutation_in_flight
        )

    # ---- forms ----
    def open_create(self) -> None:
        self.create_open = True

    def close_create(self) -> None:
        self.create_open = False

    def begin_edit(self, record_id: str) -> None:
        self.edit_target = record_id

    def end_edit(self) -> None:
        self.edit_target = None

    def request_delete(self, record_id: str) -> None:
        self.delete_pending = record_id

    def cancel_delete(self) -> None:
        self.delete_pending = None

    # ---- requests ----
    def mutation_started(self) -> None:
        self.mutation_in_flight = True

    def mutation_finished(self) -> None:
        self.mutation_in_flight = False
