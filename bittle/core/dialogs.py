"""
Input-collection dialogs for the family tree graph.

Both dialogs share one explicit state:

    Closed --open()--> Open --confirm()--> Submitting --ok--> Closed
                        |                      |
                     cancel()               raised
                        v                      v
                      Closed            Failed(reason) --cancel()--> Closed
                                               |
                                           confirm() (retry)

The dialogs own no persistence. `confirm` runs the caller's completion
callback exactly once; whatever it raises is kept as the failure reason
instead of closing the dialog.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Callable, Optional

from bittle.errors import DialogTransitionError

logger = logging.getLogger(__name__)


class DialogStatus(str, enum.Enum):
    CLOSED = "closed"
    OPEN = "open"
    SUBMITTING = "submitting"
    FAILED = "failed"


@dataclass(frozen=True)
class DialogState:
    status: DialogStatus
    reason: Optional[str] = None

    @classmethod
    def closed(cls) -> "DialogState":
        return cls(DialogStatus.CLOSED)

    @classmethod
    def open(cls) -> "DialogState":
        return cls(DialogStatus.OPEN)

    @classmethod
    def submitting(cls) -> "DialogState":
        return cls(DialogStatus.SUBMITTING)

    @classmethod
    def failed(cls, reason: str) -> "DialogState":
        return cls(DialogStatus.FAILED, reason)


class ConfirmationDialog:
    title = ""

    def __init__(self) -> None:
        self.state = DialogState.closed()

    @property
    def status(self) -> DialogStatus:
        return self.state.status

    @property
    def inputs_disabled(self) -> bool:
        return self.status is DialogStatus.SUBMITTING

    def _require(self, *allowed: DialogStatus, action: str) -> None:
        if self.status not in allowed:
            raise DialogTransitionError(
                f"Cannot {action} {type(self).__name__} while {self.status.value}"
            )

    def open(self) -> None:
        self._require(DialogStatus.CLOSED, action="open")
        self.state = DialogState.open()

    def cancel(self) -> None:
        self._require(DialogStatus.OPEN, DialogStatus.FAILED, action="cancel")
        self.state = DialogState.closed()

    def _submit(self, callback: Callable[[], None]) -> DialogState:
        self._require(DialogStatus.OPEN, DialogStatus.FAILED, action="confirm")
        self.state = DialogState.submitting()
        try:
            callback()
        except Exception as exc:
            logger.exception("%s failed", type(self).__name__)
            self.state = DialogState.failed(str(exc) or type(exc).__name__)
        else:
            self.state = DialogState.closed()
        return self.state


class DeleteMemberDialog(ConfirmationDialog):
    title = "Confirm Member Deletion"

    def __init__(self, identifier: str) -> None:
        super().__init__()
        self.identifier = identifier

    @property
    def message(self) -> str:
        return (
            f"Are you sure you want to delete the member '{self.identifier}'? "
            "This action cannot be undone."
        )

    def confirm(self, on_confirm: Callable[[], None]) -> DialogState:
        return self._submit(on_confirm)


class EditIdentifierDialog(ConfirmationDialog):
    title = "Edit Identifier"

    def __init__(self, node_id: str, current_identifier: str) -> None:
        super().__init__()
        self.node_id = node_id
        self.value = current_identifier

    def set_value(self, value: str) -> None:
        self._require(DialogStatus.OPEN, DialogStatus.FAILED, action="edit")
        self.value = value

    @property
    def can_submit(self) -> bool:
        return bool(self.value.strip()) and not self.inputs_disabled

    def confirm(self, on_save: Callable[[str, str], None]) -> DialogState:
        """Save the trimmed identifier; a blank value keeps the dialog as is."""
        self._require(DialogStatus.OPEN, DialogStatus.FAILED, action="confirm")
        identifier = self.value.strip()
        if not identifier:
            return self.state
        return self._submit(lambda: on_save(self.node_id, identifier))
