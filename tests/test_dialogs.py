from __future__ import annotations

import pytest

from bittle.core.dialogs import (
    DeleteMemberDialog,
    DialogStatus,
    EditIdentifierDialog,
)
from bittle.errors import DialogTransitionError, StoreError


class _Recorder:
    def __init__(self, error: Exception | None = None):
        self.calls: list[tuple] = []
        self.error = error

    def __call__(self, *args) -> None:
        self.calls.append(args)
        if self.error:
            raise self.error


# ---------------------------------------------------------------------------
# Delete member
# ---------------------------------------------------------------------------


def test_delete_dialog_names_member() -> None:
    dialog = DeleteMemberDialog("Ada")
    assert dialog.title == "Confirm Member Deletion"
    assert "'Ada'" in dialog.message
    assert dialog.status is DialogStatus.CLOSED


def test_cancel_never_calls_back() -> None:
    on_confirm = _Recorder()
    dialog = DeleteMemberDialog("Ada")
    dialog.open()
    dialog.cancel()

    assert dialog.status is DialogStatus.CLOSED
    assert on_confirm.calls == []


def test_confirm_calls_back_once_and_closes() -> None:
    on_confirm = _Recorder()
    dialog = DeleteMemberDialog("Ada")
    dialog.open()

    state = dialog.confirm(on_confirm)
    assert state.status is DialogStatus.CLOSED
    assert on_confirm.calls == [()]


def test_failed_callback_keeps_dialog_with_reason() -> None:
    dialog = DeleteMemberDialog("Ada")
    dialog.open()

    state = dialog.confirm(_Recorder(StoreError("Error deleting member: timeout")))
    assert state.status is DialogStatus.FAILED
    assert state.reason == "Error deleting member: timeout"
    assert not dialog.inputs_disabled

    # retry from Failed succeeds
    retry = _Recorder()
    assert dialog.confirm(retry).status is DialogStatus.CLOSED
    assert retry.calls == [()]


def test_failed_dialog_can_be_dismissed() -> None:
    dialog = DeleteMemberDialog("Ada")
    dialog.open()
    dialog.confirm(_Recorder(RuntimeError()))
    assert dialog.state.reason == "RuntimeError"

    dialog.cancel()
    assert dialog.status is DialogStatus.CLOSED


def test_inputs_disabled_while_submitting() -> None:
    dialog = DeleteMemberDialog("Ada")
    dialog.open()
    seen = []
    dialog.confirm(lambda: seen.append(dialog.inputs_disabled))
    assert seen == [True]


def test_illegal_transitions_raise() -> None:
    dialog = DeleteMemberDialog("Ada")
    with pytest.raises(DialogTransitionError):
        dialog.confirm(_Recorder())
    with pytest.raises(DialogTransitionError):
        dialog.cancel()

    dialog.open()
    with pytest.raises(DialogTransitionError):
        dialog.open()


# ---------------------------------------------------------------------------
# Edit identifier
# ---------------------------------------------------------------------------


def test_edit_saves_trimmed_identifier() -> None:
    on_save = _Recorder()
    dialog = EditIdentifierDialog("m-1", "Ada")
    dialog.open()
    assert dialog.value == "Ada"

    dialog.set_value("  Ada L.  ")
    assert dialog.confirm(on_save).status is DialogStatus.CLOSED
    assert on_save.calls == [("m-1", "Ada L.")]


def test_blank_identifier_is_not_submitted() -> None:
    on_save = _Recorder()
    dialog = EditIdentifierDialog("m-1", "Ada")
    dialog.open()
    dialog.set_value("   ")

    assert not dialog.can_submit
    assert dialog.confirm(on_save).status is DialogStatus.OPEN
    assert on_save.calls == []


def test_edit_cancel_discards_value() -> None:
    on_save = _Recorder()
    dialog = EditIdentifierDialog("m-1", "Ada")
    dialog.open()
    dialog.set_value("Grace")
    dialog.cancel()

    assert on_save.calls == []
    with pytest.raises(DialogTransitionError):
        dialog.set_value("Other")
