from __future__ import annotations

import logging

from .errors import InvalidInputError
from .models import (
    DailyHearts,
    DailyLedger,
    HeartAction,
    HeartEvent,
    HeartResult,
    HistoricalArchive,
    HistoricalHearts,
    LedgerKind,
    RemovalResult,
    SubjectKind,
)
from .store import LedgerStore

logger = logging.getLogger(__name__)


def validate_user_id(user_id: object) -> str:
    if not isinstance(user_id, str) or not user_id.strip():
        raise InvalidInputError("user_id must be a non-empty string")
    return user_id


def _is_venue_id(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _validate_subject(kind: SubjectKind, subject_id: object) -> int | str:
    if kind is SubjectKind.venue:
        if not _is_venue_id(subject_id):
            raise InvalidInputError(f"venue id must be an integer, got {subject_id!r}")
        return subject_id
    if not isinstance(subject_id, str) or not subject_id.strip():
        raise InvalidInputError("menu item id must be a non-empty string")
    return subject_id


def _coerce_enum(enum_cls, value, field: str):
    try:
        return enum_cls(value)
    except ValueError:
        raise InvalidInputError(f"Unknown {field}: {value!r}") from None


def _same_id(a: int | str, b: int | str) -> bool:
    """Match identifiers whether they arrive in numeric or string form."""
    return a == b or str(a) == str(b)


def record_heart(
    store: LedgerStore,
    user_id: str,
    kind: SubjectKind | str,
    subject_id: int | str,
    action: HeartAction | str,
    context_venue_id: int | None = None,
) -> HeartResult:
    """
    Like or unlike a venue or menu item in today's buffer.

    A repeated like is ignored. An unlike removes every matching record
    for the user and subject and succeeds even if none exist.
    """
    user_id = validate_user_id(user_id)
    kind = _coerce_enum(SubjectKind, kind, "subject kind")
    action = _coerce_enum(HeartAction, action, "action")
    subject_id = _validate_subject(kind, subject_id)

    if kind is SubjectKind.venue:
        venue_id = subject_id
    elif context_venue_id is None or _is_venue_id(context_venue_id):
        venue_id = context_venue_id
    else:
        raise InvalidInputError(
            f"context venue id must be an integer, got {context_venue_id!r}"
        )

    def _mutate(daily: DailyLedger) -> None:
        hearts = daily.collection(kind)
        existing = [h for h in hearts if h.user_id == user_id and h.subject_id == subject_id]

        if action is HeartAction.like and not existing:
            event = HeartEvent.create(user_id, subject_id, venue_id, store.now())
            hearts.append(event)
            logger.debug(
                "Heart added: user=%s %s=%s day=%d time=%s",
                user_id, kind.value, subject_id, event.day_of_week, event.time_of_day,
            )
        elif action is HeartAction.unlike and existing:
            daily.replace_collection(
                kind,
                [h for h in hearts if not (h.user_id == user_id and h.subject_id == subject_id)],
            )
            logger.debug(
                "Removed %d heart records: user=%s %s=%s",
                len(existing), user_id, kind.value, subject_id,
            )

    store.update_daily(_mutate)
    return HeartResult(success=True, is_liked=action is HeartAction.like)


def list_daily_hearts(store: LedgerStore, user_id: str) -> DailyHearts:
    """Return the ids the user has liked since the last rollover."""
    user_id = validate_user_id(user_id)
    daily, _ = store.snapshot()
    return DailyHearts(
        venue_ids={h.subject_id for h in daily.for_user(user_id, SubjectKind.venue)},
        menu_item_ids={
            str(h.subject_id) for h in daily.for_user(user_id, SubjectKind.menu_item)
        },
    )


def list_historical_hearts(store: LedgerStore, user_id: str) -> HistoricalHearts:
    """Return the user's detailed archive records."""
    user_id = validate_user_id(user_id)
    _, archive = store.snapshot()
    return HistoricalHearts(
        venue_hearts=archive.for_user(user_id, SubjectKind.venue),
        menu_item_hearts=archive.for_user(user_id, SubjectKind.menu_item),
    )


def remove_heart(
    store: LedgerStore,
    ledger: LedgerKind | str,
    user_id: str,
    kind: SubjectKind | str,
    subject_id: int | str,
) -> RemovalResult:
    """
    Delete one record matching the user and subject from the chosen ledger.

    ``success`` is ``False`` when nothing matched.
    """
    user_id = validate_user_id(user_id)
    ledger = _coerce_enum(LedgerKind, ledger, "ledger")
    kind = _coerce_enum(SubjectKind, kind, "subject kind")
    if subject_id is None or (isinstance(subject_id, str) and not subject_id.strip()):
        raise InvalidInputError("subject id is required")

    def _mutate(doc: DailyLedger | HistoricalArchive) -> bool:
        hearts = doc.collection(kind)
        for index, heart in enumerate(hearts):
            if heart.user_id == user_id and _same_id(heart.subject_id, subject_id):
                del hearts[index]
                return True
        return False

    if ledger is LedgerKind.daily:
        removed = store.update_daily(_mutate)
    else:
        removed = store.update_archive(_mutate)

    if removed:
        logger.info(
            "Removed %s heart from %s ledger: user=%s id=%s",
            kind.value, ledger.value, user_id, subject_id,
        )
    return RemovalResult(success=removed)
