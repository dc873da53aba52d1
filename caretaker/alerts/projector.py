"""Snapshot projection into active and history views.

A pure reducer: every snapshot is projected from scratch, no view is ever
patched incrementally and no state is carried between calls.
"""

from dataclasses import dataclass

from caretaker.alerts.schemas import AlertRecord, AlertSnapshot


@dataclass(frozen=True)
class AlertViews:
    """Derived views of one snapshot.

    Attributes:
        active: Unacknowledged alerts, newest first.
        history: All alerts, newest first.
    """

    active: tuple[AlertRecord, ...] = ()
    history: tuple[AlertRecord, ...] = ()


def _sort_key(record: AlertRecord) -> tuple[int, str]:
    # Equal timestamps fall back to the id so repeated projections agree
    return (-record.timestamp, record.alert_id)


class AlertProjector:
    """Projects full alert snapshots into ``AlertViews``."""

    def project(self, snapshot: AlertSnapshot) -> AlertViews:
        """Compute the active and history views for a snapshot.

        Args:
            snapshot: Entire remote alert state.

        Returns:
            AlertViews sorted by timestamp descending.
        """
        history = tuple(sorted(snapshot.values(), key=_sort_key))
        active = tuple(r for r in history if not r.acknowledged)
        return AlertViews(active=active, history=history)
