"""
HistoryNarrator - Detail text composer for history entries

Keeps the wording of audit entries in one place so every transition
produces a consistent description.
"""

from typing import Optional


class HistoryNarrator:
    """Composes the ``details`` text stored with each AssetHistory row"""

    # ========== Asset lifecycle ==========

    @staticmethod
    def asset_created(actor) -> str:
        return f"Asset created by {actor.display_name}"

    @staticmethod
    def asset_assigned(target, actor) -> str:
        return f"Asset assigned to {target.display_name} by {actor.display_name}"

    @staticmethod
    def asset_returned(holder, condition: str) -> str:
        holder_name = holder.display_name if holder else 'unknown user'
        return f"Asset returned by {holder_name} in {condition} condition"

    @staticmethod
    def asset_revoked(holder, reason: Optional[str] = None) -> str:
        holder_name = holder.display_name if holder else 'unknown user'
        text = f"Asset revoked from {holder_name}."
        if reason:
            text += f" Reason: {reason}"
        return text

    @staticmethod
    def asset_retired(actor, reason: Optional[str] = None) -> str:
        text = f"Asset retired by {actor.display_name}"
        if reason:
            text += f" | Reason: {reason}"
        return text

    @staticmethod
    def asset_restored(from_status: str, actor, notes: Optional[str] = None) -> str:
        text = f"Asset restored from {from_status} to AVAILABLE by {actor.display_name}"
        if notes:
            text += f" | Notes: {notes}"
        return text

    # ========== Assignment notes ==========

    @staticmethod
    def return_note(condition: str, notes: Optional[str] = None) -> str:
        if notes:
            return f"Return notes: {notes} (condition: {condition})"
        return f"Returned (condition: {condition})"

    @staticmethod
    def revoke_note(reason: Optional[str] = None) -> str:
        return f"Revoked: {reason or 'No reason provided'}"

    # ========== Request workflow ==========

    @staticmethod
    def request_submitted(request, actor) -> str:
        return f"Request #{request.id} ({request.type.value}) submitted by {actor.display_name}"

    @staticmethod
    def request_status_changed(request, from_status: str, to_status: str, actor) -> str:
        """Comment for request workflow status changes"""
        return f"Request #{request.id} status changed: {from_status} → {to_status} by {actor.display_name}"
