import logging
from typing import Any, Dict

from aizer.database.store import Store, first_or_none, raise_for_error, utcnow_iso
from aizer.modules.profiles.schemas import ProfileResponse, ProfileUpdate

logger = logging.getLogger(__name__)

DEFAULT_ACCENT_COLOR = "#FFFFFF"


class ProfileService:
    def __init__(self, store: Store):
        self.store = store

    def get_profile(self, user: Dict[str, Any]) -> ProfileResponse:
        """Stored profile of the user, or the defaults when none was saved yet"""
        row = first_or_none(raise_for_error(
            self.store.query("profiles", [("id", user["id"])]), "load profile"
        ))
        if row:
            return ProfileResponse(**row)
        email = user.get("email") or ""
        return ProfileResponse(
            id=user["id"],
            email=email or None,
            display_name=email.split("@")[0] or None,
            accent_color=DEFAULT_ACCENT_COLOR,
        )

    def update_profile(self, user: Dict[str, Any], profile_data: ProfileUpdate) -> ProfileResponse:
        """Update the profile, creating it on first save"""
        update_data = {}
        if profile_data.display_name is not None:
            update_data["display_name"] = profile_data.display_name.strip() or None
        if profile_data.accent_color is not None:
            update_data["accent_color"] = profile_data.accent_color
        if not update_data:
            return self.get_profile(user)

        update_data["updated_at"] = utcnow_iso()
        row = first_or_none(raise_for_error(
            self.store.update("profiles", update_data, [("id", user["id"])]), "update profile"
        ))
        if row:
            return ProfileResponse(**row)

        default = self.get_profile(user)
        rows = raise_for_error(self.store.insert("profiles", [{
            "id": user["id"],
            "email": default.email,
            "display_name": default.display_name,
            "accent_color": default.accent_color,
            **update_data,
        }]), "create profile")
        logger.info("Created profile for user %s", user["id"])
        return ProfileResponse(**rows[0])
