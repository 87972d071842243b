from typing import Any, Dict

from pydantic.alias_generators import to_camel
from sqlalchemy.orm import Session

from evaltrack.models.system import SystemSetting, GLOBAL_SETTINGS_ID

SETTING_FIELDS = (
    "app_name",
    "system_theme",
    "maintenance_mode",
    "notifications_enabled",
    "email_notifications",
)


def get_settings(db: Session) -> SystemSetting:
    """
    Return the one settings row, creating it with defaults on first use.

    This is the only way the application obtains SystemSetting, so there is
    never more than the single `global_settings` row.
    """
    settings_row = db.get(SystemSetting, GLOBAL_SETTINGS_ID)
    if settings_row is None:
        settings_row = SystemSetting(id=GLOBAL_SETTINGS_ID)
        db.add(settings_row)
        db.commit()
        db.refresh(settings_row)
    return settings_row


def apply_settings_update(settings_row: SystemSetting, update_data: Dict[str, Any]) -> Dict[str, Dict[str, Any]]:
    """
    Apply ``update_data`` and report what actually changed.

    Returns:
        ``{fieldName: {"oldValue": ..., "newValue": ...}}`` (camelCase, as on the
        wire) for changed fields only;
        empty when the payload matched the stored values.
    """
    changes: Dict[str, Dict[str, Any]] = {}
    for field, value in update_data.items():
        if field not in SETTING_FIELDS:
            continue
        current = getattr(settings_row, field)
        if current != value:
            changes[to_camel(field)] = {"oldValue": current, "newValue": value}
            setattr(settings_row, field, value)
    return changes
