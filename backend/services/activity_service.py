from database.db import db
from database.models import Activity


class ActivityService:

    @staticmethod
    def record(user_id, type, action, description=None, module=None,
               entity_type=None, entity_id=None):
        """Adds an audit entry to the current session; the caller commits."""
        activity = Activity(
            user_id=user_id,
            type=type,
            action=action,
            description=description,
            module=module,
            entity_type=entity_type,
            entity_id=entity_id,
        )
        db.session.add(activity)
        return activity
