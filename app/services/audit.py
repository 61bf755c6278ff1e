import logging

from ..extensions import db
from ..models import UserLog

logger = logging.getLogger(__name__)


def log_action(principal, action, target_table, target_id=None, description=None):
    """Queue a user_log row on the current session; the caller commits."""
    db.session.add(UserLog(user_id=principal.user_id, action=action,
                           target_table=target_table, target_id=target_id,
                           description=description))
    logger.info("user %s %s %s#%s", principal.user_id, action, target_table, target_id)


def recent_logs(limit=100):
    return (UserLog.query.order_by(UserLog.timestamp.desc(), UserLog.id.desc())
            .limit(limit).all())
