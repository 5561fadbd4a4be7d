import logging
import os

from zdock_api.domain.ports import LivenessProbe

logger = logging.getLogger(__name__)


class ProcessLivenessProbe(LivenessProbe):
    def is_running(self, pid: str) -> bool:
        """
        Signal-0 check on ``pid``. Only "no such process" counts as dead; any
        other failure (e.g. EPERM for a process owned by another user) is
        reported as alive so we never reclaim a process we can't inspect.
        """
        pid = (pid or "").strip()
        if not pid.isdecimal() or int(pid) <= 0:
            return False

        try:
            os.kill(int(pid), 0)
        except (ProcessLookupError, OverflowError):
            return False
        except PermissionError:
            return True
        except OSError as exc:
            logger.debug("[PROBE] pid %s: %s, assuming alive", pid, exc)
            return True
        return True
