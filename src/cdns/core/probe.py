"""System probe backed by the real host."""

import logging
import os
import shutil
import stat
import subprocess

from cdns.core.base import SystemProbe
from cdns.core.errors import ServiceQueryError

logger = logging.getLogger(__name__)


class DefaultSystemProbe(SystemProbe):
    """Answers probe questions with PATH lookups, systemctl and stat."""

    def __init__(self, systemctl: str = "systemctl"):
        self.systemctl = systemctl

    def command_exists(self, name: str) -> bool:
        return shutil.which(name) is not None

    def service_running(self, name: str) -> bool:
        try:
            proc = subprocess.run(
                [self.systemctl, "is-active", "--quiet", name],
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                check=False,
            )
        except OSError as e:
            raise ServiceQueryError(name, e) from e

        logger.debug(f"{self.systemctl} is-active {name} -> {proc.returncode}")
        return proc.returncode == 0

    def file_exists(self, path: str) -> bool:
        return os.path.exists(path)

    def is_regular_file(self, path: str) -> bool:
        return stat.S_ISREG(os.stat(path).st_mode)

    def is_symlink(self, path: str) -> bool:
        return stat.S_ISLNK(os.lstat(path).st_mode)
