"""Persistent store for custom environments.

Custom environments are kept in a YAML list of ``Environment.to_dict()``
records. Public environments always come from the catalog and are never
written to the file.
"""

import logging
import os
import tempfile
from pathlib import Path
from typing import List, Optional

import portalocker
import yaml

from .catalog import PUBLIC_ENVIRONMENTS, get_public_environment, is_public_name
from .constants import DEFAULT_CLIENT_ID, LOCK_SUFFIX
from .environment import Environment
from .errors import (
    ConfigError,
    EnvironmentExistsError,
    EnvironmentNotFoundError,
    PublicEnvironmentError,
)
from .parameters import get_parameter

logger = logging.getLogger(__name__)


def _atomic_write_text(path: Path, text: str) -> None:
    """Write text to a temp file in the same directory, fsync, then rename over path."""
    path.parent.mkdir(parents=True, exist_ok=True)

    with tempfile.NamedTemporaryFile(
        mode="w",
        delete=False,
        dir=path.parent,
        prefix=f".{path.name}.tmp-",
        suffix=""
    ) as f:
        f.write(text)
        f.flush()
        os.fsync(f.fileno())
        tmp = Path(f.name)

    try:
        os.replace(tmp, path)
    except OSError:
        tmp.unlink(missing_ok=True)
        raise


class EnvironmentStore:
    """Public environments plus custom environments persisted to YAML."""

    def __init__(self, path: Path, client_id: str = DEFAULT_CLIENT_ID):
        """
        Args:
            path: YAML file holding custom environments
            client_id: Client identity given to every loaded environment
        """
        self.path = path
        self.client_id = client_id

    @property
    def lock_path(self) -> Path:
        return self.path.with_name(self.path.name + LOCK_SUFFIX)

    # ---- read --------------------------------------------------------------

    def _load_custom(self) -> List[Environment]:
        if not self.path.exists():
            return []
        try:
            data = yaml.safe_load(self.path.read_text()) or []
        except yaml.YAMLError as e:
            raise ConfigError(f"Cannot parse {self.path}: {e}") from e
        if not isinstance(data, list):
            raise ConfigError(f"{self.path} must contain a list of environments")

        envs = []
        for i, item in enumerate(data):
            if not isinstance(item, dict) or not item.get("name"):
                raise ConfigError(f"{self.path}: entry {i} must be a mapping with a 'name'")
            envs.append(Environment.from_dict(item, client_id=self.client_id))
        return envs

    def custom(self) -> List[Environment]:
        """Custom environments in file order."""
        return self._load_custom()

    def list(self) -> List[Environment]:
        """Public environments followed by custom ones."""
        public = [Environment.from_dict(env.to_dict(), client_id=self.client_id) for env in PUBLIC_ENVIRONMENTS]
        return public + self._load_custom()

    def get(self, name: str) -> Environment:
        """
        Look up an environment by name.

        Raises:
            EnvironmentNotFoundError: If no public or custom environment matches
        """
        public = get_public_environment(name)
        if public is not None:
            return Environment.from_dict(public.to_dict(), client_id=self.client_id)
        for env in self._load_custom():
            if env.name == name:
                return env
        raise EnvironmentNotFoundError(name)

    def find(self, name: str) -> Optional[Environment]:
        try:
            return self.get(name)
        except EnvironmentNotFoundError:
            return None

    # ---- write -------------------------------------------------------------

    def _save_custom(self, envs: List[Environment]) -> None:
        text = yaml.safe_dump([env.to_dict() for env in envs], sort_keys=False)
        _atomic_write_text(self.path, text)

    def _lock(self) -> portalocker.Lock:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        return portalocker.Lock(str(self.lock_path), "w", timeout=30)

    def add(self, env: Environment) -> Environment:
        """
        Persist a new custom environment.

        Raises:
            PublicEnvironmentError: If the name belongs to a public environment
            EnvironmentExistsError: If a custom environment has the same name
        """
        if is_public_name(env.name):
            raise PublicEnvironmentError(env.name, "add")

        with self._lock():
            envs = self._load_custom()
            if any(e.name == env.name for e in envs):
                raise EnvironmentExistsError(env.name)
            envs.append(env)
            self._save_custom(envs)
        logger.info("Added environment %s", env.name)
        return env

    def set_value(self, name: str, parameter: str, value: Optional[str]) -> Environment:
        """
        Update one stored parameter of a custom environment.

        Raises:
            PublicEnvironmentError: For public environments
            EnvironmentNotFoundError: If no custom environment matches
            UnknownParameterError: If the parameter is not registered
        """
        if is_public_name(name):
            raise PublicEnvironmentError(name, "modify")
        get_parameter(parameter)

        with self._lock():
            envs = self._load_custom()
            for env in envs:
                if env.name == name:
                    env.set(parameter, value)
                    self._save_custom(envs)
                    logger.info("Set %s on environment %s", parameter, name)
                    return env
        raise EnvironmentNotFoundError(name)

    def remove(self, name: str) -> None:
        """
        Delete a custom environment.

        Raises:
            PublicEnvironmentError: For public environments
            EnvironmentNotFoundError: If no custom environment matches
        """
        if is_public_name(name):
            raise PublicEnvironmentError(name, "delete")

        with self._lock():
            envs = self._load_custom()
            remaining = [e for e in envs if e.name != name]
            if len(remaining) == len(envs):
                raise EnvironmentNotFoundError(name)
            self._save_custom(remaining)
        logger.info("Removed environment %s", name)
