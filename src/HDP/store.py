"""
Profile stores.

A profile is a named FeatureVector snapshot. The scoring code never touches a
store; callers inject one. Records are kept in the flat interchange form of
FeatureVector.to_dict(), so any store round-trips a vector field by field.

Stores are created on save, overwritten on re-save with the same name, and
never delete anything implicitly.
"""

import abc
import json
import logging
import pathlib
import typing

from .errors import InvalidArgumentError, NotFoundError
from .features import FeatureVector

logger = logging.getLogger(__name__)


def _check_name(name: typing.Any) -> str:
    if not isinstance(name, str) or not name.strip():
        raise InvalidArgumentError(f"Profile name must be a non-empty string, got {name!r}")
    return name


class ProfileStore(metaclass=abc.ABCMeta):
    @abc.abstractmethod
    def save(self, name: str, features: FeatureVector) -> None:
        # create or overwrite the profile `name`
        raise NotImplementedError

    @abc.abstractmethod
    def load(self, name: str) -> FeatureVector:
        # raise NotFoundError when there is no profile `name`
        raise NotImplementedError

    @abc.abstractmethod
    def names(self) -> list[str]:
        raise NotImplementedError


class InMemoryProfileStore(ProfileStore):
    """Process-local store; useful for tests and embedding."""

    def __init__(self):
        self._records: dict[str, dict[str, typing.Any]] = {}

    def save(self, name: str, features: FeatureVector) -> None:
        self._records[_check_name(name)] = features.to_dict()

    def load(self, name: str) -> FeatureVector:
        try:
            record = self._records[_check_name(name)]
        except KeyError:
            raise NotFoundError(name)
        return FeatureVector.from_dict(record)

    def names(self) -> list[str]:
        return sorted(self._records)


class JsonProfileStore(ProfileStore):
    """
    All profiles in one JSON document:

        {"profiles": {"<name>": {"age": 28, "sex": "male", ...}, ...}}

    The file (and its parent directories) is created on the first save; a
    missing file reads as an empty store. Not safe for concurrent writers.
    """

    def __init__(self, path: typing.Union[str, pathlib.Path]):
        self.path = pathlib.Path(path)

    def _read(self) -> dict[str, dict[str, typing.Any]]:
        if not self.path.is_file():
            return {}
        with open(self.path, "r", encoding="utf-8") as in_f:
            try:
                document = json.load(in_f)
            except json.JSONDecodeError as e:
                raise InvalidArgumentError(f"{self.path} is not valid JSON: {e}") from e
        profiles = document.get("profiles") if isinstance(document, dict) else None
        if not isinstance(profiles, dict):
            raise InvalidArgumentError(f"{self.path} is not a profile store (missing 'profiles' object)")
        return profiles

    def _write(self, profiles: dict[str, dict[str, typing.Any]]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as out_f:
            json.dump({"profiles": profiles}, out_f, indent=2, sort_keys=True)

    def save(self, name: str, features: FeatureVector) -> None:
        _check_name(name)
        profiles = self._read()
        if name in profiles:
            logger.debug(f"Overwriting profile {name!r} in {self.path}")
        profiles[name] = features.to_dict()
        self._write(profiles)
        logger.debug(f"Saved profile {name!r} to {self.path}")

    def load(self, name: str) -> FeatureVector:
        _check_name(name)
        profiles = self._read()
        if name not in profiles:
            raise NotFoundError(name)
        logger.debug(f"Loaded profile {name!r} from {self.path}")
        return FeatureVector.from_dict(profiles[name])

    def names(self) -> list[str]:
        return sorted(self._read())
