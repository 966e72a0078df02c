"""RunManifest model."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from wintune.errors import InvalidArgumentError, ManifestCorruptError
from wintune.plan import Action, normalize_features, parse_profile
from wintune.util.time import parse_iso, to_iso

from .codec import action_from_dict, action_to_dict

SCHEMA_VERSION: int = 1


@dataclass(slots=True)
class RunManifest:
    """
    Durable record of a Plan plus run identity.

    Written before the first action is applied. PowerPlan.resolved_id is not
    known at that point and stays null in the file.
    """

    run_id: str
    created_at: datetime
    host: str
    user: str
    profile: str
    features: list[str]
    actions: list[Action]

    def to_dict(self) -> dict[str, Any]:
        return {
            "schema_version": SCHEMA_VERSION,
            "run_id": self.run_id,
            "created_at": to_iso(self.created_at),
            "host": self.host,
            "user": self.user,
            "profile": self.profile,
            "features": list(self.features),
            "actions": [action_to_dict(a) for a in self.actions],
        }

    @classmethod
    def from_dict(cls, data: Any) -> RunManifest:
        """
        Raises:
            ManifestCorruptError: if required keys are missing or malformed.
        """
        if not isinstance(data, dict):
            raise ManifestCorruptError("Manifest root must be a JSON object")

        version = data.get("schema_version", SCHEMA_VERSION)
        if version != SCHEMA_VERSION:
            raise ManifestCorruptError(
                "Unsupported manifest schema version",
                details={"schema_version": version},
            )

        try:
            actions_raw = data["actions"]
            if not isinstance(actions_raw, list):
                raise TypeError("actions must be a list")
            return cls(
                run_id=str(data["run_id"]),
                created_at=parse_iso(data["created_at"]),
                host=str(data["host"]),
                user=str(data["user"]),
                profile=parse_profile(str(data["profile"])).value,
                features=[f.value for f in normalize_features(str(f) for f in data["features"])],
                actions=[action_from_dict(a) for a in actions_raw],
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise ManifestCorruptError("Manifest is missing required fields", cause=exc) from exc
        except InvalidArgumentError as exc:
            raise ManifestCorruptError(
                "Manifest names an unknown profile or feature",
                details=exc.details,
                cause=exc,
            ) from exc
