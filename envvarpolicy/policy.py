"""Admission checks on the environment variables set by a workload's containers."""

from __future__ import annotations

import argparse
import json
import sys
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from envvarpolicy.operators import PolicyViolation
from envvarpolicy.settings import Settings, SettingsError

_TEMPLATED_KINDS = frozenset(
    {
        "Deployment",
        "ReplicaSet",
        "StatefulSet",
        "DaemonSet",
        "ReplicationController",
        "Job",
    }
)


@dataclass(frozen=True)
class ValidationResponse:
    """The outcome of validating one admission request."""

    accepted: bool
    message: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Return the wire form of the response."""
        result: dict[str, Any] = {"accepted": self.accepted}
        if self.message is not None:
            result["message"] = self.message
        return result


def get_containers_env_vars(
    containers: Iterable[Mapping[str, Any]],
) -> dict[str, list[str]]:
    """Map each container that declares ``env`` to the names it sets."""
    return {
        container["name"]: [entry["name"] for entry in container["env"]]
        for container in containers
        if container.get("env") is not None
    }


def validate_envvar(settings: Settings, env_vars: Iterable[str]) -> None:
    """Apply the settings to one container's names; raise PolicyViolation on failure."""
    settings.check(set(env_vars))


def validate_environment_variables(
    pod_spec: Mapping[str, Any], settings: Settings
) -> list[str]:
    """Return one error message per container that breaks the rule, or none."""
    envvars = get_containers_env_vars(pod_spec.get("containers") or [])
    envvars.update(get_containers_env_vars(pod_spec.get("initContainers") or []))
    envvars.update(get_containers_env_vars(pod_spec.get("ephemeralContainers") or []))

    errors = []
    for container_name, names in envvars.items():
        try:
            validate_envvar(settings, names)
        except PolicyViolation as err:
            errors.append(f"{container_name}: {err}")
    return errors


def extract_pod_spec(obj: Mapping[str, Any]) -> dict[str, Any] | None:
    """Return the pod spec carried by a workload object, or None for other kinds."""
    if not isinstance(obj, Mapping):
        raise ValueError("object must be a mapping")
    kind = obj.get("kind")
    spec = obj.get("spec") or {}
    if kind == "Pod":
        return dict(spec)
    if kind in _TEMPLATED_KINDS:
        return dict((spec.get("template") or {}).get("spec") or {})
    if kind == "CronJob":
        job_spec = (spec.get("jobTemplate") or {}).get("spec") or {}
        return dict((job_spec.get("template") or {}).get("spec") or {})
    return None


def _load_json(payload: bytes | str) -> Any:
    try:
        return json.loads(payload)
    except (json.JSONDecodeError, UnicodeDecodeError) as err:
        raise ValueError(f"cannot decode payload: {err}") from None


def validate(payload: bytes | str) -> ValidationResponse:
    """Validate a JSON admission request carrying ``request`` and ``settings``."""
    data = _load_json(payload)
    if not isinstance(data, Mapping):
        raise ValueError("payload must be a JSON object")
    raw_settings = data.get("settings")
    settings = Settings() if raw_settings is None else Settings.from_dict(raw_settings)
    request = data.get("request")
    if not isinstance(request, Mapping):
        raise ValueError("payload has no `request` object")
    obj = request.get("object")
    if not isinstance(obj, Mapping):
        raise ValueError("request has no `object`")

    pod_spec = extract_pod_spec(obj) or {}
    errors = validate_environment_variables(pod_spec, settings)
    if errors:
        return ValidationResponse(accepted=False, message=", ".join(errors))
    return ValidationResponse(accepted=True)


def validate_settings(payload: bytes | str) -> dict[str, Any]:
    """Check JSON settings and report whether they are valid."""
    data = _load_json(payload)
    try:
        Settings.from_dict(data).validate()
    except SettingsError as err:
        return {"valid": False, "message": str(err)}
    return {"valid": True}


def main(argv: Sequence[str] | None = None) -> int:
    """Run a validation over a JSON payload read from a file or standard input."""
    parser = argparse.ArgumentParser(
        prog="envvarpolicy",
        description="Check container environment variables against a policy.",
    )
    parser.add_argument("command", choices=["validate", "validate-settings"])
    parser.add_argument(
        "payload", nargs="?", default="-", help="JSON payload file, '-' for stdin"
    )
    args = parser.parse_args(argv)

    if args.payload == "-":
        raw = sys.stdin.buffer.read()
    else:
        with open(args.payload, "rb") as handle:
            raw = handle.read()

    try:
        if args.command == "validate":
            result = validate(raw).to_dict()
        else:
            result = validate_settings(raw)
    except (ValueError, KeyError, TypeError) as err:
        print(f"error: {err}", file=sys.stderr)
        return 1
    print(json.dumps(result))
    return 0