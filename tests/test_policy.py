import json

import pytest

from envvarpolicy.operators import (
    CONTAINS_ALL_OF_ERROR_MSG,
    CONTAINS_ANY_OF_ERROR_MSG,
)
from envvarpolicy.policy import (
    ValidationResponse,
    extract_pod_spec,
    get_containers_env_vars,
    main,
    validate,
    validate_environment_variables,
    validate_envvar,
    validate_settings,
)
from envvarpolicy.operators import PolicyViolation
from envvarpolicy.settings import Criteria, Settings


def _container(name, env_names):
    return {"name": name, "env": [{"name": n} for n in env_names]}


def _payload(obj, settings):
    return json.dumps({"request": {"object": obj}, "settings": settings})


def test_envvar_extraction():
    envvars = ["a", "c"]
    containers = [_container("test-container1", envvars), _container("test-container2", envvars)]
    result = get_containers_env_vars(containers)
    assert result["test-container1"] == envvars
    assert result["test-container2"] == envvars
    assert len(result) == 2


def test_extraction_skips_containers_without_env():
    result = get_containers_env_vars([{"name": "bare"}, _container("full", ["X"])])
    assert result == {"full": ["X"]}


def test_multiple_container_error_message():
    settings = Settings(Criteria.CONTAINS_ANY_OF, {"a", "b"})
    pod_spec = {
        "containers": [_container("test-container1", ["c"]), _container("test-container2", ["c"])],
        "initContainers": [
            _container("test-container3", ["c"]),
            _container("test-container4", ["c"]),
        ],
        "ephemeralContainers": [
            _container("test-container5", ["c"]),
            _container("test-container6", ["c"]),
        ],
    }
    errors = validate_environment_variables(pod_spec, settings)
    assert len(errors) == 6
    for c in range(1, 7):
        assert any(
            e.startswith(f"test-container{c}: {CONTAINS_ANY_OF_ERROR_MSG} ") for e in errors
        )


def test_validate_environment_variables_passes():
    settings = Settings(Criteria.CONTAINS_ALL_OF, {"A"})
    pod_spec = {"containers": [_container("app", ["A", "B"])]}
    assert validate_environment_variables(pod_spec, settings) == []


def test_validate_envvar_raises():
    settings = Settings(Criteria.CONTAINS_ALL_OF, {"A", "B"})
    with pytest.raises(PolicyViolation, match=CONTAINS_ALL_OF_ERROR_MSG):
        validate_envvar(settings, ["A"])


@pytest.mark.parametrize(
    "obj, expected",
    [
        ({"kind": "Pod", "spec": {"containers": []}}, {"containers": []}),
        (
            {"kind": "Deployment", "spec": {"template": {"spec": {"containers": [1]}}}},
            {"containers": [1]},
        ),
        (
            {
                "kind": "CronJob",
                "spec": {"jobTemplate": {"spec": {"template": {"spec": {"x": 1}}}}},
            },
            {"x": 1},
        ),
        ({"kind": "ConfigMap", "data": {}}, None),
    ],
)
def test_extract_pod_spec(obj, expected):
    assert extract_pod_spec(obj) == expected


def test_validate_accepts():
    obj = {"kind": "Pod", "spec": {"containers": [_container("app", ["HOME"])]}}
    response = validate(_payload(obj, {"criteria": "containsAnyOf", "envvars": ["HOME"]}))
    assert response == ValidationResponse(accepted=True)
    assert response.to_dict() == {"accepted": True}


def test_validate_rejects_with_message():
    obj = {
        "kind": "Deployment",
        "spec": {"template": {"spec": {"containers": [_container("app", ["SECRET_X"])]}}},
    }
    settings = {"criteria": "doesNotContainAnyOf", "envvars": ["SECRET_X"]}
    response = validate(_payload(obj, settings))
    assert response.accepted is False
    assert response.message.startswith("app: Resource must not have any")
    assert response.message.endswith("found: SECRET_X")
    assert response.to_dict()["accepted"] is False


def test_validate_unknown_kind_accepted():
    obj = {"kind": "Service", "spec": {}}
    response = validate(_payload(obj, {"criteria": "containsAllOf", "envvars": ["A"]}))
    assert response.accepted is True


def test_validate_bad_json():
    with pytest.raises(ValueError):
        validate(b"{not json")


@pytest.mark.parametrize(
    "settings, valid",
    [
        ({"criteria": "containsAllOf", "envvars": ["VAR"]}, True),
        ({"criteria": "containsAllOf", "envvars": []}, False),
        ({"criteria": "containsAllOf", "envvars": ["1bad"]}, False),
        ({"criteria": "nope", "envvars": ["VAR"]}, False),
    ],
)
def test_validate_settings(settings, valid):
    result = validate_settings(json.dumps(settings))
    assert result["valid"] is valid
    if not valid:
        assert result["message"]


def test_main_validate(tmp_path, capsys):
    path = tmp_path / "payload.json"
    obj = {"kind": "Pod", "spec": {"containers": [_container("app", ["A"])]}}
    path.write_text(_payload(obj, {"criteria": "containsAllOf", "envvars": ["A", "B"]}))
    assert main(["validate", str(path)]) == 0
    out = json.loads(capsys.readouterr().out)
    assert out["accepted"] is False
    assert out["message"] == f"app: {CONTAINS_ALL_OF_ERROR_MSG} B"


def test_main_validate_settings(tmp_path, capsys):
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"criteria": "containsAnyOf", "envvars": ["X"]}))
    assert main(["validate-settings", str(path)]) == 0
    assert json.loads(capsys.readouterr().out) == {"valid": True}


def test_main_bad_payload(tmp_path, capsys):
    path = tmp_path / "bad.json"
    path.write_text("garbage")
    assert main(["validate", str(path)]) == 1
    assert "error" in capsys.readouterr().err