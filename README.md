# envvarpolicy

An admission policy that looks at the environment variables of every container
in a Pod and either accepts or rejects the request according to a rule. It checks
regular containers, init containers and ephemeral containers.

## Rules

A rule pairs a criterion with a set of environment variable names:

| criterion             | a container breaks the rule when it...                   |
|-----------------------|----------------------------------------------------------|
| `containsAnyOf`       | has none of the listed variables                         |
| `doesNotContainAnyOf` | has at least one of the listed variables                 |
| `containsAllOf`       | is missing any of the listed variables                   |
| `doesNotContainAllOf` | has every one of the listed variables at the same time   |

Settings are written as a mapping:

```json
{"criteria": "containsAllOf", "envvars": ["HTTP_PROXY", "NO_PROXY"]}
```

Settings are valid when the list is not empty and every name is a C identifier
(`[a-zA-Z_][a-zA-Z_0-9]*`).

Only containers that declare an `env` list are checked. When several containers
break the rule, the rejection message has one entry per container. The entries
are separated by `", "`, and each entry starts with the container name. Within a
message, the variable names are listed in sorted order. If a container name
appears in more than one container list, the entry from the later list is used.
The lists are read in this order: containers, init containers, ephemeral
containers.

## Installation

```
pip install envvarpolicy
```

## Using it from Python

```python
from envvarpolicy.operators import PolicyViolation
from envvarpolicy.settings import Settings, SettingsError

settings = Settings.from_dict({"criteria": "containsAnyOf", "envvars": ["LOG_LEVEL"]})
settings.validate()                    # raises SettingsError on bad settings
settings.check({"LOG_LEVEL", "HOME"})  # raises PolicyViolation when the rule fails
print(settings.to_dict())
```

### `envvarpolicy.settings`

- **`Settings`** is a frozen dataclass with two fields:
  - `criteria`: a `Criteria` value.
  - `envvars`: a frozenset of names.
- **`Settings.from_dict`** raises `SettingsError` in these cases:
  - a field is missing;
  - the criterion is unknown;
  - `envvars` is not a sequence of strings.
- **`Settings.to_dict`** returns the mapping form, with the names sorted.
- **`Criteria`** is an enum of the four criteria above.

### `envvarpolicy.operators`

The rule checks are also available as plain functions:

- `contains_any_of`
- `does_not_contain_any_of`
- `contains_all_of`
- `does_not_contain_all_of`

Each function takes the rule's names and the names that are present. When the
rule is not met, it raises `PolicyViolation`. The exception carries a descriptive
message, and its `names` attribute holds the offending names, sorted.

### `envvarpolicy.policy`

This module handles whole requests.

**`validate(payload)`**

- Takes a JSON validation request of this shape:

  ```json
  {
    "settings": {"criteria": "doesNotContainAnyOf", "envvars": ["DEBUG"]},
    "request": {"object": {"kind": "Pod", "spec": {"containers": []}}}
  }
  ```

- Returns a `ValidationResponse` with two fields:
  - `accepted`
  - `message`, which is set on rejection.
- `ValidationResponse.to_dict()` gives the response in its wire form.
- Pod specs are read from objects of these kinds:
  - `Pod`
  - `Deployment`
  - `ReplicaSet`
  - `StatefulSet`
  - `DaemonSet`
  - `ReplicationController`
  - `Job`
  - `CronJob`
- Objects of other kinds are accepted.
- Malformed payloads raise `ValueError`.
- `validate` does not call `Settings.validate`. Use `validate_settings` for that.

**`validate_settings(payload)`**

- Checks a JSON settings document on its own.
- Returns `{"valid": true}` when the settings are valid.
- Otherwise returns `{"valid": false, "message": ...}`.

**Helpers**

The lower-level pieces are public as well:

- `extract_pod_spec`
- `get_containers_env_vars`
- `validate_envvar`
- `validate_environment_variables`

## Command line

The package installs an `envvarpolicy` command. It reads a JSON payload from a
file, or from standard input when the file is `-` or is omitted:

```
envvarpolicy validate request.json
envvarpolicy validate-settings settings.json
cat request.json | envvarpolicy validate
envvarpolicy --help
```

The result is printed as JSON on standard output. When a payload cannot be
processed, the command prints `error: ...` on standard error and exits with
status 1.

## What it does not do

The package does not serve admission requests over the network. There is no
webhook server. Requests are evaluated only through the Python functions and the
command-line tool described above.

## Running the tests

```
pip install "envvarpolicy[test]"
pytest
```