[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "envvarpolicy"
version = "2.0.2"
description = "Admission policy that checks the environment variables of Pod containers against a rule"
requires-python = ">=3.10"
dependencies = []
keywords = ["kubernetes", "admission", "policy", "environment-variables", "pod"]
classifiers = [
    "Development Status :: 5 - Production/Stable",
    "Intended Audience :: System Administrators",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Systems Administration",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
envvarpolicy = "envvarpolicy.policy:main"

[tool.hatch.build.targets.wheel]
packages = ["envvarpolicy"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
strict = true
