[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "petfeeder"
version = "0.1.0"
description = "Scheduled pet feeder controller with a small JSON HTTP interface, time-zone aware clock and persisted settings"
requires-python = ">=3.10"
dependencies = []
keywords = ["pet feeder", "home automation", "scheduler", "feeding", "http"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: End Users/Desktop",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Home Automation",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
petfeeder = "petfeeder.app:main"

[tool.hatch.build.targets.wheel]
packages = ["petfeeder"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
