[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "composecli"
version = "0.1.0"
description = "Command-line front end for multi-container application projects, driven through a pluggable backend"
requires-python = ">=3.10"
dependencies = []
keywords = ["compose", "containers", "cli", "services", "backend"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Systems Administration",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
composecli = "composecli.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["composecli"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
