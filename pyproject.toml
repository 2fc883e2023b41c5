[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "mirrorvault"
version = "0.1.0"
description = "Terminal screens and state for a database backup, restore and scheduling agent"
requires-python = ">=3.10"
keywords = ["database", "backup", "restore", "terminal", "tui", "scheduler", "ansi"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: System Administrators",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Database :: Front-Ends",
    "Topic :: System :: Archiving :: Backup",
    "Typing :: Typed",
]
dependencies = []

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["mirrorvault"]

[tool.pytest.ini_options]
addopts = "-ra"
