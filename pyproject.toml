[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "tfnotify"
version = "0.1.0"
description = "Parse Terraform command output and render notification messages from it"
requires-python = ">=3.10"
dependencies = []
keywords = ["terraform", "notification", "plan", "apply", "ci"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Build Tools",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["tfnotify"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
