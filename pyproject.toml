[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "subdomainx"
version = "1.4.1"
description = "Building blocks for subdomain reconnaissance: result types, checkpoints, httpx and smap scanning, tool discovery and input validation"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "subdomain",
    "enumeration",
    "reconnaissance",
    "security",
    "httpx",
    "smap",
    "port-scanning",
    "checkpoint",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Information Technology",
    "Intended Audience :: System Administrators",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Security",
    "Topic :: Internet :: Name Service (DNS)",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["subdomainx"]

[tool.hatch.build.targets.sdist]
include = ["subdomainx", "tests", "README.md"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
