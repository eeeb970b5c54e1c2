[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "svcgateway"
version = "0.1.0"
description = "A small HTTP API gateway that routes JSON calls to REST services described in .svc files."
requires-python = ">=3.10"
keywords = ["api-gateway", "gateway", "wsgi", "load-balancer", "jwt", "rate-limiting", "rest"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Web Environment",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet :: WWW/HTTP :: HTTP Servers",
    "Topic :: Internet :: WWW/HTTP :: WSGI :: Application",
    "Topic :: Internet :: Proxy Servers",
]
dependencies = [
    "werkzeug>=2.3",
    "requests>=2.28",
    "pyjwt>=2.6",
]

[project.optional-dependencies]
test = [
    "pytest>=7.0",
    "responses>=0.23",
]

[project.scripts]
svcgateway = "svcgateway.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["svcgateway"]

[tool.hatch.build.targets.sdist]
include = ["svcgateway", "tests"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP", "SIM"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
