[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "gomer"
version = "0.1.0"
description = "Building blocks for resource-oriented services: composable constraints, binding helpers, API operation codes and envelope encryption"
requires-python = ">=3.10"
dependencies = [
    "cryptography",
]
keywords = ["validation", "constraints", "base64", "envelope-encryption", "aes-gcm", "http"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Software Development :: Libraries :: Application Frameworks",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["gomer"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
