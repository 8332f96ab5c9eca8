[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "simplecontents"
version = "0.1.0"
description = "Content records with metadata, blob storage, filtering and paginated listing"
requires-python = ">=3.10"
keywords = ["content", "storage", "metadata", "repository", "sqlalchemy"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet :: WWW/HTTP :: HTTP Servers",
    "Topic :: Software Development :: Libraries :: Python Modules",
]
dependencies = [
    "sqlalchemy",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["simplecontents"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
