[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "vectorclient"
version = "0.1.0"
description = "Client-side logic for a vector database service: indexes, partitions, roles, resource groups, consistency options, call metadata and rate-limit retries."
requires-python = ">=3.10"
dependencies = []
keywords = ["vector database", "client", "similarity search", "rbac", "partitions", "indexes"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Database :: Front-Ends",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["vectorclient"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
