[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "cellguard"
version = "0.1.0"
description = "Container and image stores, path and network rewrite rules, and access logging for syscall-level isolation"
requires-python = ">=3.10"
dependencies = []
keywords = ["containers", "sandbox", "isolation", "rootfs", "path-rewriting", "nat"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Operating System",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["cellguard"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
