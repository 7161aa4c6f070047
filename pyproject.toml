[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "asdbatch"
version = "0.1.0"
description = "Batch job that looks up member ages from telecom TCRS services and stores them in the member database"
requires-python = ">=3.10"
dependencies = []
keywords = ["batch", "age verification", "tcrs", "dmrs", "telecom"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: System Administrators",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Office/Business",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
asdbatch = "asdbatch.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["asdbatch"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
