[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "tribalcraft"
version = "1.0.0"
description = "A small multiplayer top-down game: an authoritative websocket game server, a pygame client and their binary wire protocol."
requires-python = ">=3.10"
keywords = ["game", "multiplayer", "websocket", "io-game", "pygame"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Environment :: X11 Applications",
    "Framework :: AsyncIO",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Games/Entertainment :: Real Time Strategy",
]
dependencies = [
    "websockets",
    "websocket-client",
    "pygame",
]

[project.optional-dependencies]
test = [
    "pytest",
    "pytest-asyncio",
]

[project.scripts]
tribalcraft-server = "tribalcraft.server.main:main"
tribalcraft-client = "tribalcraft.client.main:main"

[tool.hatch.build.targets.wheel]
packages = ["tribalcraft"]

[tool.hatch.build.targets.sdist]
include = ["tribalcraft", "tests", "pyproject.toml"]

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
