[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "fighterserver"
version = "0.1.0"
description = "Server-side building blocks for a sector-based multiplayer fighting game: wire protocol, world sectors, sessions, sockets and frame timing."
requires-python = ">=3.10"
dependencies = []
keywords = [
    "game-server",
    "mmo",
    "tcp",
    "protocol",
    "sectors",
    "fighting-game",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Games/Entertainment :: Side-Scrolling/Arcade Games",
    "Topic :: System :: Networking",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["fighterserver"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
