[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "neoframe"
version = "0.1.0"
description = "Settings registry, config loading, window state persistence and keyboard/mouse input translation for a Neovim GUI frontend"
requires-python = ">=3.11"
dependencies = []
keywords = ["neovim", "gui", "settings", "keyboard", "mouse", "input"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Text Editors",
]

[project.optional-dependencies]
test = [
    "pytest",
    "pytest-asyncio",
]

[tool.hatch.build.targets.wheel]
packages = ["neoframe"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py311"
