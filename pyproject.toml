[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "labrc"
version = "0.1.0"
description = "Configuration reader, bindings model and session helpers for a stacking Wayland compositor"
requires-python = ">=3.10"
dependencies = []
keywords = ["wayland", "compositor", "window-manager", "rc.xml", "keybind", "mousebind", "openbox"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: End Users/Desktop",
    "Intended Audience :: Developers",
    "Operating System :: POSIX :: Linux",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Desktop Environment :: Window Managers",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
labrc-find-idents = "labrc.find_idents:main"

[tool.hatch.build.targets.wheel]
packages = ["labrc"]

[tool.pytest.ini_options]
addopts = "-ra"
