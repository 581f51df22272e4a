[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "dynaquantum"
version = "0.1.0"
description = "Process-table simulation with a dynamic time-quantum scheduler, and a round-robin scheduling calculator"
requires-python = ">=3.10"
dependencies = []
keywords = ["scheduler", "round-robin", "time quantum", "process table", "operating systems", "simulation"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Education",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Operating System Kernels",
    "Topic :: Education",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
dynaquantum-rr = "dynaquantum.modrr:main"

[tool.hatch.build.targets.wheel]
packages = ["dynaquantum"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
