[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "proxyrisk"
version = "0.1.0"
description = "Validate a list of proxies and keep only those whose outbound IP has a fraud score of zero."
requires-python = ">=3.10"
keywords = ["proxy", "fraud-score", "ip-reputation", "validation"]
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
    "Topic :: Internet :: Proxy Servers",
]
dependencies = [
    "requests>=2.28",
]

[project.optional-dependencies]
test = [
    "pytest>=7",
    "responses>=0.23",
]

[project.scripts]
proxyrisk = "proxyrisk.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["proxyrisk"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "I", "B", "UP"]
