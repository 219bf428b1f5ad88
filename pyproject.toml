[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "himama-dl"
version = "0.0.3"
description = "Download the photos and videos from a HiMama child care account"
requires-python = ">=3.10"
keywords = ["himama", "download", "scraper", "photos", "childcare"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet :: WWW/HTTP",
    "Topic :: Multimedia :: Graphics",
]
dependencies = [
    "requests",
    "beautifulsoup4",
]

[project.optional-dependencies]
test = [
    "pytest",
    "responses",
]

[project.scripts]
himama-dl = "himama_dl.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["himama_dl"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
